"""Capture session: gathers inputs, picks a destination and writes the note.

A session moves through ``INITIALIZING -> READY -> SUBMITTING`` and ends in
``COMPLETED`` or ``FAILED`` (a failed session can be submitted again), or in
``CANCELLED`` when the user abandons it. Every background fetch is tagged with
the session generation so results arriving after a cancel or restart are
dropped instead of landing on a discarded draft.
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable

from .enrichment.summarizer import get_summarizer
from .errors import CaptureError, NoVaultFoundError, PluginNotInstalledError, UnresolvedDestinationError
from .ingest.browser import BrowserLinkDetector
from .ingest.page import fetch_page_content
from .ingest.selection import get_selected_text
from .models import CaptureDraft, CaptureResult, Note, PageContent, Resolution, SourceLink, Vault
from .notify import Notifier
from .query.search import MAX_RESULTS, MIN_QUERY_LENGTH, rank_notes
from .storage import SessionDefaults
from .vault.index import NoteIndex
from .vault.resolver import resolve, split_note_path
from .vault.templates import compose
from .vault.vaults import get_vault, vaults_with_plugin
from .vault.writer import UriWriter, build_capture_uri, build_fallback_uri

logger = logging.getLogger(__name__)

_DEFAULT = object()


class CaptureState(str, Enum):
    INITIALIZING = "initializing"
    READY = "ready"
    SUBMITTING = "submitting"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class CaptureSession:
    """Drives one capture from detection to the companion write."""

    def __init__(
        self,
        config: dict[str, Any],
        vaults: list[Vault],
        *,
        index: NoteIndex | None = None,
        defaults: SessionDefaults | None = None,
        notifier: Notifier | None = None,
        detect_link: Callable[[], Awaitable[SourceLink | None]] | None = None,
        detect_selection: Callable[[], Awaitable[str | None]] | None = None,
        fetch_content: Callable[[str], Awaitable[PageContent]] | None = None,
        summarize: Any = _DEFAULT,
        writer=None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.all_vaults = list(vaults)
        self.vaults: list[Vault] = []
        self.index = index or NoteIndex(config["index_path"])
        self.defaults = defaults or SessionDefaults(config["state_path"])
        self.notifier = notifier or Notifier()

        timeouts = config.get("timeouts", {})
        self._detection_timeout = timeouts.get("detection", 5.0)
        self._fetch_timeout = timeouts.get("page_fetch", 20.0)
        self._summary_timeout = timeouts.get("summary", 60.0)

        self._detect_link = detect_link or BrowserLinkDetector(config.get("supported_browsers", [])).detect
        self._detect_selection = detect_selection or get_selected_text
        self._fetch_content = fetch_content or partial(fetch_page_content, timeout=self._fetch_timeout)
        if summarize is _DEFAULT:
            summarizer = get_summarizer(config)
            summarize = summarizer.summarize if summarizer else None
        self._summarize: Callable[[str], str] | None = summarize
        self._writer = writer or UriWriter()
        self._clock = clock

        ranking = config.get("ranking", {})
        self._min_query_length = ranking.get("min_query_length", MIN_QUERY_LENGTH)
        self._max_results = ranking.get("max_results", MAX_RESULTS)

        self.state = CaptureState.INITIALIZING
        self.draft: CaptureDraft | None = None
        self.matches: list[Note] = []
        self.page_prompt: str | None = None
        self._generation = 0
        self._content_task: asyncio.Task | None = None

    # -- lifecycle -----------------------------------------------------------

    async def start(self, detect: bool = True) -> CaptureDraft:
        """Load defaults and run detection.

        Raises:
            NoVaultFoundError: no vaults are known.
            PluginNotInstalledError: no vault has the write plugin enabled.
        """
        self._generation += 1
        generation = self._generation
        self.state = CaptureState.INITIALIZING
        self.matches = []
        self.page_prompt = None
        self._content_task = None

        if not self.all_vaults:
            raise NoVaultFoundError()
        plugin_id = self.config.get("required_plugin", "obsidian-advanced-uri")
        self.vaults = vaults_with_plugin(self.all_vaults, plugin_id)
        if not self.vaults:
            raise PluginNotInstalledError(plugin_id)

        draft = CaptureDraft()
        draft.vault = get_vault(self.vaults, self.defaults.get("vault")) or self.vaults[0]
        saved_folder = self.defaults.get("path")
        draft.folder = saved_folder if saved_folder is not None else self.config.get("default_folder", "")
        self.draft = draft

        if detect:
            await asyncio.gather(
                self._run_link_detection(generation),
                self._run_selection_detection(generation),
            )
        if generation != self._generation:
            return draft

        self.state = CaptureState.READY
        self._announce_capture()
        return draft

    def cancel(self) -> None:
        """Discard the draft and abandon in-flight fetches."""
        self._generation += 1
        if self._content_task and not self._content_task.done():
            self._content_task.cancel()
        self._content_task = None
        self.draft = None
        self.matches = []
        self.state = CaptureState.CANCELLED

    async def wait_for_content(self) -> None:
        """Wait for the page/transcript fetch started by detection, if any."""
        task = self._content_task
        if task is not None and not task.done():
            # a cancelled fetch ends the wait without raising
            await asyncio.wait({task})

    # -- detection -----------------------------------------------------------

    async def _run_link_detection(self, generation: int) -> None:
        try:
            link = await asyncio.wait_for(self._detect_link(), timeout=self._detection_timeout)
        except Exception as e:
            logger.debug(f"Browser link detection failed: {e}")
            return
        if link is None or generation != self._generation:
            return

        self.draft.source = link
        self._content_task = asyncio.create_task(self._run_content_fetch(generation, link.url))

    async def _run_selection_detection(self, generation: int) -> None:
        try:
            text = await asyncio.wait_for(self._detect_selection(), timeout=self._detection_timeout)
        except Exception as e:
            logger.debug(f"Selected text detection failed: {e}")
            return
        if text and generation == self._generation:
            self.draft.highlight_text = text

    async def _run_content_fetch(self, generation: int, url: str) -> None:
        try:
            content = await asyncio.wait_for(self._fetch_content(url), timeout=self._fetch_timeout)
        except Exception as e:
            logger.warning(f"Page content fetch failed for {url}: {e}")
            if generation == self._generation:
                self.notifier.toast("Failed to fetch page content", "failure")
            return
        if generation != self._generation:
            logger.debug(f"Dropping content for {url} from a stale session")
            return
        if content.body:
            self.draft.page_body = content.body
            self.page_prompt = content.prompt
            if not self.draft.highlight_text and not self.draft.source:
                self.notifier.toast("Page contents captured")

    def _announce_capture(self) -> None:
        draft = self.draft
        if draft.highlight_text and draft.source:
            self.notifier.toast("Highlighted text, Source captured")
        elif draft.highlight_text:
            self.notifier.toast("Highlighted text captured")
        elif draft.source:
            self.notifier.toast("Link captured")

    # -- editing -------------------------------------------------------------

    def _require_draft(self) -> CaptureDraft:
        if self.draft is None:
            raise CaptureError("No capture in progress")
        return self.draft

    def set_vault(self, name: str) -> Vault:
        draft = self._require_draft()
        vault = get_vault(self.vaults, name)
        if vault is None:
            raise CaptureError(f"Vault '{name}' is not available for capture")
        draft.vault = vault
        self.matches = []
        return vault

    def update_title(self, text: str) -> list[Note]:
        """Set the file name and re-rank the vault's notes against it."""
        draft = self._require_draft()
        draft.file_name = text
        if len(text) < self._min_query_length:
            self.matches = []
        else:
            notes = self.index.get_notes(draft.vault)
            self.matches = rank_notes(text, notes, limit=self._max_results, min_length=self._min_query_length)
        return self.matches

    def select_match(self, note: Note) -> None:
        """Point the draft at an existing note so the capture appends to it."""
        draft = self._require_draft()
        if draft.vault is None:
            raise UnresolvedDestinationError("No vault selected")
        draft.folder, draft.file_name = split_note_path(draft.vault.root_path, note.path)
        self.matches = []

    def clear_capture(self) -> None:
        """Forget the detected highlight and link."""
        draft = self._require_draft()
        draft.highlight_text = None
        draft.source = None
        self.notifier.toast("Capture Cleared")

    @property
    def summary_available(self) -> bool:
        return self._summarize is not None and bool(self.draft and self.draft.page_body)

    async def set_include_summary(self, include: bool) -> str | None:
        """Toggle the summary section, generating the summary on first use.

        The summary is computed from one snapshot of the page body, taken after
        any in-flight content fetch settles.
        """
        draft = self._require_draft()
        draft.include_summary = include
        if not include or draft.summary_text:
            return draft.summary_text
        if self._summarize is None:
            return None

        generation = self._generation
        await self.wait_for_content()
        if generation != self._generation:
            return None

        page_body = draft.page_body
        if not page_body:
            return None

        self.notifier.toast("Generating Summary", "animated")
        try:
            summary = await asyncio.wait_for(
                asyncio.to_thread(self._summarize, page_body), timeout=self._summary_timeout
            )
        except Exception as e:
            logger.warning(f"Summary generation failed: {e}")
            if generation == self._generation:
                self.notifier.toast("Failed to generate summary", "failure")
            return None

        if generation != self._generation:
            return None
        draft.summary_text = summary or None
        if summary:
            self.notifier.toast("Summary captured")
        return draft.summary_text

    # -- submission ----------------------------------------------------------

    def resolution(self) -> Resolution:
        """Where the draft would be written right now."""
        draft = self._require_draft()
        root = draft.vault.root_path if draft.vault else None
        return resolve(root, draft.folder, draft.file_name)

    def _persist_defaults(self, draft: CaptureDraft) -> None:
        try:
            if draft.vault:
                self.defaults.set("vault", draft.vault.name)
            self.defaults.set("path", draft.folder)
        except OSError as e:
            logger.warning(f"Could not save capture defaults: {e}")

    async def submit(self) -> CaptureResult:
        """Write the draft, retrying once with a plain create on failure.

        Raises:
            UnresolvedDestinationError: no vault or file name; the session stays ready.
        """
        draft = self._require_draft()
        if self.state not in (CaptureState.READY, CaptureState.FAILED):
            raise CaptureError(f"Cannot submit while {self.state.value}")

        self.state = CaptureState.SUBMITTING
        self._persist_defaults(draft)

        try:
            resolution = self.resolution()
        except UnresolvedDestinationError as e:
            self.state = CaptureState.READY
            self.notifier.toast(str(e), "failure")
            raise

        body = compose(draft, self._clock())
        open_in_new_tab = bool(self.config.get("open_in_new_tab", False))
        scheme = self.config.get("uri_scheme", "obsidian")

        uri = build_capture_uri(
            draft.vault.name, resolution.relative_path, body, resolution.append, open_in_new_tab, scheme
        )
        result = CaptureResult(ok=False, uri=uri, append=resolution.append, attempts=[uri])

        try:
            await self._writer.write(uri)
        except Exception as e:
            logger.warning(f"Capture write failed, retrying as a new note: {e}")
            self.notifier.toast("Failed to capture. Try again", "failure")

            fallback = build_fallback_uri(draft.vault.name, resolution.relative_path, body, open_in_new_tab, scheme)
            result.uri = fallback
            result.append = False
            result.fallback_used = True
            result.attempts.append(fallback)
            try:
                await self._writer.write(fallback)
            except Exception as err:
                logger.error(f"Fallback capture write failed: {err}")
                result.error = str(err)
                self.state = CaptureState.FAILED
                self.notifier.toast("Capture failed", "failure")
                return result

        result.ok = True
        self.state = CaptureState.COMPLETED
        self.draft = None
        self.matches = []
        self.notifier.hud("Note Captured")
        return result
