"""Data models used throughout PKC."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Note:
    """An existing note known to the index cache.

    ``path`` is vault-relative with forward slashes and unique within a vault;
    ``title`` is the filename without extension and may repeat.
    """
    title: str
    path: str


@dataclass(frozen=True)
class Vault:
    """One note-storage root."""
    name: str
    root_path: str
    key: str = ""


@dataclass(frozen=True)
class RankedMatch:
    """Sort record for a ranking query; never stored."""
    note: Note
    match_index: int


@dataclass(frozen=True)
class SourceLink:
    """A captured resource link. ``label`` is the page title when known."""
    url: str
    label: str | None = None

    @property
    def display_label(self) -> str:
        return self.label or self.url


@dataclass(frozen=True)
class PageContent:
    """Fetched page body, either Markdown or a flattened video transcript."""
    body: str
    kind: str  # "page" or "transcript"

    @property
    def prompt(self) -> str:
        if self.kind == "transcript":
            return "Include video transcript"
        return "Include page content"


@dataclass
class CaptureDraft:
    """User-editable state of one capture session."""
    vault: Vault | None = None
    folder: str = ""
    file_name: str = ""
    highlight_text: str | None = None
    note_text: str | None = None
    source: SourceLink | None = None
    page_body: str | None = None
    summary_text: str | None = None
    include_highlight: bool = True
    include_page_body: bool = False
    include_summary: bool = False


@dataclass(frozen=True)
class Resolution:
    """Where a capture lands and whether it appends to an existing note."""
    absolute_path: Path
    relative_path: str
    append: bool


@dataclass
class CaptureResult:
    """Outcome of a submission."""
    ok: bool
    uri: str
    append: bool
    fallback_used: bool = False
    error: str | None = None
    attempts: list[str] = field(default_factory=list)
