"""Hand captured notes to Obsidian through the Advanced URI plugin."""

import asyncio
import logging
import sys
from urllib.parse import quote

import click
from rich.console import Console

from ..errors import WriteError

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone besides alphanumerics and "_.-~"
_URI_SAFE = "!*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_SAFE)


def _base_uri(scheme: str, vault_name: str, relative_path: str, body: str, append: bool) -> str:
    return (
        f"{scheme}://advanced-uri?"
        + ("mode=append&" if append else "")
        + f"vault={encode_component(vault_name)}"
        + f"&filepath={encode_component(relative_path)}"
        + f"&data={encode_component(body)}"
    )


def build_capture_uri(
    vault_name: str,
    relative_path: str,
    body: str,
    append: bool,
    open_in_new_tab: bool = False,
    scheme: str = "obsidian",
) -> str:
    """URI for the primary write.

    Appends open silently so Obsidian does not steal focus; a fresh note opens
    in a new tab only when the user asked for it.
    """
    uri = _base_uri(scheme, vault_name, relative_path, body, append)
    if append:
        return uri + "&openmode=silent"
    if open_in_new_tab:
        return uri + "&openmode=tab"
    return uri


def build_fallback_uri(
    vault_name: str,
    relative_path: str,
    body: str,
    open_in_new_tab: bool = False,
    scheme: str = "obsidian",
) -> str:
    """URI for the retry after a failed write: no append handling."""
    uri = _base_uri(scheme, vault_name, relative_path, body, append=False)
    return uri + ("&openmode=tab" if open_in_new_tab else "")


class UriWriter:
    """Opens companion write URIs with the system URL handler."""

    async def write(self, uri: str) -> None:
        # `open` on macOS reports the handler status itself; xdg-open has to be waited on
        wait = sys.platform != "darwin"
        code = await asyncio.to_thread(click.launch, uri, wait=wait)
        if code != 0:
            raise WriteError(f"URI handler exited with status {code}")
        logger.debug(f"Handed off capture URI ({len(uri)} chars)")


class DryRunWriter:
    """Records URIs instead of opening them."""

    def __init__(self, console: Console | None = None):
        self.console = console
        self.uris: list[str] = []

    async def write(self, uri: str) -> None:
        self.uris.append(uri)
        if self.console:
            self.console.print(f"[dim]{uri}[/]", soft_wrap=True)
