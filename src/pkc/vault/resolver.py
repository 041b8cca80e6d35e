"""Resolve a capture destination inside a vault."""

from pathlib import Path, PurePosixPath

from ..errors import UnresolvedDestinationError
from ..models import Resolution

NOTE_EXTENSION = ".md"


def _clean_folder(folder: str | None) -> str:
    if not folder:
        return ""
    return folder.strip().replace("\\", "/").strip("/")


def relative_note_path(folder: str | None, file_name: str) -> str:
    """Vault-relative path without extension."""
    folder = _clean_folder(folder)
    return f"{folder}/{file_name}" if folder else file_name


def resolve(vault_root: str | Path | None, folder: str | None, file_name: str) -> Resolution:
    """Compute the absolute note path and whether the capture appends.

    ``append`` reflects a point-in-time existence check; the file system is
    never modified here.

    Raises:
        UnresolvedDestinationError: no vault root or an empty file name.
    """
    if vault_root is None:
        raise UnresolvedDestinationError("No vault selected")
    file_name = (file_name or "").strip()
    if not file_name:
        raise UnresolvedDestinationError("No file name given")

    relative = relative_note_path(folder, file_name)
    absolute = Path(vault_root) / f"{relative}{NOTE_EXTENSION}"
    return Resolution(absolute_path=absolute, relative_path=relative, append=absolute.is_file())


def split_note_path(vault_root: str | Path, note_path: str) -> tuple[str, str]:
    """Split a note path into (folder, file name) relative to the vault root.

    ``note_path`` may be vault-relative or absolute under ``vault_root``.
    """
    path = note_path.replace("\\", "/")
    root = str(vault_root).replace("\\", "/").rstrip("/")
    if path.startswith(root + "/"):
        path = path[len(root) + 1:]

    rel = PurePosixPath(path.lstrip("/"))
    folder = "" if str(rel.parent) == "." else str(rel.parent)
    name = rel.stem if rel.suffix == NOTE_EXTENSION else rel.name
    return folder, name
