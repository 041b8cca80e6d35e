"""Cached index of the notes in each vault."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from ..models import Note, Vault

logger = logging.getLogger(__name__)


def scan_vault(root: str | Path) -> list[Note]:
    """List every Markdown note under ``root``, skipping dot-directories."""
    root = Path(root)
    if not root.is_dir():
        return []

    notes = []
    for md_file in root.rglob("*.md"):
        rel = md_file.relative_to(root)
        if any(part.startswith(".") for part in rel.parts):
            continue
        notes.append(Note(title=md_file.stem, path=rel.as_posix()))

    notes.sort(key=lambda n: n.path)
    return notes


class NoteIndex:
    """JSON snapshot mapping vault names to their known notes.

    Layout::

        {"<vault name>": {"root": "...", "indexed_at": "...",
                          "notes": [{"title": "...", "path": "..."}]}}
    """

    def __init__(self, index_path: str | Path):
        self.index_path = Path(index_path)
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.index_path.exists():
            return {}
        try:
            data = json.loads(self.index_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable note index {self.index_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def save(self) -> None:
        self.index_path.parent.mkdir(parents=True, exist_ok=True)
        self.index_path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    def build(self, vault: Vault) -> int:
        """Rescan one vault into the snapshot. Returns the note count."""
        notes = scan_vault(vault.root_path)
        self._data[vault.name] = {
            "root": vault.root_path,
            "indexed_at": datetime.now().isoformat(timespec="seconds"),
            "notes": [{"title": n.title, "path": n.path} for n in notes],
        }
        logger.debug(f"Indexed {len(notes)} note(s) in vault '{vault.name}'")
        return len(notes)

    def refresh(self, vaults: list[Vault]) -> dict[str, int]:
        """Rebuild every given vault and persist the snapshot."""
        counts = {v.name: self.build(v) for v in vaults}
        self.save()
        return counts

    def get_notes(self, vault: Vault | None) -> list[Note]:
        """Notes cached for ``vault``. Never raises; unknown vaults yield []."""
        if vault is None:
            return []
        entry = self._data.get(vault.name)
        if not isinstance(entry, dict):
            return []
        notes = []
        items = entry.get("notes")
        if not isinstance(items, list):
            return []
        for item in items:
            try:
                notes.append(Note(title=item["title"], path=item["path"]))
            except (KeyError, TypeError):
                continue
        return notes

    def indexed_at(self, vault: Vault) -> str | None:
        entry = self._data.get(vault.name)
        return entry.get("indexed_at") if isinstance(entry, dict) else None


def get_notes_from_cache(vault: Vault | None, index_path: str | Path) -> list[Note]:
    """Read-only lookup of a vault's cached notes."""
    return NoteIndex(index_path).get_notes(vault)
