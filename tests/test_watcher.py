"""Tests for the index watcher."""

from pkc.models import Vault
from pkc.vault.index import NoteIndex
from pkc.watcher import IndexWatcher, VaultChangeHandler


def test_handler_filters_notes(tmp_path):
    handler = VaultChangeHandler(Vault(name="V", root_path=str(tmp_path)))
    assert handler._is_note(str(tmp_path / "a" / "Note.md"))
    assert not handler._is_note(str(tmp_path / ".obsidian" / "x.md"))
    assert not handler._is_note(str(tmp_path / "image.png"))
    assert not handler._is_note("/elsewhere/Note.md")


def test_reindex_updates_cache(tmp_path):
    root = tmp_path / "V"
    root.mkdir()
    vault = Vault(name="V", root_path=str(root))
    config = {"index_path": str(tmp_path / "index.json")}
    watcher = IndexWatcher(config, [vault])

    (root / "New.md").write_text("x")
    watcher._reindex(vault)
    assert [n.title for n in NoteIndex(config["index_path"]).get_notes(vault)] == ["New"]
