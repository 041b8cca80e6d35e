"""Tests for path resolution, the note index and vault discovery."""

import json
from pathlib import Path

import pytest

from pkc.errors import UnresolvedDestinationError
from pkc.models import Vault
from pkc.vault.index import NoteIndex, get_notes_from_cache, scan_vault
from pkc.vault.resolver import resolve, split_note_path
from pkc.vault.vaults import find_vaults, installed_plugins, vaults_with_plugin


def test_resolve_vault_root(tmp_path):
    res = resolve(tmp_path, "", "Foo")
    assert res.absolute_path == tmp_path / "Foo.md"
    assert res.relative_path == "Foo"
    assert res.append is False

    (tmp_path / "Foo.md").write_text("existing")
    assert resolve(tmp_path, "", "Foo").append is True


def test_resolve_folder(tmp_path):
    res = resolve(str(tmp_path), "inbox", "Bar")
    assert res.absolute_path == tmp_path / "inbox" / "Bar.md"
    assert res.relative_path == "inbox/Bar"
    assert res.append is False


def test_resolve_absent_folder(tmp_path):
    assert resolve(tmp_path, None, "Foo").relative_path == "Foo"


def test_resolve_does_not_touch_disk(tmp_path):
    resolve(tmp_path, "new/deep", "Note")
    assert not (tmp_path / "new").exists()


def test_resolve_without_vault():
    with pytest.raises(UnresolvedDestinationError):
        resolve(None, "inbox", "Foo")


def test_resolve_without_file_name(tmp_path):
    with pytest.raises(UnresolvedDestinationError):
        resolve(tmp_path, "inbox", "  ")


def test_split_note_path():
    assert split_note_path("/vaults/Main", "inbox/Draft.md") == ("inbox", "Draft")
    assert split_note_path("/vaults/Main", "Top.md") == ("", "Top")
    assert split_note_path("/vaults/Main", "/vaults/Main/a/b/Deep.md") == ("a/b", "Deep")


def _make_vault(tmp_path, name="Main", plugins=None):
    root = tmp_path / name
    (root / "inbox").mkdir(parents=True)
    (root / "inbox" / "Draft.md").write_text("draft")
    (root / "Ideas.md").write_text("ideas")
    (root / ".obsidian").mkdir()
    (root / ".obsidian" / "workspace.md").write_text("ignored")
    (root / "image.png").write_bytes(b"")
    if plugins is not None:
        (root / ".obsidian" / "community-plugins.json").write_text(json.dumps(plugins))
    return Vault(name=name, root_path=str(root))


def test_scan_vault_skips_hidden(tmp_path):
    vault = _make_vault(tmp_path)
    notes = scan_vault(vault.root_path)
    assert [(n.title, n.path) for n in notes] == [("Ideas", "Ideas.md"), ("Draft", "inbox/Draft.md")]


def test_index_round_trip(tmp_path):
    vault = _make_vault(tmp_path)
    index_path = tmp_path / "cache" / "index.json"
    counts = NoteIndex(index_path).refresh([vault])
    assert counts == {"Main": 2}

    notes = get_notes_from_cache(vault, index_path)
    assert {n.path for n in notes} == {"Ideas.md", "inbox/Draft.md"}
    assert NoteIndex(index_path).indexed_at(vault) is not None


def test_index_never_raises(tmp_path):
    index_path = tmp_path / "index.json"
    index_path.write_text("{not json")
    assert get_notes_from_cache(Vault(name="x", root_path="/nope"), index_path) == []
    assert get_notes_from_cache(None, index_path) == []
    assert get_notes_from_cache(Vault(name="x", root_path="/nope"), tmp_path / "missing.json") == []

    index_path.write_text(json.dumps({"V": {"notes": 5}}))
    assert get_notes_from_cache(Vault(name="V", root_path="/x"), index_path) == []


def test_plugin_check(tmp_path):
    with_plugin = _make_vault(tmp_path, "A", plugins=["obsidian-advanced-uri", "dataview"])
    without = _make_vault(tmp_path, "B", plugins=["dataview"])
    bare = _make_vault(tmp_path, "C")
    assert "dataview" in installed_plugins(with_plugin)
    assert vaults_with_plugin([with_plugin, without, bare], "obsidian-advanced-uri") == [with_plugin]


def test_find_vaults_from_obsidian_config(tmp_path):
    cfg_file = tmp_path / "obsidian.json"
    cfg_file.write_text(json.dumps({"vaults": {"abc123": {"path": str(tmp_path / "Work"), "ts": 1}}}))
    vaults = find_vaults({"obsidian_config": str(cfg_file)})
    assert len(vaults) == 1
    assert vaults[0].name == "Work"
    assert vaults[0].key == "abc123"


def test_find_vaults_from_config_list(tmp_path):
    vaults = find_vaults({"vaults": [{"path": str(tmp_path / "Notes")}, {"name": "Other", "path": "/x/y"}]})
    assert [v.name for v in vaults] == ["Notes", "Other"]
    assert Path(vaults[0].root_path) == tmp_path / "Notes"
