"""Tests for the command line interface."""

import json

import yaml
from click.testing import CliRunner

from pkc.cli import cli


def _setup(tmp_path):
    root = tmp_path / "Main"
    (root / "inbox").mkdir(parents=True)
    (root / ".obsidian").mkdir()
    (root / ".obsidian" / "community-plugins.json").write_text(json.dumps(["obsidian-advanced-uri"]))
    (root / "inbox" / "Draft.md").write_text("old")

    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(yaml.safe_dump({
        "index_path": str(tmp_path / "index.json"),
        "state_path": str(tmp_path / "state.yaml"),
        "vaults": [{"name": "Main", "path": str(root)}],
    }))
    return cfg_file


def test_index_and_search(tmp_path):
    cfg_file = _setup(tmp_path)
    runner = CliRunner()

    result = runner.invoke(cli, ["-c", str(cfg_file), "index"])
    assert result.exit_code == 0
    assert "Main: 1 note(s)" in result.output

    result = runner.invoke(cli, ["-c", str(cfg_file), "search", "dra"])
    assert result.exit_code == 0
    assert "inbox/Draft.md" in result.output


def test_capture_dry_run_appends(tmp_path):
    cfg_file = _setup(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, [
        "-c", str(cfg_file), "capture", "--yes", "--no-detect", "--dry-run",
        "--folder", "inbox", "--title", "Draft", "--note", "hello",
    ])
    assert result.exit_code == 0, result.output
    assert "Appending to inbox/Draft.md in Main" in result.output
    assert "mode=append" in result.output
    assert "Note Captured" in result.output
    assert yaml.safe_load((tmp_path / "state.yaml").read_text()) == {"vault": "Main", "path": "inbox"}


def test_capture_requires_title_with_yes(tmp_path):
    cfg_file = _setup(tmp_path)
    result = CliRunner().invoke(cli, ["-c", str(cfg_file), "capture", "--yes", "--no-detect", "--dry-run"])
    assert result.exit_code == 0
    assert "--title is required" in result.output


def test_capture_without_vaults(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(yaml.safe_dump({
        "index_path": str(tmp_path / "index.json"),
        "state_path": str(tmp_path / "state.yaml"),
        "obsidian_config": str(tmp_path / "missing.json"),
    }))
    result = CliRunner().invoke(cli, ["-c", str(cfg_file), "capture", "--yes", "--no-detect", "--dry-run"])
    assert result.exit_code == 0
    assert "No Obsidian vaults found" in result.output
