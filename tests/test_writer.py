"""Tests for companion write URIs."""

import asyncio
import sys

import pytest

from pkc.errors import WriteError
from pkc.vault import writer as writer_mod
from pkc.vault.writer import DryRunWriter, UriWriter, build_capture_uri, build_fallback_uri, encode_component


def test_encode_matches_encode_uri_component():
    assert encode_component("inbox/My Note") == "inbox%2FMy%20Note"
    assert encode_component("a-b_c.d!~*'()") == "a-b_c.d!~*'()"
    assert encode_component("line1\nline2 & more") == "line1%0Aline2%20%26%20more"


def test_create_uri():
    uri = build_capture_uri("My Vault", "inbox/Bar", "# hi", append=False)
    assert uri == "obsidian://advanced-uri?vault=My%20Vault&filepath=inbox%2FBar&data=%23%20hi"


def test_create_uri_new_tab():
    uri = build_capture_uri("V", "Bar", "x", append=False, open_in_new_tab=True)
    assert uri.endswith("&openmode=tab")
    assert "mode=append" not in uri


def test_append_uri_is_silent_regardless_of_preference():
    for new_tab in (False, True):
        uri = build_capture_uri("V", "inbox/Draft", "x", append=True, open_in_new_tab=new_tab)
        assert uri.startswith("obsidian://advanced-uri?mode=append&vault=V")
        assert uri.endswith("&openmode=silent")
        assert "openmode=tab" not in uri


def test_fallback_uri_drops_append_handling():
    uri = build_fallback_uri("V", "inbox/Draft", "x", open_in_new_tab=True)
    assert "mode=append" not in uri
    assert "openmode=silent" not in uri
    assert uri.endswith("&openmode=tab")
    assert not build_fallback_uri("V", "inbox/Draft", "x").count("openmode")


def test_custom_scheme():
    assert build_capture_uri("V", "a", "b", append=False, scheme="obsidian-beta").startswith("obsidian-beta://")


def test_uri_writer_raises_on_failure(monkeypatch):
    monkeypatch.setattr(writer_mod.click, "launch", lambda uri, wait=False: 3)
    with pytest.raises(WriteError):
        asyncio.run(UriWriter().write("obsidian://advanced-uri?vault=V"))


def test_uri_writer_success(monkeypatch):
    launched = []
    monkeypatch.setattr(writer_mod.click, "launch", lambda uri, wait=False: launched.append((uri, wait)) or 0)
    asyncio.run(UriWriter().write("obsidian://x"))
    assert launched == [("obsidian://x", sys.platform != "darwin")]


def test_dry_run_writer_records():
    w = DryRunWriter()
    asyncio.run(w.write("obsidian://x"))
    assert w.uris == ["obsidian://x"]


@pytest.mark.skipif(not sys.platform.startswith("linux"), reason="xdg-open handoff")
def test_uri_writer_reports_failed_xdg_open(tmp_path, monkeypatch):
    fake = tmp_path / "xdg-open"
    fake.write_text("#!/bin/sh\nexit 4\n")
    fake.chmod(0o755)
    monkeypatch.setenv("PATH", f"{tmp_path}:/usr/bin:/bin")

    with pytest.raises(WriteError):
        asyncio.run(UriWriter().write("obsidian://advanced-uri?vault=x"))
