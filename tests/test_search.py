"""Tests for note ranking."""

from pkc.models import Note, Vault
from pkc.query.search import rank_notes, search_notes
from pkc.vault.index import NoteIndex


def _notes(*titles):
    return [Note(title=t, path=f"notes/{t}.md") for t in titles]


def test_short_query_returns_nothing():
    notes = _notes("a", "ab", "abc")
    assert rank_notes("", notes) == []
    assert rank_notes("a", notes) == []


def test_only_substring_matches():
    notes = _notes("Project Alpha", "Beta plan", "alphabet soup")
    results = rank_notes("ALPHA", notes)
    assert [n.title for n in results] == ["alphabet soup", "Project Alpha"]
    assert all("alpha" in n.title.lower() for n in results)


def test_earlier_match_wins():
    notes = _notes("My meeting notes", "Meeting", "Team meeting")
    assert [n.title for n in rank_notes("meeting", notes)] == ["Meeting", "My meeting notes", "Team meeting"]


def test_shorter_title_wins_on_same_offset():
    notes = _notes("Reading list 2024", "Reading list", "Reading")
    assert [n.title for n in rank_notes("read", notes)] == ["Reading", "Reading list", "Reading list 2024"]


def test_lexicographic_tie_break():
    notes = _notes("Docs b", "Docs a", "Docs c")
    assert [n.title for n in rank_notes("docs", notes)] == ["Docs a", "Docs b", "Docs c"]


def test_result_is_bounded():
    notes = _notes(*[f"Journal {i:02d}" for i in range(25)])
    results = rank_notes("journal", notes)
    assert len(results) == 10
    assert results[0].title == "Journal 00"


def test_empty_notes():
    assert rank_notes("anything", []) == []


def test_search_notes_reads_cache(tmp_path):
    root = tmp_path / "Vault"
    (root / "inbox").mkdir(parents=True)
    (root / "inbox" / "Draft.md").write_text("x")
    (root / "Drafting tips.md").write_text("x")
    vault = Vault(name="Vault", root_path=str(root))

    index_path = tmp_path / "index.json"
    NoteIndex(index_path).refresh([vault])

    config = {"index_path": str(index_path), "ranking": {"min_query_length": 2, "max_results": 1}}
    results = search_notes("draft", vault, config)
    assert [n.path for n in results] == ["inbox/Draft.md"]
