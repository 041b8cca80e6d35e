"""Title search over the cached note index."""

from typing import Any

from ..models import Note, RankedMatch, Vault
from ..vault.index import NoteIndex

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 10


def rank_notes(
    query: str,
    notes: list[Note],
    limit: int = MAX_RESULTS,
    min_length: int = MIN_QUERY_LENGTH,
) -> list[Note]:
    """Rank notes whose title contains ``query``, best first.

    Matching is case-insensitive substring containment. Earlier matches rank
    higher, then shorter titles, then titles in lexicographic order.

    Args:
        query: Partially typed title.
        notes: Candidate notes, usually one vault's cache entry.
        limit: Maximum number of notes returned.
        min_length: Queries shorter than this return nothing.

    Returns:
        At most ``limit`` notes.
    """
    if len(query) < min_length:
        return []

    q = query.lower()
    matches = []
    for note in notes:
        idx = note.title.lower().find(q)
        if idx != -1:
            matches.append(RankedMatch(note=note, match_index=idx))

    matches.sort(key=lambda m: (m.match_index, len(m.note.title), m.note.title))
    return [m.note for m in matches[:limit]]


def search_notes(query: str, vault: Vault, config: dict[str, Any]) -> list[Note]:
    """Rank a vault's cached notes against ``query`` using configured bounds."""
    ranking = config.get("ranking", {})
    index = NoteIndex(config["index_path"])
    return rank_notes(
        query,
        index.get_notes(vault),
        limit=ranking.get("max_results", MAX_RESULTS),
        min_length=ranking.get("min_query_length", MIN_QUERY_LENGTH),
    )
