"""Order host entries for display, optionally filtered by a search query."""

from hostpick.ranking.fuzzy import fuzzy_score
from hostpick.types import HostEntry


def _identity_key(entry: HostEntry) -> tuple:
    """Pinned first (most recent pin first), then alias case-insensitively."""
    if entry.pinned_at is not None:
        return (0, -entry.pinned_at.timestamp(), entry.alias.lower(), entry.alias)
    return (1, 0.0, entry.alias.lower(), entry.alias)


def score_entry(entry: HostEntry, query: str) -> int:
    """Best fuzzy score of query over the entry's searchable fields."""
    fields = [entry.alias, entry.host, entry.user]
    if entry.aliases:
        fields.append(" ".join(entry.aliases))
    if entry.tags:
        fields.append(" ".join(entry.tags))

    best = 0
    for value in fields:
        if not value:
            continue
        best = max(best, fuzzy_score(query, value))
    return best


def rank(entries: list[HostEntry], query: str = "") -> list[HostEntry]:
    """Return entries in display order for query.

    An empty query keeps every entry, pinned first. Otherwise only entries
    matching the query as a subsequence of some field are kept, best score
    first. The input list is not modified.
    """
    q = query.strip()
    if not q:
        return sorted(entries, key=_identity_key)

    scored = []
    for entry in entries:
        score = score_entry(entry, q)
        if score > 0:
            scored.append((score, entry))

    scored.sort(key=lambda item: (-item[0], _identity_key(item[1])))
    return [entry for _, entry in scored]
