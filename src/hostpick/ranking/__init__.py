"""Fuzzy search and ordering of host entries."""

from hostpick.ranking.fuzzy import fuzzy_score, is_word_boundary, match_positions
from hostpick.ranking.rank import rank, score_entry

__all__ = [
    "fuzzy_score",
    "is_word_boundary",
    "match_positions",
    "rank",
    "score_entry",
]
