"""Fuzzy subsequence scoring."""

BOUNDARY_SEPARATORS = "-_./"

EARLY_START_WINDOW = 20
ADJACENCY_BONUS = 5
MAX_GAP_PENALTY = 15
START_BOUNDARY_BONUS = 8
BOUNDARY_BONUS = 6


def is_word_boundary(prev: str, curr: str, idx: int) -> bool:
    """Whether curr at idx starts a word, given the preceding character."""
    if idx == 0:
        return True
    if not prev:
        return False
    if prev in BOUNDARY_SEPARATORS or prev.isspace():
        return True
    # camelCase
    return prev.islower() and curr.isupper()


def _fold(s: str) -> str:
    # Per-character so indexes keep lining up with s (str.lower can grow U+0130)
    return "".join(c.lower()[0] for c in s)


def match_positions(query: str, target: str) -> list[int] | None:
    """Greedy case-insensitive subsequence match.

    Returns the matched index in target for each query character, or None if
    query is not a subsequence of target.
    """
    ql = _fold(query)
    tl = _fold(target)

    positions = []
    ti = 0
    for ch in ql:
        found = tl.find(ch, ti)
        if found == -1:
            return None
        positions.append(found)
        ti = found + 1
    return positions


def fuzzy_score(query: str, target: str) -> int:
    """Score query against target; 0 means no match.

    The score rewards early, contiguous and word-boundary matches and
    penalizes gaps. The case bonus compares query[i] with the i-th matched
    target character, regardless of which query character produced that
    match. The result can be negative for long, scattered matches.
    """
    if not query or not target:
        return 0

    positions = match_positions(query, target)
    if not positions:
        return 0

    score = len(positions)

    start = positions[0]
    if start < EARLY_START_WINDOW:
        score += EARLY_START_WINDOW - start

    gap_total = 0
    for prev_pos, pos in zip(positions, positions[1:]):
        if pos == prev_pos + 1:
            score += ADJACENCY_BONUS
        else:
            gap_total += pos - prev_pos - 1
    score -= min(gap_total, MAX_GAP_PENALTY)

    for i, pos in enumerate(positions):
        prev = target[pos - 1] if pos > 0 else ""
        curr = target[pos]
        if is_word_boundary(prev, curr, pos):
            score += START_BOUNDARY_BONUS if pos == 0 else BOUNDARY_BONUS
        if i < len(query) and query[i] == curr:
            score += 1

    return score
