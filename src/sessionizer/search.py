"""Fuzzy search over reconciled candidates.

Subsequence matching with scoring:
- Every matched character scores a base amount
- Consecutive matches score a growing bonus
- Matches at the start of the text or of a word score higher
- Frecency only breaks ties between equal match scores
"""

from collections.abc import Sequence

from .models import Candidate

MATCH_SCORE = 16
CONSECUTIVE_BONUS = 8  # Multiplied by current run length
LEADING_BONUS = 24  # Decays by 2 per character before the first match
BOUNDARY_BONUS = 8
BOUNDARY_CHARS = "/.-_ "

# Rank weight stays below one point so it never outranks a better match
RANK_WEIGHT = 0.5


def fuzzy_match(query: str, text: str) -> tuple[bool, int, list[int]]:
    """Check if query is a case-insensitive subsequence of text.

    Every occurrence of the first query character is tried as a starting
    point and the best-scoring alignment wins.

    Returns:
        (matches, score, indices) - indices are the matched positions in text
    """
    if not query:
        return True, 0, []

    query_lower = query.lower()
    text_lower = text.lower()

    best_score: int | None = None
    best_indices: list[int] = []

    start = text_lower.find(query_lower[0])
    while start != -1:
        indices = _align_from(query_lower, text_lower, start)
        if indices is None:
            # A later start only has less text left to match
            break
        score = _score_alignment(indices, text_lower)
        if best_score is None or score > best_score:
            best_score = score
            best_indices = indices
        start = text_lower.find(query_lower[0], start + 1)

    if best_score is None:
        return False, 0, []
    return True, best_score, best_indices


def _align_from(query: str, text: str, start: int) -> list[int] | None:
    """Greedy leftmost alignment of query in text beginning at start."""
    indices = [start]
    pos = start + 1
    for char in query[1:]:
        pos = text.find(char, pos)
        if pos == -1:
            return None
        indices.append(pos)
        pos += 1
    return indices


def _score_alignment(indices: list[int], text: str) -> int:
    score = max(0, LEADING_BONUS - 2 * indices[0])
    run = 0
    for n, i in enumerate(indices):
        score += MATCH_SCORE
        if n > 0 and i == indices[n - 1] + 1:
            run += 1
            score += CONSECUTIVE_BONUS * run
        else:
            run = 0
        if i == 0 or text[i - 1] in BOUNDARY_CHARS:
            score += BOUNDARY_BONUS
    return score


def match_score(query: str, candidate: Candidate) -> int | None:
    """Best score over a candidate's search targets, or None if none match.

    Secondary targets (the raw directory path) count for half.
    """
    best = None
    for text, primary in candidate.search_targets():
        matches, score, _ = fuzzy_match(query, text)
        if not matches:
            continue
        if not primary:
            score //= 2
        if best is None or score > best:
            best = score
    return best


def search(candidates: Sequence[Candidate], query: str) -> list[tuple[Candidate, float]]:
    """Rank candidates against a free-text query.

    Args:
        candidates: Candidates in default browse order
        query: Search string; empty returns every candidate unchanged

    Returns:
        (candidate, score) pairs, best first. Equal scores keep input order.
        Only includes matching candidates.
    """
    if not query:
        return [(candidate, 0.0) for candidate in candidates]

    matched: list[tuple[Candidate, int]] = []
    for candidate in candidates:
        score = match_score(query, candidate)
        if score is not None:
            matched.append((candidate, score))

    if not matched:
        return []

    top_rank = max(max(c.rank_score, 0.0) for c, _ in matched)
    results: list[tuple[Candidate, float]] = []
    for candidate, score in matched:
        weight = 0.0
        if top_rank > 0:
            weight = RANK_WEIGHT * max(candidate.rank_score, 0.0) / top_rank
        results.append((candidate, score + weight))

    results.sort(key=lambda r: -r[1])
    return results
