"""Query ranking for list filtering.

Labels containing the query as a substring rank first, ordered by where the
hit starts. Labels that only contain the query as a scattered subsequence
follow, ordered by ``fuzzy_score``. Matching ignores case.
"""

from __future__ import annotations

from typing import NamedTuple

WORD_BOUNDARIES = frozenset("/_-. :")
SUBSTRING_BASE = 10_000


class FuzzyMatch(NamedTuple):
    index: int
    label: str
    score: int


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``candidate`` as a subsequence match, or ``None`` when it is not one.

    Runs of adjacent characters and hits at word starts score up; skipped
    characters and long candidates score down.
    """
    if not query:
        return 0
    haystack = candidate.casefold()
    total = 0
    streak = 0
    pos = -1
    for needle in query.casefold():
        found = haystack.find(needle, pos + 1)
        if found < 0:
            return None
        streak = streak + 1 if found == pos + 1 else 0
        total += 20 + 4 * min(streak, 4) if streak else -min(40, 2 * (found - pos - 1))
        at_word_start = found == 0 or haystack[found - 1] in WORD_BOUNDARIES
        if at_word_start:
            total += 35
        pos = found
    return total - len(haystack) // 5


def rank_labels(query: str, labels: list[str], limit: int | None = None) -> list[FuzzyMatch]:
    """Return the labels matching ``query``, best first."""
    if not query:
        matches = [FuzzyMatch(index, label, 0) for index, label in enumerate(labels)]
        return matches[:limit]

    folded_query = query.casefold()
    substring: list[FuzzyMatch] = []
    scattered: list[FuzzyMatch] = []
    for index, label in enumerate(labels):
        start = label.casefold().find(folded_query)
        if start >= 0:
            substring.append(FuzzyMatch(index, label, SUBSTRING_BASE - 50 * start - len(label)))
            continue
        score = fuzzy_score(query, label)
        if score is not None:
            scattered.append(FuzzyMatch(index, label, score))

    def order(match: FuzzyMatch) -> tuple[int, int, str]:
        return (-match.score, len(match.label), match.label)

    ranked = sorted(substring, key=order) + sorted(scattered, key=order)
    return ranked[:limit]
