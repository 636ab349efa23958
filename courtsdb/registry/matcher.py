"""Candidate matching: run one query against every eligible court.

The query is normalized (whitespace collapsed, folded to ASCII, lower-cased)
and searched with each court's compiled patterns in order. A court yields at
most one Candidate: the text matched by its first pattern that counts.

When partial matches are not allowed a pattern only counts if its leftmost
search hit covers the whole normalized query. A shorter hit does not count
and evaluation moves on to the next pattern.

If no court matched at all, the query is compared for exact equality with
each eligible court's normalized name.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Mapping, Optional, Sequence

from courtsdb.registry.compiler import CompiledPattern
from courtsdb.registry.models import Candidate, CourtRecord
from courtsdb.shared.text_utils import normalize_query


def is_eligible(
    court: CourtRecord,
    category: Optional[str] = None,
    bankruptcy: Optional[bool] = None,
    location: Optional[str] = None,
) -> bool:
    """Apply the category, bankruptcy and location pre-filters to one court."""
    if category is not None and court.category != category:
        return False
    if bankruptcy is not None and court.is_bankruptcy != bankruptcy:
        return False
    if location and not court.matches_location(location):
        return False
    return True


def match_patterns(
    patterns: Sequence[CompiledPattern], text: str, allow_partial_matches: bool
) -> Optional[str]:
    """Return the text matched by the first pattern that counts, else None."""
    for pattern in patterns:
        span = pattern.search(text)
        if span is None:
            continue
        start, end = span
        if allow_partial_matches or (start == 0 and end == len(text)):
            return text[start:end]
    return None


class CandidateMatcher:
    """Evaluate queries against a fixed, ordered set of courts.

    Args:
        courts: Courts in registry order
        patterns: court id -> compiled patterns
        workers: Thread count for the scan; 1 scans inline
    """

    def __init__(
        self,
        courts: Sequence[CourtRecord],
        patterns: Mapping[str, Sequence[CompiledPattern]],
        workers: int = 1,
    ) -> None:
        self._courts = list(courts)
        self._patterns = patterns
        self._workers = workers
        self._names = {c.id: normalize_query(c.name) for c in self._courts}

    def match(
        self,
        text: str,
        category: Optional[str] = None,
        bankruptcy: Optional[bool] = None,
        location: Optional[str] = None,
        allow_partial_matches: bool = False,
    ) -> List[Candidate]:
        """Produce the raw candidates for one query, in registry order.

        Returns an empty list when nothing matches; never raises for that.
        """
        normalized = normalize_query(text)
        if not normalized:
            return []

        eligible = [
            c for c in self._courts if is_eligible(c, category, bankruptcy, location)
        ]

        def evaluate(court: CourtRecord) -> Optional[Candidate]:
            matched = match_patterns(
                self._patterns.get(court.id, ()), normalized, allow_partial_matches
            )
            return Candidate(court.id, matched) if matched is not None else None

        if self._workers > 1 and len(eligible) > 1:
            with ThreadPoolExecutor(max_workers=self._workers) as executor:
                results = list(executor.map(evaluate, eligible))
        else:
            results = [evaluate(c) for c in eligible]

        candidates = [c for c in results if c is not None]
        if candidates:
            return candidates

        return [
            Candidate(c.id, normalized)
            for c in eligible
            if self._names[c.id] == normalized
        ]
