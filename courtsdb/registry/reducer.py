"""Match reduction: tie-break rules that turn candidates into court ids.

Two passes, always in this order:

1. Parent suppression. A court is dropped when another candidate names it
   as its parent, so "California Court of Appeal, First Appellate District"
   resolves to the district rather than to the Court of Appeal as well.
2. Substring suppression. A candidate is dropped when its matched text is a
   strict substring of another candidate's matched text ("circuit court"
   loses to "14th circuit court"). Identical texts both survive.

Neither pass may empty a non-empty set; a pass that would is skipped.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from courtsdb.registry.models import Candidate, CourtRecord

ParentLookup = Callable[[str], Optional[CourtRecord]]


def dedupe_candidates(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Keep the first candidate per court id, preserving order."""
    seen = set()
    unique: List[Candidate] = []
    for candidate in candidates:
        if candidate.court_id in seen:
            continue
        seen.add(candidate.court_id)
        unique.append(candidate)
    return unique


def suppress_parents(
    candidates: Sequence[Candidate], lookup: ParentLookup
) -> List[Candidate]:
    """Drop candidates that are the parent of another candidate."""
    if len(candidates) <= 1:
        return list(candidates)

    parent_ids = set()
    for candidate in candidates:
        court = lookup(candidate.court_id)
        if court is not None and court.parent:
            parent_ids.add(court.parent)

    reduced = [c for c in candidates if c.court_id not in parent_ids]
    return reduced if reduced else list(candidates)


def suppress_substrings(candidates: Sequence[Candidate]) -> List[Candidate]:
    """Drop candidates whose matched text sits strictly inside another's."""
    if len(candidates) <= 1:
        return list(candidates)

    texts = {c.matched_text for c in candidates}
    reduced = [
        c
        for c in candidates
        if not any(
            other != c.matched_text and c.matched_text in other for other in texts
        )
    ]
    return reduced if reduced else list(candidates)


def reduce_candidates(
    candidates: Sequence[Candidate], lookup: ParentLookup
) -> List[str]:
    """Run both suppression passes and return the surviving court ids."""
    survivors = suppress_substrings(
        suppress_parents(dedupe_candidates(candidates), lookup)
    )
    return [c.court_id for c in survivors]
