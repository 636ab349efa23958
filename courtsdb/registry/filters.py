"""Post filters that narrow a list of court ids.

Each filter takes the registry (anything with ``find_by_id``), keeps the
input order, drops ids the registry doesn't know, and is a no-op when its
criterion is None. Since every filter only removes ids, they can be chained
in any order with the same result.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Protocol

from courtsdb.registry.models import CourtRecord


class CourtLookup(Protocol):
    def find_by_id(self, court_id: str) -> Optional[CourtRecord]:
        ...


def _keep(
    registry: CourtLookup,
    court_ids: Iterable[str],
    predicate: Callable[[CourtRecord], bool],
) -> List[str]:
    kept: List[str] = []
    for court_id in court_ids:
        court = registry.find_by_id(court_id)
        if court is not None and predicate(court):
            kept.append(court_id)
    return kept


def filter_by_category(
    registry: CourtLookup, court_ids: Iterable[str], category: Optional[str]
) -> List[str]:
    """Keep courts whose category equals ``category`` exactly."""
    if category is None:
        return list(court_ids)
    return _keep(registry, court_ids, lambda c: c.category == category)


def filter_by_bankruptcy(
    registry: CourtLookup, court_ids: Iterable[str], bankruptcy: Optional[bool]
) -> List[str]:
    """Keep bankruptcy courts (True) or everything else (False)."""
    if bankruptcy is None:
        return list(court_ids)
    return _keep(registry, court_ids, lambda c: c.is_bankruptcy == bankruptcy)


def filter_by_location(
    registry: CourtLookup, court_ids: Iterable[str], location: Optional[str]
) -> List[str]:
    """Keep courts whose location, name or jurisdiction contains ``location``."""
    if not location:
        return list(court_ids)
    return _keep(registry, court_ids, lambda c: c.matches_location(location))


def filter_by_date(
    registry: CourtLookup, court_ids: Iterable[str], when: Optional[date]
) -> List[str]:
    """Keep courts with an active range containing ``when``.

    A ``datetime`` is compared by its date part. A court with no active
    ranges is never kept.
    """
    if when is None:
        return list(court_ids)
    if isinstance(when, datetime):
        when = when.date()
    return _keep(registry, court_ids, lambda c: c.is_active_on(when))
