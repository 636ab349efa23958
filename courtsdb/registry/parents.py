"""Parent link validation and inheritance.

A court may name another court as its ``parent``. The link is a lookup
relation only. Loading enforces that every parent exists and that parent
chains never loop, then lets children that leave ``dates``, ``type`` or
``location`` unset take them from their parent.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from courtsdb.core.exceptions import ParentReferenceError, RegistrySchemaError
from courtsdb.registry.models import CourtRecord


def index_by_id(courts: Sequence[CourtRecord]) -> Dict[str, CourtRecord]:
    """Map ids to courts, rejecting duplicates."""
    by_id: Dict[str, CourtRecord] = {}
    for court in courts:
        if court.id in by_id:
            raise RegistrySchemaError(f"Duplicate court id '{court.id}'")
        by_id[court.id] = court
    return by_id


def validate_parents(by_id: Dict[str, CourtRecord]) -> None:
    """Check that parents resolve and parent chains terminate.

    Raises:
        ParentReferenceError: On a missing parent or a cycle.
    """
    for court in by_id.values():
        if court.parent and court.parent not in by_id:
            raise ParentReferenceError(
                f"Court '{court.id}' has unknown parent '{court.parent}'",
                court_id=court.id,
                parent=court.parent,
            )

    done: set = set()
    for court in by_id.values():
        path: List[str] = []
        on_path: set = set()
        current = court
        while current.parent and current.id not in done:
            if current.id in on_path:
                cycle = path[path.index(current.id) :] + [current.id]
                raise ParentReferenceError(
                    "Parent cycle: " + " -> ".join(cycle),
                    court_id=current.id,
                    parent=current.parent,
                )
            path.append(current.id)
            on_path.add(current.id)
            current = by_id[current.parent]
        done.update(path)


def apply_parent_inheritance(courts: Sequence[CourtRecord]) -> List[CourtRecord]:
    """Fill unset active ranges, category and location from the parent.

    Only the parent's own declared values are used, never values the
    parent itself inherited. Returns new records in the same order.
    """
    declared = {c.id: c for c in courts}
    inherited: List[CourtRecord] = []
    for court in courts:
        parent = declared.get(court.parent) if court.parent else None
        if parent is None:
            inherited.append(court)
            continue

        update = {}
        if not court.active_ranges and parent.active_ranges:
            update["active_ranges"] = list(parent.active_ranges)
        if court.category is None and parent.category is not None:
            update["category"] = parent.category
        if court.location is None and parent.location is not None:
            update["location"] = parent.location
        inherited.append(court.model_copy(update=update) if update else court)
    return inherited
