"""
Court Registry.

The Registry is the value every query runs against. It is built once by the
host, either from a data directory (see ``courtsdb.registry.loader``) or
from records already in memory, and then passed explicitly to queries.

Construction
------------
    records ──→ parent checks + inheritance
    variables + places ──→ VariableExpander.expand_all()
    templates ──→ resolve_court_patterns()      (per court)
    resolved sources ──→ compile_all()          (lazy, or eager on request)

Every fatal problem (undefined or cyclic variables, malformed ordinal
ranges, bad parent links, duplicate ids) is raised as a LoadError while the
registry is constructed. Compilation is deferred until the first query
unless ``eager_compile`` is set; pattern compile failures never raise, they
are collected in ``compile_errors``.

Thread Safety
-------------
The compiled pattern map is built at most once per registry, guarded by a
lock with double-checked initialization. After that the registry is
read-only and can be queried from any number of threads.

Usage
-----
    registry = load_registry()
    registry.find_court_ids("Calhoun County Circuit Court", location="Florida")
    registry.find_by_id("scotus")
"""

from __future__ import annotations

import threading
from datetime import date
from typing import (
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from courtsdb.core.exceptions import LoadError, PatternCompileError
from courtsdb.core.logging import BuildLogger, get_logger
from courtsdb.registry.compiler import (
    CompiledPattern,
    PatternEngine,
    RegexEngine,
    compile_all,
    resolve_court_patterns,
)
from courtsdb.registry.filters import filter_by_date
from courtsdb.registry.matcher import CandidateMatcher
from courtsdb.registry.models import Candidate, CourtRecord, ExampleFailure
from courtsdb.registry.parents import (
    apply_parent_inheritance,
    index_by_id,
    validate_parents,
)
from courtsdb.registry.reducer import reduce_candidates
from courtsdb.registry.variables import VariableExpander

logger = get_logger(__name__)


class Registry:
    """Immutable, queryable set of courts with their resolved patterns.

    Use ``Registry.from_records()`` or ``load_registry()`` to build one;
    the constructor expects records that are already validated.
    """

    def __init__(
        self,
        courts: Sequence[CourtRecord],
        resolved: Mapping[str, Tuple[str, ...]],
        variables: Mapping[str, str],
        engine: Optional[PatternEngine] = None,
        compile_workers: int = 1,
        match_workers: int = 1,
    ) -> None:
        self._courts: Tuple[CourtRecord, ...] = tuple(courts)
        self._by_id: Dict[str, CourtRecord] = {c.id: c for c in self._courts}
        self._resolved: Dict[str, Tuple[str, ...]] = dict(resolved)
        self._variables: Dict[str, str] = dict(variables)
        self._engine: PatternEngine = engine or RegexEngine()
        self._compile_workers = compile_workers
        self._match_workers = match_workers

        self._lock = threading.Lock()
        self._matcher: Optional[CandidateMatcher] = None
        self._compiled: Dict[str, Tuple[CompiledPattern, ...]] = {}
        self._compile_errors: Tuple[PatternCompileError, ...] = ()

    @classmethod
    def from_records(
        cls,
        courts: Sequence[CourtRecord],
        variables: Optional[Mapping[str, str]] = None,
        places: Optional[Mapping[str, Sequence[str]]] = None,
        *,
        engine: Optional[PatternEngine] = None,
        eager_compile: bool = False,
        compile_workers: int = 1,
        match_workers: int = 1,
        source: str = "<memory>",
    ) -> "Registry":
        """Build a registry from structured data.

        Args:
            courts: Court records in registry order
            variables: Variable table (name -> template)
            places: Place lists (name -> literal entries)
            engine: Pattern engine (default: RegexEngine)
            eager_compile: Compile every pattern now instead of on first query
            compile_workers: Thread count for compilation
            match_workers: Thread count for matching
            source: Label used in log messages

        Raises:
            LoadError: If the data cannot form a valid registry.
        """
        blog = BuildLogger(source)
        try:
            blog.start_stage("parents")
            by_id = index_by_id(courts)
            validate_parents(by_id)
            courts = apply_parent_inheritance(list(courts))

            blog.start_stage("expand")
            expanded = VariableExpander(variables or {}, places).expand_all()
            blog.log_progress("Expanded variables", count=len(expanded))

            blog.start_stage("resolve")
            resolved = {c.id: resolve_court_patterns(c, expanded) for c in courts}

            registry = cls(
                courts,
                resolved,
                expanded,
                engine=engine,
                compile_workers=compile_workers,
                match_workers=match_workers,
            )
            if eager_compile:
                blog.start_stage("compile")
                registry.compile()
        except LoadError as e:
            blog.finish(success=False, error=str(e))
            raise

        blog.finish(success=True, records=len(registry))
        return registry

    # === Accessors ===

    def __len__(self) -> int:
        return len(self._courts)

    def __contains__(self, court_id: object) -> bool:
        return court_id in self._by_id

    def __iter__(self) -> Iterator[CourtRecord]:
        return iter(self._courts)

    def find_by_id(self, court_id: str) -> Optional[CourtRecord]:
        """Return the court with this id, or None."""
        return self._by_id.get(court_id)

    def list_all(self) -> List[CourtRecord]:
        """Snapshot of every court in registry order."""
        return list(self._courts)

    @property
    def variables(self) -> Dict[str, str]:
        """The fully expanded variable table."""
        return dict(self._variables)

    def resolved_patterns(self, court_id: str) -> Tuple[str, ...]:
        """Regex sources for a court, name last; empty for unknown ids."""
        return self._resolved.get(court_id, ())

    def compiled_patterns(self, court_id: str) -> Tuple[CompiledPattern, ...]:
        """Compiled patterns for a court, minus any that failed to compile."""
        self.compile()
        return self._compiled.get(court_id, ())

    @property
    def compile_errors(self) -> Tuple[PatternCompileError, ...]:
        """Patterns dropped because they failed to compile."""
        self.compile()
        return self._compile_errors

    @property
    def is_compiled(self) -> bool:
        return self._matcher is not None

    # === Compilation ===

    def compile(self) -> CandidateMatcher:
        """Compile every court's patterns once; later calls are free."""
        matcher = self._matcher
        if matcher is not None:
            return matcher

        with self._lock:
            if self._matcher is None:
                results = compile_all(
                    self._resolved, self._engine, self._compile_workers
                )
                self._compiled = {cid: r.patterns for cid, r in results.items()}
                self._compile_errors = tuple(
                    e for r in results.values() for e in r.errors
                )
                if self._compile_errors:
                    logger.warning(
                        "Some patterns were dropped",
                        count=len(self._compile_errors),
                    )
                self._matcher = CandidateMatcher(
                    self._courts, self._compiled, self._match_workers
                )
            return self._matcher

    # === Queries ===

    def match(
        self,
        text: str,
        category: Optional[str] = None,
        bankruptcy: Optional[bool] = None,
        location: Optional[str] = None,
        allow_partial_matches: bool = False,
    ) -> List[Candidate]:
        """Raw candidates for a query, before reduction."""
        return self.compile().match(
            text,
            category=category,
            bankruptcy=bankruptcy,
            location=location,
            allow_partial_matches=allow_partial_matches,
        )

    def find_court_ids(
        self,
        text: str,
        *,
        category: Optional[str] = None,
        bankruptcy: Optional[bool] = None,
        location: Optional[str] = None,
        active_at: Optional[date] = None,
        allow_partial_matches: bool = False,
    ) -> List[str]:
        """Identify the courts a free-text description refers to.

        Args:
            text: Court description, e.g. "Calhoun County Circuit Court"
            category: Only consider courts of this category
            bankruptcy: Only bankruptcy courts (True) or only others (False)
            location: Only courts whose location, name or jurisdiction
                contains this string (case-insensitive)
            active_at: Only courts active on this date
            allow_partial_matches: Count pattern hits that cover only part
                of the text

        Returns:
            Court ids in registry order; empty when nothing matched.
        """
        candidates = self.match(
            text,
            category=category,
            bankruptcy=bankruptcy,
            location=location,
            allow_partial_matches=allow_partial_matches,
        )
        court_ids = reduce_candidates(candidates, self.find_by_id)
        return filter_by_date(self, court_ids, active_at)

    def validate_examples(self) -> List[ExampleFailure]:
        """Run every court's example strings and report the ones that miss."""
        failures: List[ExampleFailure] = []
        for court in self._courts:
            for example in court.examples:
                found = self.find_court_ids(example)
                if court.id not in found:
                    failures.append(ExampleFailure(court.id, example, tuple(found)))
        return failures


def find_court_ids(
    registry: Registry,
    text: str,
    *,
    category: Optional[str] = None,
    bankruptcy: Optional[bool] = None,
    location: Optional[str] = None,
    active_at: Optional[date] = None,
    allow_partial_matches: bool = False,
) -> List[str]:
    """Module-level form of ``Registry.find_court_ids``."""
    return registry.find_court_ids(
        text,
        category=category,
        bankruptcy=bankruptcy,
        location=location,
        active_at=active_at,
        allow_partial_matches=allow_partial_matches,
    )
