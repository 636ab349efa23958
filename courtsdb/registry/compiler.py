"""Pattern compilation for court records.

Every court is searchable through its explicit pattern templates followed by
its display name. Templates are resolved against the expanded variable
table when the registry is built (so unknown variables fail the build);
compiling the resolved sources into regex objects can happen later.

All patterns compile case-insensitive and Unicode-aware; there is no
per-pattern override. A pattern that fails to compile is dropped from its
court and reported as a PatternCompileError diagnostic; the court keeps
every other pattern.

The regex engine sits behind the PatternEngine protocol. RegexEngine, built
on the standard ``re`` module, is the default.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import (
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)

from courtsdb.core.exceptions import PatternCompileError
from courtsdb.core.logging import get_logger
from courtsdb.registry.models import CourtRecord
from courtsdb.registry.variables import substitute_variables
from courtsdb.shared.text_utils import fold_text

logger = get_logger(__name__)

MATCH_FLAGS = re.IGNORECASE | re.UNICODE

Span = Tuple[int, int]


@runtime_checkable
class CompiledPattern(Protocol):
    """What the matcher needs from a compiled pattern."""

    source: str

    def search(self, text: str) -> Optional[Span]:
        """Return the (start, end) of the leftmost match, or None."""
        ...

    def fullmatch(self, text: str) -> bool:
        """Return True if the pattern matches the whole of ``text``."""
        ...


@runtime_checkable
class PatternEngine(Protocol):
    """Compiles pattern sources. Raises ValueError on invalid sources."""

    def compile(self, source: str) -> CompiledPattern:
        ...


class RegexPattern:
    """CompiledPattern backed by ``re.Pattern``."""

    __slots__ = ("source", "_regex")

    def __init__(self, source: str, regex: "re.Pattern[str]") -> None:
        self.source = source
        self._regex = regex

    def search(self, text: str) -> Optional[Span]:
        match = self._regex.search(text)
        return match.span() if match else None

    def fullmatch(self, text: str) -> bool:
        return self._regex.fullmatch(text) is not None

    def __repr__(self) -> str:
        return f"RegexPattern({self.source!r})"


class RegexEngine:
    """PatternEngine using the standard library ``re`` module."""

    def compile(self, source: str) -> CompiledPattern:
        try:
            return RegexPattern(source, re.compile(source, MATCH_FLAGS))
        except re.error as e:
            raise ValueError(str(e)) from e


@dataclass(frozen=True)
class CompileResult:
    """Compiled patterns of one court plus the sources that failed."""

    court_id: str
    patterns: Tuple[CompiledPattern, ...]
    errors: Tuple[PatternCompileError, ...] = ()


def resolve_court_patterns(
    court: CourtRecord, variables: Mapping[str, str]
) -> Tuple[str, ...]:
    """Resolve a court's templates into regex sources.

    The effective list is the court's patterns followed by its display
    name. Each source is folded to ASCII the same way query text is; the name
    is folded before it is escaped, so punctuation that folds into regex
    metacharacters (full-width parentheses, ellipses) stays literal.

    Raises:
        UndefinedVariableError: A template names an unknown variable.
        OrdinalRangeError: A template holds a malformed ordinal range.
    """
    sources = [
        fold_text(substitute_variables(template, variables, owner=court.id))
        for template in court.patterns
    ]
    sources.append(re.escape(fold_text(court.name)))
    return tuple(sources)


def compile_court_patterns(
    court_id: str, sources: Sequence[str], engine: PatternEngine
) -> CompileResult:
    """Compile one court's resolved sources, dropping the ones that fail."""
    compiled: List[CompiledPattern] = []
    errors: List[PatternCompileError] = []
    for source in sources:
        try:
            compiled.append(engine.compile(source))
        except ValueError as e:
            logger.warning(
                "Dropping pattern that failed to compile",
                court_id=court_id,
                pattern=source,
                error=e,
            )
            errors.append(
                PatternCompileError(
                    f"Pattern for court '{court_id}' failed to compile: {e}",
                    court_id=court_id,
                    pattern=source,
                )
            )
    return CompileResult(court_id, tuple(compiled), tuple(errors))


def compile_all(
    resolved: Mapping[str, Sequence[str]],
    engine: Optional[PatternEngine] = None,
    workers: int = 1,
) -> Dict[str, CompileResult]:
    """Compile the resolved sources of every court.

    Courts are independent, so with ``workers > 1`` they are compiled on a
    thread pool. The result preserves the order of ``resolved``.

    Args:
        resolved: court id -> resolved pattern sources, in registry order
        engine: Pattern engine (default: RegexEngine)
        workers: Thread count

    Returns:
        court id -> CompileResult
    """
    engine = engine or RegexEngine()
    items = list(resolved.items())

    if workers <= 1 or len(items) < 2:
        results = [compile_court_patterns(cid, src, engine) for cid, src in items]
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(
                executor.map(
                    lambda item: compile_court_patterns(item[0], item[1], engine),
                    items,
                )
            )

    failed = sum(len(r.errors) for r in results)
    logger.debug(
        "Compiled court patterns",
        courts=len(results),
        patterns=sum(len(r.patterns) for r in results),
        failed=failed,
    )
    return {r.court_id: r for r in results}
