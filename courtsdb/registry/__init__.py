"""
Court Registry - Pattern Compilation and Matching.

Build flow (once per Registry):

    variables.json + places/*.txt ──→ VariableExpander ──→ expanded table
    courts.json ──→ CourtRecord ──→ parent checks + inheritance
    record templates + expanded table ──→ resolved sources ──→ compile

Query flow (per call):

    text ──→ CandidateMatcher ──→ reduce_candidates ──→ filter_by_date

Usage Example
-------------
    from courtsdb.registry import load_registry

    registry = load_registry()
    registry.find_court_ids("Fayette County Court of Common Pleas")
    # ['ohctcomplfayett', 'pactcomplfayett']
"""

from courtsdb.registry.compiler import (
    CompiledPattern,
    PatternEngine,
    RegexEngine,
)
from courtsdb.registry.filters import (
    filter_by_bankruptcy,
    filter_by_category,
    filter_by_date,
    filter_by_location,
)
from courtsdb.registry.loader import load_registry
from courtsdb.registry.models import (
    Candidate,
    CourtRecord,
    DateRange,
    ExampleFailure,
)
from courtsdb.registry.registry import Registry, find_court_ids
from courtsdb.registry.variables import VariableExpander

__all__ = [
    "Registry",
    "find_court_ids",
    "load_registry",
    "CourtRecord",
    "DateRange",
    "Candidate",
    "ExampleFailure",
    "VariableExpander",
    "PatternEngine",
    "CompiledPattern",
    "RegexEngine",
    "filter_by_category",
    "filter_by_bankruptcy",
    "filter_by_location",
    "filter_by_date",
]
