"""courtsdb - identify courts from free-text descriptions.

Given a registry of court records, each annotated with regex pattern
templates, courtsdb turns strings such as "Calhoun County Circuit Court" or
"Tribunal de Apelaciones de Puerto Rico" into court identifiers, optionally
narrowed by court type, location or a point in time.

    from courtsdb import find_court_ids, load_registry

    registry = load_registry()
    find_court_ids(registry, "Calhoun County Circuit Court", location="Florida")
    # ['flacirct14cal']
"""

from courtsdb.core.config import RegistryConfig, load_config
from courtsdb.core.exceptions import (
    ConfigError,
    CourtsDBError,
    LoadError,
    OrdinalRangeError,
    ParentReferenceError,
    PatternCompileError,
    RegistrySchemaError,
    UndefinedVariableError,
    VariableCycleError,
)
from courtsdb.registry import (
    Candidate,
    CourtRecord,
    DateRange,
    ExampleFailure,
    Registry,
    find_court_ids,
    load_registry,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Registry
    "Registry",
    "find_court_ids",
    "load_registry",
    # Models
    "CourtRecord",
    "DateRange",
    "Candidate",
    "ExampleFailure",
    # Configuration
    "RegistryConfig",
    "load_config",
    # Exceptions
    "CourtsDBError",
    "LoadError",
    "UndefinedVariableError",
    "VariableCycleError",
    "OrdinalRangeError",
    "ParentReferenceError",
    "RegistrySchemaError",
    "PatternCompileError",
    "ConfigError",
]
