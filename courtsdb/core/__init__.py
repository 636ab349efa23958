"""
Core Layer - Configuration, Logging and Errors.

The core package holds the services every other courtsdb module relies on.
It never imports from the registry or the CLI.

Architecture Position
---------------------
    ┌─────────────────────────────────────────┐
    │            CLI (courtsdb.cli)           │
    ├─────────────────────────────────────────┤
    │      Registry (courtsdb.registry)       │
    ├─────────────────────────────────────────┤
    │  Shared (courtsdb.shared: text_utils)   │
    ├─────────────────────────────────────────┤
    │    ★ Core (config, logging, errors) ★   │  <- You are here
    └─────────────────────────────────────────┘

Key Components
--------------
**Configuration (config.py)**
    RegistryConfig dataclass, YAML loading and COURTSDB_* env overrides.

**Logging (logging.py)**
    get_logger() returning a StructuredLogger with key=value context, and
    BuildLogger for timing registry construction stages.

**Exceptions (exceptions.py)**
    CourtsDBError hierarchy. Every error carries an error code, an
    explanation and suggested fixes.
"""

from courtsdb.core.config import RegistryConfig, load_config, save_config
from courtsdb.core.exceptions import CourtsDBError, LoadError
from courtsdb.core.logging import BuildLogger, configure_logging, get_logger

__all__ = [
    # Config
    "RegistryConfig",
    "load_config",
    "save_config",
    # Logging
    "get_logger",
    "configure_logging",
    "BuildLogger",
    # Exceptions
    "CourtsDBError",
    "LoadError",
]
