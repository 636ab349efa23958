"""
Registry Loader.

Reads registry source data from a directory and builds a Registry:

    <data_dir>/
        variables.json      {"name": "template", ...}
        places/<name>.txt   one literal entry per line -> variable <name>
        courts.json         [ {court record}, ... ]

Files are parsed straight into typed records; pattern text is never patched
textually before parsing, so regex backslashes are written in courts.json
exactly as JSON requires (``"\\\\d+"`` for ``\\d+``).

Only ``courts.json`` is required. A missing variables file or places
directory means "no variables" / "no place lists".
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from courtsdb.core.config import RegistryConfig
from courtsdb.core.exceptions import RegistrySchemaError
from courtsdb.core.logging import get_logger
from courtsdb.registry.compiler import PatternEngine
from courtsdb.registry.models import CourtRecord
from courtsdb.registry.registry import Registry
from courtsdb.shared.text_utils import read_lines

logger = get_logger(__name__)


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise RegistrySchemaError(f"Registry file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise RegistrySchemaError(f"Invalid JSON in {path}: {e}") from e


def load_variables(path: Path) -> Dict[str, str]:
    """Read the variable table. A missing file yields an empty table."""
    if not path.exists():
        logger.debug("No variables file", path=path)
        return {}

    data = _read_json(path)
    if not isinstance(data, dict):
        raise RegistrySchemaError(
            f"{path} must contain an object, got {type(data).__name__}"
        )
    for name, value in data.items():
        if not isinstance(value, str):
            raise RegistrySchemaError(
                f"Variable '{name}' in {path} must be a string, "
                f"got {type(value).__name__}"
            )
    return data


def load_places(directory: Path) -> Dict[str, List[str]]:
    """Read every ``<name>.txt`` place list in a directory, sorted by name."""
    if not directory.is_dir():
        logger.debug("No places directory", path=directory)
        return {}

    places: Dict[str, List[str]] = {}
    for path in sorted(directory.glob("*.txt")):
        places[path.stem] = read_lines(path)
    return places


def load_courts(path: Path) -> List[CourtRecord]:
    """Read and validate the court list."""
    data = _read_json(path)
    if not isinstance(data, list):
        raise RegistrySchemaError(
            f"{path} must contain a list of courts, got {type(data).__name__}"
        )

    courts: List[CourtRecord] = []
    for index, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise RegistrySchemaError(f"Court #{index} in {path} is not an object")
        try:
            courts.append(CourtRecord.model_validate(raw))
        except ValidationError as e:
            label = raw.get("id") or f"#{index}"
            raise RegistrySchemaError(f"Invalid court {label} in {path}: {e}") from e
    return courts


def load_registry(
    data_dir: Optional[Path] = None,
    config: Optional[RegistryConfig] = None,
    engine: Optional[PatternEngine] = None,
) -> Registry:
    """Load and build a registry from a data directory.

    Args:
        data_dir: Overrides ``config.data_dir``
        config: Registry configuration (default: RegistryConfig())
        engine: Pattern engine (default: RegexEngine)

    Returns:
        A ready Registry

    Raises:
        LoadError: If any source file is unreadable or inconsistent.
    """
    config = config or RegistryConfig()
    if data_dir is not None:
        config = RegistryConfig(**{**config.to_dict(), "data_dir": Path(data_dir)})

    variables = load_variables(config.variables_path)
    places = load_places(config.places_path)
    courts = load_courts(config.courts_path)
    logger.info(
        "Loaded registry sources",
        data_dir=config.data_dir,
        courts=len(courts),
        variables=len(variables),
        places=len(places),
    )

    return Registry.from_records(
        courts,
        variables,
        places,
        engine=engine,
        eager_compile=config.eager_compile,
        compile_workers=config.compile_workers,
        match_workers=config.match_workers,
        source=str(config.courts_path),
    )
