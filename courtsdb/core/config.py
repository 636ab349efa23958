"""
Configuration for courtsdb.

Provides the RegistryConfig dataclass and the functions that load it from a
YAML file with environment variable overrides.

Architecture Context
--------------------
Configuration sits at the Core layer. A RegistryConfig is created once by
the host (or the CLI) and handed to load_registry():

    courtsdb.yaml (optional)
           ↓
    load_config() → RegistryConfig
           ↓
    load_registry(config=...) → Registry

Configuration precedence: 1. Env vars, 2. YAML file, 3. Defaults.

Environment Variables
---------------------
String values in the YAML file may use ${VAR_NAME} or ${VAR_NAME:default}:

    data_dir: ${COURTS_DATA:/srv/courts_db/data}

The following variables override whatever the file says:

    COURTSDB_DATA_DIR         registry data directory
    COURTSDB_LOG_LEVEL        DEBUG, INFO, WARNING, ERROR, CRITICAL
    COURTSDB_EAGER_COMPILE    1/true/yes to compile every pattern at load
    COURTSDB_COMPILE_WORKERS  thread count for pattern compilation
    COURTSDB_MATCH_WORKERS    thread count for matching
"""

import os
import re
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from courtsdb.core.exceptions import ConfigError


DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
CONFIG_FILENAMES = ("courtsdb.yaml", "courtsdb.yml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
MAX_WORKERS = 64

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class _Logger:
    """Lazy logger holder.

    Avoids creating handlers at import time.
    """

    _instance = None

    @classmethod
    def get(cls) -> Any:
        """Get logger (lazy-loaded)."""
        if cls._instance is None:
            from courtsdb.core.logging import get_logger

            cls._instance = get_logger(__name__)
        return cls._instance


@dataclass
class RegistryConfig:
    """Where the registry data lives and how it is built."""

    data_dir: Path = DEFAULT_DATA_DIR
    courts_file: str = "courts.json"
    variables_file: str = "variables.json"
    places_dir: str = "places"
    eager_compile: bool = False
    compile_workers: int = 1
    match_workers: int = 1
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Normalize paths and validate values."""
        self.data_dir = Path(self.data_dir).expanduser()
        self.log_level = str(self.log_level).upper()

        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"Unknown log_level: '{self.log_level}'",
                field="log_level",
                value=self.log_level,
            )
        for name in ("compile_workers", "match_workers"):
            value = getattr(self, name)
            if not isinstance(value, int) or not 1 <= value <= MAX_WORKERS:
                raise ConfigError(
                    f"{name} must be an integer between 1 and {MAX_WORKERS}, "
                    f"got {value!r}",
                    field=name,
                    value=value,
                )
        for name in ("courts_file", "variables_file", "places_dir"):
            if not getattr(self, name):
                raise ConfigError(f"{name} must not be empty", field=name)

    @property
    def courts_path(self) -> Path:
        return self.data_dir / self.courts_file

    @property
    def variables_path(self) -> Path:
        return self.data_dir / self.variables_file

    @property
    def places_path(self) -> Path:
        return self.data_dir / self.places_dir

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegistryConfig":
        """Build a config from a parsed YAML mapping.

        Unknown keys are rejected so typos don't silently fall back to
        defaults.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                field=unknown[0],
            )
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for display or saving."""
        data = asdict(self)
        data["data_dir"] = str(self.data_dir)
        return data


def expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Handles nested structures including:
    - Strings with ${VAR_NAME} or ${VAR_NAME:default} syntax
    - Nested dictionaries
    - Nested lists

    Args:
        value: Configuration value (string, dict, list, or primitive)

    Returns:
        Value with all environment variables expanded
    """
    if isinstance(value, str):
        pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

        def replace_env_var(match: re.Match) -> str:
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def _env_bool(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}", field=name, value=raw)


def _env_int(name: str) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(
            f"{name} must be an integer, got {raw!r}", field=name, value=raw
        ) from e


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply COURTSDB_* environment overrides to a config mapping.

    Environment variables take precedence over config file values.
    """
    data = dict(data)

    data_dir = os.environ.get("COURTSDB_DATA_DIR")
    if data_dir:
        data["data_dir"] = data_dir

    log_level = os.environ.get("COURTSDB_LOG_LEVEL")
    if log_level:
        data["log_level"] = log_level

    eager = _env_bool("COURTSDB_EAGER_COMPILE")
    if eager is not None:
        data["eager_compile"] = eager

    for key, env_name in (
        ("compile_workers", "COURTSDB_COMPILE_WORKERS"),
        ("match_workers", "COURTSDB_MATCH_WORKERS"),
    ):
        value = _env_int(env_name)
        if value is not None:
            data[key] = value

    return data


def _find_config_file(base_path: Path) -> Optional[Path]:
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.exists():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> RegistryConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to courtsdb.yaml in base_path.
        base_path: Directory searched for a config file. Defaults to cwd.

    Returns:
        RegistryConfig with all settings.

    Raises:
        ConfigError: If a value in the file or environment is invalid.
    """
    base_path = base_path or Path.cwd()
    if config_path is None:
        config_path = _find_config_file(base_path)

    data: Dict[str, Any] = {}
    if config_path is not None and config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            _Logger.get().warning(
                "Could not load config, using defaults",
                path=config_path,
                error=e,
            )
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(
                f"{config_path} must contain a mapping, got {type(loaded).__name__}"
            )
        data = expand_env_vars(loaded)
        data_dir = data.get("data_dir")
        if data_dir and not Path(data_dir).expanduser().is_absolute():
            data["data_dir"] = config_path.parent / data_dir

    return RegistryConfig.from_dict(_apply_env_overrides(data))


def save_config(config: RegistryConfig, config_path: Path) -> None:
    """Save configuration to YAML file."""
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
