"""
Structured Logging for courtsdb.

This module provides the logging infrastructure used by the registry loader,
the pattern compiler and the CLI: key=value fields, a build-stage logger
for registry construction, and consistent formatting.

Architecture Context
--------------------
Logging is a Core layer service. Modules import get_logger() from here
rather than using Python's logging directly:

    # Good - uses courtsdb's structured logging
    from courtsdb.core.logging import get_logger
    logger = get_logger(__name__)

    # Avoid - bypasses our structure
    import logging
    logger = logging.getLogger(__name__)

Logger Types
------------
**StructuredLogger**
    Wraps a stdlib logger; keyword fields are appended to the message as
    key=value pairs:

        logger = get_logger(__name__)
        logger.info("Registry loaded", records=3352)

**BuildLogger**
    Tracks the stages of registry construction (expand, resolve, index,
    compile) with timing:

        blog = BuildLogger("courts.json")
        blog.start_stage("expand")
        blog.log_progress("Expanded variables", count=120)
        blog.finish(success=True, records=3352)

Loggers are cached by name, so multiple calls to get_logger() return the
same instance.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[Path] = None
    console: bool = True


class StructuredLogger:
    """
    Structured logger.

    Provides consistent logging across the package with support for
    structured fields.
    """

    def __init__(self, name: str, config: Optional[LogConfig] = None) -> None:
        self.logger = logging.getLogger(name)
        self.config = config or _ConfigHolder.get_config()
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger."""
        level = getattr(logging, self.config.level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # Remove existing handlers
        self.logger.handlers.clear()

        if self.config.console:
            console_handler = RichHandler(
                console=Console(stderr=True),
                show_time=True,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            )
            console_handler.setLevel(level)
            self.logger.addHandler(console_handler)

        if self.config.file_path:
            formatter = logging.Formatter(
                self.config.format,
                datefmt=self.config.date_format,
            )
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.file_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _format_message(self, message: str, **kwargs: Any) -> str:
        """Format message with extra fields."""
        if kwargs:
            field_str = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            return f"{message} | {field_str}"
        return message

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(self._format_message(message, **kwargs))


# Module-level logger factory
_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str, config: Optional[LogConfig] = None) -> StructuredLogger:
    """
    Get or create a structured logger.

    Args:
        name: Logger name (typically __name__).
        config: Optional logging configuration.

    Returns:
        Configured StructuredLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, config)
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Configure global logging settings.

    Loggers created before this call are reconfigured in place.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        console: Whether to log to console.
    """
    config = LogConfig(
        level=level,
        file_path=log_file,
        console=console,
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _ConfigHolder.set_config(config)

    for logger in _loggers.values():
        logger.config = config
        logger._setup_logger()


class _ConfigHolder:
    """Holds default logging configuration."""

    _config: LogConfig = LogConfig()

    @classmethod
    def get_config(cls) -> LogConfig:
        """Get the default config."""
        return cls._config

    @classmethod
    def set_config(cls, config: LogConfig) -> None:
        """Set the default config."""
        cls._config = config


class BuildLogger:
    """
    Specialized logger for registry construction.

    Tracks build stages and provides timing information.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.logger = get_logger("courtsdb.build")
        self._stage_start: Optional[datetime] = None
        self._current_stage: Optional[str] = None

    def start_stage(self, stage: str) -> None:
        """Mark the start of a build stage."""
        self._finish_current_stage()
        self._current_stage = stage
        self._stage_start = datetime.now()
        self.logger.debug("Starting stage", source=self.source, stage=stage)

    def _finish_current_stage(self) -> None:
        """Log completion of current stage if any."""
        if self._current_stage and self._stage_start:
            duration = (datetime.now() - self._stage_start).total_seconds()
            self.logger.debug(
                "Completed stage",
                source=self.source,
                stage=self._current_stage,
                duration_sec=f"{duration:.3f}",
            )
        self._current_stage = None
        self._stage_start = None

    def finish(
        self, success: bool, records: int = 0, error: Optional[str] = None
    ) -> None:
        """Mark build completion."""
        self._finish_current_stage()
        if success:
            self.logger.info("Registry built", source=self.source, records=records)
        else:
            self.logger.error("Registry build failed", source=self.source, error=error)

    def log_progress(self, message: str, **kwargs: Any) -> None:
        """Log progress within a stage."""
        self.logger.debug(
            message,
            source=self.source,
            stage=self._current_stage,
            **kwargs,
        )
