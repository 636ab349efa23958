"""Shared CLI plumbing.

Option objects reused by several commands, JSON output, and the decorator
that turns courtsdb errors into an error panel and exit code 1.
"""

from __future__ import annotations

import json
from functools import wraps
from typing import Any, Callable

import typer

from courtsdb.cli.console import render_error
from courtsdb.core.exceptions import CourtsDBError

DataDirOption = typer.Option(
    None, "--data-dir", "-d", help="Registry data directory (default: bundled data)"
)
ConfigOption = typer.Option(
    None, "--config", "-c", help="Path to a courtsdb.yaml config file"
)
JsonOption = typer.Option(False, "--json", help="Output as JSON")


def safe_cli_command(func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a command so courtsdb errors render as a panel and exit 1."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CourtsDBError as e:
            render_error(e)
            raise typer.Exit(code=1)

    return wrapper


def echo_json(data: Any) -> None:
    """Print ``data`` as indented JSON on stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
