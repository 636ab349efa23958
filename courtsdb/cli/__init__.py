"""Command-line interface for courtsdb."""

from courtsdb.cli.main import app, cli_main

__all__ = ["app", "cli_main"]
