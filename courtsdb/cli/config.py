"""Config subcommands.

Commands:
    show  Display the effective configuration
    init  Write the effective configuration to a courtsdb.yaml file

Examples:
    courtsdb config show --json
    courtsdb config init --data-dir ./data
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from courtsdb.cli.common import ConfigOption, JsonOption, echo_json, safe_cli_command
from courtsdb.cli.console import get_console, tip
from courtsdb.core.config import RegistryConfig, load_config, save_config

app = typer.Typer(
    name="config",
    help="Configuration management",
    add_completion=False,
)


@app.callback()
def main() -> None:
    """Configuration management for courtsdb.

    Settings come from courtsdb.yaml in the current directory (or --config)
    with COURTSDB_* environment variables taking precedence.
    """


@app.command("show")
@safe_cli_command
def show_command(
    json_output: bool = JsonOption,
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Display the effective configuration."""
    config = load_config(config_path)

    if json_output:
        echo_json(config.to_dict())
        return

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in config.to_dict().items():
        table.add_row(key, escape(str(value)))
    get_console().print(table)


@app.command("init")
@safe_cli_command
def init_command(
    path: Path = typer.Argument(
        Path("courtsdb.yaml"), help="Where to write the config file"
    ),
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", "-d", help="Registry data directory to record"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing file"
    ),
) -> None:
    """Write the effective configuration to a YAML file.

    Values start from the current configuration and environment, so
    ``COURTSDB_*`` overrides are captured too.
    """
    console = get_console()
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists:[/yellow] {escape(str(path))}")
        tip("Use --force to overwrite it")
        raise typer.Exit(code=1)

    config = load_config()
    if data_dir is not None:
        config = RegistryConfig(
            **{**config.to_dict(), "data_dir": data_dir.expanduser().resolve()}
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    save_config(config, path)
    console.print(f"[green]Wrote[/green] {escape(str(path))}")
