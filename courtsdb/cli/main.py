"""courtsdb CLI - Main application entry point.

Commands:
    find      Identify the courts a free-text description refers to
    show      Display one court record
    list      List courts, optionally filtered
    validate  Check that every court finds its own examples
    config    Show or write the configuration file

Every command loads the registry from ``--data-dir`` (or the configured /
bundled data) and accepts ``--json`` for machine-readable output. Errors
raised by courtsdb are shown as a panel with guidance and exit code 1.

Examples:
    courtsdb find "Calhoun County Circuit Court" --location Florida
    courtsdb find "14th circuit court of appeals" --partial --json
    courtsdb show scotus
    courtsdb validate --data-dir ./data
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from courtsdb.cli.common import (
    ConfigOption,
    DataDirOption,
    JsonOption,
    echo_json,
    safe_cli_command,
)
from courtsdb.cli.config import app as config_app
from courtsdb.cli.console import get_console, tip
from courtsdb.core.config import load_config
from courtsdb.core.logging import configure_logging, get_logger
from courtsdb.registry.filters import (
    filter_by_bankruptcy,
    filter_by_category,
    filter_by_location,
)
from courtsdb.registry.loader import load_registry
from courtsdb.registry.models import CourtRecord
from courtsdb.registry.registry import Registry

logger = get_logger(__name__)

app = typer.Typer(
    name="courtsdb",
    help="Identify courts from free-text descriptions",
    no_args_is_help=True,
    add_completion=False,
)
app.add_typer(config_app, name="config")


def _load(data_dir: Optional[Path], config_path: Optional[Path]) -> Registry:
    """Resolve configuration, set up logging and build the registry."""
    config = load_config(config_path)
    configure_logging(level=config.log_level)
    registry = load_registry(data_dir=data_dir, config=config)
    logger.debug("Registry ready", courts=len(registry))
    return registry


def _parse_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(
            f"Expected YYYY-MM-DD, got {value!r}", param_hint="--date"
        ) from e


def _court_summary(court: CourtRecord) -> Dict[str, Any]:
    return {
        "id": court.id,
        "name": court.name,
        "type": court.category,
        "location": court.location,
        "parent": court.parent,
    }


def _courts_table(title: str, courts: List[CourtRecord]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Location")
    for court in courts:
        table.add_row(
            escape(court.id),
            escape(court.name),
            escape(court.category or "-"),
            escape(court.location or "-"),
        )
    return table


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version and exit"
    ),
) -> None:
    """courtsdb - match court names against a court registry."""
    if version:
        from courtsdb import __version__

        typer.echo(f"courtsdb {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("find")
@safe_cli_command
def find_command(
    text: str = typer.Argument(..., help="Court description to identify"),
    category: Optional[str] = typer.Option(
        None, "--category", "-t", help="Only courts of this type"
    ),
    bankruptcy: Optional[bool] = typer.Option(
        None,
        "--bankruptcy/--no-bankruptcy",
        help="Only bankruptcy courts, or only non-bankruptcy courts",
    ),
    location: Optional[str] = typer.Option(
        None, "--location", "-l", help="Only courts in this location"
    ),
    when: Optional[str] = typer.Option(
        None, "--date", help="Only courts active on this date (YYYY-MM-DD)"
    ),
    partial: bool = typer.Option(
        False, "--partial", help="Accept matches covering part of the text"
    ),
    json_output: bool = JsonOption,
    data_dir: Optional[Path] = DataDirOption,
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Identify the courts a free-text description refers to.

    Examples:
        courtsdb find "Supreme Court of the United States"
        courtsdb find "Calhoun County Circuit Court" --location Michigan
    """
    active_at = _parse_date(when)
    registry = _load(data_dir, config_path)

    court_ids = registry.find_court_ids(
        text,
        category=category,
        bankruptcy=bankruptcy,
        location=location,
        active_at=active_at,
        allow_partial_matches=partial,
    )
    courts = [registry.find_by_id(cid) for cid in court_ids]

    if json_output:
        echo_json(
            {
                "query": text,
                "court_ids": court_ids,
                "courts": [_court_summary(c) for c in courts if c is not None],
                "total": len(court_ids),
            }
        )
        return

    console = get_console()
    if not court_ids:
        console.print(f"[yellow]No court matched:[/yellow] {escape(text)}")
        if not partial:
            tip("Use --partial to accept matches covering part of the text")
        return

    console.print(_courts_table("Matching Courts", [c for c in courts if c]))
    console.print(f"\n[dim]Total: {len(court_ids)} courts[/dim]")


@app.command("show")
@safe_cli_command
def show_command(
    court_id: str = typer.Argument(..., help="Court id, e.g. scotus"),
    json_output: bool = JsonOption,
    data_dir: Optional[Path] = DataDirOption,
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Display one court record."""
    registry = _load(data_dir, config_path)
    court = registry.find_by_id(court_id)
    console = get_console()

    if court is None:
        console.print(f"[red]Court not found:[/red] {escape(court_id)}")
        raise typer.Exit(code=1)

    if json_output:
        data = court.to_dict()
        data["resolved_patterns"] = list(registry.resolved_patterns(court_id))
        echo_json(data)
        return

    table = Table(title=court.name, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("ID", escape(court.id))
    table.add_row("Type", escape(court.category or "-"))
    table.add_row("Location", escape(court.location or "-"))
    table.add_row("Jurisdiction", escape(court.jurisdiction or "-"))
    table.add_row("Parent", escape(court.parent or "-"))
    table.add_row("Citation", escape(court.citation_string or "-"))
    dates = ", ".join(
        f"{r.start or '...'} to {r.end or '...'}" for r in court.active_ranges
    )
    table.add_row("Active", dates or "-")
    table.add_row("Patterns", escape("\n".join(court.patterns)) or "-")
    table.add_row("Examples", escape("\n".join(court.examples)) or "-")
    console.print(table)


@app.command("list")
@safe_cli_command
def list_command(
    category: Optional[str] = typer.Option(
        None, "--category", "-t", help="Only courts of this type"
    ),
    bankruptcy: Optional[bool] = typer.Option(
        None,
        "--bankruptcy/--no-bankruptcy",
        help="Only bankruptcy courts, or only non-bankruptcy courts",
    ),
    location: Optional[str] = typer.Option(
        None, "--location", "-l", help="Only courts in this location"
    ),
    json_output: bool = JsonOption,
    data_dir: Optional[Path] = DataDirOption,
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """List courts in registry order."""
    registry = _load(data_dir, config_path)

    court_ids = [c.id for c in registry]
    court_ids = filter_by_category(registry, court_ids, category)
    court_ids = filter_by_bankruptcy(registry, court_ids, bankruptcy)
    court_ids = filter_by_location(registry, court_ids, location)
    courts = [c for c in (registry.find_by_id(cid) for cid in court_ids) if c]

    if json_output:
        echo_json(
            {
                "courts": [_court_summary(c) for c in courts],
                "total": len(courts),
            }
        )
        return

    console = get_console()
    if not courts:
        console.print("[yellow]No courts found[/yellow]")
        return

    console.print(_courts_table("Courts", courts))
    console.print(f"\n[dim]Total: {len(courts)} courts[/dim]")


@app.command("validate")
@safe_cli_command
def validate_command(
    json_output: bool = JsonOption,
    data_dir: Optional[Path] = DataDirOption,
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Check that every court's examples find that court.

    Also reports patterns that failed to compile. Exits with code 1 when
    anything is wrong.
    """
    registry = _load(data_dir, config_path)
    failures = registry.validate_examples()
    compile_errors = registry.compile_errors
    examples = sum(len(c.examples) for c in registry)
    ok = not failures and not compile_errors

    if json_output:
        echo_json(
            {
                "courts": len(registry),
                "examples": examples,
                "failures": [
                    {"court_id": f.court_id, "example": f.example, "found": list(f.found)}
                    for f in failures
                ],
                "compile_errors": [
                    {"court_id": e.court_id, "pattern": e.pattern, "error": str(e)}
                    for e in compile_errors
                ],
                "ok": ok,
            }
        )
        if not ok:
            raise typer.Exit(code=1)
        return

    console = get_console()
    if failures:
        table = Table(title="Example Failures")
        table.add_column("Court", style="cyan", no_wrap=True)
        table.add_column("Example")
        table.add_column("Found")
        for failure in failures:
            table.add_row(
                escape(failure.court_id),
                escape(failure.example),
                escape(", ".join(failure.found) or "-"),
            )
        console.print(table)

    for error in compile_errors:
        console.print(f"[yellow]Dropped pattern[/yellow] {escape(str(error))}")

    if not ok:
        console.print(
            f"[red]FAILED[/red] {len(failures)} examples, "
            f"{len(compile_errors)} patterns"
        )
        raise typer.Exit(code=1)

    console.print(
        f"[green]OK[/green] {len(registry)} courts, {examples} examples checked"
    )


def cli_main() -> None:
    """Entry point for console_scripts.

    This function is called when running 'courtsdb' command.
    """
    app()


if __name__ == "__main__":
    cli_main()
