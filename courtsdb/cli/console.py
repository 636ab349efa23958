"""Console output helpers.

Provides the shared rich console and the error panel the CLI shows for
courtsdb errors instead of a traceback.
"""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from courtsdb.core.exceptions import CourtsDBError, get_root_cause

# Shared console instance
_console: Optional[Console] = None


def get_console() -> Console:
    """Get shared console instance (lazy-loaded)."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def tip(message: str) -> None:
    """Display a dim tip line below primary output."""
    get_console().print(f"  [dim]Tip: {message}[/dim]")


def _build_error_content(
    message: str, why: str, how_to_fix: List[str], root_message: Optional[str]
) -> Text:
    text = Text()
    text.append(message, style="bold red")
    text.append("\n\n")

    if root_message and root_message != message:
        text.append("Root cause: ", style="bold yellow")
        text.append(root_message, style="yellow")
        text.append("\n\n")

    text.append("Why it happened:\n", style="bold cyan")
    text.append(f"  {why}\n", style="cyan")
    text.append("\n")

    text.append("How to fix:\n", style="bold green")
    for fix in how_to_fix:
        text.append(f"  - {fix}\n", style="green")
    return text


def render_error(exc: CourtsDBError) -> None:
    """Render a courtsdb error as a panel with why/how-to-fix guidance.

    Example output::

        ╭──────────── Error: CDB-LOAD-001 ────────────╮
        │ Undefined variable 'state' ...              │
        │                                             │
        │ Why it happened:                            │
        │   A ${name} placeholder refers to ...       │
        │                                             │
        │ How to fix:                                 │
        │   - Add the variable to variables.json      │
        ╰─────────────────────────────────────────────╯
    """
    root_cause = get_root_cause(exc)
    root_message = str(root_cause) if root_cause is not exc else None

    content = _build_error_content(
        message=exc.user_message,
        why=exc.why_it_happened,
        how_to_fix=list(exc.how_to_fix),
        root_message=root_message,
    )
    panel = Panel(
        content,
        title=f"[bold red]Error: {exc.error_code}[/bold red]",
        border_style="red",
        padding=(1, 2),
    )
    get_console().print(panel)
