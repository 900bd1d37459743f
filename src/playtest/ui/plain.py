"""
plain.py

PURPOSE: Plain text output formatting for the CLI and the terminal player.
DEPENDENCIES: rich

ARCHITECTURE NOTES:
This module provides formatted console output using Rich.
It handles:
- Game narratives and headers
- Action help
- Messages and errors
- Debug output

Every helper takes an optional console so tests can capture output.
"""

import json

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from playtest.models.action import ActionRegistry

# Global console instance
console = Console()


def _pick(override: Console | None) -> Console:
    return override or console


def print_header(text: str, console: Console | None = None) -> None:
    """Print a section header."""
    _pick(console).rule(f"[bold blue]{text}[/bold blue]")


def print_message(text: str, console: Console | None = None) -> None:
    """Print a normal game message. Narratives are printed verbatim."""
    _pick(console).print(text, markup=False, highlight=False)


def print_error(text: str, console: Console | None = None) -> None:
    """Print an error message."""
    _pick(console).print(Text(text, style="red"))


def print_success(text: str, console: Console | None = None) -> None:
    """Print a success message."""
    _pick(console).print(Text(text, style="green"))


def print_title(title: str, console: Console | None = None) -> None:
    """Print a game title in a panel."""
    panel = Panel(
        Text(title, justify="center", style="bold"),
        border_style="blue",
    )
    _pick(console).print(panel)


def print_help(actions: ActionRegistry, console: Console | None = None) -> None:
    """Print the legal actions with their usage."""
    table = Table(title="Available actions", show_header=False, box=None)
    table.add_column("usage", style="bold cyan")
    table.add_column("description")
    for spec in actions.values():
        table.add_row(Text(spec.usage()), Text(spec.description))
    table.add_row("?", "Show this list (uses no turn)")
    _pick(console).print(table)


def print_debug(data: dict[str, object] | str, console: Console | None = None) -> None:
    """Print debug information."""
    out = _pick(console)
    out.print("[dim]--- DEBUG ---[/dim]")
    if isinstance(data, dict):
        out.print(Text(json.dumps(data, indent=2, default=str), style="dim"))
    else:
        out.print(Text(data, style="dim"))
    out.print("[dim]-------------[/dim]")


def print_game_over(won: bool, message: str, console: Console | None = None) -> None:
    """Print game over message."""
    if won:
        style = "bold green"
        border = "green"
    else:
        style = "bold red"
        border = "red"

    panel = Panel(
        Text(message, justify="center", style=style),
        title="Game Over",
        border_style=border,
    )
    _pick(console).print(panel)
