"""
Console output helpers built on rich.

Environment handling:
- Respects NO_COLOR and FORCE_COLOR environment variables
- Falls back to plain text when stdout is not a terminal
"""

from __future__ import annotations

import os

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from strata.orchestration.results import RunResult

STRATA_THEME = Theme(
    {
        "info": "#88C0D0",
        "success": "#A3BE8C",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "muted": "#D8DEE9",
    }
)

console = Console(
    theme=STRATA_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
)


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]✓ {message}[/success]")


def error(message: str) -> None:
    """Print an error message."""
    console.print(f"[error]✗ {message}[/error]")


def warning(message: str) -> None:
    console.print(f"[warning]⚠ {message}[/warning]")


def info(message: str) -> None:
    console.print(f"[info]ℹ {message}[/info]")


def header(title: str) -> None:
    """Print a section header."""
    console.print()
    console.print(Panel(f"[bold]{title}[/bold]", border_style="cyan"))


def print_run_summary(result: RunResult) -> None:
    """Print one row per stack processed, in execution order."""
    table = Table(title=f"{result.action} · {result.environment}")
    table.add_column("Layer")
    table.add_column("Stack")
    table.add_column("Region")
    table.add_column("Duration", justify="right")

    for layer in result.layers:
        if layer.skipped:
            table.add_row(layer.name, "[muted]skipped[/muted]", "", "")
            continue
        if not layer.stacks:
            table.add_row(layer.name, "[muted]no stacks[/muted]", "", "")
        for stack in layer.stacks:
            table.add_row(
                layer.name,
                stack.stack_id,
                stack.region,
                f"{stack.duration_seconds:.1f}s",
            )

    console.print(table)
