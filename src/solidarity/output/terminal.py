"""Rich terminal reporter: level pills, annotation table, verdict."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from solidarity.annotations.aggregator import count_by_level
from solidarity.annotations.models import CheckResult
from solidarity.config.schema import Level
from solidarity.output.checks import conclusion_for

_LEVEL_STYLE = {
    Level.FAILURE: "bold white on red",
    Level.WARNING: "bold black on yellow",
    Level.NOTICE: "bold black on bright_cyan",
}


def _level_pill(level: Level) -> Text:
    return Text(f" {level.label.upper()} ", style=_LEVEL_STYLE.get(level, ""))


def render(
    result: CheckResult,
    *,
    show_summary: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print check results to the terminal using Rich."""
    console = console or Console(stderr=True)
    _, title = conclusion_for(result.level)

    if not result.annotations:
        console.print()
        console.print(f"[bold green]✓ {title.value}: no non-inclusive language added.[/bold green]")
        if show_summary:
            _print_summary(console, result)
        return

    console.print()
    table = Table(
        title="Inclusive Language",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Level", justify="center", width=11)
    table.add_column("File", style="magenta")
    table.add_column("Line", justify="right", style="green")
    table.add_column("Rule", style="cyan")
    table.add_column("Suggestion", min_width=30)

    for a in result.annotations:
        table.add_row(
            _level_pill(a.level),
            a.path,
            str(a.start_line),
            a.rule,
            a.title,
        )

    console.print(table)

    if show_summary:
        _print_summary(console, result)

    console.print()
    style = "bold red" if result.level is Level.FAILURE else "bold yellow"
    console.print(f"[{style}]{title.value}.[/{style}]")


def _print_summary(console: Console, result: CheckResult) -> None:
    console.print()
    console.print(f"[dim]Files scanned:[/dim]  {len(result.scanned_files)}")
    console.print(f"[dim]Skipped:[/dim]        {len(result.skipped_files)}")
    for level, n in count_by_level(result.annotations).items():
        label = f"{level.label.capitalize()}:"
        console.print(f"[dim]{label:<15}[/dim] {n}")
    console.print(f"[dim]Duration:[/dim]       {result.duration_ms:.0f}ms")
