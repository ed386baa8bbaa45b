"""Rich console utilities for yalich.

The console writes to stderr so that it never mixes with the license
table on stdout.
"""

from typing import Any, List, Tuple

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
    }
)

# Shared console instance
console = Console(
    theme=custom_theme,
    stderr=True,
    color_system="auto",
)


def print_summary_table(
    title: str,
    data: List[Tuple[str, Any]],
    show_if_empty: bool = False,
) -> None:
    """
    Print a summary table.

    Args:
        title: Table title
        data: List of (label, value) tuples
        show_if_empty: Whether to show the table if all values are 0/empty
    """
    if not show_if_empty:
        data = [(label, value) for label, value in data if value]

    if not data:
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    for label, value in data:
        table.add_row(label, str(value))

    console.print(table)


def print_license_summary(stats) -> None:
    """
    Print the run summary as a Rich table.

    Args:
        stats: PipelineStats of the finished run
    """
    data: List[Tuple[str, Any]] = [
        (f"{category.capitalize()} dependencies", count) for category, count in stats.dependencies.items()
    ]
    data += [
        ("Licenses from overrides", stats.overridden_licenses),
        ("Licenses from GitHub", stats.github_licenses),
        ("Licenses missing", stats.missing_licenses),
    ]
    print_summary_table("License Summary", data)

    if stats.missing_licenses:
        console.print(f"[warning]Warning:[/warning] {stats.missing_licenses} dependencies have no known license")
    else:
        console.print(f"[success]✓ {stats.total} dependencies, all licensed[/success]")
