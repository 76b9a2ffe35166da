"""Rich-based terminal output for the ``testplan`` commands.

All functions share the module-level ``_console`` so tests can swap it for
a capturing console.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from src.shared.constants import VERSION

# ---------------------------------------------------------------------------
# Module-level Console singleton
# ---------------------------------------------------------------------------

_console = Console()


# ---------------------------------------------------------------------------
# Display functions
# ---------------------------------------------------------------------------


def print_generate_header(flags_path: Path | str, definitions_path: Path | str) -> None:
    """Print a panel naming the two input documents."""
    header = Text()
    header.append("Test Plan Generator", style="bold white")
    header.append(f" v{VERSION}\n", style="dim")
    header.append("Feature Flags: ", style="bold")
    header.append(f"{flags_path}\n", style="cyan")
    header.append("Test Definitions: ", style="bold")
    header.append(f"{definitions_path}", style="green")

    _console.print(
        Panel(
            header,
            title="[bold]Inputs[/bold]",
            border_style="blue",
            expand=False,
        )
    )


def print_plan_table(plans: list[Any], output_dir: Path | str) -> None:
    """Print one row per written plan with its summary counts.

    Parameters
    ----------
    plans:
        ``GeneratedPlan`` instances.
    output_dir:
        Directory the plans were written to.
    """
    table = Table(title="Test Plans", show_header=True, header_style="bold magenta")
    table.add_column("File", style="cyan", min_width=30)
    table.add_column("Plan Rows", justify="right")
    table.add_column("Scenarios", justify="right")
    table.add_column("Enabled Flags", justify="right")
    table.add_column("Absence Tests", justify="right")

    for plan in plans:
        table.add_row(
            plan.filename,
            str(plan.row_count),
            str(plan.stats.scenario_count),
            str(plan.stats.enabled_flag_count),
            str(plan.stats.disabled_flag_count),
        )

    _console.print(table)
    _console.print(
        f"[green]✓[/green] Generated {len(plans)} test plan(s) in {output_dir}"
    )


def print_report(text: str) -> None:
    """Print a pre-formatted plain-text report verbatim."""
    _console.print(text, markup=False, highlight=False, soft_wrap=True)


def print_notice(message: str, style: str = "dim") -> None:
    _console.print(Text(message, style=style))


def print_error_panel(error: str | Exception, hint: str | None = None) -> None:
    """Print an error message in a red Rich panel.

    Parameters
    ----------
    error:
        Error message string or Exception instance.
    hint:
        Optional second line, e.g. where an input was expected.
    """
    content = Text(str(error), style="bold white")
    if hint:
        content.append(f"\n{hint}", style="dim")
    _console.print(
        Panel(
            content,
            title="[bold red]Error[/bold red]",
            border_style="red",
            expand=False,
        )
    )
