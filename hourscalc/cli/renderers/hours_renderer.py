"""Rich renderer for pay period hours.

Transforms SDK hours summaries into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from hourscalc.sdk import HoursSummary, OvertimeBreakdown, PayPeriod, format_hours


def render_hours_summary(console: Console, summary: HoursSummary) -> None:
    """Render a computed hours summary.

    Args:
        console: Rich Console instance
        summary: SDK output from summarize_hours()
    """
    breakdown = summary.breakdown

    if breakdown.skipped_entries:
        console.print(Panel(
            f"[yellow]{breakdown.skipped_entries} time entr"
            f"{'y was' if breakdown.skipped_entries == 1 else 'ies were'} skipped "
            f"(malformed or outside the pay period). Run with LOG_LEVEL=DEBUG for details.[/yellow]",
            title="Note",
            border_style="yellow",
        ))

    _render_breakdown(console, summary.period, breakdown, summary.threshold)
    console.print(f"[dim]{summary.entry_count} entries[/dim]")


def render_cached_breakdown(console: Console, period: PayPeriod, breakdown: OvertimeBreakdown) -> None:
    """Render a breakdown read from the cache."""
    console.print("[dim]Showing last cached hours (closed entries only).[/dim]")
    _render_breakdown(console, period, breakdown, threshold=None)


def _render_breakdown(console: Console, period: PayPeriod, breakdown: OvertimeBreakdown, threshold) -> None:
    table = Table(title=f"Pay period {period.label}", box=box.SIMPLE_HEAVY)
    table.add_column("", style="bold")
    table.add_column("Hours", justify="right")

    for i, hours in enumerate(breakdown.weekly_hours):
        week = f"Week {i + 1}"
        if threshold is not None and hours > threshold:
            table.add_row(week, f"[magenta]{format_hours(hours)}[/magenta]")
        else:
            table.add_row(week, format_hours(hours))

    table.add_section()
    table.add_row("Regular", format_hours(breakdown.regular_hours))
    overtime = format_hours(breakdown.overtime_hours)
    if breakdown.overtime_hours > 0:
        overtime = f"[magenta]{overtime}[/magenta]"
    table.add_row("Overtime", overtime)
    table.add_row("Total", format_hours(breakdown.total_hours))

    table.add_section()
    current = format_hours(breakdown.current_week_hours)
    if threshold is not None:
        current = f"{current} / {threshold:g}h"
    table.add_row("Current week", current)
    if breakdown.in_progress_hours > 0:
        table.add_row("Active", f"[cyan]{format_hours(breakdown.in_progress_hours)}[/cyan]")
        table.add_row("Projected total", format_hours(breakdown.projected_total_hours))

    console.print(table)
