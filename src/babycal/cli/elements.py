"""Reusable CLI elements for displaying output."""

import json
from dataclasses import asdict
from datetime import date
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

from babycal.grid import weeks
from babycal.models import (
    Achievement,
    AgeInfo,
    CalendarCell,
    CalendarMonthView,
    GraphResult,
    StoreStats,
)

# File size constants
BYTES_PER_KB = 1024
BYTES_PER_MB = BYTES_PER_KB * 1024

WEEKDAY_HEADERS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# Width of the bar column in the graph table
GRAPH_BAR_WIDTH = 40


def display_age_info(
    console: Console,
    day: date,
    info: AgeInfo | None,
    *,
    show_days_since_birth: bool = True,
) -> None:
    """Display the age detail of one day.

    Args:
        console: Rich console for output
        day: Displayed day
        info: Age detail, or None when no birth date is configured
        show_days_since_birth: Include the day count since birth
    """
    console.print(f"[cyan]📅[/cyan] {day.isoformat()}")
    if info is None:
        console.print("[yellow]No birth date configured[/yellow]")
        return

    console.print(f"  Age: [bold]{info.labels.chronological}[/bold]")
    if not info.labels.suppressed:
        console.print(f"  Corrected age: [bold]{info.labels.corrected}[/bold]")
    if show_days_since_birth:
        console.print(f"  Days since birth: {info.days_since_birth}")


def format_age_info_json(day: date, info: AgeInfo | None) -> str:
    """Format the age detail of one day as JSON."""
    data: dict[str, Any] = {"date": day.isoformat(), "age": None}
    if info is not None:
        data["age"] = asdict(info)
    return json.dumps(data, indent=2, ensure_ascii=False)


def _cell_text(cell: CalendarCell, first_of_month: bool) -> str:
    """Render one calendar cell.

    The age is printed on the 1st and on days where it reaches a new month.
    """
    if cell.is_today:
        day_style = "bold reverse"
    else:
        day_style = "" if cell.is_current_month else "dim"
    day_text = f"[{day_style}]{cell.date.day}[/]" if day_style else str(cell.date.day)
    lines = [day_text]

    if cell.achievement_count:
        lines.append(f"[green]★{cell.achievement_count}[/green]")

    info = cell.age_info
    show_age = cell.is_current_month and (first_of_month or cell.label_changed)
    if info is not None and show_age:
        lines.append(f"[cyan]{info.chronological}[/cyan]")
        if not info.suppressed:
            lines.append(f"[magenta]({info.corrected})[/magenta]")

    return "\n".join(lines)


def display_calendar(
    console: Console, view: CalendarMonthView, title: str = ""
) -> None:
    """Display a month grid as a 7-column table.

    Args:
        console: Rich console for output
        view: Month grid to display
        title: Optional title prefix (e.g. the child's name)
    """
    heading = f"{view.year}-{view.month:02d}"
    table = Table(
        title=f"{title} {heading}".strip(),
        show_header=True,
        header_style="bold cyan",
        show_lines=True,
    )
    for header in WEEKDAY_HEADERS:
        table.add_column(header, justify="center", min_width=7)

    for row in weeks(view.cells):
        table.add_row(
            *(
                _cell_text(cell, cell.is_current_month and cell.date.day == 1)
                for cell in row
            )
        )

    console.print(table)
    console.print(
        "[cyan]age[/cyan]  [magenta](corrected age)[/magenta]  "
        "[green]★ achievements[/green]"
    )


def display_graph(console: Console, result: GraphResult, period: str) -> None:
    """Display graph buckets as a table with a cumulative bar.

    Args:
        console: Rich console for output
        result: Graph buckets and labels
        period: Period shown (for the title)
    """
    table = Table(
        title=f"Achievements ({period})", show_header=True, header_style="bold cyan"
    )
    table.add_column("Age", style="cyan", no_wrap=True)
    table.add_column("Corrected", style="magenta", no_wrap=True)
    table.add_column("Tried", justify="right", style="yellow")
    table.add_column("Did", justify="right", style="blue")
    table.add_column("Total", justify="right", style="green")
    table.add_column("", no_wrap=True)

    peak = max(result.total, 1)
    for bucket in result.buckets:
        age_label = bucket.actual_label if bucket.show_actual_label else ""
        corrected = bucket.corrected_label if bucket.show_corrected_label else ""
        if bucket.show_corrected_zero_line:
            corrected = f"[bold]{corrected or bucket.corrected_label}[/bold]"
        bar = "█" * round(GRAPH_BAR_WIDTH * bucket.cumulative / peak)
        table.add_row(
            age_label,
            corrected or "",
            str(bucket.tried_count),
            str(bucket.did_count),
            str(bucket.cumulative),
            f"[green]{bar}[/green]",
        )

    console.print(table)


def format_graph_json(result: GraphResult) -> str:
    """Format graph buckets and labels as JSON."""
    return json.dumps(asdict(result), indent=2, ensure_ascii=False)


def display_achievements_table(
    console: Console, achievements: dict[str, list[Achievement]]
) -> None:
    """Display achievements grouped by day.

    Args:
        console: Rich console for output
        achievements: Mapping of day key -> achievements
    """
    table = Table(title="Achievements", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Type", no_wrap=True)
    table.add_column("Title")
    table.add_column("Memo", style="dim")
    table.add_column("ID", style="dim", no_wrap=True)

    for key in sorted(achievements):
        for item in achievements[key]:
            type_text = (
                "[blue]did[/blue]" if item.type == "did" else "[yellow]tried[/yellow]"
            )
            table.add_row(key, type_text, item.title, item.memo or "", item.id)

    console.print(table)


def _convert_achievements_to_dict(
    achievements: dict[str, list[Achievement]],
) -> dict[str, list[dict[str, Any]]]:
    return {
        key: [
            item.model_dump(mode="json", by_alias=True, exclude_none=True)
            for item in achievements[key]
        ]
        for key in sorted(achievements)
    }


def format_achievements_json(achievements: dict[str, list[Achievement]]) -> str:
    """Format achievements as JSON."""
    data = _convert_achievements_to_dict(achievements)
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_achievements_yaml(achievements: dict[str, list[Achievement]]) -> str:
    """Format achievements as YAML."""
    data = _convert_achievements_to_dict(achievements)
    return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True)


def display_store_stats(console: Console, stats: StoreStats) -> None:
    """Display achievement store statistics."""
    console.print("[bold cyan]Achievement Store[/bold cyan]")
    console.print(f"  Days with achievements: {stats.total_days}")
    console.print(f"  Achievements: {stats.total_achievements}")
    console.print(f"    [blue]did[/blue]: {stats.did_count}")
    console.print(f"    [yellow]tried[/yellow]: {stats.tried_count}")
    if stats.first_day and stats.last_day:
        console.print(f"  Range: {stats.first_day} to {stats.last_day}")
    console.print(f"  File: {stats.store_path}")
    console.print(f"  Size: {_format_file_size(stats.store_size_bytes)}")


def _format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format."""
    if size_bytes < BYTES_PER_KB:
        return f"{size_bytes} B"
    if size_bytes < BYTES_PER_MB:
        return f"{size_bytes / BYTES_PER_KB:.1f} KB"
    return f"{size_bytes / BYTES_PER_MB:.1f} MB"
