from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.tree import Tree

if TYPE_CHECKING:
    from rich.console import Console

    from edisontel.feed.series import TelemetrySeries
    from edisontel.models.telemetry import Dictionary


def _format_timestamp(timestamp: Any) -> str:
    """Render epoch milliseconds as a UTC ISO time, or the raw value."""
    if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
        return datetime.fromtimestamp(timestamp / 1000, tz=UTC).isoformat(timespec="milliseconds")
    return "" if timestamp is None else str(timestamp)


class RichOutput:
    """Rich-based terminal output helpers for *edisontel*."""

    def __init__(self, console: Console) -> None:
        self._con = console

    # ------------------------------------------------------------------
    # Dictionary
    # ------------------------------------------------------------------

    def dictionary(self, dictionary: Dictionary) -> None:
        """Print the dictionary as a subsystem/measurement tree."""
        title = dictionary.name or dictionary.identifier or "Dictionary"
        tree = Tree(f"[bold]{title}[/bold]")
        for subsystem in dictionary.subsystems:
            branch = tree.add(f"[cyan]{subsystem.name or subsystem.identifier}[/cyan]")
            for m in subsystem.measurements:
                units = f" ({m.units})" if m.units else ""
                kind = f" [dim]{m.type}[/dim]" if m.type else ""
                branch.add(f"{m.identifier}  {m.name}{units}{kind}")
        self._con.print(tree)

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------

    def series(self, measurement_id: str, series: TelemetrySeries) -> None:
        """Print a table of timestamp/value rows."""
        table = Table(title=f"History: {measurement_id}")
        table.add_column("Time", style="cyan")
        table.add_column("Value", justify="right")

        for i in range(series.point_count):
            table.add_row(_format_timestamp(series.domain_value(i)), str(series.range_value(i)))

        self._con.print(table)
        if series.point_count == 0:
            self._con.print("[dim]No points returned.[/dim]")

    def live_point(self, measurement_id: str, timestamp: Any, value: Any) -> None:
        """Print one live data point on a single line."""
        stamp = _format_timestamp(timestamp)
        self._con.print(f"[dim]{stamp}[/dim]  [cyan]{measurement_id}[/cyan] = {value}")

    def definition(self, definition: dict[str, Any]) -> None:
        """Pretty-print a bundle definition as highlighted JSON."""
        self._con.print_json(data=definition)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------

    def error(self, message: str) -> None:
        """Print a bold red error line."""
        self._con.print(f"[bold red]Error:[/bold red] {message}")

    def info(self, message: str) -> None:
        """Print an informational message (plain)."""
        self._con.print(message)
