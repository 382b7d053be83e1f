"""Rich terminal presentation for the sync client."""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.table import Table

from campaignmap.contracts.marker import Marker
from campaignmap.contracts.view import MarkerView, Notifier


def marker_table(markers: Iterable[Marker]) -> Table:
    table = Table(title="Markers")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Color")
    for marker in markers:
        table.add_row(
            marker.id,
            marker.name,
            marker.type.value,
            f"{marker.x:.2f}",
            f"{marker.y:.2f}",
            f"[{marker.color}]{marker.color}[/]",
        )
    return table


class RichMarkerView(MarkerView):
    """Prints one line per visual change instead of drawing pins."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def add(self, marker: Marker) -> None:
        self._console.print(f"[green]+[/green] {marker.name} ({marker.type.value}) at {marker.x:.2f}, {marker.y:.2f}")

    def move(self, marker_id: str, x: float, y: float) -> None:
        self._console.print(f"[blue]>[/blue] {marker_id} moved to {x:.2f}, {y:.2f}")

    def refresh(self, marker: Marker) -> None:
        self._console.print(f"[magenta]~[/magenta] {marker.name} ({marker.type.value}, {marker.color})")

    def remove(self, marker_id: str) -> None:
        self._console.print(f"[red]-[/red] {marker_id} removed")


class RichNotifier(Notifier):
    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self.warnings: list[str] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        self._console.print(f"[yellow]warning:[/yellow] {message}")
