"""Client-side marker cache and guard set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from campaignmap.contracts.marker import Marker
from campaignmap.contracts.view import MarkerView, NullMarkerView


class MarkerState(StrEnum):
    UNKNOWN = "unknown"
    TRACKED = "tracked"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class MarkerChange:
    added: bool = False
    moved: bool = False
    refreshed: bool = False

    @property
    def changed(self) -> bool:
        return self.added or self.moved or self.refreshed


class MarkerRegistry:
    """Last known marker records plus the ids under a local drag.

    An id is present iff it has been observed (from a create response or a
    poll) and not since seen missing from a poll or confirmed deleted.
    Guarded ids keep their local position when new data arrives; every other
    field is still updated.
    """

    def __init__(self, view: MarkerView | None = None) -> None:
        self._view = view or NullMarkerView()
        self._markers: dict[str, Marker] = {}
        self._guarded: set[str] = set()
        self._drag_origins: dict[str, tuple[float, float]] = {}

    def __contains__(self, marker_id: object) -> bool:
        return marker_id in self._markers

    def __len__(self) -> int:
        return len(self._markers)

    @property
    def view(self) -> MarkerView:
        return self._view

    @property
    def guarded(self) -> frozenset[str]:
        return frozenset(self._guarded)

    def get(self, marker_id: str) -> Marker | None:
        return self._markers.get(marker_id)

    def ids(self) -> set[str]:
        return set(self._markers)

    def snapshot(self) -> dict[str, Marker]:
        return dict(self._markers)

    def state(self, marker_id: str) -> MarkerState:
        if marker_id not in self._markers:
            return MarkerState.UNKNOWN
        if marker_id in self._guarded:
            return MarkerState.DRAGGING
        return MarkerState.TRACKED

    def observe(self, marker: Marker, *, force_refresh: bool = False) -> MarkerChange:
        previous = self._markers.get(marker.id)
        if previous is None:
            self._markers[marker.id] = marker
            self._view.add(marker)
            return MarkerChange(added=True)

        moved = False
        if marker.id in self._guarded:
            marker = marker.model_copy(update={"x": previous.x, "y": previous.y})
        elif (previous.x, previous.y) != (marker.x, marker.y):
            self._view.move(marker.id, marker.x, marker.y)
            moved = True

        refreshed = force_refresh or previous.metadata_key() != marker.metadata_key()
        if refreshed:
            self._view.refresh(marker)

        if marker != previous:
            self._markers[marker.id] = marker
        return MarkerChange(moved=moved, refreshed=refreshed)

    def forget(self, marker_id: str) -> bool:
        self._guarded.discard(marker_id)
        self._drag_origins.pop(marker_id, None)
        if self._markers.pop(marker_id, None) is None:
            return False
        self._view.remove(marker_id)
        return True

    def retain_only(self, marker_ids: set[str]) -> list[str]:
        """Tear down every tracked id not in *marker_ids*, guarded or not."""
        missing = [marker_id for marker_id in self._markers if marker_id not in marker_ids]
        for marker_id in missing:
            self.forget(marker_id)
        return missing

    def begin_drag(self, marker_id: str) -> bool:
        marker = self._markers.get(marker_id)
        if marker is None:
            return False
        if marker_id not in self._guarded:
            self._drag_origins[marker_id] = (marker.x, marker.y)
            self._guarded.add(marker_id)
        return True

    def drag_to(self, marker_id: str, x: float, y: float) -> bool:
        marker = self._markers.get(marker_id)
        if marker is None:
            return False
        if (marker.x, marker.y) != (x, y):
            self._markers[marker_id] = marker.model_copy(update={"x": x, "y": y})
            self._view.move(marker_id, x, y)
        return True

    def drag_origin(self, marker_id: str) -> tuple[float, float] | None:
        return self._drag_origins.get(marker_id)

    def release(self, marker_id: str) -> None:
        self._guarded.discard(marker_id)
        self._drag_origins.pop(marker_id, None)
