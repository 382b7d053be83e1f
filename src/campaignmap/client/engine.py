"""Polling sync engine: reconciles snapshots and issues marker mutations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from campaignmap.client.api import MapApiClient
from campaignmap.client.registry import MarkerRegistry
from campaignmap.contracts.exceptions import ApiError, MarkerNotFoundError
from campaignmap.contracts.marker import Marker, PatchMarkerInput, coerce_type, round_coordinate, type_color
from campaignmap.contracts.view import LoggingNotifier, Notifier

_LOG = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    added: list[str] = field(default_factory=list)
    moved: list[str] = field(default_factory=list)
    refreshed: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.moved or self.refreshed or self.removed)


class SyncEngine:
    def __init__(
        self,
        api: MapApiClient,
        registry: MarkerRegistry | None = None,
        notifier: Notifier | None = None,
        *,
        poll_interval: float = 3.0,
        rollback_failed_moves: bool = False,
    ) -> None:
        self._api = api
        self._registry = registry or MarkerRegistry()
        self._notifier = notifier or LoggingNotifier()
        self._poll_interval = poll_interval
        self._rollback_failed_moves = rollback_failed_moves

    @property
    def registry(self) -> MarkerRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Snapshot reconciliation
    # ------------------------------------------------------------------

    def reconcile(self, markers: Iterable[Marker]) -> ReconcileResult:
        """Merge a full snapshot into the registry.

        New ids are added, unguarded ids adopt the snapshot position, pins are
        regenerated only when drawn metadata changes, and ids missing from the
        snapshot are torn down. Reconciling the same snapshot twice is a no-op
        the second time.
        """
        result = ReconcileResult()
        seen: set[str] = set()
        for marker in markers:
            seen.add(marker.id)
            change = self._registry.observe(marker)
            if change.added:
                result.added.append(marker.id)
            if change.moved:
                result.moved.append(marker.id)
            if change.refreshed:
                result.refreshed.append(marker.id)
        result.removed = self._registry.retain_only(seen)
        return result

    async def poll_once(self) -> ReconcileResult | None:
        try:
            markers = await self._api.fetch_snapshot()
        except ApiError as exc:
            _LOG.warning("Poll failed, keeping cached markers: %s", exc)
            return None
        return self.reconcile(markers)

    async def run(
        self,
        stop: asyncio.Event | None = None,
        *,
        on_result: Callable[[ReconcileResult], None] | None = None,
    ) -> None:
        """Poll on a fixed interval until *stop* is set. Failures retry next tick."""
        stop = stop or asyncio.Event()
        while not stop.is_set():
            result = await self.poll_once()
            if result is not None and on_result is not None:
                on_result(result)
            try:
                await asyncio.wait_for(stop.wait(), timeout=self._poll_interval)
            except TimeoutError:
                continue

    # ------------------------------------------------------------------
    # Drag gestures
    # ------------------------------------------------------------------

    def begin_drag(self, marker_id: str) -> bool:
        return self._registry.begin_drag(marker_id)

    def drag_to(self, marker_id: str, x: float, y: float) -> bool:
        return self._registry.drag_to(marker_id, x, y)

    async def end_drag(self, marker_id: str, x: float, y: float) -> Marker | None:
        """Persist the final position of a drag.

        The guard is released whatever the outcome. On failure the displayed
        position stays where the user left it unless ``rollback_failed_moves``
        is set, in which case it returns to where the drag started.
        """
        if marker_id not in self._registry:
            return None
        x, y = round_coordinate(x), round_coordinate(y)
        origin = self._registry.drag_origin(marker_id)
        self._registry.drag_to(marker_id, x, y)

        try:
            updated = await self._api.patch_marker(marker_id, {"x": x, "y": y})
        except MarkerNotFoundError:
            self._registry.forget(marker_id)
            self._notifier.warn("Save failed: the marker was deleted by someone else.")
            return None
        except ApiError as exc:
            _LOG.debug("Move of %s failed: %s", marker_id, exc)
            if self._rollback_failed_moves and origin is not None:
                self._registry.drag_to(marker_id, *origin)
            self._notifier.warn("Save failed. Refresh and try again.")
            return None
        finally:
            self._registry.release(marker_id)

        self._registry.observe(updated, force_refresh=True)
        return updated

    # ------------------------------------------------------------------
    # Create / update / delete
    # ------------------------------------------------------------------

    async def create_marker(
        self,
        name: str,
        marker_type: str = "player",
        x: float = 0.0,
        y: float = 0.0,
        *,
        avatar: str = "",
        color: str | None = None,
    ) -> Marker | None:
        name = name.strip()
        if not name:
            return None
        safe_type = coerce_type(marker_type)
        fields = {
            "name": name,
            "type": safe_type.value,
            "x": round_coordinate(x),
            "y": round_coordinate(y),
            "color": color or type_color(safe_type),
            "avatar": avatar,
        }
        try:
            created = await self._api.create_marker(fields)
        except ApiError as exc:
            _LOG.debug("Create failed: %s", exc)
            self._notifier.warn("Failed to create marker.")
            return None
        self._registry.observe(created)
        return created

    async def update_marker(self, marker_id: str, **fields: Any) -> Marker | None:
        changes = PatchMarkerInput.from_payload(fields).changes()
        if not changes:
            return self._registry.get(marker_id)
        try:
            updated = await self._api.patch_marker(marker_id, changes)
        except MarkerNotFoundError:
            self._registry.forget(marker_id)
            self._notifier.warn("Save failed: the marker was deleted by someone else.")
            return None
        except ApiError as exc:
            _LOG.debug("Update of %s failed: %s", marker_id, exc)
            self._notifier.warn("Failed to save marker.")
            return None
        self._registry.observe(updated, force_refresh=True)
        return updated

    async def rename_marker(self, marker_id: str, name: str) -> Marker | None:
        name = name.strip()
        if not name:
            return None
        return await self.update_marker(marker_id, name=name)

    async def delete_marker(self, marker_id: str) -> bool:
        try:
            await self._api.delete_marker(marker_id)
        except MarkerNotFoundError:
            self._registry.forget(marker_id)
            self._notifier.warn("Marker was already deleted.")
            return False
        except ApiError as exc:
            _LOG.debug("Delete of %s failed: %s", marker_id, exc)
            self._notifier.warn("Failed to delete marker.")
            return False
        self._registry.forget(marker_id)
        return True
