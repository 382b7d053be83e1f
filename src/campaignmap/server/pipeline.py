"""Read-modify-persist-audit pipeline for marker mutations."""

from __future__ import annotations

import asyncio
import logging

from campaignmap.audit.log import AuditLog
from campaignmap.contracts.audit import AuditAction, AuditEntry
from campaignmap.contracts.exceptions import MarkerNotFoundError
from campaignmap.contracts.marker import CreateMarkerInput, Marker, MarkerCollection, PatchMarkerInput, new_marker_id
from campaignmap.contracts.store import MarkerStore

_LOG = logging.getLogger(__name__)


class MutationPipeline:
    """Applies one client change at a time to the shared collection.

    Each mutation loads the whole collection, changes one record, saves the
    whole collection and then queues an audit entry. Mutations are serialized
    by a single lock so a save never discards a change committed by a
    concurrent request; every request still succeeds on its own.
    """

    def __init__(self, store: MarkerStore, audit: AuditLog | None = None) -> None:
        self._store = store
        self._audit = audit
        self._lock = asyncio.Lock()

    @property
    def store(self) -> MarkerStore:
        return self._store

    async def snapshot(self) -> MarkerCollection:
        return await asyncio.to_thread(self._store.load)

    async def create(self, fields: CreateMarkerInput, *, actor: str = "anon") -> Marker:
        async with self._lock:
            collection = await asyncio.to_thread(self._store.load)
            marker = fields.to_marker(self._assign_id(fields.id, collection))
            collection.markers.append(marker)
            await asyncio.to_thread(self._store.save, collection)

        _LOG.debug("Created marker %s", marker.id)
        self._notify(AuditAction.ADD, marker, actor)
        return marker

    async def patch(self, marker_id: str, fields: PatchMarkerInput, *, actor: str = "anon") -> Marker:
        async with self._lock:
            collection = await asyncio.to_thread(self._store.load)
            index = collection.index_of(marker_id)
            if index is None:
                raise MarkerNotFoundError(marker_id)
            marker = fields.apply_to(collection.markers[index])
            collection.markers[index] = marker
            await asyncio.to_thread(self._store.save, collection)

        _LOG.debug("Patched marker %s: %s", marker_id, sorted(fields.changes()))
        self._notify(AuditAction.UPDATE, marker, actor)
        return marker

    async def delete(self, marker_id: str, *, actor: str = "anon") -> Marker:
        async with self._lock:
            collection = await asyncio.to_thread(self._store.load)
            index = collection.index_of(marker_id)
            if index is None:
                raise MarkerNotFoundError(marker_id)
            deleted = collection.markers.pop(index)
            await asyncio.to_thread(self._store.save, collection)

        _LOG.debug("Deleted marker %s", marker_id)
        self._notify(AuditAction.DELETE, deleted, actor)
        return deleted

    @staticmethod
    def _assign_id(requested: str | None, collection: MarkerCollection) -> str:
        existing = collection.ids()
        if requested and requested not in existing:
            return requested
        if requested:
            _LOG.warning("Requested marker id %s already exists, assigning a new one", requested)
        marker_id = new_marker_id()
        while marker_id in existing:  # pragma: no cover
            marker_id = new_marker_id()
        return marker_id

    def _notify(self, action: AuditAction, marker: Marker, actor: str) -> None:
        if self._audit is None:
            return
        self._audit.submit(AuditEntry(action=action, marker_id=marker.id, marker_name=marker.name, actor=actor))
