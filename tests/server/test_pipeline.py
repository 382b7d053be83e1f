"""Tests for the mutation pipeline."""

from __future__ import annotations

import asyncio

import pytest

from campaignmap.audit.log import AuditLog
from campaignmap.contracts.exceptions import MarkerNotFoundError, PersistenceError
from campaignmap.contracts.marker import CreateMarkerInput, Marker, MarkerCollection, PatchMarkerInput
from campaignmap.server.pipeline import MutationPipeline
from tests.fakes.audit import FakeAuditSink
from tests.fakes.store import FakeStore


def make_pipeline(store: FakeStore, sink: FakeAuditSink) -> tuple[MutationPipeline, AuditLog]:
    audit = AuditLog(sink)
    return MutationPipeline(store, audit), audit


class TestCreate:
    @pytest.mark.asyncio
    async def test_appends_and_persists(self, store: FakeStore, audit_sink: FakeAuditSink) -> None:
        pipeline, audit = make_pipeline(store, audit_sink)
        await audit.start()

        created = await pipeline.create(
            CreateMarkerInput.from_payload({"name": "Bob", "type": "player", "x": 10, "y": 20}), actor="dm"
        )
        await audit.stop()

        assert created.id
        assert created.color == "#2563eb"
        assert [marker.id for marker in store.markers] == ["camp", created.id]
        assert store.save_calls == 1
        assert audit_sink.descriptions == ["Add marker Bob by dm"]

    @pytest.mark.asyncio
    async def test_keeps_requested_id(self, store: FakeStore, audit_sink: FakeAuditSink) -> None:
        pipeline, _ = make_pipeline(store, audit_sink)

        created = await pipeline.create(CreateMarkerInput.from_payload({"id": "bob", "name": "Bob"}))

        assert created.id == "bob"

    @pytest.mark.asyncio
    async def test_duplicate_requested_id_is_replaced(self, store: FakeStore, audit_sink: FakeAuditSink) -> None:
        pipeline, _ = make_pipeline(store, audit_sink)

        created = await pipeline.create(CreateMarkerInput.from_payload({"id": "camp", "name": "Impostor"}))

        assert created.id != "camp"
        assert len({marker.id for marker in store.markers}) == 2

    @pytest.mark.asyncio
    async def test_concurrent_creates_get_distinct_ids(self, audit_sink: FakeAuditSink) -> None:
        store = FakeStore()
        pipeline, _ = make_pipeline(store, audit_sink)

        created = await asyncio.gather(
            *(pipeline.create(CreateMarkerInput.from_payload({"name": f"P{n}"})) for n in range(20))
        )

        assert len({marker.id for marker in created}) == 20
        assert len(store.markers) == 20


class TestPatch:
    @pytest.mark.asyncio
    async def test_applies_allow_listed_fields(self, store: FakeStore, audit_sink: FakeAuditSink) -> None:
        pipeline, audit = make_pipeline(store, audit_sink)
        await audit.start()

        updated = await pipeline.patch("camp", PatchMarkerInput.from_payload({"x": 5.555}), actor="dm")
        await audit.stop()

        assert updated.x == 5.56
        assert updated.name == "Camp"
        assert store.markers[0] == updated
        assert audit_sink.descriptions == ["Update marker Camp by dm"]

    @pytest.mark.asyncio
    async def test_unknown_fields_never_stored(self, store: FakeStore, audit_sink: FakeAuditSink) -> None:
        pipeline, _ = make_pipeline(store, audit_sink)

        await pipeline.patch("camp", PatchMarkerInput.from_payload({"owner": "mallory", "notes": "ruins"}))

        stored = store.document["markers"][0]
        assert "owner" not in stored
        assert stored["notes"] == "ruins"
        assert stored["name"] == "Camp"

    @pytest.mark.asyncio
    async def test_repeated_rounding_is_stable(self, store: FakeStore, audit_sink: FakeAuditSink) -> None:
        pipeline, _ = make_pipeline(store, audit_sink)
        patch = PatchMarkerInput.from_payload({"x": 100.005, "y": 50.004})

        await pipeline.patch("camp", patch)
        await pipeline.patch("camp", patch)
        snapshot = await pipeline.snapshot()

        assert (snapshot.markers[0].x, snapshot.markers[0].y) == (100.01, 50.0)

    @pytest.mark.asyncio
    async def test_unknown_id_has_no_side_effects(self, store: FakeStore, audit_sink: FakeAuditSink) -> None:
        pipeline, audit = make_pipeline(store, audit_sink)
        before = store.document

        with pytest.raises(MarkerNotFoundError):
            await pipeline.patch("ghost", PatchMarkerInput.from_payload({"name": "Boo"}))

        assert store.document == before
        assert store.save_calls == 0
        assert audit._queue.empty()


class TestDelete:
    @pytest.mark.asyncio
    async def test_removes_record(self, store: FakeStore, audit_sink: FakeAuditSink, bob: Marker) -> None:
        store.save(MarkerCollection(markers=[*store.markers, bob]))
        pipeline, audit = make_pipeline(store, audit_sink)
        await audit.start()

        deleted = await pipeline.delete("camp", actor="dm")
        await audit.stop()

        assert deleted.id == "camp"
        assert [marker.id for marker in store.markers] == ["bob"]
        assert audit_sink.descriptions == ["Delete marker Camp by dm"]

    @pytest.mark.asyncio
    async def test_unknown_id_leaves_collection_unchanged(self, store: FakeStore, audit_sink: FakeAuditSink) -> None:
        pipeline, _ = make_pipeline(store, audit_sink)
        before = store.document

        with pytest.raises(MarkerNotFoundError):
            await pipeline.delete("never-created")

        assert store.document == before
        assert store.save_calls == 0


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_racing_renames_both_succeed_without_merging(
        self, store: FakeStore, audit_sink: FakeAuditSink
    ) -> None:
        pipeline, _ = make_pipeline(store, audit_sink)

        first, second = await asyncio.gather(
            pipeline.patch("camp", PatchMarkerInput.from_payload({"name": "North Camp"})),
            pipeline.patch("camp", PatchMarkerInput.from_payload({"name": "South Camp"})),
        )

        assert {first.name, second.name} == {"North Camp", "South Camp"}
        assert store.markers[0].name in {"North Camp", "South Camp"}
        assert len(store.markers) == 1

    @pytest.mark.asyncio
    async def test_concurrent_edits_to_different_markers_are_not_lost(
        self, store: FakeStore, audit_sink: FakeAuditSink, bob: Marker
    ) -> None:
        store.save(MarkerCollection(markers=[*store.markers, bob]))
        pipeline, _ = make_pipeline(store, audit_sink)

        await asyncio.gather(
            pipeline.patch("camp", PatchMarkerInput.from_payload({"notes": "burned"})),
            pipeline.patch("bob", PatchMarkerInput.from_payload({"x": 99})),
            pipeline.create(CreateMarkerInput.from_payload({"name": "Dragon", "type": "event"})),
        )

        by_name = {marker.name: marker for marker in store.markers}
        assert by_name["Camp"].notes == "burned"
        assert by_name["Bob"].x == 99.0
        assert "Dragon" in by_name


class TestFailures:
    @pytest.mark.asyncio
    async def test_persistence_failure_propagates_and_skips_audit(
        self, store: FakeStore, audit_sink: FakeAuditSink
    ) -> None:
        pipeline, audit = make_pipeline(store, audit_sink)
        store.fail_saves = True

        with pytest.raises(PersistenceError):
            await pipeline.create(CreateMarkerInput.from_payload({"name": "Bob"}))

        assert audit._queue.empty()

    @pytest.mark.asyncio
    async def test_works_without_audit(self, store: FakeStore) -> None:
        pipeline = MutationPipeline(store)

        created = await pipeline.create(CreateMarkerInput.from_payload({"name": "Solo"}))

        assert created.name == "Solo"
