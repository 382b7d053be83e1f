"""Tests for the client marker registry."""

from __future__ import annotations

from campaignmap.client.registry import MarkerRegistry, MarkerState
from campaignmap.contracts.marker import Marker
from tests.fakes.view import FakeView


def make_registry(*markers: Marker) -> tuple[MarkerRegistry, FakeView]:
    view = FakeView()
    registry = MarkerRegistry(view)
    for marker in markers:
        registry.observe(marker)
    return registry, view


class TestObserve:
    def test_first_observation_adds_entity(self, camp: Marker) -> None:
        registry, view = make_registry()

        change = registry.observe(camp)

        assert change.added
        assert registry.state("camp") is MarkerState.TRACKED
        assert view.positions["camp"] == (120.0, 80.0)

    def test_unchanged_marker_is_a_noop(self, camp: Marker) -> None:
        registry, view = make_registry(camp)
        calls = view.call_count

        change = registry.observe(camp.model_copy())

        assert not change.changed
        assert view.call_count == calls

    def test_position_change_moves_without_refresh(self, camp: Marker) -> None:
        registry, view = make_registry(camp)

        change = registry.observe(camp.model_copy(update={"x": 1.0}))

        assert change.moved and not change.refreshed
        assert view.positions["camp"] == (1.0, 80.0)

    def test_metadata_change_refreshes(self, camp: Marker) -> None:
        registry, view = make_registry(camp)

        change = registry.observe(camp.model_copy(update={"avatar": "https://img/camp.png"}))

        assert change.refreshed
        assert view.refreshes == ["camp"]

    def test_notes_change_updates_cache_without_refresh(self, camp: Marker) -> None:
        registry, view = make_registry(camp)

        change = registry.observe(camp.model_copy(update={"notes": "a long history"}))

        assert not change.changed
        assert view.refreshes == []
        assert registry.get("camp").notes == "a long history"

    def test_force_refresh(self, camp: Marker) -> None:
        registry, view = make_registry(camp)

        assert registry.observe(camp, force_refresh=True).refreshed
        assert view.refreshes == ["camp"]


class TestGuard:
    def test_guarded_position_is_kept(self, camp: Marker) -> None:
        registry, view = make_registry(camp)
        registry.begin_drag("camp")
        registry.drag_to("camp", 50.0, 60.0)

        change = registry.observe(camp.model_copy(update={"x": 999.0, "y": 999.0, "name": "Base"}))

        assert not change.moved
        assert change.refreshed
        assert (registry.get("camp").x, registry.get("camp").y) == (50.0, 60.0)
        assert registry.get("camp").name == "Base"
        assert view.positions["camp"] == (50.0, 60.0)

    def test_states(self, camp: Marker) -> None:
        registry, _ = make_registry(camp)

        assert registry.state("nobody") is MarkerState.UNKNOWN
        registry.begin_drag("camp")
        assert registry.state("camp") is MarkerState.DRAGGING
        registry.release("camp")
        assert registry.state("camp") is MarkerState.TRACKED

    def test_begin_drag_unknown_marker(self) -> None:
        registry, _ = make_registry()
        assert registry.begin_drag("ghost") is False
        assert registry.guarded == frozenset()

    def test_drag_origin_is_position_at_start(self, camp: Marker) -> None:
        registry, _ = make_registry(camp)
        registry.begin_drag("camp")
        registry.drag_to("camp", 1.0, 2.0)
        registry.begin_drag("camp")

        assert registry.drag_origin("camp") == (120.0, 80.0)
        registry.release("camp")
        assert registry.drag_origin("camp") is None


class TestRemoval:
    def test_forget_tears_everything_down(self, camp: Marker) -> None:
        registry, view = make_registry(camp)
        registry.begin_drag("camp")

        assert registry.forget("camp") is True
        assert "camp" not in registry
        assert registry.guarded == frozenset()
        assert view.removed == ["camp"]

    def test_forget_unknown(self) -> None:
        registry, view = make_registry()
        assert registry.forget("ghost") is False
        assert view.removed == []

    def test_retain_only(self, camp: Marker, bob: Marker) -> None:
        registry, _ = make_registry(camp, bob)

        assert registry.retain_only({"bob"}) == ["camp"]
        assert registry.ids() == {"bob"}
