"""Shared test fixtures for campaignmap tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from campaignmap.contracts.marker import Marker, MarkerType
from tests.fakes.audit import FakeAuditSink
from tests.fakes.store import FakeStore


@pytest.fixture
def camp() -> Marker:
    """A location marker already on the map."""
    return Marker(id="camp", x=120.0, y=80.0, name="Camp", type=MarkerType.LOCATION, color="#16a34a")


@pytest.fixture
def bob() -> Marker:
    return Marker(id="bob", x=10.0, y=20.0, name="Bob", type=MarkerType.PLAYER, color="#2563eb")


@pytest.fixture
def store(camp: Marker) -> FakeStore:
    return FakeStore([camp])


@pytest.fixture
def audit_sink() -> FakeAuditSink:
    return FakeAuditSink()


@pytest.fixture
def data_path(tmp_path: Path) -> Path:
    return tmp_path / "data.json"
