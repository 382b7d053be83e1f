"""Tests for AuditLog - queueing, retry and drop behaviour."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from campaignmap.audit.log import AuditLog
from campaignmap.contracts.audit import AuditAction, AuditEntry
from tests.fakes.audit import FakeAuditSink


def _entry(name: str = "Bob") -> AuditEntry:
    return AuditEntry(action=AuditAction.ADD, marker_id=name.lower(), marker_name=name, actor="dm")


class TestDelivery:
    @pytest.mark.asyncio
    async def test_delivers_in_submission_order(self) -> None:
        sink = FakeAuditSink()
        log = AuditLog(sink)
        await log.start()

        for name in ("A", "B", "C"):
            assert log.submit(_entry(name)) is True
        await log.stop()

        assert sink.descriptions == ["Add marker A by dm", "Add marker B by dm", "Add marker C by dm"]
        assert not log.running

    @pytest.mark.asyncio
    async def test_submit_does_not_wait_for_sink(self) -> None:
        release = asyncio.Event()

        class SlowSink(FakeAuditSink):
            async def record(self, entry: AuditEntry) -> None:
                await release.wait()
                await super().record(entry)

        sink = SlowSink()
        log = AuditLog(sink)
        await log.start()

        log.submit(_entry())
        assert sink.entries == []

        release.set()
        await log.stop()
        assert len(sink.entries) == 1

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self) -> None:
        log = AuditLog(FakeAuditSink())
        await log.start()
        worker = log._worker
        await log.start()

        assert log._worker is worker
        await log.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self) -> None:
        await AuditLog(FakeAuditSink()).stop()


class TestRetry:
    @pytest.mark.asyncio
    @patch("campaignmap.audit.log.AuditLog._sleep_backoff", new_callable=AsyncMock)
    async def test_retries_then_succeeds(self, mock_backoff: AsyncMock) -> None:
        sink = FakeAuditSink(failures=2)
        log = AuditLog(sink, max_retries=3)
        await log.start()

        log.submit(_entry())
        await log.stop()

        assert sink.attempts == 3
        assert sink.descriptions == ["Add marker Bob by dm"]
        assert mock_backoff.await_count == 2
        assert log.dropped == 0

    @pytest.mark.asyncio
    @patch("campaignmap.audit.log.AuditLog._sleep_backoff", new_callable=AsyncMock)
    async def test_gives_up_after_max_retries(self, mock_backoff: AsyncMock) -> None:
        sink = FakeAuditSink(failures=10)
        log = AuditLog(sink, max_retries=2)
        await log.start()

        log.submit(_entry())
        log.submit(_entry("Next"))
        await log.stop()

        assert sink.attempts == 6
        assert sink.entries == []
        assert log.dropped == 2

    @pytest.mark.asyncio
    async def test_unexpected_sink_exception_is_contained(self) -> None:
        class BrokenSink(FakeAuditSink):
            async def record(self, entry: AuditEntry) -> None:
                raise RuntimeError("boom")

        log = AuditLog(BrokenSink(), max_retries=0)
        await log.start()

        log.submit(_entry())
        await log.stop()

        assert log.dropped == 1


class TestBackpressure:
    @pytest.mark.asyncio
    async def test_full_queue_drops_entry(self) -> None:
        log = AuditLog(FakeAuditSink(), max_queue=1)

        assert log.submit(_entry("A")) is True
        assert log.submit(_entry("B")) is False
        assert log.dropped == 1

    @pytest.mark.asyncio
    @patch("campaignmap.audit.log.asyncio.sleep", new_callable=AsyncMock)
    async def test_backoff_is_capped(self, mock_sleep: AsyncMock) -> None:
        await AuditLog._sleep_backoff(10)

        (seconds,), _ = mock_sleep.await_args
        assert seconds <= 1.1
