"""Bounded, retrying audit queue decoupled from request handling."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import random

from campaignmap.contracts.audit import AuditEntry, AuditSink

_LOG = logging.getLogger(__name__)


class AuditLog:
    """Queues audit entries and feeds them to a sink from one worker task.

    - ``submit`` never blocks; a full queue drops the entry with an error log
    - each entry is retried up to *max_retries* times with exponential backoff
      plus jitter, then dropped
    - sink failures never propagate to the submitter

    A single worker keeps entries in submission order.
    """

    def __init__(self, sink: AuditSink, *, max_queue: int = 256, max_retries: int = 3) -> None:
        self._sink = sink
        self._max_retries = max_retries
        self._queue: asyncio.Queue[AuditEntry] = asyncio.Queue(maxsize=max_queue)
        self._worker: asyncio.Task[None] | None = None
        self.dropped = 0

    @property
    def sink(self) -> AuditSink:
        return self._sink

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def submit(self, entry: AuditEntry) -> bool:
        try:
            self._queue.put_nowait(entry)
        except asyncio.QueueFull:
            self.dropped += 1
            _LOG.error("Audit queue full, dropping entry: %s", entry.description)
            return False
        return True

    async def start(self) -> None:
        if self.running:
            return
        self._worker = asyncio.create_task(self._run(), name="campaignmap-audit")

    async def stop(self) -> None:
        """Deliver everything already queued, then stop the worker."""
        if self._worker is None:
            return
        await self._queue.join()
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None

    async def drain(self) -> None:
        await self._queue.join()

    async def _run(self) -> None:
        while True:
            entry = await self._queue.get()
            try:
                await self._deliver(entry)
            finally:
                self._queue.task_done()

    async def _deliver(self, entry: AuditEntry) -> bool:
        for attempt in range(self._max_retries + 1):
            try:
                await self._sink.record(entry)
                return True
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # sink failures are never surfaced
                if attempt >= self._max_retries:
                    self.dropped += 1
                    _LOG.error("Giving up on audit entry %r: %s", entry.description, exc)
                    return False
                _LOG.warning("Audit sink failed (attempt %d): %s", attempt + 1, exc)
                await self._sleep_backoff(attempt)
        return False  # pragma: no cover

    @staticmethod
    async def _sleep_backoff(attempt: int) -> None:
        seconds = min(4.0, float(2**attempt)) * 0.25 + random.uniform(0.0, 0.1)
        await asyncio.sleep(seconds)
