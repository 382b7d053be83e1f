"""FastAPI application factory for the marker service."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from campaignmap.audit.log import AuditLog
from campaignmap.audit.sinks import create_audit_sink
from campaignmap.contracts.audit import AuditSink
from campaignmap.contracts.config import ServerConfig
from campaignmap.contracts.exceptions import MarkerNotFoundError, PersistenceError
from campaignmap.contracts.store import MarkerStore
from campaignmap.server.pipeline import MutationPipeline
from campaignmap.server.routes import PayloadTooLargeError, router
from campaignmap.store.json_file import JsonFileStore

_LOG = logging.getLogger(__name__)


def create_app(
    config: ServerConfig | None = None,
    *,
    store: MarkerStore | None = None,
    audit_sink: AuditSink | None = None,
) -> FastAPI:
    """Build the marker service.

    *store* and *audit_sink* default to a :class:`JsonFileStore` on
    ``config.data_path`` and the sink selected by ``config.audit``.
    """
    config = config or ServerConfig()
    store = store or JsonFileStore(config.data_path)
    audit_sink = audit_sink or create_audit_sink(config.audit, data_path=config.data_path)
    audit = AuditLog(audit_sink, max_queue=config.audit_queue_size, max_retries=config.audit_max_retries)
    pipeline = MutationPipeline(store, audit)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await audit.start()
        try:
            yield
        finally:
            await audit.stop()

    app = FastAPI(title="Campaign Map", version="0.3.0", lifespan=lifespan)
    app.state.pipeline = pipeline
    app.state.audit = audit
    app.state.max_body_bytes = config.max_body_bytes
    app.include_router(router)

    @app.exception_handler(MarkerNotFoundError)
    async def _not_found(request: Request, exc: MarkerNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "not found"})

    @app.exception_handler(PayloadTooLargeError)
    async def _too_large(request: Request, exc: PayloadTooLargeError) -> JSONResponse:
        return JSONResponse(status_code=413, content={"error": "payload too large"})

    @app.exception_handler(PersistenceError)
    async def _persistence_failed(request: Request, exc: PersistenceError) -> JSONResponse:
        _LOG.error("Persistence failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "storage failure"})

    return app
