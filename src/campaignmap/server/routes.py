"""HTTP routes for the marker service."""

from __future__ import annotations

import json
from typing import Any

from fastapi import APIRouter, Header, Request, Response

from campaignmap.contracts.audit import normalize_actor
from campaignmap.contracts.marker import CreateMarkerInput, Marker, PatchMarkerInput
from campaignmap.server.pipeline import MutationPipeline

router = APIRouter()


class PayloadTooLargeError(Exception):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"request body of {size} bytes exceeds {limit} bytes")
        self.size = size
        self.limit = limit


def _pipeline(request: Request) -> MutationPipeline:
    return request.app.state.pipeline


async def _json_body(request: Request) -> Any:
    """Parse the request body, treating anything unparseable as an empty object."""
    limit: int = request.app.state.max_body_bytes
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(int(declared), limit)
    raw = await request.body()
    if len(raw) > limit:
        raise PayloadTooLargeError(len(raw), limit)
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}


@router.get("/data")
async def get_data(request: Request, response: Response) -> dict[str, Any]:
    """Full marker snapshot. Clients poll this on a fixed interval."""
    response.headers["Cache-Control"] = "no-store"
    collection = await _pipeline(request).snapshot()
    return collection.model_dump(mode="json")


@router.post("/markers")
async def create_marker(request: Request, x_user: str | None = Header(default=None)) -> dict[str, Any]:
    fields = CreateMarkerInput.from_payload(await _json_body(request))
    marker = await _pipeline(request).create(fields, actor=normalize_actor(x_user))
    return _dump(marker)


@router.patch("/markers/{marker_id}")
async def patch_marker(
    marker_id: str,
    request: Request,
    x_user: str | None = Header(default=None),
) -> dict[str, Any]:
    fields = PatchMarkerInput.from_payload(await _json_body(request))
    marker = await _pipeline(request).patch(marker_id, fields, actor=normalize_actor(x_user))
    return _dump(marker)


@router.delete("/markers/{marker_id}", status_code=204)
async def delete_marker(
    marker_id: str,
    request: Request,
    x_user: str | None = Header(default=None),
) -> Response:
    await _pipeline(request).delete(marker_id, actor=normalize_actor(x_user))
    return Response(status_code=204)


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "campaignmap"}


def _dump(marker: Marker) -> dict[str, Any]:
    return marker.model_dump(mode="json")
