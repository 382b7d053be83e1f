"""Async HTTP client for the marker service."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from campaignmap.contracts.audit import normalize_actor
from campaignmap.contracts.exceptions import ApiError, MarkerNotFoundError
from campaignmap.contracts.marker import Marker, MarkerCollection

_LOG = logging.getLogger(__name__)


class MapApiClient:
    """Thin wrapper around ``httpx.AsyncClient`` for the four marker endpoints.

    Every failure (transport error, non-2xx status, unparseable body) is raised
    as :class:`ApiError`; a 404 on a marker path is raised as
    :class:`MarkerNotFoundError`. Requests are never retried here.
    """

    def __init__(
        self,
        base_url: str,
        actor: str = "anon",
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._actor = normalize_actor(actor)
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    @property
    def actor(self) -> str:
        return self._actor

    async def __aenter__(self) -> MapApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_snapshot(self) -> list[Marker]:
        response = await self._request("GET", "/data", headers={"Cache-Control": "no-store"})
        try:
            return MarkerCollection.model_validate(response.json()).markers
        except (ValueError, ValidationError) as exc:
            raise ApiError(f"invalid snapshot payload: {exc}", status_code=response.status_code) from exc

    async def create_marker(self, fields: dict[str, Any]) -> Marker:
        response = await self._request("POST", "/markers", json=fields, mutating=True)
        return self._marker(response)

    async def patch_marker(self, marker_id: str, fields: dict[str, Any]) -> Marker:
        response = await self._request(
            "PATCH", self._marker_path(marker_id), json=fields, mutating=True, marker_id=marker_id
        )
        return self._marker(response)

    async def delete_marker(self, marker_id: str) -> None:
        await self._request("DELETE", self._marker_path(marker_id), mutating=True, marker_id=marker_id)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
        mutating: bool = False,
        marker_id: str | None = None,
    ) -> httpx.Response:
        request_headers = dict(headers or {})
        if mutating:
            request_headers["X-User"] = self._actor
        _LOG.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, json=json, headers=request_headers)
        except httpx.HTTPError as exc:
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 404 and marker_id is not None:
            raise MarkerNotFoundError(marker_id)
        if not response.is_success:
            raise ApiError(f"{method} {path} returned HTTP {response.status_code}", status_code=response.status_code)
        return response

    @staticmethod
    def _marker_path(marker_id: str) -> str:
        return f"/markers/{quote(marker_id, safe='')}"

    @staticmethod
    def _marker(response: httpx.Response) -> Marker:
        try:
            return Marker.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ApiError(f"invalid marker payload: {exc}", status_code=response.status_code) from exc
