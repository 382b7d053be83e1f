"""One-shot marker commands: list, add, move, rename, delete."""

from __future__ import annotations

import argparse

from pydantic import ValidationError
from rich.console import Console

from campaignmap.client.api import MapApiClient
from campaignmap.client.engine import SyncEngine
from campaignmap.client.registry import MarkerRegistry
from campaignmap.cli.views import RichNotifier, marker_table
from campaignmap.contracts.config import ClientConfig
from campaignmap.contracts.exceptions import ConfigError, MarkerNotFoundError


def client_config_from_args(args: argparse.Namespace) -> ClientConfig:
    import campaignmap.cli as cli

    config = cli.load_config(args.config).client
    overrides: dict[str, object] = {}
    if getattr(args, "url", None):
        overrides["base_url"] = args.url
    if getattr(args, "user", None):
        overrides["actor"] = args.user
    if getattr(args, "interval", None) is not None:
        overrides["poll_interval"] = args.interval
    if not overrides:
        return config
    try:
        return ClientConfig.model_validate({**config.model_dump(), **overrides})
    except ValidationError as exc:
        raise ConfigError(f"invalid client options: {exc}") from exc


def open_api(config: ClientConfig) -> MapApiClient:
    return MapApiClient(config.base_url, config.actor, timeout=config.timeout)


async def _seeded_engine(api: MapApiClient, config: ClientConfig, notifier: RichNotifier) -> SyncEngine:
    engine = SyncEngine(
        api,
        MarkerRegistry(),
        notifier,
        poll_interval=config.poll_interval,
        rollback_failed_moves=config.rollback_failed_moves,
    )
    engine.reconcile(await api.fetch_snapshot())
    return engine


def _require(engine: SyncEngine, marker_id: str) -> None:
    if marker_id not in engine.registry:
        raise MarkerNotFoundError(marker_id)


async def run_list(args: argparse.Namespace) -> bool:
    config = client_config_from_args(args)
    async with open_api(config) as api:
        markers = await api.fetch_snapshot()
    Console().print(marker_table(markers))
    return True


async def run_add(args: argparse.Namespace) -> bool:
    config = client_config_from_args(args)
    notifier = RichNotifier()
    async with open_api(config) as api:
        engine = SyncEngine(api, MarkerRegistry(), notifier)
        created = await engine.create_marker(args.name, args.type, args.x, args.y, avatar=args.avatar)
    if created is None:
        return False
    print(created.id)
    return True


async def run_move(args: argparse.Namespace) -> bool:
    config = client_config_from_args(args)
    notifier = RichNotifier()
    async with open_api(config) as api:
        engine = await _seeded_engine(api, config, notifier)
        _require(engine, args.marker_id)
        engine.begin_drag(args.marker_id)
        updated = await engine.end_drag(args.marker_id, args.x, args.y)
    if updated is None:
        return False
    print(f"{updated.id} {updated.x:.2f} {updated.y:.2f}")
    return True


async def run_rename(args: argparse.Namespace) -> bool:
    config = client_config_from_args(args)
    notifier = RichNotifier()
    async with open_api(config) as api:
        engine = await _seeded_engine(api, config, notifier)
        _require(engine, args.marker_id)
        updated = await engine.rename_marker(args.marker_id, args.name)
    return updated is not None


async def run_delete(args: argparse.Namespace) -> bool:
    config = client_config_from_args(args)
    notifier = RichNotifier()
    async with open_api(config) as api:
        engine = await _seeded_engine(api, config, notifier)
        _require(engine, args.marker_id)
        return await engine.delete_marker(args.marker_id)


__all__ = ["client_config_from_args", "run_add", "run_delete", "run_list", "run_move", "run_rename"]
