"""Watch command: a terminal viewer that polls like the browser client."""

from __future__ import annotations

import argparse
import asyncio

from rich.console import Console

from campaignmap.cli.commands.markers import client_config_from_args, open_api
from campaignmap.cli.views import RichMarkerView, RichNotifier
from campaignmap.client.engine import ReconcileResult, SyncEngine
from campaignmap.client.registry import MarkerRegistry


def format_poll_summary(result: ReconcileResult) -> str:
    parts = []
    for label, ids in (
        ("added", result.added),
        ("moved", result.moved),
        ("refreshed", result.refreshed),
        ("removed", result.removed),
    ):
        if ids:
            parts.append(f"{len(ids)} {label}")
    return ", ".join(parts)


async def run_watch(args: argparse.Namespace, stop: asyncio.Event | None = None) -> bool:
    config = client_config_from_args(args)
    console = Console()
    console.print(f"Watching {config.base_url} every {config.poll_interval:g}s (Ctrl+C to stop)")

    def report(result: ReconcileResult) -> None:
        if result.changed:
            console.print(f"[dim]{format_poll_summary(result)}[/dim]")

    async with open_api(config) as api:
        engine = SyncEngine(
            api,
            MarkerRegistry(RichMarkerView(console)),
            RichNotifier(),
            poll_interval=config.poll_interval,
        )
        await engine.run(stop, on_result=report)
    return True


__all__ = ["format_poll_summary", "run_watch"]
