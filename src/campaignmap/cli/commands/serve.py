"""Serve command."""

from __future__ import annotations

import argparse
from pathlib import Path

from pydantic import ValidationError

from campaignmap.contracts.config import ServerConfig
from campaignmap.contracts.exceptions import ConfigError


def server_config_from_args(args: argparse.Namespace) -> ServerConfig:
    import campaignmap.cli as cli

    config = cli.load_config(args.config).server
    overrides: dict[str, object] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.data is not None:
        overrides["data_path"] = Path(args.data).expanduser().resolve()
    if args.audit is not None:
        overrides["audit"] = args.audit
    if not overrides:
        return config
    try:
        return ServerConfig.model_validate({**config.model_dump(), **overrides})
    except ValidationError as exc:
        raise ConfigError(f"invalid server options: {exc}") from exc


def run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    from campaignmap.server import create_app

    config = server_config_from_args(args)
    app = create_app(config)
    print(f"Campaign map running on http://{config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level="debug" if args.verbose else "info")


__all__ = ["run_serve", "server_config_from_args"]
