"""Config loading."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from campaignmap.contracts.config import CampaignMapConfig, ServerConfig
from campaignmap.contracts.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "campaignmap.json"


def _resolve_path(value: Path, *, base_dir: Path) -> Path:
    if value.is_absolute():
        return value
    return (base_dir / value).resolve()


def _apply_env(config: CampaignMapConfig) -> CampaignMapConfig:
    raw_port = os.environ.get("PORT")
    if not raw_port:
        return config
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise ConfigError(f"PORT must be an integer, got {raw_port!r}") from exc
    try:
        server = ServerConfig.model_validate({**config.server.model_dump(), "port": port})
    except ValidationError as exc:
        raise ConfigError(f"invalid PORT: {exc}") from exc
    return config.model_copy(update={"server": server})


def load_config(path: str | Path | None = None) -> CampaignMapConfig:
    """Load ``campaignmap.json``.

    With no path, ``./campaignmap.json`` is used when present and built-in
    defaults otherwise. An explicit path that cannot be read is an error.
    Relative ``server.data_path`` values resolve against the config file's
    directory. The ``PORT`` environment variable overrides ``server.port``.
    """
    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_NAME
        if not candidate.exists():
            return _apply_env(CampaignMapConfig())
        path = candidate

    config_path = Path(path).expanduser().resolve()
    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = CampaignMapConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    server = parsed.server.model_copy(
        update={"data_path": _resolve_path(parsed.server.data_path, base_dir=config_path.parent)}
    )
    return _apply_env(parsed.model_copy(update={"server": server}))
