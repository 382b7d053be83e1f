"""Configuration contracts."""

from __future__ import annotations

import os
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field


class AuditMode(StrEnum):
    GIT = "git"
    LOG = "log"
    NONE = "none"


def _default_actor() -> str:
    return (os.environ.get("CAMPAIGNMAP_USER") or "anon").strip() or "anon"


class ServerConfig(BaseModel):
    data_path: Path = Path("data.json")
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    audit: AuditMode = AuditMode.LOG
    audit_queue_size: int = Field(default=256, ge=1, le=10000)
    audit_max_retries: int = Field(default=3, ge=0, le=10)
    max_body_bytes: int = Field(default=1024 * 1024, ge=1)

    model_config = {"frozen": True}


class ClientConfig(BaseModel):
    base_url: str = "http://127.0.0.1:3000"
    actor: str = Field(default_factory=_default_actor)
    poll_interval: float = Field(default=3.0, gt=0)
    timeout: float = Field(default=10.0, gt=0)
    rollback_failed_moves: bool = False

    model_config = {"frozen": True}


class CampaignMapConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)

    model_config = {"frozen": True}
