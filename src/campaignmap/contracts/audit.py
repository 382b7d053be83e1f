"""Audit trail contracts."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import StrEnum

from pydantic import BaseModel

MAX_ACTOR_LENGTH = 40
MAX_MESSAGE_LENGTH = 160

_LINE_BREAKS = re.compile(r"[\r\n]+")


class AuditAction(StrEnum):
    ADD = "Add"
    UPDATE = "Update"
    DELETE = "Delete"


def normalize_actor(raw: str | None) -> str:
    """Free-text actor label from a request header. Never trusted for auth."""
    actor = (raw or "").strip()[:MAX_ACTOR_LENGTH]
    return actor or "anon"


def sanitize_message(message: str) -> str:
    return _LINE_BREAKS.sub(" ", str(message))[:MAX_MESSAGE_LENGTH]


class AuditEntry(BaseModel):
    action: AuditAction
    marker_id: str
    marker_name: str = ""
    actor: str = "anon"

    model_config = {"frozen": True}

    @property
    def description(self) -> str:
        label = self.marker_name or self.marker_id
        return sanitize_message(f"{self.action.value} marker {label} by {self.actor}")


class AuditSink(ABC):
    """Append-only recorder of mutation descriptions."""

    @abstractmethod
    async def record(self, entry: AuditEntry) -> None: ...  # pragma: no cover
