"""Public contracts for campaignmap."""

from campaignmap.contracts.audit import AuditAction, AuditEntry, AuditSink, normalize_actor, sanitize_message
from campaignmap.contracts.config import AuditMode, CampaignMapConfig, ClientConfig, ServerConfig
from campaignmap.contracts.exceptions import (
    ApiError,
    AuditError,
    CampaignMapError,
    ConfigError,
    MarkerNotFoundError,
    PersistenceError,
)
from campaignmap.contracts.marker import (
    PATCHABLE_FIELDS,
    CreateMarkerInput,
    Marker,
    MarkerCollection,
    MarkerType,
    PatchMarkerInput,
    round_coordinate,
    type_color,
)
from campaignmap.contracts.store import MarkerStore
from campaignmap.contracts.view import LoggingNotifier, MarkerView, Notifier, NullMarkerView

__all__ = [
    "PATCHABLE_FIELDS",
    "ApiError",
    "AuditAction",
    "AuditEntry",
    "AuditError",
    "AuditMode",
    "AuditSink",
    "CampaignMapConfig",
    "CampaignMapError",
    "ClientConfig",
    "ConfigError",
    "CreateMarkerInput",
    "LoggingNotifier",
    "Marker",
    "MarkerCollection",
    "MarkerNotFoundError",
    "MarkerStore",
    "MarkerType",
    "MarkerView",
    "Notifier",
    "NullMarkerView",
    "PatchMarkerInput",
    "PersistenceError",
    "ServerConfig",
    "normalize_actor",
    "round_coordinate",
    "sanitize_message",
    "type_color",
]
