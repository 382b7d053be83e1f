"""Public API surface for campaignmap."""

__version__ = "0.3.0"

from campaignmap.audit import AuditLog, GitAuditSink, LoggingAuditSink, NullAuditSink, create_audit_sink
from campaignmap.client import MapApiClient, MarkerRegistry, MarkerState, ReconcileResult, SyncEngine
from campaignmap.config import load_config
from campaignmap.contracts import (
    ApiError,
    AuditEntry,
    AuditError,
    AuditSink,
    CampaignMapConfig,
    CampaignMapError,
    ClientConfig,
    ConfigError,
    CreateMarkerInput,
    Marker,
    MarkerCollection,
    MarkerNotFoundError,
    MarkerStore,
    MarkerType,
    MarkerView,
    Notifier,
    PatchMarkerInput,
    PersistenceError,
    ServerConfig,
    round_coordinate,
)
from campaignmap.server import MutationPipeline, create_app
from campaignmap.store import JsonFileStore

__all__ = [
    "ApiError",
    "AuditEntry",
    "AuditError",
    "AuditLog",
    "AuditSink",
    "CampaignMapConfig",
    "CampaignMapError",
    "ClientConfig",
    "ConfigError",
    "CreateMarkerInput",
    "GitAuditSink",
    "JsonFileStore",
    "LoggingAuditSink",
    "MapApiClient",
    "Marker",
    "MarkerCollection",
    "MarkerNotFoundError",
    "MarkerRegistry",
    "MarkerState",
    "MarkerStore",
    "MarkerType",
    "MarkerView",
    "MutationPipeline",
    "Notifier",
    "NullAuditSink",
    "PatchMarkerInput",
    "PersistenceError",
    "ReconcileResult",
    "ServerConfig",
    "SyncEngine",
    "__version__",
    "create_app",
    "create_audit_sink",
    "load_config",
    "round_coordinate",
]
