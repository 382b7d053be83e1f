"""Exception hierarchy for campaignmap."""

from __future__ import annotations


class CampaignMapError(Exception):
    """Base exception for all campaignmap errors."""


class ConfigError(CampaignMapError):
    """Configuration loading or validation failure."""


class PersistenceError(CampaignMapError):
    """The marker document could not be read or written."""


class MarkerNotFoundError(CampaignMapError):
    """No marker with the requested id exists."""

    def __init__(self, marker_id: str) -> None:
        super().__init__(f"Marker not found: {marker_id}")
        self.marker_id = marker_id


class AuditError(CampaignMapError):
    """An audit sink failed to record an entry."""


class ApiError(CampaignMapError):
    """A request to the marker service failed.

    Attributes:
        status_code: HTTP status of the failed response, or ``None`` when the
            request never produced a response (connection refused, timeout).
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
