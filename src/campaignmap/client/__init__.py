"""Polling client: API wrapper, marker registry and sync engine."""

from campaignmap.client.api import MapApiClient
from campaignmap.client.engine import ReconcileResult, SyncEngine
from campaignmap.client.registry import MarkerChange, MarkerRegistry, MarkerState

__all__ = ["MapApiClient", "MarkerChange", "MarkerRegistry", "MarkerState", "ReconcileResult", "SyncEngine"]
