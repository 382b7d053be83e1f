"""Client-side presentation contracts.

Rendering pins, projecting coordinates and prompting the user all live
outside this package. The sync engine only talks to these two seams.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from campaignmap.contracts.marker import Marker

_LOG = logging.getLogger(__name__)


class MarkerView(ABC):
    @abstractmethod
    def add(self, marker: Marker) -> None: ...  # pragma: no cover

    @abstractmethod
    def move(self, marker_id: str, x: float, y: float) -> None: ...  # pragma: no cover

    @abstractmethod
    def refresh(self, marker: Marker) -> None:
        """Regenerate the visual representation from the marker's metadata."""

    @abstractmethod
    def remove(self, marker_id: str) -> None: ...  # pragma: no cover


class NullMarkerView(MarkerView):
    def add(self, marker: Marker) -> None:
        return None

    def move(self, marker_id: str, x: float, y: float) -> None:
        return None

    def refresh(self, marker: Marker) -> None:
        return None

    def remove(self, marker_id: str) -> None:
        return None


class Notifier(ABC):
    @abstractmethod
    def warn(self, message: str) -> None: ...  # pragma: no cover


class LoggingNotifier(Notifier):
    def warn(self, message: str) -> None:
        _LOG.warning("%s", message)
