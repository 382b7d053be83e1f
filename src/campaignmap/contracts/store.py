"""Persistence contract: the marker collection is loaded and saved as one unit."""

from __future__ import annotations

from abc import ABC, abstractmethod

from campaignmap.contracts.marker import MarkerCollection


class MarkerStore(ABC):
    @abstractmethod
    def load(self) -> MarkerCollection: ...  # pragma: no cover

    @abstractmethod
    def save(self, collection: MarkerCollection) -> None: ...  # pragma: no cover
