"""Whole-document JSON persistence for the marker collection."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from campaignmap.contracts.exceptions import PersistenceError
from campaignmap.contracts.marker import MarkerCollection
from campaignmap.contracts.store import MarkerStore

_LOG = logging.getLogger(__name__)


class JsonFileStore(MarkerStore):
    """Stores ``{"markers": [...]}`` in a single file.

    Every save replaces the whole document: the payload is written to a
    sibling ``.tmp`` file, fsynced, then moved over the target with
    ``os.replace``. A failed save leaves the previous document in place.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> MarkerCollection:
        if not self._path.exists():
            return MarkerCollection()
        try:
            payload: Any = json.loads(self._path.read_text(encoding="utf-8"))
            return MarkerCollection.model_validate(payload)
        except OSError as exc:
            raise PersistenceError(f"failed reading marker data: {self._path}") from exc
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"invalid JSON in marker data: {self._path}") from exc
        except ValidationError as exc:
            raise PersistenceError(f"invalid marker data in {self._path}: {exc}") from exc

    def save(self, collection: MarkerCollection) -> None:
        data = json.dumps(collection.model_dump(mode="json"), indent=2, ensure_ascii=False)
        tmp_path = Path(f"{self._path}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise PersistenceError(f"failed to persist marker data: {self._path}") from exc
        _LOG.debug("Saved %d markers to %s", len(collection.markers), self._path)
