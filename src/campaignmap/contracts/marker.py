"""Marker contracts and write-path normalization."""

from __future__ import annotations

import math
import uuid
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

PATCHABLE_FIELDS = ("x", "y", "name", "type", "color", "avatar", "notes")

_TWO_PLACES = Decimal("0.01")
_NO_FRACTION = 1e15


class MarkerType(StrEnum):
    PLAYER = "player"
    LOCATION = "location"
    EVENT = "event"


TYPE_COLORS: dict[MarkerType, str] = {
    MarkerType.PLAYER: "#2563eb",
    MarkerType.LOCATION: "#16a34a",
    MarkerType.EVENT: "#f97316",
}


def type_color(marker_type: MarkerType | str) -> str:
    return TYPE_COLORS[coerce_type(marker_type)]


def coerce_type(value: Any) -> MarkerType:
    """Map any incoming type value onto a known type, falling back to ``player``."""
    if isinstance(value, str):
        try:
            return MarkerType(value.strip().lower())
        except ValueError:
            pass
    return MarkerType.PLAYER


def is_coordinate(value: Any) -> bool:
    """True for finite numbers that fit in a float. Booleans are not coordinates."""
    if not isinstance(value, int | float) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def round_coordinate(value: float) -> float:
    """Round half-up to two decimals.

    Works on the shortest decimal repr of the float so ``100.005`` becomes
    ``100.01`` rather than the ``100.0`` binary rounding would produce.
    Magnitudes of ``1e15`` and above carry no hundredths and are returned as is.
    """
    value = float(value)
    if abs(value) >= _NO_FRACTION:
        return value
    return float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def new_marker_id() -> str:
    return uuid.uuid4().hex


class Marker(BaseModel):
    id: str
    x: float = 0.0
    y: float = 0.0
    name: str = ""
    type: MarkerType = MarkerType.PLAYER
    color: str = ""
    avatar: str = ""
    notes: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _collapse_type(cls, value: Any) -> MarkerType:
        return coerce_type(value)

    @model_validator(mode="after")
    def _fill_defaults(self) -> Marker:
        if not self.name:
            self.name = self.id
        if not self.color:
            self.color = type_color(self.type)
        return self

    def display_name(self) -> str:
        return self.name or self.id

    def metadata_key(self) -> tuple[str, str, str, str]:
        """Fields drawn in the pin. ``notes`` is not drawn."""
        return (self.name, self.type.value, self.color, self.avatar)


class MarkerCollection(BaseModel):
    markers: list[Marker] = Field(default_factory=list)

    def index_of(self, marker_id: str) -> int | None:
        for index, marker in enumerate(self.markers):
            if marker.id == marker_id:
                return index
        return None

    def ids(self) -> set[str]:
        return {marker.id for marker in self.markers}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class CreateMarkerInput(BaseModel):
    """Lenient create payload: bad values fall back to defaults instead of failing."""

    id: str | None = None
    name: str = ""
    type: MarkerType = MarkerType.PLAYER
    x: float = 0.0
    y: float = 0.0
    color: str = ""
    avatar: str = ""
    notes: str = ""

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> str | None:
        if value is None or value == "" or isinstance(value, bool):
            return None
        return str(value)

    @field_validator("x", "y", mode="before")
    @classmethod
    def _normalize_coordinate(cls, value: Any) -> float:
        return float(value) if is_coordinate(value) else 0.0

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> MarkerType:
        return coerce_type(value)

    @field_validator("name", "color", "avatar", "notes", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> str:
        return _text(value)

    @classmethod
    def from_payload(cls, payload: Any) -> CreateMarkerInput:
        return cls.model_validate(payload if isinstance(payload, dict) else {})

    def to_marker(self, marker_id: str) -> Marker:
        name = self.name.strip() or marker_id
        return Marker(
            id=marker_id,
            x=round_coordinate(self.x),
            y=round_coordinate(self.y),
            name=name,
            type=self.type,
            color=self.color.strip() or type_color(self.type),
            avatar=self.avatar.strip(),
            notes=self.notes,
        )


class PatchMarkerInput(BaseModel):
    """Allow-listed partial update. Anything outside the allow-list is dropped."""

    x: float | None = None
    y: float | None = None
    name: str | None = None
    type: MarkerType | None = None
    color: str | None = None
    avatar: str | None = None
    notes: str | None = None

    model_config = {"extra": "ignore"}

    @classmethod
    def from_payload(cls, payload: Any) -> PatchMarkerInput:
        if not isinstance(payload, dict):
            return cls()
        fields: dict[str, Any] = {}
        for key in PATCHABLE_FIELDS:
            value = payload.get(key)
            if value is None:
                continue
            if key in ("x", "y"):
                if not is_coordinate(value):
                    continue
                fields[key] = round_coordinate(value)
            elif key == "type":
                fields[key] = coerce_type(value)
            else:
                fields[key] = _text(value)
        return cls(**fields)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def apply_to(self, marker: Marker) -> Marker:
        """Return *marker* with the changes applied, re-running the defaults for blank name or color."""
        return Marker.model_validate({**marker.model_dump(), **self.changes()})
