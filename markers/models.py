"""
Purpose: Domain models for the Markers capability.
What it does:
- Defines the Marker ("Geo") a user drops at their current position
- Defines the lifespan variant: Bounded(duration_ms) | Unbounded
- Converts markers to and from the persisted JSON record

Rule: No timers, no storage access. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union
import math
import uuid

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class Bounded:
    """
    A lifespan that ends `duration_ms` milliseconds after creation.
    """
    duration_ms: int

    def __post_init__(self):
        if self.duration_ms <= 0:
            raise ValueError("duration_ms must be > 0")


@dataclass(frozen=True)
class Unbounded:
    """
    A lifespan with no expiry.
    """


UNBOUNDED = Unbounded()

Lifespan = Union[Bounded, Unbounded]


def lifespan_to_json(lifespan: Lifespan) -> Optional[int]:
    # unbounded is stored as null
    if isinstance(lifespan, Unbounded):
        return None
    return lifespan.duration_ms


def _finite_float(value: Any, field_name: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{field_name} must be finite, got {value!r}")
    return number


def _finite_int(value: Any, field_name: str) -> int:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{field_name} must be finite, got {value!r}")
    return int(number)


def lifespan_from_json(value: Any) -> Lifespan:
    if value is None:
        return UNBOUNDED
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"lifespan must be a number or null, got {value!r}")
    return Bounded(_finite_int(value, "lifespan"))


def coerce_lifespan(value: Union[Lifespan, int, None]) -> Lifespan:
    """
    Accepts a lifespan variant, a plain number of milliseconds, or None (unbounded).
    """
    if isinstance(value, (Bounded, Unbounded)):
        return value
    return lifespan_from_json(value)


@dataclass(frozen=True)
class Marker:
    """
    The single active Geo: where it was dropped, when, and for how long.
    """

    id: str
    latitude: float
    longitude: float
    created_at_ms: int
    lifespan: Lifespan = UNBOUNDED

    @property
    def location(self) -> LatLon:
        return (self.latitude, self.longitude)

    def expires_at_ms(self) -> Optional[int]:
        if isinstance(self.lifespan, Unbounded):
            return None
        return self.created_at_ms + self.lifespan.duration_ms

    def remaining_ms(self, now_ms: int) -> Optional[int]:
        """
        Milliseconds until expiry, clamped at 0. None for an unbounded marker.
        """
        expires_at = self.expires_at_ms()
        if expires_at is None:
            return None
        return max(0, expires_at - now_ms)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "createdAt": self.created_at_ms,
            "lifespanMs": lifespan_to_json(self.lifespan),
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> Marker:
        """
        Rebuild a Marker from its persisted record.

        Older records used `timestamp` / `lifespan` instead of
        `createdAt` / `lifespanMs`; both spellings are accepted.
        Raises KeyError, TypeError or ValueError on a malformed record.
        """
        if not isinstance(record, dict):
            raise TypeError(f"marker record must be an object, got {type(record).__name__}")

        created_at = record["createdAt"] if "createdAt" in record else record["timestamp"]
        if "lifespanMs" in record:
            lifespan_value = record["lifespanMs"]
        else:
            lifespan_value = record["lifespan"]

        marker_id = record["id"]
        if not isinstance(marker_id, str) or not marker_id:
            raise ValueError("marker id must be a non-empty string")

        return cls(
            id=marker_id,
            latitude=_finite_float(record["latitude"], "latitude"),
            longitude=_finite_float(record["longitude"], "longitude"),
            created_at_ms=_finite_int(created_at, "createdAt"),
            lifespan=lifespan_from_json(lifespan_value),
        )

    @staticmethod
    def new(location: LatLon, lifespan: Lifespan, now_ms: int) -> Marker:
        latitude, longitude = location
        return Marker(
            id=str(uuid.uuid4()),
            latitude=float(latitude),
            longitude=float(longitude),
            created_at_ms=now_ms,
            lifespan=lifespan,
        )


def is_expired(marker: Marker, now_ms: int) -> bool:
    """
    True once `now_ms >= created_at + duration`. Unbounded markers never expire.
    """
    expires_at = marker.expires_at_ms()
    if expires_at is None:
        return False
    return now_ms >= expires_at
