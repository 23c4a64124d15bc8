"""
Purpose: Central configuration for Marker lifespans.
What it does:

Stores the tunables used when dropping a Geo:

MIN_LIFESPAN_MINUTES = 5
MAX_LIFESPAN_MINUTES = 120
DEFAULT_LIFESPAN_MINUTES = 60

Rule: No lifecycle logic here, only parameters and the minute -> lifespan mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from .models import Bounded, Lifespan

MINUTE_MS = 60 * 1000


@dataclass(frozen=True)
class MarkerPolicy:
    """
    Central configuration for marker lifespans.
    """

    # --- Lifespan range offered when dropping a Geo ---
    min_lifespan_minutes: int = 5
    max_lifespan_minutes: int = 120  # 2 hours
    default_lifespan_minutes: int = 60

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.min_lifespan_minutes <= 0:
            raise ValueError("min_lifespan_minutes must be > 0")

        if self.max_lifespan_minutes < self.min_lifespan_minutes:
            raise ValueError("max_lifespan_minutes must be >= min_lifespan_minutes")

        if not (self.min_lifespan_minutes <= self.default_lifespan_minutes <= self.max_lifespan_minutes):
            raise ValueError("default_lifespan_minutes must lie within the lifespan range")

    def lifespan_for_minutes(self, minutes: int) -> Lifespan:
        if not (self.min_lifespan_minutes <= minutes <= self.max_lifespan_minutes):
            raise ValueError(
                f"lifespan must be between {self.min_lifespan_minutes} and "
                f"{self.max_lifespan_minutes} minutes, got {minutes}"
            )
        return Bounded(minutes * MINUTE_MS)

    def lifespan_from_fraction(self, fraction: float) -> Lifespan:
        """
        Maps a slider position in [0, 1] onto the lifespan range, rounded to whole minutes.
        """
        if not 0.0 <= fraction <= 1.0:
            raise ValueError("fraction must be within [0, 1]")
        span = self.max_lifespan_minutes - self.min_lifespan_minutes
        minutes = math.floor(self.min_lifespan_minutes + fraction * span + 0.5)  # half rounds up
        return self.lifespan_for_minutes(minutes)

    def default_lifespan(self) -> Lifespan:
        return self.lifespan_for_minutes(self.default_lifespan_minutes)


def default_marker_policy() -> MarkerPolicy:
    """
    Convenience factory for the default policy.
    """
    p = MarkerPolicy()
    p.validate()
    return p
