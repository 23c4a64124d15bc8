"""
Purpose: Customer-facing text for distances, durations and Geo countdowns.
"""

from __future__ import annotations

from typing import Optional

from markers.models import Lifespan, Unbounded


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{meters:.1f} meters"
    return f"{meters / 1000:.2f} km"


def format_duration(total_seconds: float) -> str:
    """
    3725 -> "1 hr 2 min 5 sec". Zero-valued units are dropped, except that a
    zero total still reads "0 sec".
    """
    total_seconds = int(total_seconds)
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    parts = []
    if hours > 0:
        parts.append(f"{hours} hr")
    if minutes > 0:
        parts.append(f"{minutes} min")
    if seconds > 0 or not parts:
        parts.append(f"{seconds} sec")
    return " ".join(parts)


def format_time_remaining(remaining_ms: Optional[int]) -> str:
    """
    Countdown text for the active Geo. None means the Geo never expires.
    """
    if remaining_ms is None:
        return "No Expiry"
    if remaining_ms <= 0:
        return "Expired"
    total_seconds = remaining_ms // 1000
    return f"{total_seconds // 60:02d}m {total_seconds % 60:02d}s"


def format_lifespan(lifespan: Lifespan) -> str:
    if isinstance(lifespan, Unbounded):
        return "Indefinite"
    return f"{int(lifespan.duration_ms / 60000 + 0.5)} minutes"
