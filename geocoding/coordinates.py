"""
Purpose: Recognize literal "latitude,longitude" descriptors and label coordinates.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from .nominatim_client import GeocodingError

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)"
_PAIR = re.compile(rf"^\s*({_NUMBER})\s*,\s*({_NUMBER})\s*$")


def parse_coordinates(text: str) -> Optional[LatLon]:
    """
    "40.7128,-74.0060" -> (40.7128, -74.006)

    Returns None unless the text is exactly two comma-separated numbers with
    latitude in [-90, 90] and longitude in [-180, 180].
    """
    if not text:
        return None
    match = _PAIR.match(text)
    if not match:
        return None

    latitude, longitude = float(match.group(1)), float(match.group(2))
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        return None
    return (latitude, longitude)


def coordinates_label(latitude: float, longitude: float, precision: int = 4) -> str:
    return f"Coordinates: {latitude:.{precision}f}, {longitude:.{precision}f}"


def describe_location(geocoder, latitude: float, longitude: float, precision: int = 4) -> str:
    """
    Human-readable name for a coordinate pair.
    Falls back to a "Coordinates: lat, lon" label when the reverse lookup fails.
    """
    try:
        name = geocoder.reverse(latitude, longitude)
    except (GeocodingError, ValueError) as e:
        logger.warning("Reverse geocoding failed for %s, %s: %s", latitude, longitude, e)
        name = None

    return name or coordinates_label(latitude, longitude, precision)
