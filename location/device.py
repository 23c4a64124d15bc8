"""
Purpose: The device's current position, refreshed on demand.
What it does:
Wraps a location source (anything callable returning (lat, lon)) and keeps
the last good fix plus the last error, the way a UI reads a geolocation
service: `location`, `error`, `refresh()`.

Rule: Sources report a missing fix by raising LocationUnavailable; refresh()
records that as `error`. Any other exception from a source is a bug in the
source and propagates.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]

IP_LOOKUP_URL = "https://ipapi.co/json/"


class LocationUnavailable(Exception):
    """The position could not be determined."""
    pass


class StaticLocationSource:
    """
    A fixed position (tests, desktop sessions with a configured home location).
    """
    def __init__(self, latitude: float, longitude: float):
        self.latitude = latitude
        self.longitude = longitude

    def __call__(self) -> LatLon:
        return (self.latitude, self.longitude)


class IPLocationSource:
    """
    Approximate position from the caller's public IP.
    """
    def __init__(self, url: str = IP_LOOKUP_URL, timeout: int = 4,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def __call__(self) -> LatLon:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise LocationUnavailable(f"IP geolocation failed: {e}") from e

        try:
            latitude = float(data["latitude"])
            longitude = float(data["longitude"])
        except (KeyError, TypeError, ValueError) as e:
            raise LocationUnavailable("IP geolocation returned no coordinates") from e

        return (latitude, longitude)


class DeviceLocation:
    def __init__(self, source: Callable[[], LatLon], *, fetch_now: bool = True):
        self.source = source
        self.location: Optional[LatLon] = None
        self.error: Optional[str] = None
        if fetch_now:
            self.refresh()

    def refresh(self) -> Optional[LatLon]:
        """
        Ask the source again. On LocationUnavailable the error is recorded and
        the previous fix is dropped, so callers never act on a stale position.
        """
        self.error = None
        try:
            self.location = self.source()
        except LocationUnavailable as e:
            logger.warning("Error getting location: %s", e)
            self.location = None
            self.error = f"Error getting location: {e}"
        return self.location
