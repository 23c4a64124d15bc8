"""
Purpose: Journey lookup orchestration (the "glue" between geocoding and routing).
What it does:
Takes two free-form location descriptors (address, place name or "lat,lon"),
resolves both to coordinates + display names, then asks OSRM for the driving
distance and duration between them.

Flow:
1. resolve source and destination concurrently
   - "lat,lon" -> reverse lookup for a name only (falls back to a coordinates label)
   - free text -> forward search, first match wins, no match is a hard failure
2. one OSRM /route call, only once both endpoints are resolved
3. first route -> JourneyDetails

Rule: Stateless and single-shot. No retries; failures are surfaced to the caller.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from geocoding.coordinates import describe_location, parse_coordinates
from geocoding.nominatim_client import GeocodingError
from .osrm_client import OSRMError, RoutingTransportError

logger = logging.getLogger(__name__)

SOURCE = "source"
DESTINATION = "destination"

NO_ROUTE_FALLBACK = "No route found between the given locations."


class JourneyException(Exception):
    """Base class for journey lookup failures. `str(e)` is the user-facing message."""
    kind = "JourneyError"


class UnresolvedLocationException(JourneyException):
    kind = "UnresolvedLocation"

    def __init__(self, side: str, descriptor: str):
        self.side = side
        self.descriptor = descriptor
        if descriptor and descriptor.strip():
            message = f"Could not find coordinates for {side}: {descriptor}"
        else:
            message = f"A {side} location is required."
        super().__init__(message)


class NoRouteException(JourneyException):
    kind = "NoRoute"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or NO_ROUTE_FALLBACK)


class TransportFailureException(JourneyException):
    kind = "TransportFailure"

    def __init__(self, stage: str, detail: Optional[str] = None):
        self.stage = stage
        self.detail = detail
        message = f"An unexpected error occurred while {stage}"
        super().__init__(f"{message}: {detail}" if detail else f"{message}.")


@dataclass(frozen=True)
class ResolvedEndpoint:
    latitude: float
    longitude: float
    display_name: str

    @property
    def location(self):
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class JourneyDetails:
    distance_m: float # in meters
    duration_s: int # whole seconds
    source_name: str
    destination_name: str


@dataclass(frozen=True)
class JourneyOutcome:
    """
    One output shape for callers: either `details` or a single `error` message.
    """
    details: Optional[JourneyDetails] = None
    error: Optional[str] = None
    kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.details is not None


class JourneyService:
    """
    Geocode both ends, then route between them.

    `geocoder` needs search(text) and reverse(lat, lon) (e.g. NominatimClient);
    `router` needs compute_route([(lat, lon), (lat, lon)]) (e.g. OSRMClient).
    """
    def __init__(self, geocoder, router, max_workers: int = 2):
        self.geocoder = geocoder
        self.router = router
        self.max_workers = max_workers

    def resolve(self, descriptor: str, side: str = SOURCE) -> ResolvedEndpoint:
        descriptor = (descriptor or "").strip()
        if not descriptor:
            raise UnresolvedLocationException(side, descriptor)

        coordinates = parse_coordinates(descriptor)
        if coordinates is not None:
            latitude, longitude = coordinates
            # already resolved; the reverse lookup only supplies a name
            return ResolvedEndpoint(latitude, longitude, describe_location(self.geocoder, latitude, longitude))

        try:
            places = self.geocoder.search(descriptor)
        except GeocodingError as e:
            logger.error("Forward geocoding failed for %s %r: %s", side, descriptor, e)
            raise TransportFailureException(f"looking up the {side} location", str(e)) from e

        if not places:
            raise UnresolvedLocationException(side, descriptor)

        place = places[0]
        return ResolvedEndpoint(place.latitude, place.longitude, place.display_name)

    def calculate(self, source: str, destination: str) -> JourneyDetails:
        """
        Raises UnresolvedLocationException, NoRouteException or TransportFailureException.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            source_future = pool.submit(self.resolve, source, SOURCE)
            destination_future = pool.submit(self.resolve, destination, DESTINATION)
            # source errors are reported first when both sides fail
            source_end = source_future.result()
            destination_end = destination_future.result()

        try:
            route = self.router.compute_route([source_end.location, destination_end.location])
        except OSRMError as e:
            raise NoRouteException(e.message) from e
        except RoutingTransportError as e:
            logger.error("Routing failed: %s", e)
            raise TransportFailureException("fetching directions", str(e)) from e

        return JourneyDetails(
            distance_m=float(route["distance"]),
            duration_s=math.floor(float(route["duration"]) + 0.5),
            source_name=source_end.display_name,
            destination_name=destination_end.display_name,
        )

    def lookup(self, source: str, destination: str) -> JourneyOutcome:
        """
        Same as calculate(), with failures folded into a JourneyOutcome.
        """
        try:
            details = self.calculate(source, destination)
        except JourneyException as e:
            return JourneyOutcome(error=str(e), kind=e.kind)
        return JourneyOutcome(details=details)
