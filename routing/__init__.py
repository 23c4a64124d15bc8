#Marks routing as a package.
#Re-exports clean public APIs (OSRMClient, JourneyService, formatters)
#so other modules import from routing without knowing internal file names.
#No business logic.

from .osrm_client import OSRMClient, OSRMError, RoutingTransportError
from .journey_service import (
    JourneyService,
    JourneyDetails,
    JourneyOutcome,
    ResolvedEndpoint,
    JourneyException,
    UnresolvedLocationException,
    NoRouteException,
    TransportFailureException,
)
from .formatting import format_distance, format_duration, format_time_remaining, format_lifespan

__all__ = [
           "OSRMClient",
           "OSRMError",
             "RoutingTransportError",
             "JourneyService",
             "JourneyDetails",
             "JourneyOutcome",
             "ResolvedEndpoint",
             "JourneyException",
             "UnresolvedLocationException",
             "NoRouteException",
             "TransportFailureException",
             "format_distance",
             "format_duration",
             "format_time_remaining",
             "format_lifespan",
             ]
