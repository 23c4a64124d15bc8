#Purpose: The OSRM "adapter/client".
#Sole responsibility: talk to OSRM via HTTP and return normalized outputs.
#Encapsulates OSRM-specific details:
#coordinate formatting (lon,lat)
#URL construction (/route)
#error handling (provider codes vs transport failures)
#parsing response JSON into your internal shape
#It should not contain geocoding or journey rules.


from dotenv import load_dotenv
import logging
import math
import os
from typing import List, Tuple, Dict, Optional
import requests

# Read OSRM base URL from environment
# Example in .env:
# OSRM_BASE_URL=http://router.project-osrm.org
load_dotenv()
BASE_URL = os.getenv("OSRM_BASE_URL", "http://router.project-osrm.org")
USER_AGENT = os.getenv("HEGGEO_USER_AGENT", "HegGeoApp/1.0 (https://heggeo.netlify.app; for_learning_purposes)")

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]

logger = logging.getLogger(__name__)


class OSRMError(Exception):
    """OSRM answered, but with no usable route (code != "Ok" or no routes)."""

    def __init__(self, code: Optional[str], message: Optional[str] = None):
        self.code = code
        self.message = message
        super().__init__(message or f"No route found or API error: {code}")


class RoutingTransportError(Exception):
    """The OSRM call could not be completed at all."""
    pass


class OSRMClient:
    """
    OSRM Adapter / Client

    Sole responsibility:
    - Talk to OSRM via HTTP
    - Convert internal (lat, lon) → OSRM (lon,lat)
    - Return normalized outputs

    """
    def __init__(self, profile: str = "driving", timeout: int = 10,
                 base_url: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or BASE_URL or "").rstrip("/")
        self.timeout = timeout #the time to wait for a response from OSRM before giving up
        self.profile = profile #the mode of transportation (driving, walking, cycling)
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("OSRM base URL not set. Please set OSRM_BASE_URL in the .env file.")

    #----------------
    # Internal helper methods for coordinate formatting
    #----------------
    def format_coordinates(self, coords: List[LatLon]) -> str:
        """Convert list of (lat, lon) to OSRM format 'lon,lat;lon,lat;...'"""
        return ';'.join([f"{lon},{lat}" for lat, lon in coords])

    #----------------
    # Public methods
    #----------------
    def compute_route(self, coordinates: List[LatLon]) -> Dict[str, float]:
        """
        calls the OSRM /route endpoint with the given coordinates and
        returns a dict with distance and duration of the first route

        Returns:
            {
                "distance": float, # in meters
                "duration": float, # in seconds
            }
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required to compute a route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{self.format_coordinates(coordinates)}"

        try:
            response = self.session.get(
                url,
                params={
                    # only aggregate distance/duration are consumed
                    "overview": "false",
                    "alternatives": "false",
                    "steps": "false",
                    "annotations": "false",
                },
                headers={"User-Agent": USER_AGENT},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RoutingTransportError(f"OSRM request failed: {e}") from e

        # OSRM reports NoRoute / InvalidQuery with a JSON body on 4xx as well
        try:
            data = response.json()
        except ValueError:
            data = None

        if not isinstance(data, dict) or "code" not in data:
            logger.error("OSRM returned HTTP %s without a routing payload", response.status_code)
            raise RoutingTransportError(f"Failed to get directions from OSRM: HTTP {response.status_code}")

        #validating OSRM response
        routes = data.get("routes") or []
        if data.get("code") != "Ok" or not routes:
            logger.error("OSRM no route: code=%s message=%s", data.get("code"), data.get("message"))
            raise OSRMError(data.get("code"), data.get("message"))

        #take the first route (OSRM may return multiple routes) and normalize output to internal format
        try:
            route = routes[0]
            distance = float(route["distance"])
            duration = float(route["duration"])
            if not (math.isfinite(distance) and math.isfinite(duration)):
                raise ValueError("distance/duration")
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("OSRM returned a malformed route: %r", data.get("routes"))
            raise RoutingTransportError(f"OSRM returned a malformed route: missing or invalid {e}") from e

        return {
            "distance": distance,
            "duration": duration,
        }
