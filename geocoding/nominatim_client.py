#Purpose: The Nominatim "adapter/client".
#Sole responsibility: talk to Nominatim via HTTP and return normalized places.
#Encapsulates Nominatim-specific details:
#identifying User-Agent (required by the usage policy)
#URL construction (/search, /reverse)
#error handling
#parsing response JSON into Place objects
#It should not contain journey or marker rules.


from dotenv import load_dotenv
import logging
import os
from dataclasses import dataclass
from typing import List, Optional
import requests

# Read Nominatim base URL and client tag from environment
# Example in .env:
# NOMINATIM_BASE_URL=https://nominatim.openstreetmap.org
# HEGGEO_USER_AGENT=HegGeoApp/1.0 (https://heggeo.netlify.app)
load_dotenv()
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org")
USER_AGENT = os.getenv("HEGGEO_USER_AGENT", "HegGeoApp/1.0 (https://heggeo.netlify.app; for_learning_purposes)")

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """The geocoding call could not be completed (network, HTTP status or payload)."""
    pass


@dataclass(frozen=True)
class Place:
    latitude: float
    longitude: float
    display_name: str


class NominatimClient:
    """
    Nominatim Adapter / Client

    Sole responsibility:
    - Talk to Nominatim via HTTP
    - Forward search (text -> places) and reverse lookup (lat, lon -> display name)
    """
    def __init__(self, base_url: Optional[str] = None, user_agent: Optional[str] = None,
                 timeout: int = 10, session: Optional[requests.Session] = None):
        self.base_url = (base_url or NOMINATIM_BASE_URL).rstrip("/")
        self.user_agent = user_agent or USER_AGENT
        self.timeout = timeout
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("Nominatim base URL not set. Please set NOMINATIM_BASE_URL in the .env file.")

    #----------------
    # Internal helper
    #----------------
    def _get_json(self, path: str, params: dict):
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(
                url,
                params=params,
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise GeocodingError(f"Nominatim request to /{path} failed: {e}") from e

        if not response.ok:
            logger.error("Nominatim /%s returned HTTP %s: %s", path, response.status_code, response.text[:200])
            raise GeocodingError(f"Nominatim /{path} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise GeocodingError(f"Nominatim /{path} returned a non-JSON body") from e

    #----------------
    # Public methods
    #----------------
    def search(self, text: str, limit: int = 1) -> List[Place]:
        """
        Forward geocoding. Returns an empty list when nothing matched.
        """
        data = self._get_json(
            "search",
            {"q": text, "format": "json", "limit": limit, "addressdetails": 1},
        )
        if not isinstance(data, list):
            raise GeocodingError("Nominatim /search returned an unexpected payload")

        places = []
        for item in data:
            try:
                places.append(
                    Place(
                        latitude=float(item["lat"]),
                        longitude=float(item["lon"]),
                        display_name=item.get("display_name") or text,
                    )
                )
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed Nominatim result for %r: %r", text, item)
        return places

    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        """
        Reverse geocoding. Returns the display name, or None when Nominatim has none.
        """
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise ValueError(f"Invalid coordinates for reverse geocoding: {latitude}, {longitude}")

        data = self._get_json(
            "reverse",
            {"format": "json", "lat": latitude, "lon": longitude, "zoom": 18, "addressdetails": 1},
        )
        if not isinstance(data, dict):
            return None
        return data.get("display_name") or None
