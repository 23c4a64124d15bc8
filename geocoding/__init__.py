#Marks geocoding as a package.
#Re-exports the Nominatim adapter and the coordinate helpers
#so other modules import from geocoding without knowing internal file names.
#No business logic.

from .nominatim_client import NominatimClient, Place, GeocodingError
from .coordinates import parse_coordinates, coordinates_label, describe_location

__all__ = [
           "NominatimClient",
           "Place",
             "GeocodingError",
             "parse_coordinates",
             "coordinates_label",
             "describe_location",
             ]
