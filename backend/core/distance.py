"""
Distance helpers.

- Haversine straight-line distance in miles
- Parsing of Distance Matrix API responses into {location_id: miles}
- Zip code geocoding through OpenStreetMap Nominatim, with a bounded in-memory cache
"""

import logging
import math
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

from core.config import settings
from core.converters import round_half_up

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3959
METERS_TO_MILES = 0.000621371
GEOCODE_CACHE_SIZE = 1024


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


def _to_radians(degrees: float) -> float:
    return degrees * (math.pi / 180)


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """Great-circle distance between two points, rounded to whole miles."""
    d_lat = _to_radians(lat2 - lat1)
    d_lon = _to_radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(_to_radians(lat1)) * math.cos(_to_radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round_half_up(EARTH_RADIUS_MILES * c)


def meters_to_miles(meters: float) -> int:
    return round_half_up(meters * METERS_TO_MILES)


def parse_distance_matrix(data: dict, location_ids: List[str]) -> Dict[str, int]:
    """Map each destination's location id to driving miles.

    Only elements with status OK and a distance are kept; element order matches
    the destinations that were sent.
    """
    results: Dict[str, int] = {}
    rows = (data or {}).get("rows") or []
    if not rows:
        return results

    elements = rows[0].get("elements") or []
    for index, element in enumerate(elements):
        if index >= len(location_ids):
            break
        if element.get("status") == "OK" and element.get("distance"):
            results[str(location_ids[index])] = meters_to_miles(element["distance"]["value"])
    return results


class ZipGeocoder:
    """Zip code -> coordinates with a bounded, process-local LRU cache."""

    def __init__(self, url: str = None, user_agent: str = None, timeout: float = None,
                 max_entries: int = GEOCODE_CACHE_SIZE):
        self.url = url or settings.geocoder_url
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.timeout = timeout or settings.http_timeout
        self.max_entries = max_entries
        self._cache: "OrderedDict[str, Coordinates]" = OrderedDict()

    def get_cached(self, zip_code: str) -> Optional[Coordinates]:
        coordinates = self._cache.get(zip_code)
        if coordinates is not None:
            self._cache.move_to_end(zip_code)
        return coordinates

    def cache(self, zip_code: str, coordinates: Coordinates) -> None:
        self._cache[zip_code] = coordinates
        self._cache.move_to_end(zip_code)
        while len(self._cache) > self.max_entries:
            self._cache.popitem(last=False)

    def lookup(self, zip_code: str) -> Optional[Coordinates]:
        cached = self.get_cached(zip_code)
        if cached:
            return cached

        try:
            resp = requests.get(
                self.url,
                params={"postalcode": zip_code, "country": "US", "format": "json", "limit": 1},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Error geocoding zip code %s: %s", zip_code, e)
            return None

        if not resp.ok:
            logger.error("Geocoding API error for %s: %s", zip_code, resp.reason)
            return None

        try:
            data = resp.json()
            if not data:
                return None
            coordinates = Coordinates(latitude=float(data[0]["lat"]), longitude=float(data[0]["lon"]))
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("Unreadable geocoding response for %s: %s", zip_code, e)
            return None

        self.cache(zip_code, coordinates)
        return coordinates


geocoder = ZipGeocoder()
