"""Geocoding service for location lookups."""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.geocoders import Nominatim

from forecast_lookup.config import GEOCODING_TIMEOUT, GEOCODING_USER_AGENT
from forecast_lookup.weather.errors import GeocodingError
from forecast_lookup.weather.models import Coordinates

logger = logging.getLogger(__name__)

CITY_FIELDS = ("city", "town", "village", "municipality", "county")


class GeocodingService:
    """Resolves free-text addresses and zip codes to coordinates."""

    def __init__(self, geolocator: Optional[Any] = None, max_results: int = 5):
        """Initialize the geocoding service.

        Args:
            geolocator: geopy geocoder (creates a Nominatim instance if None)
            max_results: Upper bound on matches requested from the provider
        """
        # Reuse instance for performance
        self.geolocator = geolocator or Nominatim(
            user_agent=GEOCODING_USER_AGENT,
            timeout=GEOCODING_TIMEOUT
        )
        self.max_results = max_results
        logger.info("GeocodingService initialized with Nominatim")

    def search(self, query: str) -> List[Coordinates]:
        """Look up a free-text location.

        Args:
            query: Address or zip code

        Returns:
            Matches ordered best first; empty when nothing matched

        Raises:
            GeocodingError: If the geocoding provider fails
        """
        if not query or not query.strip():
            return []
        return list(self._lookup(query.strip()))

    @lru_cache(maxsize=1000)
    def _lookup(self, query: str) -> Tuple[Coordinates, ...]:
        try:
            logger.info(f"Geocoding query: {query}")
            locations = self.geolocator.geocode(
                query,
                exactly_one=False,
                addressdetails=True,
                limit=self.max_results
            )
            results = tuple(self._to_coordinates(location) for location in locations or ())
        except (GeocoderUnavailable, GeocoderTimedOut) as e:
            logger.error(f"Geocoding service unavailable for '{query}': {e}")
            raise GeocodingError("Geocoding service temporarily unavailable")
        except GeocoderServiceError as e:
            logger.error(f"Geocoding provider error for '{query}': {e}")
            raise GeocodingError(f"Failed to geocode location: {e}")
        except Exception as e:
            logger.error(f"Unexpected error geocoding '{query}': {e}")
            raise GeocodingError(f"Failed to geocode location: {e}")

        if not results:
            logger.info(f"No geocoding match for '{query}'")
            return ()

        best = results[0]
        logger.info(f"Successfully geocoded '{query}' to ({best.lat}, {best.lon})")
        return results

    @staticmethod
    def _to_coordinates(location: Any) -> Coordinates:
        raw = getattr(location, "raw", None) or {}
        address: Dict[str, Any] = raw.get("address") or {}
        city = next((address[field] for field in CITY_FIELDS if address.get(field)), None)

        return Coordinates(
            lat=location.latitude,
            lon=location.longitude,
            city=city,
            state=address.get("state"),
            country=address.get("country")
        )
