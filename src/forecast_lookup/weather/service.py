"""Weather gateway: cached access to current conditions and forecasts."""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from pydantic import TypeAdapter, ValidationError

from forecast_lookup.config import GatewayConfig
from forecast_lookup.logging_config import log_failure
from forecast_lookup.weather.cache import WeatherCache
from forecast_lookup.weather.client import OpenWeatherClient
from forecast_lookup.weather.errors import (
    InvalidLocationError, LocationNotFoundError, WeatherAppError
)
from forecast_lookup.weather.geocoding import GeocodingService
from forecast_lookup.weather.models import (
    Coordinates, Payload, WeatherData, WeatherError, WeatherResult, decode_payload
)
from forecast_lookup.weather.validation import is_valid_coordinates

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE = "Weather service temporarily unavailable"

CURRENT = "current"
FORECAST = "forecast"

_payload_adapter = TypeAdapter(Payload)


def cache_key(kind: str, lat: float, lon: float) -> str:
    """Cache key for a coordinate-based payload, e.g. ``current:37.7749:-122.4194``."""
    return f"{kind}:{lat}:{lon}"


def zip_cache_key(zip_code: str) -> str:
    return f"zip:{zip_code}"


def _decode_cached(cached: Optional[str], key: str, decode: Callable[[str], Any]) -> Any:
    """Decode a cached entry; an undecodable one counts as a miss."""
    if cached is None:
        return None
    try:
        return decode(cached)
    except ValidationError as e:
        logger.warning(f"Ignoring undecodable cache entry {key}: {e.error_count()} validation errors")
        return None


class WeatherGateway:
    """Fetches weather payloads through the cache."""

    def __init__(
        self,
        config: GatewayConfig,
        cache: WeatherCache,
        client: Optional[OpenWeatherClient] = None,
        geocoding_service: Optional[GeocodingService] = None
    ):
        """Initialize the gateway.

        Args:
            config: Gateway settings, cache TTL included
            cache: Cache store for payloads and combined zip results
            client: Weather client instance (creates default if None)
            geocoding_service: Geocoding service instance (creates default if None)
        """
        self.config = config
        self.cache = cache
        self.client = client or OpenWeatherClient(config)
        self.geocoding_service = geocoding_service or GeocodingService()

    async def get_current(self, coords: Coordinates) -> Union[WeatherData, WeatherError]:
        """Current conditions for the coordinates.

        Raises:
            InvalidLocationError: If the coordinates are out of range
            ApiError: If the weather API rejects the request
            httpx.TransportError: If the request could not be completed
        """
        return await self._cached_fetch(CURRENT, coords, self.client.get_current)

    async def get_forecast(self, coords: Coordinates) -> Union[WeatherData, WeatherError]:
        """5-day / 3-hour forecast for the coordinates.

        Raises:
            InvalidLocationError: If the coordinates are out of range
            ApiError: If the weather API rejects the request
            httpx.TransportError: If the request could not be completed
        """
        return await self._cached_fetch(FORECAST, coords, self.client.get_forecast)

    async def is_cached(self, kind: str, coords: Coordinates) -> bool:
        return await self.cache.exists(cache_key(kind, coords.lat, coords.lon))

    async def get_by_zip(self, zip_code: Optional[str]) -> WeatherResult:
        """Current conditions and forecast for a zip code.

        A cached combined result is returned as a copy flagged ``from_cache``.
        Failures are reported in the result's ``error`` field, never raised.

        Args:
            zip_code: US zip code

        Returns:
            WeatherResult with data or an error message
        """
        key = zip_cache_key(zip_code or "")

        try:
            cached = _decode_cached(await self.cache.get(key), key, WeatherResult.model_validate_json)
            if cached is not None:
                logger.info(f"Serving weather for zip {zip_code} from cache")
                return cached.model_copy(update={"from_cache": True})

            if not zip_code or not zip_code.strip():
                raise InvalidLocationError("Zip code cannot be blank")

            coordinates = self._coordinates_for_zip(zip_code)
            current = await self.get_current(coordinates)
            forecast = await self.get_forecast(coordinates)

            result = WeatherResult(
                current=current,
                forecast=forecast,
                coordinates=coordinates,
                from_cache=False
            )
            await self.cache.set(key, result.model_dump_json(), self.config.cache_ttl)
            return result

        except WeatherAppError as e:
            log_failure(logger, f"Failed to get weather by zip code {zip_code}", e)
            return WeatherResult.failure(str(e))
        except Exception as e:
            log_failure(logger, f"Unexpected error getting weather by zip code {zip_code}", e)
            return WeatherResult.failure(SERVICE_UNAVAILABLE)

    def _coordinates_for_zip(self, zip_code: str) -> Coordinates:
        results = self.geocoding_service.search(zip_code)
        if not results:
            raise LocationNotFoundError(f"Location not found for zip code: {zip_code}")
        return results[0]

    async def _cached_fetch(
        self,
        kind: str,
        coords: Coordinates,
        fetch: Callable[[float, float], Awaitable[Dict]]
    ) -> Union[WeatherData, WeatherError]:
        if not is_valid_coordinates(coords.lat, coords.lon):
            raise InvalidLocationError(
                "Invalid coordinates: latitude must be between -90 and 90, "
                "longitude between -180 and 180"
            )

        key = cache_key(kind, coords.lat, coords.lon)
        cached = _decode_cached(await self.cache.get(key), key, _payload_adapter.validate_json)
        if cached is not None:
            return cached

        logger.info(f"Fetching {kind} weather for lat={coords.lat}, lon={coords.lon}")
        payload = decode_payload(await fetch(coords.lat, coords.lon))
        await self.cache.set(key, payload.model_dump_json(), self.config.cache_ttl)
        return payload

    async def aclose(self):
        """Close the weather client."""
        try:
            await self.client.aclose()
        except Exception as e:
            logger.error(f"Error closing weather client: {e}")
