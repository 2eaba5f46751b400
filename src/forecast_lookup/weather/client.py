"""HTTP client for the OpenWeatherMap API."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from forecast_lookup.config import GatewayConfig
from forecast_lookup.weather.errors import ApiError

logger = logging.getLogger(__name__)

CURRENT_ENDPOINT = "/weather"
FORECAST_ENDPOINT = "/forecast"


def classify_response(response: httpx.Response) -> Dict[str, Any]:
    """Turn an API response into its JSON body or an ApiError.

    Args:
        response: Response from the weather API

    Returns:
        Parsed JSON body for a 200 response

    Raises:
        ApiError: For any other status code
    """
    code = response.status_code

    if code == 200:
        return response.json()
    if code == 401:
        raise ApiError("Invalid API key", status_code=code)
    if code == 404:
        raise ApiError("Location not found", status_code=code)
    if code == 429:
        raise ApiError("API rate limit exceeded. Please try again later", status_code=code)
    if 500 <= code <= 599:
        raise ApiError(f"API Error: {code} - Service unavailable", status_code=code)

    raise ApiError(f"API Error: {code} - {response.reason_phrase}", status_code=code)


class OpenWeatherClient:
    """Async client for fetching weather data from OpenWeatherMap."""

    def __init__(self, config: GatewayConfig, client: Optional[httpx.AsyncClient] = None):
        """Initialize the weather client.

        Args:
            config: Gateway settings (API key, base URL, timeout)
            client: Preconfigured httpx client, mainly for tests
        """
        self.config = config
        self.client = client or httpx.AsyncClient(
            base_url=config.base_url,
            headers={"User-Agent": config.user_agent},
            timeout=config.timeout
        )

    async def get_current(self, lat: float, lon: float) -> Dict[str, Any]:
        return await self.fetch(CURRENT_ENDPOINT, lat, lon)

    async def get_forecast(self, lat: float, lon: float) -> Dict[str, Any]:
        return await self.fetch(FORECAST_ENDPOINT, lat, lon)

    async def fetch(self, endpoint: str, lat: float, lon: float) -> Dict[str, Any]:
        """Fetch one endpoint for the given coordinates.

        Args:
            endpoint: API path, /weather or /forecast
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            Raw JSON body

        Raises:
            ApiError: If the API answers with a non-200 status
            httpx.TransportError: If the request could not be completed
        """
        params = {"lat": lat, "lon": lon, "units": "metric"}

        response = await self.client.get(endpoint, params={**params, "appid": self.config.api_key})
        self._log_api_call(endpoint, params, response.status_code)
        return classify_response(response)

    def _log_api_call(self, endpoint: str, params: Dict[str, Any], status_code: int) -> None:
        logger.info(json.dumps({
            "event": "api_call",
            "service": "openweather",
            "endpoint": endpoint,
            "params": params,
            "response_code": status_code,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }))

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
