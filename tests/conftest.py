"""
Shared fixtures for the forecast lookup test suite.

Nothing here touches the network: OpenWeatherMap is served by an
httpx.MockTransport, Redis by an in-memory double and Nominatim by a mock.
"""

from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import httpx
import pytest

from forecast_lookup.config import GatewayConfig
from forecast_lookup.weather.cache import WeatherCache
from forecast_lookup.weather.client import OpenWeatherClient
from forecast_lookup.weather.geocoding import GeocodingService
from forecast_lookup.weather.models import Coordinates
from forecast_lookup.weather.service import WeatherGateway

BASE_URL = "https://api.test/data/2.5"

SF_LAT = 37.7749
SF_LON = -122.4194


# ---------------------------------------------------------------------------
# Payload factories
# ---------------------------------------------------------------------------

def make_current_payload(
    temp: float = 18.4,
    temp_min: float = 15.2,
    temp_max: float = 21.6,
    description: str = "clear sky",
    name: str = "San Francisco",
) -> Dict[str, Any]:
    """OpenWeatherMap /weather response body."""
    return {
        "coord": {"lon": SF_LON, "lat": SF_LAT},
        "weather": [{"id": 800, "main": "Clear", "description": description, "icon": "01d"}],
        "main": {"temp": temp, "feels_like": temp - 1, "temp_min": temp_min, "temp_max": temp_max, "humidity": 60},
        "name": name,
        "cod": 200,
    }


def make_forecast_entry(dt_txt: str, temp: float, description: str = "light rain", code: int = 500) -> Dict[str, Any]:
    return {
        "dt_txt": dt_txt,
        "main": {"temp": temp, "temp_min": temp, "temp_max": temp},
        "weather": [{"id": code, "main": "Rain", "description": description}],
    }


def make_forecast_payload(entries: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """OpenWeatherMap /forecast response body spanning six days (Fri Jul 26 - Wed Jul 31, 2024)."""
    if entries is None:
        entries = []
        for day, temps in zip(range(26, 32), ([20.5, 25.0], [18.0, 22.4], [15.5, 19.5], [14.0, 16.0], [21.0, 24.5], [10.0, 12.0])):
            entries.append(make_forecast_entry(f"2024-07-{day} 09:00:00", temps[0], "scattered clouds", 802))
            entries.append(make_forecast_entry(f"2024-07-{day} 15:00:00", temps[1], "light rain", 500))
    return {"cod": "200", "message": 0, "cnt": len(entries), "list": entries, "city": {"name": "San Francisco"}}


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class FakeRedis:
    """Dict-backed stand-in for redis.asyncio.Redis."""

    def __init__(self) -> None:
        self.store: Dict[str, bytes] = {}
        self.ttls: Dict[str, Optional[int]] = {}

    async def get(self, key: str) -> Optional[bytes]:
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.store[key] = value.encode("utf-8")
        self.ttls[key] = ex
        return True

    async def exists(self, key: str) -> int:
        return int(key in self.store)

    async def aclose(self) -> None:
        pass


class UpstreamStub:
    """Request handler for httpx.MockTransport mimicking OpenWeatherMap."""

    def __init__(self) -> None:
        self.responses: Dict[str, Tuple[int, Any]] = {
            "/weather": (200, make_current_payload()),
            "/forecast": (200, make_forecast_payload()),
        }
        self.requests: List[httpx.Request] = []
        self.error: Optional[Exception] = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        endpoint = "/" + request.url.path.rsplit("/", 1)[-1]
        status, body = self.responses[endpoint]
        return httpx.Response(status, json=body)

    def calls_to(self, endpoint: str) -> int:
        return sum(1 for request in self.requests if request.url.path.endswith(endpoint))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sf_coordinates() -> Coordinates:
    return Coordinates(lat=SF_LAT, lon=SF_LON, city="San Francisco", state="California", country="United States")


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(api_key="test-key-123", base_url=BASE_URL, timeout=5, cache_ttl=60)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def weather_cache(fake_redis) -> WeatherCache:
    return WeatherCache(fake_redis, prefix="test")


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def weather_client(gateway_config, upstream) -> OpenWeatherClient:
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(upstream))
    return OpenWeatherClient(gateway_config, client=http_client)


@pytest.fixture
def geocoder(sf_coordinates):
    service = MagicMock(spec=GeocodingService)
    service.search.return_value = [sf_coordinates]
    return service


@pytest.fixture
def gateway(gateway_config, weather_cache, weather_client, geocoder) -> WeatherGateway:
    return WeatherGateway(gateway_config, weather_cache, client=weather_client, geocoding_service=geocoder)
