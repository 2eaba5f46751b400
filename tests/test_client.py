"""Tests for the OpenWeatherMap client and response classification."""

import httpx
import pytest

from conftest import SF_LAT, SF_LON, make_current_payload

from forecast_lookup.weather.client import classify_response
from forecast_lookup.weather.errors import ApiError


class TestClassifyResponse:
    def test_ok_returns_body(self):
        body = make_current_payload()
        assert classify_response(httpx.Response(200, json=body)) == body

    def test_invalid_api_key(self):
        with pytest.raises(ApiError) as excinfo:
            classify_response(httpx.Response(401, json={"cod": 401}))
        assert str(excinfo.value) == "Invalid API key"
        assert excinfo.value.status_code == 401

    def test_location_not_found(self):
        with pytest.raises(ApiError, match="^Location not found$"):
            classify_response(httpx.Response(404))

    def test_rate_limited(self):
        with pytest.raises(ApiError, match="rate limit"):
            classify_response(httpx.Response(429))

    @pytest.mark.parametrize("status", [500, 502, 503, 599])
    def test_server_errors(self, status):
        with pytest.raises(ApiError) as excinfo:
            classify_response(httpx.Response(status))
        assert "Service unavailable" in str(excinfo.value)
        assert str(status) in str(excinfo.value)

    def test_other_status_carries_code_and_reason(self):
        with pytest.raises(ApiError) as excinfo:
            classify_response(httpx.Response(403))
        assert str(excinfo.value) == "API Error: 403 - Forbidden"


class TestOpenWeatherClient:
    @pytest.mark.asyncio
    async def test_sends_metric_units_and_key(self, weather_client, upstream):
        await weather_client.get_current(SF_LAT, SF_LON)

        request = upstream.requests[0]
        assert request.url.path == "/data/2.5/weather"
        assert request.url.params["units"] == "metric"
        assert request.url.params["appid"] == "test-key-123"
        assert float(request.url.params["lat"]) == SF_LAT
        assert float(request.url.params["lon"]) == SF_LON

    @pytest.mark.asyncio
    async def test_forecast_endpoint(self, weather_client, upstream):
        body = await weather_client.get_forecast(SF_LAT, SF_LON)
        assert upstream.requests[0].url.path == "/data/2.5/forecast"
        assert len(body["list"]) == 12

    @pytest.mark.asyncio
    async def test_api_error_raised(self, weather_client, upstream):
        upstream.responses["/weather"] = (401, {"cod": 401, "message": "Invalid API key"})
        with pytest.raises(ApiError, match="Invalid API key"):
            await weather_client.get_current(SF_LAT, SF_LON)

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, weather_client, upstream):
        upstream.error = httpx.ConnectError("connection refused")
        with pytest.raises(httpx.TransportError):
            await weather_client.get_current(SF_LAT, SF_LON)

    @pytest.mark.asyncio
    async def test_api_key_not_logged(self, weather_client, caplog):
        caplog.set_level("INFO", logger="forecast_lookup.weather.client")
        await weather_client.get_current(SF_LAT, SF_LON)
        assert "api_call" in caplog.text
        assert "test-key-123" not in caplog.text
