"""API endpoints for the forecast lookup service."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from forecast_lookup.config import (
    CACHE_EXPIRE_SECONDS, RATE_LIMIT_ENABLED, RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW_SECONDS
)
from forecast_lookup.weather.aggregation import format_temperature
from forecast_lookup.weather.models import LocationQuery, WeatherView
from forecast_lookup.weather.orchestrator import WeatherOrchestrator
from forecast_lookup.weather.report import WeatherReport
from forecast_lookup.weather.validation import sanitize_location_input

logger = logging.getLogger(__name__)

CACHE_NOTICE = "Weather data retrieved from cache."

# Create router
router = APIRouter(prefix="/weather", tags=["weather"])


def get_orchestrator(request: Request) -> WeatherOrchestrator:
    """Dependency to get the orchestrator built at startup."""
    return WeatherOrchestrator(request.app.state.gateway)


def build_weather_view(report: WeatherReport) -> WeatherView:
    """Render a successful report for the client."""
    temperature = report.current_temperature()
    return WeatherView(
        location=report.location_name(),
        current_temperature=temperature,
        current_temperature_display=format_temperature(temperature),
        high_low=report.high_low(),
        description=report.description(),
        forecast=report.extended_forecast(),
        from_cache=report.from_cache(),
        notice=CACHE_NOTICE if report.from_cache() else None
    )


@router.get("/", response_model=WeatherView)
async def get_weather(
    address: Optional[str] = Query(None, description="Street address or place name"),
    zip_code: Optional[str] = Query(None, description="US zip code (12345 or 12345-6789)"),
    lat: Optional[float] = Query(None, description="Latitude in decimal degrees (use with lon)"),
    lon: Optional[float] = Query(None, description="Longitude in decimal degrees (use with lat)"),
    orchestrator: WeatherOrchestrator = Depends(get_orchestrator)
):
    """Get current conditions and a 5-day forecast for a location.

    Args:
        address: Street address or place name
        zip_code: US zip code
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees

    Returns:
        WeatherView with current conditions and forecast

    Raises:
        HTTPException: 400 for invalid input, 502 for any other failure
    """
    query = LocationQuery(
        address=sanitize_location_input(address),
        zip_code=sanitize_location_input(zip_code),
        latitude=lat,
        longitude=lon
    )
    location_type = "zip_code" if query.zip_code else "address" if query.address else "coordinates"
    logger.info(f"Weather request started: {location_type}={query.zip_code or query.address or (lat, lon)}")

    result = await orchestrator.run(query)

    if result.error:
        logger.error(f"Weather request failed: {result.error}")
        raise HTTPException(status_code=400 if result.invalid_input else 502, detail=result.error)

    report = result.report
    if report.has_error():
        message = report.error_message() or "Weather data unavailable"
        logger.error(f"Weather request failed: {message}")
        raise HTTPException(status_code=502, detail=message)

    logger.info("Weather request completed successfully")
    return build_weather_view(report)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "forecast-lookup"}


@router.get("/info")
async def get_service_info() -> dict:
    """Get service information.

    Returns:
        Service information including cache and rate limit settings
    """
    return {
        "service": "Forecast Lookup Service",
        "version": "0.1.0",
        "cache_expire_seconds": CACHE_EXPIRE_SECONDS,
        "rate_limit": {
            "enabled": RATE_LIMIT_ENABLED,
            "requests": RATE_LIMIT_REQUESTS,
            "window_seconds": RATE_LIMIT_WINDOW_SECONDS
        },
        "features": [
            "Current conditions by address, zip code or coordinates",
            "5-day forecast summary"
        ],
        "data_source": "OpenWeatherMap API"
    }
