"""Request orchestration: validate, resolve, fetch, attach."""

import logging
from dataclasses import dataclass
from typing import Optional

from forecast_lookup.logging_config import log_failure
from forecast_lookup.weather.geocoding import GeocodingService
from forecast_lookup.weather.models import Coordinates, LocationQuery, WeatherResult
from forecast_lookup.weather.report import WeatherReport
from forecast_lookup.weather.service import CURRENT, SERVICE_UNAVAILABLE, WeatherGateway
from forecast_lookup.weather.validation import validate_location_input

logger = logging.getLogger(__name__)

NO_LOCATION = "No valid location provided"


@dataclass
class OrchestrationResult:
    """Outcome of one lookup. ``error`` is set only on failure paths."""
    report: WeatherReport
    error: Optional[str] = None
    invalid_input: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.report.has_error()


class WeatherOrchestrator:
    """Runs one weather lookup from raw parameters to a report."""

    def __init__(self, gateway: WeatherGateway, geocoding_service: Optional[GeocodingService] = None):
        self.gateway = gateway
        self.geocoding_service = geocoding_service or gateway.geocoding_service

    async def run(self, query: LocationQuery) -> OrchestrationResult:
        """Look up the weather for a location query.

        Never raises; unexpected failures are logged and reported as
        "Weather service temporarily unavailable".
        """
        report = WeatherReport(
            address=query.address,
            zip_code=query.zip_code,
            latitude=query.latitude,
            longitude=query.longitude
        )

        try:
            errors = validate_location_input(
                address=report.address,
                zip_code=report.zip_code,
                latitude=report.latitude,
                longitude=report.longitude
            )
            if errors:
                message = ", ".join(error.message for error in errors)
                logger.info(f"Rejected location input: {message}")
                return OrchestrationResult(report=report, error=message, invalid_input=True)

            self._resolve_address(report)
            if report.geocoding_error:
                return OrchestrationResult(report=report, error=report.geocoding_error)

            report.set_forecast_data(await self._fetch_forecast_data(report))
            return OrchestrationResult(report=report)

        except Exception as e:
            log_failure(logger, "WeatherOrchestrator error", e)
            return OrchestrationResult(report=report, error=SERVICE_UNAVAILABLE)

    def _resolve_address(self, report: WeatherReport) -> None:
        """Geocode the address when no coordinates were given."""
        if not report.address or report.latitude is not None or report.longitude is not None:
            return
        if report.zip_code:
            return

        not_found = (
            f"Unable to find location for '{report.address}'. "
            "Please try a different address or zip code."
        )
        try:
            results = self.geocoding_service.search(report.address)
        except Exception as e:
            log_failure(logger, f"Geocoding failed for address '{report.address}'", e)
            report.geocoding_error = not_found
            return

        if not results:
            report.geocoding_error = not_found
            return

        best = results[0]
        report.latitude = best.lat
        report.longitude = best.lon

    async def _fetch_forecast_data(self, report: WeatherReport) -> WeatherResult:
        if report.zip_code:
            return await self.gateway.get_by_zip(report.zip_code)

        if report.latitude is not None and report.longitude is not None:
            coords = Coordinates(lat=report.latitude, lon=report.longitude)
            from_cache = await self.gateway.is_cached(CURRENT, coords)
            current = await self.gateway.get_current(coords)
            forecast = await self.gateway.get_forecast(coords)
            return WeatherResult(
                current=current,
                forecast=forecast,
                coordinates=coords,
                from_cache=from_cache
            )

        return WeatherResult.failure(NO_LOCATION)
