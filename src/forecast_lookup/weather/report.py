"""Weather report handed to the view layer."""

from typing import List, Optional

from pydantic import BaseModel, Field

from forecast_lookup.weather.aggregation import aggregate_forecast, format_description
from forecast_lookup.weather.models import ForecastDay, HighLow, WeatherData, WeatherResult


class WeatherReport(BaseModel):
    """A location request and the weather fetched for it.

    Accessors return None instead of raising when the data is missing or
    carries an error.
    """
    address: Optional[str] = None
    zip_code: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    geocoding_error: Optional[str] = None
    data: WeatherResult = Field(default_factory=WeatherResult)

    def set_forecast_data(self, data: WeatherResult) -> None:
        self.data = data

    def _current(self) -> Optional[WeatherData]:
        current = self.data.current
        return current if isinstance(current, WeatherData) else None

    def current_temperature(self) -> Optional[float]:
        current = self._current()
        return current.temperature if current else None

    def high_low(self) -> Optional[HighLow]:
        """Today's bounds from the current conditions, not the forecast."""
        current = self._current()
        if current is None:
            return None
        return HighLow(high=current.temp_max, low=current.temp_min)

    def description(self) -> Optional[str]:
        current = self._current()
        return format_description(current.condition) if current else None

    def location_name(self) -> Optional[str]:
        """Geocoded city for zip lookups, else the API's name, else the address."""
        coordinates = self.data.coordinates
        if self.zip_code and coordinates is not None and coordinates.city:
            return coordinates.city

        current = self._current()
        if current is not None and current.name:
            return current.name

        return self.address

    def from_cache(self) -> bool:
        return self.data.from_cache is True

    def has_error(self) -> bool:
        if self.geocoding_error:
            return True
        return not self.data.is_valid()

    def error_message(self) -> Optional[str]:
        if self.geocoding_error:
            return self.geocoding_error
        if self.data.error:
            return self.data.error

        for payload in (self.data.current, self.data.forecast):
            if payload is not None and payload.status == "error" and payload.message:
                return payload.message

        return None

    def extended_forecast(self) -> List[ForecastDay]:
        return aggregate_forecast(self.data.forecast)

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, text: str) -> "WeatherReport":
        return cls.model_validate_json(text)
