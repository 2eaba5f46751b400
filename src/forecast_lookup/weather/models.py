"""Data models for the forecast lookup service."""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class LocationQuery(BaseModel):
    """Location parameters supplied by the user."""
    address: Optional[str] = Field(None, description="Free-text street address")
    zip_code: Optional[str] = Field(None, description="US zip code, 5 or 5+4 digits")
    latitude: Optional[float] = Field(None, description="Latitude in decimal degrees")
    longitude: Optional[float] = Field(None, description="Longitude in decimal degrees")


class Coordinates(BaseModel):
    """Resolved location, optionally annotated by the geocoder."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    city: Optional[str] = Field(None, description="City name if known")
    state: Optional[str] = Field(None, description="State or region if known")
    country: Optional[str] = Field(None, description="Country if known")


class WeatherData(BaseModel):
    """Successful upstream payload, kept verbatim."""
    status: Literal["ok"] = "ok"
    data: Dict[str, Any] = Field(default_factory=dict, description="Raw JSON body from the weather API")

    @property
    def main(self) -> Dict[str, Any]:
        return self.data.get("main") or {}

    @property
    def temperature(self) -> Optional[float]:
        return self.main.get("temp")

    @property
    def temp_max(self) -> Optional[float]:
        return self.main.get("temp_max")

    @property
    def temp_min(self) -> Optional[float]:
        return self.main.get("temp_min")

    @property
    def condition(self) -> Optional[str]:
        """First weather condition description, as sent by the API."""
        weather = self.data.get("weather") or []
        if not weather:
            return None
        return weather[0].get("description")

    @property
    def name(self) -> Optional[str]:
        return self.data.get("name") or None

    @property
    def entries(self) -> Optional[List[Dict[str, Any]]]:
        """Time-series entries of a forecast payload."""
        entries = self.data.get("list")
        return entries if isinstance(entries, list) else None


class WeatherError(BaseModel):
    """Upstream payload that carried an error instead of data."""
    status: Literal["error"] = "error"
    message: str = Field(..., description="Error message")


Payload = Annotated[Union[WeatherData, WeatherError], Field(discriminator="status")]


def decode_payload(body: Any) -> Union[WeatherData, WeatherError]:
    """Decode a raw API body into the payload variant.

    OpenWeather reports some failures inside a 200 body through the ``cod``
    field (an int for /weather, a string for /forecast).
    """
    if not isinstance(body, dict):
        return WeatherError(message="Unexpected response from weather service")

    code = body.get("cod")
    if code is not None and str(code) != "200":
        return WeatherError(message=str(body.get("message") or f"API Error: {code}"))

    return WeatherData(data=body)


class WeatherResult(BaseModel):
    """Everything fetched for one lookup, or the reason it failed."""
    current: Optional[Payload] = Field(None, description="Current conditions payload")
    forecast: Optional[Payload] = Field(None, description="Forecast payload")
    coordinates: Optional[Coordinates] = Field(None, description="Coordinates the payloads belong to")
    from_cache: bool = Field(False, description="Whether the result was replayed from cache")
    error: Optional[str] = Field(None, description="Top-level error message")

    @classmethod
    def failure(cls, message: str) -> "WeatherResult":
        return cls(error=message)

    def is_valid(self) -> bool:
        """True when the bag holds data and no error marker at any level."""
        if self.current is None and self.forecast is None and self.error is None:
            return False
        if self.error:
            return False
        if isinstance(self.current, WeatherError):
            return False
        if isinstance(self.forecast, WeatherError):
            return False
        return True


class ForecastDay(BaseModel):
    """Daily forecast summary."""
    date: str = Field(..., description="Day label, e.g. 'Monday, July 26'")
    high: int = Field(..., description="Highest temperature of the day")
    low: int = Field(..., description="Lowest temperature of the day")
    description: Optional[str] = Field(None, description="First condition of the day, title-cased")


class HighLow(BaseModel):
    """Current-conditions temperature bounds."""
    high: Optional[float] = None
    low: Optional[float] = None


class WeatherView(BaseModel):
    """Weather lookup response model."""
    location: Optional[str] = Field(None, description="Display name of the location")
    current_temperature: Optional[float] = Field(None, description="Current temperature in Celsius")
    current_temperature_display: Optional[str] = Field(None, description="Formatted current temperature")
    high_low: Optional[HighLow] = Field(None, description="Today's high and low")
    description: Optional[str] = Field(None, description="Current conditions")
    forecast: List[ForecastDay] = Field(default_factory=list, description="Up to five daily summaries")
    from_cache: bool = Field(False, description="Whether data was served from cache")
    notice: Optional[str] = Field(None, description="Informational message")
