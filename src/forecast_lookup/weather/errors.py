"""Error types raised by the weather lookup pipeline."""

from typing import Optional

import httpx

# Network-level failures (timeouts, refused connections, DNS) are left as
# httpx exceptions and propagate to the orchestrator.
TransportError = httpx.TransportError


class WeatherAppError(Exception):
    """Base class for errors whose message is safe to show to a user."""
    pass


class ConfigurationError(WeatherAppError):
    """Raised when a required setting such as the API key is missing."""
    pass


class InvalidLocationError(WeatherAppError):
    """Raised when coordinates are out of range or a zip code is blank."""
    pass


class LocationNotFoundError(WeatherAppError):
    """Raised when geocoding returns no match."""
    pass


class GeocodingError(WeatherAppError):
    """Raised when the geocoding provider fails."""
    pass


class ApiError(WeatherAppError):
    """Raised when the weather API answers with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
