"""Configuration settings for the forecast lookup service."""

import os
from dataclasses import dataclass
from typing import Dict, Final, Optional, TypeVar

from dotenv import load_dotenv

from forecast_lookup.weather.errors import ConfigurationError

load_dotenv()

T = TypeVar("T")

# Runtime environment: development, test or production
APP_ENV: str = os.getenv("APP_ENV", "production").lower()


def _env_default(values: Dict[str, T]) -> T:
    """Pick the default for the current APP_ENV, production if unknown."""
    return values.get(APP_ENV, values["production"])


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() == "true"


# API Configuration
OPENWEATHER_BASE_URL: str = os.getenv("OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5")
OPENWEATHER_API_KEY: Optional[str] = os.getenv("OPENWEATHER_API_KEY")
USER_AGENT: Final[str] = os.getenv("USER_AGENT", "ForecastLookup/0.1 (user@example.com)")

# Geocoding configuration
GEOCODING_USER_AGENT: Final[str] = os.getenv("GEOCODING_USER_AGENT", "ForecastLookup/0.1 (forecast-lookup)")
GEOCODING_TIMEOUT: int = int(os.getenv("GEOCODING_TIMEOUT", "10"))

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = _env_bool("DEBUG", False)

# Outbound requests
REQUEST_TIMEOUT_SECONDS: float = float(
    os.getenv("REQUEST_TIMEOUT_SECONDS", _env_default({"development": "15", "test": "5", "production": "10"}))
)
# Declared for operators; no retry loop reads it
MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", _env_default({"development": "1", "test": "0", "production": "3"})))

# Logging
DETAILED_LOGGING: bool = _env_bool(
    "DETAILED_LOGGING", _env_default({"development": True, "test": True, "production": False})
)

# Redis cache configuration
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
CACHE_EXPIRE_SECONDS: int = int(
    os.getenv("CACHE_EXPIRE_SECONDS", _env_default({"development": "300", "test": "60", "production": "1800"}))
)
CACHE_PREFIX: str = os.getenv("CACHE_PREFIX", "forecast-lookup")

# Rate limiting knobs (not enforced by this service)
RATE_LIMIT_ENABLED: bool = _env_bool(
    "RATE_LIMIT_ENABLED", _env_default({"development": False, "test": False, "production": True})
)
RATE_LIMIT_REQUESTS: int = int(
    os.getenv("RATE_LIMIT_REQUESTS", _env_default({"development": "1000", "test": "1000", "production": "100"}))
)
RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "3600"))


@dataclass(frozen=True)
class GatewayConfig:
    """Settings handed to the weather gateway at construction time."""

    api_key: str
    base_url: str = OPENWEATHER_BASE_URL
    timeout: float = REQUEST_TIMEOUT_SECONDS
    cache_ttl: int = CACHE_EXPIRE_SECONDS
    user_agent: str = USER_AGENT
    max_retries: int = MAX_RETRIES

    @classmethod
    def from_env(cls, api_key: Optional[str] = None) -> "GatewayConfig":
        """Build the gateway config from the environment.

        Raises:
            ConfigurationError: If no OpenWeather API key is configured
        """
        key = api_key if api_key is not None else os.getenv("OPENWEATHER_API_KEY", OPENWEATHER_API_KEY or "")
        if not key or not key.strip():
            raise ConfigurationError("OpenWeather API key not configured")
        return cls(api_key=key.strip())
