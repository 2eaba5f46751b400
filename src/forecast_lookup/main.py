"""Main FastAPI application for the forecast lookup service."""

import json
import logging
import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Callable

import redis.asyncio as redis
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from forecast_lookup.api.endpoints import router as weather_router
from forecast_lookup.config import CACHE_PREFIX, DEBUG, HOST, PORT, REDIS_URL, GatewayConfig
from forecast_lookup.logging_config import configure_logging
from forecast_lookup.weather.cache import WeatherCache
from forecast_lookup.weather.service import WeatherGateway

# Configure logging
configure_logging()
logger = logging.getLogger(__name__)

SENSITIVE_PARAMS = frozenset({"api_key", "appid", "password"})


def build_request_log(request: Request, status_code: int, duration_ms: float) -> str:
    """One JSON line per request; credentials are dropped from the params."""
    params = {
        key: value for key, value in request.query_params.items()
        if key.lower() not in SENSITIVE_PARAMS
    }
    return json.dumps({
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "method": request.method,
        "path": request.url.path,
        "status": status_code,
        "user_agent": request.headers.get("user-agent"),
        "ip": request.client.host if request.client else None,
        "params": params,
        "duration": duration_ms,
    })


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    try:
        # Fails startup when the API key is missing
        config = GatewayConfig.from_env()

        logger.info(f"Connecting to Redis at {REDIS_URL}")
        cache = WeatherCache(redis.from_url(REDIS_URL), prefix=CACHE_PREFIX)
        app.state.gateway = WeatherGateway(config, cache)

        logger.info("Starting Forecast Lookup Service")
    except Exception as e:
        logger.error(f"Startup error: {e}")
        logger.error(traceback.format_exc())
        raise

    try:
        yield
    finally:
        logger.info("Shutting down Forecast Lookup Service")
        await app.state.gateway.aclose()
        await cache.close()


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        use_lifespan: Wire Redis and the weather client at startup; tests
            disable it and set ``app.state.gateway`` themselves

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Forecast Lookup Service",
        description="Current weather and 5-day forecasts by address, zip code or coordinates",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan if use_lifespan else None
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(build_request_log(request, response.status_code, duration_ms))
        return response

    # Include API routers
    app.include_router(weather_router)

    @app.get("/api", tags=["root"])
    async def api_info() -> dict:
        """API information endpoint.

        Returns:
            Basic service information
        """
        return {
            "message": "Forecast Lookup Service",
            "docs": "/docs",
            "redoc": "/redoc",
            "weather": "/weather",
            "health": "/weather/health"
        }

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        app,
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
