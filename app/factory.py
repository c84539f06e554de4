from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware

from app.api.router import api_router
from app.clients.openweather import OpenWeatherClient
from app.core.config import Settings, load_settings
from app.core.errors import WeatherError
from app.core.logging import configure_logging
from app.services.rate_limit import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

RATE_LIMITED_MESSAGE = "Too many requests, please try again later."


def _error_response(status_code: int, message: str, headers: dict[str, str] | None = None):
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.openweather_client = OpenWeatherClient(
            api_key=settings.openweather_api_key,
            timeout_seconds=settings.openweather_timeout_seconds,
            units=settings.openweather_units,
            current_url=str(settings.openweather_current_url),
            forecast_url=str(settings.openweather_forecast_url),
        )
        if settings.api_key_configured:
            logger.info("OpenWeatherMap API key configured")
        else:
            logger.warning(
                "OpenWeatherMap API key missing; set APP_OPENWEATHER_API_KEY in .env"
            )
        yield
        app.state.openweather_client.close()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="Weather Gateway API",
        version="1.0.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if settings.rate_limit_enabled and request.url.path.startswith("/api/"):
            client_id = request.client.host if request.client else "unknown"
            allowed, retry_after = app.state.rate_limiter.try_acquire(
                client_id=client_id, now=datetime.now(tz=timezone.utc)
            )
            if not allowed:
                logger.info("Rate limit exceeded for %s", client_id)
                return _error_response(
                    429, RATE_LIMITED_MESSAGE, headers={"Retry-After": str(retry_after)}
                )
        return await call_next(request)

    @app.middleware("http")
    async def request_logging(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    # Registered last so CORS wraps the rate limiter.
    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.exception_handler(WeatherError)
    async def weather_error_handler(request: Request, exc: WeatherError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
        return _error_response(exc.status_code, message, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return _error_response(400, message)

    @app.get("/", tags=["meta"])
    def root():
        return {
            "name": "Weather Gateway API",
            "version": app.version,
            "endpoints": {
                "current": "/api/weather/current/{city}",
                "forecast": "/api/weather/forecast/{city}",
                "overview": "/api/weather/overview/{city}",
                "search": "/api/weather/search/{query}",
                "health": "/api/weather/health",
            },
            "documentation": "https://openweathermap.org/api",
        }

    app.include_router(api_router)
    return app
