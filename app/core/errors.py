"""Error taxonomy shared by the upstream client, the gateway and the HTTP layer."""

from __future__ import annotations

from enum import Enum


class WeatherErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    INVALID_CREDENTIAL = "invalid_credential"
    CITY_NOT_FOUND = "city_not_found"
    RATE_LIMITED = "rate_limited"
    UNREACHABLE = "unreachable"
    UPSTREAM = "upstream"
    VALIDATION = "validation"


HTTP_STATUS_BY_KIND: dict[WeatherErrorKind, int] = {
    WeatherErrorKind.VALIDATION: 400,
    WeatherErrorKind.CITY_NOT_FOUND: 404,
}


class WeatherError(Exception):
    """Base error. ``kind`` is the discriminant callers branch on."""

    kind: WeatherErrorKind = WeatherErrorKind.UPSTREAM
    default_message: str = "Unexpected weather service error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND.get(self.kind, 500)


class ConfigurationError(WeatherError):
    kind = WeatherErrorKind.CONFIGURATION
    default_message = (
        "API key not configured. Please set your OpenWeatherMap API key in the .env file."
    )


class InvalidCredentialError(WeatherError):
    kind = WeatherErrorKind.INVALID_CREDENTIAL
    default_message = "Invalid API key. Please check your OpenWeatherMap API key."


class CityNotFoundError(WeatherError):
    kind = WeatherErrorKind.CITY_NOT_FOUND
    default_message = "City not found. Please check the city name and try again."


class RateLimitedError(WeatherError):
    kind = WeatherErrorKind.RATE_LIMITED
    default_message = "Too many requests. Please wait a moment and try again."


class UnreachableError(WeatherError):
    kind = WeatherErrorKind.UNREACHABLE
    default_message = (
        "Unable to connect to weather service. Please check your internet connection."
    )


class UpstreamError(WeatherError):
    kind = WeatherErrorKind.UPSTREAM

    def __init__(self, status_code: int | None, message: str | None = None) -> None:
        self.upstream_status = status_code
        detail = message or "Unknown error"
        if status_code is None:
            super().__init__(f"API error: {detail}")
        else:
            super().__init__(f"API error ({status_code}): {detail}")


class ValidationError(WeatherError):
    kind = WeatherErrorKind.VALIDATION
    default_message = "Invalid request"
