from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.errors import (
    CityNotFoundError,
    InvalidCredentialError,
    RateLimitedError,
    UnreachableError,
    UpstreamError,
    WeatherError,
)

logger = logging.getLogger(__name__)

OPENWEATHER_CURRENT_URL = "http://api.openweathermap.org/data/2.5/weather"
OPENWEATHER_FORECAST_URL = "http://api.openweathermap.org/data/2.5/forecast"


class OpenWeatherClient:
    """Raw access to the OpenWeatherMap current-conditions and forecast endpoints.

    Every failure leaves this class as a :class:`WeatherError` subclass; callers
    never see ``httpx`` exceptions.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: float,
        units: str = "metric",
        current_url: str = OPENWEATHER_CURRENT_URL,
        forecast_url: str = OPENWEATHER_FORECAST_URL,
    ) -> None:
        self._api_key = api_key
        self._units = units
        self._current_url = current_url
        self._forecast_url = forecast_url
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
        )

    @property
    def api_key(self) -> str:
        return self._api_key

    def close(self) -> None:
        self._client.close()

    def fetch_current(self, city: str) -> dict[str, Any]:
        return self._get(self._current_url, {"q": city})

    def fetch_forecast(self, city: str) -> dict[str, Any]:
        return self._get(self._forecast_url, {"q": city})

    def _get(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        query = {**params, "appid": self._api_key, "units": self._units}
        logger.debug("GET %s q=%s units=%s", url, params.get("q"), self._units)
        try:
            resp = self._client.get(url, params=query)
        except httpx.RequestError as e:
            logger.warning("Weather provider unreachable: %s", e.__class__.__name__)
            raise UnreachableError() from e

        if resp.is_success:
            try:
                payload = resp.json()
            except ValueError as e:
                raise UpstreamError(resp.status_code, "Malformed JSON response") from e
            if not isinstance(payload, dict):
                raise UpstreamError(resp.status_code, "Unexpected response shape")
            return payload

        error = _error_for_status(resp)
        logger.warning(
            "Weather provider returned %s (%s)", resp.status_code, error.kind.value
        )
        raise error


def _error_for_status(resp: httpx.Response) -> WeatherError:
    status = resp.status_code
    if status == 401:
        return InvalidCredentialError()
    if status == 404:
        return CityNotFoundError()
    if status == 429:
        return RateLimitedError()
    return UpstreamError(status, _upstream_message(resp))


def _upstream_message(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)
    return None
