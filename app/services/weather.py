from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Any

from app.clients.openweather import OpenWeatherClient
from app.core.config import PLACEHOLDER_API_KEY
from app.core.errors import ConfigurationError, UpstreamError, ValidationError, WeatherError
from app.models.weather import CurrentWeather, ForecastResponse, WeatherOverview
from app.services.forecast import parse_samples, round_half_up, summarize

logger = logging.getLogger(__name__)

CREDENTIAL_CHECK_CITY = "London"


def _utc_offset(seconds: Any) -> timezone:
    try:
        return timezone(timedelta(seconds=int(seconds)))
    except (TypeError, ValueError):
        return timezone.utc


def _local_time(epoch: Any, tz: timezone) -> str:
    if epoch is None:
        return ""
    return datetime.fromtimestamp(int(epoch), tz=tz).strftime("%H:%M:%S")


def _now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


class WeatherGateway:
    """Fetches and normalizes weather for a single city per call.

    Holds no per-request state; one instance can serve concurrent callers.
    """

    def __init__(self, *, client: OpenWeatherClient, forecast_days: int = 5) -> None:
        self._client = client
        self._forecast_days = forecast_days

    def current_weather(self, city: str) -> CurrentWeather:
        name = self._prepare(city)
        payload = self._client.fetch_current(name)
        try:
            return self._normalize_current(payload)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise UpstreamError(None, "Unexpected current weather response") from e

    def forecast(self, city: str) -> ForecastResponse:
        name = self._prepare(city)
        payload = self._client.fetch_forecast(name)
        try:
            return self._normalize_forecast(payload)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise UpstreamError(None, "Unexpected forecast response") from e

    def overview(self, city: str) -> WeatherOverview:
        """Current conditions and forecast fetched concurrently.

        Either request failing fails the whole overview.
        """
        name = self._prepare(city)
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="weather-overview") as pool:
            current = pool.submit(self.current_weather, name)
            forecast = pool.submit(self.forecast, name)
            return WeatherOverview(current=current.result(), forecast=forecast.result())

    def validate_credential(self) -> bool:
        try:
            self.current_weather(CREDENTIAL_CHECK_CITY)
        except WeatherError as e:
            logger.info("Credential check failed: %s", e.kind.value)
            return False
        return True

    def _prepare(self, city: str) -> str:
        name = (city or "").strip()
        if not name:
            raise ValidationError("City name is required")
        key = self._client.api_key.strip()
        if not key or key == PLACEHOLDER_API_KEY:
            raise ConfigurationError()
        return name

    @staticmethod
    def _normalize_current(data: dict[str, Any]) -> CurrentWeather:
        main = data["main"]
        sys_ = data["sys"]
        wind = data.get("wind") or {}
        condition = data["weather"][0]
        tz = _utc_offset(data.get("timezone", 0))
        visibility = data.get("visibility")
        wind_deg = wind.get("deg")

        return CurrentWeather(
            city=data["name"],
            country=sys_.get("country", ""),
            temperature=int(round_half_up(float(main["temp"]))),
            feels_like=int(round_half_up(float(main["feels_like"]))),
            humidity=int(main["humidity"]),
            pressure=int(main["pressure"]),
            wind_speed=float(wind.get("speed", 0.0)),
            wind_direction=int(wind_deg) if wind_deg is not None else None,
            description=condition["description"],
            weather_code=int(condition["id"]),
            icon=condition["icon"],
            visibility=visibility / 1000 if visibility is not None else None,
            cloudiness=int((data.get("clouds") or {}).get("all", 0)),
            sunrise=_local_time(sys_.get("sunrise"), tz),
            sunset=_local_time(sys_.get("sunset"), tz),
            timestamp=_now_iso(),
        )

    def _normalize_forecast(self, data: dict[str, Any]) -> ForecastResponse:
        city = data["city"]
        tz = _utc_offset(city.get("timezone", 0))
        days = summarize(parse_samples(data.get("list") or []), tz=tz)
        return ForecastResponse(
            city=city["name"],
            country=city.get("country", ""),
            forecast=days[: self._forecast_days],
            timestamp=_now_iso(),
        )
