from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from app.api.deps import Gateway
from app.core.errors import ValidationError
from app.schemas.weather import (
    CityRead,
    CitySearchEnvelope,
    CurrentWeatherEnvelope,
    CurrentWeatherRead,
    ErrorRead,
    ForecastEnvelope,
    ForecastRead,
    HealthRead,
    WeatherOverviewEnvelope,
    WeatherOverviewRead,
)
from app.services.cities import search_cities

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/weather",
    responses={
        400: {"model": ErrorRead},
        404: {"model": ErrorRead},
        500: {"model": ErrorRead},
    },
)

CityQuery = Annotated[str | None, Query(max_length=128)]


def _require_city(city: str | None, message: str) -> str:
    if city is None or not city.strip():
        raise ValidationError(message)
    return city.strip()


def _current(gateway: Gateway, city: str) -> CurrentWeatherEnvelope:
    current = gateway.current_weather(city)
    return CurrentWeatherEnvelope(data=CurrentWeatherRead.model_validate(asdict(current)))


def _forecast(gateway: Gateway, city: str) -> ForecastEnvelope:
    forecast = gateway.forecast(city)
    return ForecastEnvelope(data=ForecastRead.model_validate(asdict(forecast)))


def _overview(gateway: Gateway, city: str) -> WeatherOverviewEnvelope:
    overview = gateway.overview(city)
    return WeatherOverviewEnvelope(data=WeatherOverviewRead.model_validate(asdict(overview)))


@router.get("/current", response_model=CurrentWeatherEnvelope)
def current_weather_by_query(gateway: Gateway, city: CityQuery = None) -> CurrentWeatherEnvelope:
    name = _require_city(city, "City name is required as query parameter")
    return _current(gateway, name)


@router.get("/current/{city}", response_model=CurrentWeatherEnvelope)
def current_weather(city: str, gateway: Gateway) -> CurrentWeatherEnvelope:
    return _current(gateway, _require_city(city, "City name is required"))


@router.get("/forecast", response_model=ForecastEnvelope)
def forecast_by_query(gateway: Gateway, city: CityQuery = None) -> ForecastEnvelope:
    name = _require_city(city, "City name is required as query parameter")
    return _forecast(gateway, name)


@router.get("/forecast/{city}", response_model=ForecastEnvelope)
def forecast(city: str, gateway: Gateway) -> ForecastEnvelope:
    return _forecast(gateway, _require_city(city, "City name is required"))


@router.get("/overview", response_model=WeatherOverviewEnvelope)
def overview_by_query(gateway: Gateway, city: CityQuery = None) -> WeatherOverviewEnvelope:
    name = _require_city(city, "City name is required as query parameter")
    return _overview(gateway, name)


@router.get("/overview/{city}", response_model=WeatherOverviewEnvelope)
def overview(city: str, gateway: Gateway) -> WeatherOverviewEnvelope:
    return _overview(gateway, _require_city(city, "City name is required"))


@router.get("/search/{query}", response_model=CitySearchEnvelope)
def search(query: str) -> CitySearchEnvelope:
    cities = search_cities(query)
    return CitySearchEnvelope(data=[CityRead.model_validate(asdict(c)) for c in cities])


@router.get("/health", response_model=HealthRead)
def health(gateway: Gateway):
    try:
        configured = gateway.validate_credential()
    except Exception as e:  # noqa: BLE001 - report as unhealthy
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "status": "unhealthy", "error": str(e)},
        )
    return HealthRead(api_key_configured=configured)
