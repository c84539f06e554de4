from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.clients.openweather import OpenWeatherClient
from app.core.config import Settings
from app.services.weather import WeatherGateway


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_openweather_client(request: Request) -> OpenWeatherClient:
    return request.app.state.openweather_client


def get_weather_gateway(
    client: Annotated[OpenWeatherClient, Depends(get_openweather_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WeatherGateway:
    return WeatherGateway(client=client, forecast_days=settings.forecast_days)


Gateway = Annotated[WeatherGateway, Depends(get_weather_gateway)]
