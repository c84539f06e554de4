from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CityRead(CamelModel):
    name: str = Field(min_length=1, max_length=64)
    country: str = Field(min_length=2, max_length=2)
    lat: float
    lon: float


class DailySummaryRead(CamelModel):
    date: str
    temp_max: int
    temp_min: int
    temp_avg: int
    icon: str
    description: str
    weather_code: int
    humidity: int
    wind_speed: float


class CurrentWeatherRead(CamelModel):
    city: str
    country: str
    temperature: int
    feels_like: int
    humidity: int
    pressure: int
    wind_speed: float
    wind_direction: int | None = None
    description: str
    weather_code: int
    icon: str
    visibility: float | None = None
    cloudiness: int
    sunrise: str
    sunset: str
    timestamp: str


class ForecastRead(CamelModel):
    city: str
    country: str
    forecast: list[DailySummaryRead] = Field(default_factory=list, max_length=6)
    timestamp: str


class WeatherOverviewRead(CamelModel):
    current: CurrentWeatherRead
    forecast: ForecastRead


class CurrentWeatherEnvelope(CamelModel):
    success: bool = True
    data: CurrentWeatherRead


class ForecastEnvelope(CamelModel):
    success: bool = True
    data: ForecastRead


class WeatherOverviewEnvelope(CamelModel):
    success: bool = True
    data: WeatherOverviewRead


class CitySearchEnvelope(CamelModel):
    success: bool = True
    data: list[CityRead] = Field(default_factory=list)


class HealthRead(CamelModel):
    success: bool = True
    status: str = "healthy"
    api_key_configured: bool


class ErrorRead(CamelModel):
    success: bool = False
    error: str
