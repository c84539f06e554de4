from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class City:
    name: str
    country: str
    lat: float
    lon: float


@dataclass(frozen=True)
class RawSample:
    timestamp: int
    temperature: float
    humidity: int
    wind_speed: float
    weather_code: int
    icon: str
    description: str


@dataclass(frozen=True)
class DailySummary:
    date: str
    temp_max: int
    temp_min: int
    temp_avg: int
    icon: str
    description: str
    weather_code: int
    humidity: int
    wind_speed: float


@dataclass(frozen=True)
class CurrentWeather:
    city: str
    country: str
    temperature: int
    feels_like: int
    humidity: int
    pressure: int
    wind_speed: float
    wind_direction: int | None
    description: str
    weather_code: int
    icon: str
    visibility: float | None
    cloudiness: int
    sunrise: str
    sunset: str
    timestamp: str


@dataclass(frozen=True)
class ForecastResponse:
    city: str
    country: str
    forecast: list[DailySummary]
    timestamp: str


@dataclass(frozen=True)
class WeatherOverview:
    current: CurrentWeather
    forecast: ForecastResponse
