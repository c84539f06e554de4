from __future__ import annotations

from typing import Literal

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_API_KEY = "your_api_key_here"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    openweather_api_key: str = Field(default="", max_length=128)
    openweather_current_url: AnyHttpUrl = Field(
        default="http://api.openweathermap.org/data/2.5/weather"
    )
    openweather_forecast_url: AnyHttpUrl = Field(
        default="http://api.openweathermap.org/data/2.5/forecast"
    )
    openweather_units: Literal["standard", "metric", "imperial"] = Field(default="metric")
    openweather_timeout_seconds: float = Field(default=10.0, ge=0.5, le=60.0)

    forecast_days: int = Field(default=5, ge=1, le=6)

    rate_limit_enabled: bool = Field(default=True)
    rate_limit_max_requests: int = Field(default=100, ge=1, le=100_000)
    rate_limit_window_seconds: int = Field(default=15 * 60, ge=1, le=60 * 60 * 24)

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    @property
    def api_key_configured(self) -> bool:
        key = self.openweather_api_key.strip()
        return bool(key) and key != PLACEHOLDER_API_KEY


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:5173", "http://localhost:3000"]
    return settings
