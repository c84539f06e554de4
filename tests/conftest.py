from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.config import Settings
from app.factory import create_app
from tests.fakes import FakeOpenWeatherClient


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        openweather_api_key="test-key-1234567890",
        openweather_timeout_seconds=1.0,
        rate_limit_enabled=True,
        rate_limit_max_requests=100,
        rate_limit_window_seconds=900,
    )


@pytest.fixture()
def fake_openweather() -> FakeOpenWeatherClient:
    return FakeOpenWeatherClient()


@pytest.fixture()
def client(settings: Settings, fake_openweather: FakeOpenWeatherClient) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[deps.get_openweather_client] = lambda: fake_openweather
    with TestClient(app) as client:
        yield client
