from __future__ import annotations

from fastapi.testclient import TestClient

from app.api import deps
from app.core.config import Settings
from app.core.errors import CityNotFoundError, InvalidCredentialError, UnreachableError
from app.factory import create_app
from tests.fakes import FakeOpenWeatherClient


def test_current_weather_by_path(client: TestClient) -> None:
    resp = client.get("/api/weather/current/London")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert data["city"] == "London"
    assert data["temperature"] == 15
    assert data["feelsLike"] == 15
    assert data["visibility"] == 10
    assert data["windDirection"] == 200
    assert data["weatherCode"] == 800


def test_current_weather_by_query(client: TestClient) -> None:
    resp = client.get("/api/weather/current", params={"city": "London"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["data"]["country"] == "GB"


def test_missing_city_query_is_400(client: TestClient) -> None:
    resp = client.get("/api/weather/current")
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": "City name is required as query parameter",
    }


def test_blank_city_path_is_400(client: TestClient) -> None:
    resp = client.get("/api/weather/forecast/%20%20")
    assert resp.status_code == 400
    assert resp.json()["error"] == "City name is required"


def test_forecast_by_path(client: TestClient) -> None:
    resp = client.get("/api/weather/forecast/London")
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["city"] == "London"
    assert len(data["forecast"]) == 5
    day = data["forecast"][0]
    assert {"date", "tempMax", "tempMin", "tempAvg", "icon", "description",
            "weatherCode", "humidity", "windSpeed"} <= set(day.keys())
    assert day["tempMin"] <= day["tempAvg"] <= day["tempMax"]


def test_forecast_by_query(client: TestClient) -> None:
    resp = client.get("/api/weather/forecast", params={"city": "London"})
    assert resp.status_code == 200, resp.text


def test_overview(client: TestClient) -> None:
    resp = client.get("/api/weather/overview/London")
    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["current"]["city"] == "London"
    assert len(data["forecast"]["forecast"]) == 5


def test_city_not_found_is_404(client: TestClient, fake_openweather: FakeOpenWeatherClient) -> None:
    fake_openweather.current_error = CityNotFoundError()
    resp = client.get("/api/weather/current/Atlantis")
    assert resp.status_code == 404
    assert resp.json() == {
        "success": False,
        "error": "City not found. Please check the city name and try again.",
    }


def test_invalid_credential_is_500(
    client: TestClient, fake_openweather: FakeOpenWeatherClient
) -> None:
    fake_openweather.forecast_error = InvalidCredentialError()
    resp = client.get("/api/weather/forecast/London")
    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Invalid API key")


def test_overview_fails_when_forecast_fails(
    client: TestClient, fake_openweather: FakeOpenWeatherClient
) -> None:
    fake_openweather.forecast_error = UnreachableError()
    resp = client.get("/api/weather/overview/London")
    assert resp.status_code == 500
    assert resp.json()["success"] is False


def test_search(client: TestClient) -> None:
    resp = client.get("/api/weather/search/on")
    assert resp.status_code == 200
    names = [c["name"] for c in resp.json()["data"]]
    assert names == ["London", "Hong Kong"]


def test_search_is_case_insensitive(client: TestClient) -> None:
    resp = client.get("/api/weather/search/NEW")
    assert resp.json()["data"] == [
        {"name": "New York", "country": "US", "lat": 40.7128, "lon": -74.006}
    ]


def test_search_short_query_is_400(client: TestClient) -> None:
    resp = client.get("/api/weather/search/a")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Search query must be at least 2 characters"


def test_health(client: TestClient) -> None:
    resp = client.get("/api/weather/health")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "status": "healthy", "apiKeyConfigured": True}


def test_health_reports_bad_credential(
    client: TestClient, fake_openweather: FakeOpenWeatherClient
) -> None:
    fake_openweather.current_error = InvalidCredentialError()
    resp = client.get("/api/weather/health")
    assert resp.status_code == 200
    assert resp.json()["apiKeyConfigured"] is False


def test_unknown_endpoint(client: TestClient) -> None:
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Endpoint not found"}


def test_root_lists_endpoints(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["endpoints"]["health"] == "/api/weather/health"


def test_rate_limit(settings: Settings) -> None:
    settings.rate_limit_max_requests = 2
    app = create_app(settings)
    app.dependency_overrides[deps.get_openweather_client] = lambda: FakeOpenWeatherClient()
    with TestClient(app) as client:
        assert client.get("/api/weather/search/lon").status_code == 200
        assert client.get("/api/weather/search/lon").status_code == 200
        resp = client.get("/api/weather/search/lon")
        assert resp.status_code == 429
        assert resp.json() == {
            "success": False,
            "error": "Too many requests, please try again later.",
        }
        assert int(resp.headers["Retry-After"]) >= 1
        # Non-API paths are not limited.
        assert client.get("/").status_code == 200


def test_rate_limit_disabled(settings: Settings) -> None:
    settings.rate_limit_enabled = False
    settings.rate_limit_max_requests = 1
    app = create_app(settings)
    app.dependency_overrides[deps.get_openweather_client] = lambda: FakeOpenWeatherClient()
    with TestClient(app) as client:
        for _ in range(3):
            assert client.get("/api/weather/search/lon").status_code == 200


def test_rate_limited_reply_carries_cors_headers(settings: Settings) -> None:
    settings.rate_limit_max_requests = 1
    app = create_app(settings)
    headers = {"Origin": "http://localhost"}
    with TestClient(app) as client:
        first = client.get("/api/weather/search/lon", headers=headers)
        assert first.headers["access-control-allow-origin"] == "http://localhost"
        limited = client.get("/api/weather/search/lon", headers=headers)
        assert limited.status_code == 429
        assert limited.headers["access-control-allow-origin"] == "http://localhost"


def test_preflight_is_not_rate_limited(settings: Settings) -> None:
    settings.rate_limit_max_requests = 1
    app = create_app(settings)
    preflight = {
        "Origin": "http://localhost",
        "Access-Control-Request-Method": "GET",
    }
    with TestClient(app) as client:
        for _ in range(3):
            resp = client.options("/api/weather/search/lon", headers=preflight)
            assert resp.status_code == 200
        assert client.get("/api/weather/search/lon").status_code == 200


def test_search_ignores_surrounding_whitespace(client: TestClient) -> None:
    resp = client.get("/api/weather/search/%20lo%20")
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()["data"]] == ["London"]
