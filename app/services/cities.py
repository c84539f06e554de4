from __future__ import annotations

from app.core.errors import ValidationError
from app.models.weather import City

MIN_QUERY_LENGTH = 2

POPULAR_CITIES: list[City] = [
    City("Beijing", "CN", 39.9042, 116.4074),
    City("Shanghai", "CN", 31.2304, 121.4737),
    City("New York", "US", 40.7128, -74.0060),
    City("London", "GB", 51.5074, -0.1278),
    City("Tokyo", "JP", 35.6762, 139.6503),
    City("Paris", "FR", 48.8566, 2.3522),
    City("Sydney", "AU", -33.8688, 151.2093),
    City("Moscow", "RU", 55.7558, 37.6173),
    City("Hong Kong", "HK", 22.3193, 114.1694),
    City("Singapore", "SG", 1.3521, 103.8198),
]


def search_cities(query: str, cities: list[City] | None = None) -> list[City]:
    """Case-insensitive substring match against a fixed city list."""
    needle = (query or "").strip().lower()
    if len(needle) < MIN_QUERY_LENGTH:
        raise ValidationError("Search query must be at least 2 characters")
    pool = POPULAR_CITIES if cities is None else cities
    return [c for c in pool if needle in c.name.lower()]
