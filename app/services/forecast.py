"""Collapse the provider's 3-hourly forecast series into daily summaries."""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timezone, tzinfo
from typing import Any, Iterable, Sequence

from app.models.weather import DailySummary, RawSample


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round .5 towards positive infinity, e.g. 2.5 -> 3 and -2.5 -> -2."""
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _most_common(values: Sequence[str]) -> str:
    # Counter keeps insertion order and max() returns the first maximum,
    # so ties go to whichever value appeared first.
    counts = Counter(values)
    return max(counts, key=counts.__getitem__)


def date_key(timestamp: int, tz: tzinfo = timezone.utc) -> str:
    return datetime.fromtimestamp(timestamp, tz=tz).date().isoformat()


def summarize_day(date: str, samples: Sequence[RawSample]) -> DailySummary:
    temps = [s.temperature for s in samples]
    icons = [s.icon for s in samples]
    icon = _most_common(icons)
    description = _most_common([s.description for s in samples])
    weather_code = samples[icons.index(icon)].weather_code

    return DailySummary(
        date=date,
        temp_max=int(round_half_up(max(temps))),
        temp_min=int(round_half_up(min(temps))),
        temp_avg=int(round_half_up(_mean(temps))),
        icon=icon,
        description=description,
        weather_code=weather_code,
        humidity=int(round_half_up(_mean([s.humidity for s in samples]))),
        wind_speed=round_half_up(_mean([s.wind_speed for s in samples]), 1),
    )


def summarize(
    samples: Iterable[RawSample], tz: tzinfo = timezone.utc
) -> list[DailySummary]:
    """Group samples by calendar date in ``tz`` and summarize each day.

    Days come out in the order they first appear in ``samples``; they are
    never re-sorted. An empty input gives an empty list.
    """
    groups: dict[str, list[RawSample]] = {}
    for sample in samples:
        groups.setdefault(date_key(sample.timestamp, tz), []).append(sample)
    return [summarize_day(date, day) for date, day in groups.items()]


def parse_sample(entry: dict[str, Any]) -> RawSample:
    try:
        main: dict[str, Any] = entry.get("main") or {}
        wind: dict[str, Any] = entry.get("wind") or {}
        weather = entry.get("weather") or [{}]
        condition: dict[str, Any] = weather[0] if isinstance(weather[0], dict) else {}
        return RawSample(
            timestamp=int(entry["dt"]),
            temperature=float(main["temp"]),
            humidity=int(main.get("humidity", 0)),
            wind_speed=float(wind.get("speed", 0.0)),
            weather_code=int(condition.get("id", 0)),
            icon=str(condition.get("icon", "")),
            description=str(condition.get("description", "")),
        )
    except (AttributeError, IndexError, KeyError, TypeError, ValueError) as e:
        raise ValueError("Unexpected forecast entry shape") from e


def parse_samples(entries: Iterable[dict[str, Any]]) -> list[RawSample]:
    return [parse_sample(e) for e in entries]
