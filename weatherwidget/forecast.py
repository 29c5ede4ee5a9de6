"""Open-Meteo forecast client for current, daily and hourly weather.

One GET to /v1/forecast returns everything the widget shows: current
conditions, a 10-day daily summary and the hourly series for the same
window, in Fahrenheit and the location's local time zone.

No API key is required and failed calls are not retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

import httpx

from weatherwidget import config

logger = logging.getLogger(__name__)

DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,weathercode"
HOURLY_FIELDS = (
    "temperature_2m,weathercode,precipitation_probability,"
    "precipitation,relativehumidity_2m,windspeed_10m"
)


class ForecastError(Exception):
    """Raised when the forecast API returns an error or unexpected response."""


@dataclass(frozen=True)
class CurrentWeather:
    """Current conditions from the "current_weather" block.

    Attributes:
        temperature: Temperature in Fahrenheit.
        code: WMO weather code.
        wind_speed: Wind speed as reported by the API.
        time: Local observation time, if given.
    """

    temperature: float
    code: int | None
    wind_speed: float | None = None
    time: datetime | None = None


@dataclass(frozen=True)
class DailyForecast:
    """One day of the 10-day forecast."""

    date: date
    temperature_max: float | None
    temperature_min: float | None
    code: int | None


@dataclass(frozen=True)
class HourlyForecast:
    """One hour of the hourly series.

    Attributes:
        time: Timezone-aware local time at the start of the hour.
        temperature: Temperature in Fahrenheit.
        code: WMO weather code.
        precipitation_probability: Chance of precipitation (0-100).
        wind_speed: 10 m wind speed.
        precipitation: Precipitation amount.
        relative_humidity: Relative humidity percentage.
    """

    time: datetime
    temperature: float | None
    code: int | None
    precipitation_probability: float | None = None
    wind_speed: float | None = None
    precipitation: float | None = None
    relative_humidity: float | None = None


@dataclass(frozen=True)
class ForecastSnapshot:
    """Complete forecast for one location, built fresh on every fetch."""

    current: CurrentWeather | None
    daily: list[DailyForecast] = field(default_factory=list)
    hourly: list[HourlyForecast] = field(default_factory=list)
    timezone: str = ""
    utc_offset_seconds: int = 0


def _create_client() -> httpx.Client:
    """Create an httpx client for forecast requests."""
    kwargs = {"headers": {"User-Agent": config.USER_AGENT}}
    if config.REQUEST_TIMEOUT is not None:
        kwargs["timeout"] = config.REQUEST_TIMEOUT
    return httpx.Client(**kwargs)


def _column(block: dict, key: str, length: int) -> list:
    """Return an hourly/daily column padded with None to the time axis length."""
    values = list(block.get(key) or [])
    return values + [None] * (length - len(values))


def _parse_local(value: str, tz: timezone) -> datetime:
    """Parse an Open-Meteo local timestamp and attach the location's offset."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _parse_current(raw: dict | None, tz: timezone) -> CurrentWeather | None:
    if not raw or raw.get("temperature") is None:
        return None
    time = _parse_local(raw["time"], tz) if raw.get("time") else None
    return CurrentWeather(
        temperature=float(raw["temperature"]),
        code=raw.get("weathercode"),
        wind_speed=raw.get("windspeed"),
        time=time,
    )


def _parse_daily(raw: dict | None) -> list[DailyForecast]:
    if not raw:
        return []
    times = raw.get("time") or []
    highs = _column(raw, "temperature_2m_max", len(times))
    lows = _column(raw, "temperature_2m_min", len(times))
    codes = _column(raw, "weathercode", len(times))
    return [
        DailyForecast(
            date=date.fromisoformat(t),
            temperature_max=highs[i],
            temperature_min=lows[i],
            code=codes[i],
        )
        for i, t in enumerate(times)
    ]


def _parse_hourly(raw: dict | None, tz: timezone) -> list[HourlyForecast]:
    if not raw:
        return []
    times = raw.get("time") or []
    n = len(times)
    temps = _column(raw, "temperature_2m", n)
    codes = _column(raw, "weathercode", n)
    pops = _column(raw, "precipitation_probability", n)
    winds = _column(raw, "windspeed_10m", n)
    precip = _column(raw, "precipitation", n)
    humidity = _column(raw, "relativehumidity_2m", n)
    return [
        HourlyForecast(
            time=_parse_local(t, tz),
            temperature=temps[i],
            code=codes[i],
            precipitation_probability=pops[i],
            wind_speed=winds[i],
            precipitation=precip[i],
            relative_humidity=humidity[i],
        )
        for i, t in enumerate(times)
    ]


def parse_forecast(data: dict) -> ForecastSnapshot:
    """Convert a /v1/forecast JSON body into a ForecastSnapshot.

    Raises:
        ForecastError: If the body is not shaped like a forecast response.
    """
    try:
        offset = int(data.get("utc_offset_seconds") or 0)
        tz = timezone(timedelta(seconds=offset))
        return ForecastSnapshot(
            current=_parse_current(data.get("current_weather"), tz),
            daily=_parse_daily(data.get("daily")),
            hourly=_parse_hourly(data.get("hourly"), tz),
            timezone=data.get("timezone", ""),
            utc_offset_seconds=offset,
        )
    except (KeyError, TypeError, ValueError, AttributeError):
        raise ForecastError("Unexpected forecast response format.")


def get_forecast(latitude: float, longitude: float) -> ForecastSnapshot:
    """Fetch current, daily and hourly weather for the given coordinates.

    Args:
        latitude: Decimal latitude.
        longitude: Decimal longitude.

    Returns:
        A new ForecastSnapshot.

    Raises:
        ForecastError: On network errors, non-200 responses or bad JSON.
    """
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current_weather": "true",
        "daily": DAILY_FIELDS,
        "hourly": HOURLY_FIELDS,
        "temperature_unit": "fahrenheit",
        "forecast_days": config.FORECAST_DAYS,
        "timezone": "auto",
    }

    logger.debug("Fetching forecast for %s,%s", latitude, longitude)
    client = _create_client()
    try:
        try:
            response = client.get(config.FORECAST_URL, params=params)
        except httpx.HTTPError as exc:
            raise ForecastError(f"HTTP error communicating with forecast API: {exc}")

        if response.status_code != 200:
            raise ForecastError(
                f"Unexpected response from forecast API (HTTP {response.status_code})."
            )

        try:
            data = response.json()
        except ValueError:
            raise ForecastError("Received invalid JSON from forecast API.")
    finally:
        client.close()

    if not isinstance(data, dict):
        raise ForecastError("Unexpected forecast response format.")
    return parse_forecast(data)
