"""View model for the widget page.

WeatherView owns every output the page shows (header, current conditions,
10-day grid, 24-hour strip, candidate list) and moves between the UI
states in response to pipeline events. The Streamlit page in app.py only
reads from it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime

from weatherwidget import config
from weatherwidget.forecast import DailyForecast, ForecastSnapshot, HourlyForecast
from weatherwidget.geocoding import GeocodeCandidate
from weatherwidget.weather_codes import (
    UNKNOWN_SHORT_LABEL,
    WeatherCodeEntry,
    WeatherCodeTable,
    background_for,
)

IDLE_HEADER = "Search a city to begin"
SEARCHING_HEADER = "Searching…"
NOT_FOUND_HEADER = "Location not found"
FIND_ERROR_HEADER = "Error finding location"
WEATHER_ERROR_TEXT = "Error loading weather"


class UIState(enum.Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    CHOOSING = "choosing"
    RESOLVED = "resolved"
    ERROR = "error"


@dataclass(frozen=True)
class DayRow:
    """One cell of the 10-day grid, ready to render."""

    day: str
    weather: WeatherCodeEntry
    high: int | None
    low: int | None


@dataclass(frozen=True)
class HourCell:
    """One cell of the 24-hour strip, ready to render."""

    time: str
    weather: WeatherCodeEntry
    details: str


def _round(value: float | None) -> int | None:
    return None if value is None else round(value)


def select_hourly_window(
    hourly: list[HourlyForecast],
    now: datetime,
    size: int = 24,
) -> list[HourlyForecast]:
    """Return up to `size` hours starting at the first hour not before now.

    If every hour is already in the past the window starts at the first one.
    """
    start = next((i for i, h in enumerate(hourly) if h.time >= now), 0)
    return hourly[start:start + size]


def format_day(day: DailyForecast) -> str:
    """Label like "Sun, Oct 18"."""
    return f"{day.date:%a}, {day.date:%b} {day.date.day}"


def format_hour(moment: datetime) -> str:
    """Label like "3 PM"."""
    hour = moment.hour % 12 or 12
    return f"{hour} {'AM' if moment.hour < 12 else 'PM'}"


def hour_details(hour: HourlyForecast) -> str:
    """Join temperature, precipitation chance and wind, e.g. "72°F · 10% · 5 mph"."""
    parts = []
    if hour.temperature is not None:
        parts.append(f"{round(hour.temperature)}°F")
    if hour.precipitation_probability is not None:
        parts.append(f"{round(hour.precipitation_probability)}%")
    if hour.wind_speed is not None:
        parts.append(f"{round(hour.wind_speed)} mph")
    return " · ".join(parts)


class WeatherView:
    """Everything the page displays, plus the current UI state.

    Args:
        codes: Weather code table used to label conditions.
        hourly_window: Number of hours shown in the hourly strip.
    """

    def __init__(
        self,
        codes: WeatherCodeTable | None = None,
        hourly_window: int | None = None,
    ) -> None:
        self.codes = codes or WeatherCodeTable()
        self.hourly_window = hourly_window or config.HOURLY_WINDOW
        self.state = UIState.IDLE
        self.header = IDLE_HEADER
        self.temperature = ""
        self.description: WeatherCodeEntry | str = ""
        self.forecast: list[DayRow] = []
        self.hourly: list[HourCell] = []
        self.candidates: list[GeocodeCandidate] = []
        self.background = "default"

    def _clear_panels(self) -> None:
        self.temperature = ""
        self.description = ""
        self.forecast = []
        self.hourly = []

    def show_idle(self) -> None:
        self.state = UIState.IDLE
        self.header = IDLE_HEADER
        self._clear_panels()
        self.candidates = []

    def show_searching(self) -> None:
        self.state = UIState.SEARCHING
        self.header = SEARCHING_HEADER
        self._clear_panels()
        self.candidates = []

    def show_candidates(self, candidates) -> None:
        self.state = UIState.CHOOSING
        self.candidates = list(candidates)

    def set_header(self, display: str) -> None:
        self.header = display or ""
        self.candidates = []

    def show_not_found(self) -> None:
        self.state = UIState.ERROR
        self.header = NOT_FOUND_HEADER
        self._clear_panels()
        self.candidates = []

    def show_find_error(self) -> None:
        self.state = UIState.ERROR
        self.header = FIND_ERROR_HEADER
        self.forecast = []
        self.hourly = []
        self.candidates = []

    def show_weather_error(self) -> None:
        """Forecast failed: keep the header, never leave a stale snapshot up."""
        self.state = UIState.ERROR
        self.temperature = ""
        self.description = WEATHER_ERROR_TEXT
        self.forecast = []
        self.hourly = []

    def render(self, snapshot: ForecastSnapshot, now: datetime) -> None:
        """Replace every weather panel with the contents of a new snapshot."""
        self.state = UIState.RESOLVED
        current = snapshot.current
        if current is not None:
            self.temperature = f"{round(current.temperature)}°F"
            self.description = self.codes.resolve(current.code)
            self.background = background_for(current.code)
        else:
            self.temperature = ""
            self.description = ""

        self.forecast = [
            DayRow(
                day=format_day(d),
                weather=self.codes.resolve(d.code, unknown_label=UNKNOWN_SHORT_LABEL),
                high=_round(d.temperature_max),
                low=_round(d.temperature_min),
            )
            for d in snapshot.daily
        ]
        self.hourly = [
            HourCell(
                time=format_hour(h.time),
                weather=self.codes.resolve(h.code, unknown_label="—"),
                details=hour_details(h),
            )
            for h in select_hourly_window(snapshot.hourly, now, self.hourly_window)
        ]
