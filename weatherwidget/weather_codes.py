"""WMO weather code -> label, icon asset and background category."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType


@dataclass(frozen=True)
class WeatherCodeEntry:
    """Display data for one weather code.

    Attributes:
        code: WMO weather interpretation code (None for the unknown entry).
        label: Human-readable condition.
        icon: Icon file name under the icon directory.
    """

    code: int | None
    label: str
    icon: str


UNKNOWN_ICON = "unknown.png"
UNKNOWN_LABEL = "Unknown conditions"
UNKNOWN_SHORT_LABEL = "Unknown"

_ENTRIES = [
    (0, "0.png", "Clear sky"),
    (1, "2.png", "Mainly Clear"),
    (2, "2.png", "Partly cloudy"),
    (3, "3.png", "Overcast"),
    (45, "0.png", "Fog"),
    (48, "0.png", "Depositing rime fog"),
    (51, "0.png", "Light drizzle"),
    (53, "0.png", "Moderate drizzle"),
    (55, "0.png", "Dense drizzle"),
    (56, "0.png", "Light freezing drizzle"),
    (57, "0.png", "Dense freezing drizzle"),
    (61, "61.png", "Slight rain"),
    (63, "61.png", "Moderate rain"),
    (65, "65.png", "Heavy rain"),
    (66, "65.png", "Light freezing rain"),
    (67, "65.png", "Heavy freezing rain"),
    (71, "71.png", "Slight snow"),
    (73, "73.png", "Moderate snow"),
    (75, "73.png", "Heavy snow"),
    (77, "73.png", "Snow grains"),
    (80, "73.png", "Slight rain showers"),
    (81, "73.png", "Moderate rain showers"),
    (82, "73.png", "Violent rain showers"),
    (85, "73.png", "Slight snow showers"),
    (86, "73.png", "Heavy snow showers"),
    (95, "95.png", "Thunderstorm"),
    (96, "95.png", "Thunderstorm with slight hail"),
    (99, "95.png", "Thunderstorm with heavy hail"),
]

WMO_WEATHER_CODES: Mapping[int, WeatherCodeEntry] = MappingProxyType(
    {code: WeatherCodeEntry(code, label, icon) for code, icon, label in _ENTRIES}
)

# Background grouping used to pick the page gradient
_BACKGROUND_GROUPS: dict[str, frozenset[int]] = {
    "clear": frozenset({0, 1}),
    "cloudy": frozenset({2, 3, 45, 48}),
    "rain": frozenset({51, 53, 55, 61, 63, 65, 80, 81, 82}),
    "snow": frozenset({71, 73, 75, 77, 85, 86}),
    "thunder": frozenset({95, 96, 99}),
}


class WeatherCodeTable:
    """Total lookup over a fixed weather code mapping.

    Args:
        entries: Immutable mapping of code to entry.
        unknown: Entry returned for codes missing from the mapping.
    """

    def __init__(
        self,
        entries: Mapping[int, WeatherCodeEntry] = WMO_WEATHER_CODES,
        unknown: WeatherCodeEntry = WeatherCodeEntry(None, UNKNOWN_LABEL, UNKNOWN_ICON),
    ) -> None:
        self._entries = entries
        self._unknown = unknown

    def resolve(self, code: int | None, unknown_label: str | None = None) -> WeatherCodeEntry:
        """Return the entry for a code; never raises and never returns None.

        Args:
            code: Weather code from the forecast (may be None or a float).
            unknown_label: Label to use instead of the default when the
                code is not in the table (the daily grid uses "Unknown").
        """
        try:
            entry = self._entries.get(int(code))
        except (TypeError, ValueError, OverflowError):
            entry = None
        if entry is not None:
            return entry
        if unknown_label is not None:
            return replace(self._unknown, label=unknown_label)
        return self._unknown


def background_for(code: int | None) -> str:
    """Map a weather code to clear/cloudy/rain/snow/thunder/default."""
    for name, codes in _BACKGROUND_GROUPS.items():
        if code in codes:
            return name
    return "default"
