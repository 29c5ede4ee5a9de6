"""Parse free-text location input into city and state tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass

_SEPARATORS = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class LocationQuery:
    """City and state tokens taken from raw user input.

    Attributes:
        city: Everything before the final token, joined by single spaces.
        state: The final token when there are two or more, else empty.
    """

    city: str
    state: str = ""


def parse_location(raw: str) -> LocationQuery:
    """Split "City, State", "City State" or "City" into a LocationQuery.

    The last token is always taken as the state once there are two or more,
    so "New York City" parses as city "New York" and state "City". Whether
    the state is real is left to the geocoder's filtering.
    """
    parts = [p for p in _SEPARATORS.split(raw or "") if p]
    if not parts:
        return LocationQuery(city="", state="")
    if len(parts) == 1:
        return LocationQuery(city=parts[0], state="")
    return LocationQuery(city=" ".join(parts[:-1]), state=parts[-1])
