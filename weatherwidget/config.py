"""Centralized configuration loaded from environment variables.

All settings are read from environment variables with sensible defaults,
so the widget runs unchanged locally or in a hosted Streamlit deployment.
"""

import os
from pathlib import Path


def _get_int(key: str, default: int) -> int:
    """Read an integer environment variable with a default."""
    return int(os.environ.get(key, str(default)))


def _get_optional_float(key: str) -> float | None:
    """Read a float environment variable, or None when it is unset or blank."""
    value = os.environ.get(key, "").strip()
    return float(value) if value else None


# Open-Meteo endpoints (no API key required)
GEOCODING_URL: str = os.environ.get(
    "WX_GEOCODING_URL", "https://geocoding-api.open-meteo.com/v1/search"
)
FORECAST_URL: str = os.environ.get(
    "WX_FORECAST_URL", "https://api.open-meteo.com/v1/forecast"
)
USER_AGENT: str = os.environ.get("WX_USER_AGENT", "us-weather-widget")

# None leaves httpx's own default timeout in place
REQUEST_TIMEOUT: float | None = _get_optional_float("WX_REQUEST_TIMEOUT")

GEOCODE_COUNT: int = _get_int("WX_GEOCODE_COUNT", 8)
FORECAST_DAYS: int = _get_int("WX_FORECAST_DAYS", 10)
HOURLY_WINDOW: int = _get_int("WX_HOURLY_WINDOW", 24)

# Last-location store and static assets
STORE_PATH: Path = Path(
    os.environ.get(
        "WX_STORE_PATH",
        str(Path.home() / ".weatherwidget" / "last_location.json"),
    )
).expanduser()
# "browser" keeps one record per visitor in the page URL; "file" uses STORE_PATH
STORE_BACKEND: str = os.environ.get("WX_STORE_BACKEND", "browser").lower()
ICON_DIR: Path = Path(os.environ.get("WX_ICON_DIR", "icons"))

LOG_LEVEL: str = os.environ.get("WX_LOG_LEVEL", "INFO").upper()
