"""Shared test fixtures for Open-Meteo response data."""

import pytest


def make_place(name, state, lat=40.0, lon=-75.0, country_code="US"):
    """One entry of an Open-Meteo geocoding "results" array."""
    return {
        "name": name,
        "latitude": lat,
        "longitude": lon,
        "country": "United States",
        "country_code": country_code,
        "admin1": state,
    }


@pytest.fixture()
def austin_response():
    """Geocoding response with a single Texas match."""
    return {"results": [make_place("Austin", "Texas", 30.2672, -97.7431)]}


@pytest.fixture()
def concord_response():
    """Geocoding response with Concords in New Hampshire and Massachusetts."""
    return {
        "results": [
            make_place("Concord", "New Hampshire", 43.2081, -71.5376),
            make_place("Concord", "Massachusetts", 42.4604, -71.3489),
            make_place("Concord", "NH", 43.2, -71.5),
        ]
    }


@pytest.fixture()
def forecast_response():
    """Forecast response: two days of daily data and four hours of hourly data."""
    return {
        "latitude": 30.27,
        "longitude": -97.74,
        "timezone": "America/Chicago",
        "utc_offset_seconds": -18000,
        "current_weather": {
            "time": "2026-10-18T14:00",
            "temperature": 81.6,
            "windspeed": 9.4,
            "weathercode": 2,
        },
        "daily": {
            "time": ["2026-10-18", "2026-10-19"],
            "temperature_2m_max": [84.2, 79.5],
            "temperature_2m_min": [63.1, 60.4],
            "weathercode": [2, 61],
        },
        "hourly": {
            "time": [
                "2026-10-18T13:00",
                "2026-10-18T14:00",
                "2026-10-18T15:00",
                "2026-10-18T16:00",
            ],
            "temperature_2m": [80.1, 81.6, 82.4, 82.0],
            "weathercode": [2, 2, 3, 61],
            "precipitation_probability": [0, 5, 10, 40],
            "precipitation": [0.0, 0.0, 0.0, 0.02],
            "relativehumidity_2m": [48, 45, 44, 50],
            "windspeed_10m": [8.2, 9.4, 10.6, 12.5],
        },
    }
