"""Geocoding module for resolving US city/state input to coordinates.

Queries the Open-Meteo geocoding API for up to eight US places by name,
narrows them by the state the user typed, and either picks the single
remaining place or hands back the list for the user to choose from.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import httpx

from weatherwidget import config
from weatherwidget.states import StateNormalizer

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Base class for location lookup errors."""


class LocationNotFoundError(GeocodingError):
    """Raised when the geocoder has no place matching the query."""


class GeocodeFailedError(GeocodingError):
    """Raised on network errors or an unusable geocoder response."""


@dataclass(frozen=True)
class GeocodeCandidate:
    """A single place returned by the geocoder.

    Attributes:
        name: Place name (e.g., "Concord").
        latitude: Decimal latitude.
        longitude: Decimal longitude.
        country_code: ISO country code (e.g., "US").
        state: State or first-level admin area as the geocoder spells it.
        country: Country name.
    """

    name: str
    latitude: float
    longitude: float
    country_code: str = ""
    state: str = ""
    country: str = ""


@dataclass(frozen=True)
class AutoSelected:
    """Exactly one plausible place; use it without asking."""

    candidate: GeocodeCandidate


@dataclass(frozen=True)
class CandidateList:
    """Several plausible places; the user must pick one."""

    candidates: tuple[GeocodeCandidate, ...]


def _create_client() -> httpx.Client:
    """Create an httpx client for geocoding requests."""
    kwargs = {"headers": {"User-Agent": config.USER_AGENT}}
    if config.REQUEST_TIMEOUT is not None:
        kwargs["timeout"] = config.REQUEST_TIMEOUT
    return httpx.Client(**kwargs)


def _parse_candidate(raw: dict) -> GeocodeCandidate:
    """Build a GeocodeCandidate from one entry of the "results" array."""
    latitude = float(raw["latitude"])
    longitude = float(raw["longitude"])
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise ValueError("non-finite coordinates")
    return GeocodeCandidate(
        name=raw.get("name", ""),
        latitude=latitude,
        longitude=longitude,
        country_code=raw.get("country_code", ""),
        state=raw.get("state") or raw.get("admin1") or raw.get("admin1_code") or "",
        country=raw.get("country", ""),
    )


def search_places(
    name: str,
    state: str = "",
    count: int | None = None,
) -> list[GeocodeCandidate]:
    """Look up US places by name.

    Args:
        name: City name to search for.
        state: Optional state hint passed through to the API.
        count: Maximum number of results (1 for a single best guess,
            8 when offering a choice). Defaults to config.GEOCODE_COUNT.

    Returns:
        Candidates in the order the geocoder ranked them (possibly empty).

    Raises:
        GeocodeFailedError: On HTTP errors, non-200 responses or bad JSON.
    """
    params = {
        "name": name or "",
        "country": "US",
        "count": str(count if count is not None else config.GEOCODE_COUNT),
    }
    if state:
        params["state"] = state

    logger.debug("Geocoding %r (state=%r)", name, state)
    client = _create_client()
    try:
        try:
            response = client.get(config.GEOCODING_URL, params=params)
        except httpx.HTTPError as exc:
            raise GeocodeFailedError(f"HTTP error communicating with geocoder: {exc}")

        if response.status_code != 200:
            raise GeocodeFailedError(
                f"Unexpected response from geocoder (HTTP {response.status_code})."
            )

        try:
            data = response.json()
            results = (data or {}).get("results") or []
            return [_parse_candidate(r) for r in results]
        except (ValueError, KeyError, TypeError, AttributeError):
            raise GeocodeFailedError("Received an invalid response from the geocoder.")
    finally:
        client.close()


def filter_by_state(
    candidates: list[GeocodeCandidate],
    state: str,
    normalizer: StateNormalizer | None = None,
) -> list[GeocodeCandidate]:
    """Keep candidates in the given state, or all of them if none match.

    "NH", "nh" and "New Hampshire" are treated as the same state on either
    side of the comparison.
    """
    if not state:
        return list(candidates)
    normalizer = normalizer or StateNormalizer()
    matches = [c for c in candidates if normalizer.same_state(c.state, state)]
    return matches or list(candidates)


def resolve(
    city: str,
    state: str = "",
    normalizer: StateNormalizer | None = None,
) -> AutoSelected | CandidateList:
    """Resolve a parsed city/state pair to one place or a list to choose from.

    Args:
        city: City name (must not be empty).
        state: Optional state name or abbreviation.
        normalizer: State table to compare with; the built-in table by default.

    Returns:
        AutoSelected when exactly one place remains after state filtering,
        otherwise CandidateList with every remaining place.

    Raises:
        LocationNotFoundError: If the geocoder returns no places at all.
        GeocodeFailedError: On network or response errors.
    """
    results = search_places(city, state)
    if not results:
        raise LocationNotFoundError(f"No US location matches {city!r}.")

    filtered = filter_by_state(results, state, normalizer)
    if len(filtered) == 1:
        return AutoSelected(filtered[0])
    return CandidateList(tuple(filtered))


def place_display(
    candidate: GeocodeCandidate,
    normalizer: StateNormalizer | None = None,
) -> str:
    """Format a candidate as a header label, e.g. "Concord, NH"."""
    normalizer = normalizer or StateNormalizer()
    state = candidate.state
    is_us = candidate.country_code == "US" or (
        "united states" in (candidate.country or "").lower()
    )
    if is_us:
        abbr = normalizer.to_abbreviation(state)
        return f"{candidate.name}, {abbr}" if abbr else candidate.name
    if state:
        return f"{candidate.name}, {state}"
    if candidate.country:
        return f"{candidate.name}, {candidate.country}"
    return candidate.name
