"""Search -> geocode -> choose -> forecast -> render control flow."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from weatherwidget import forecast, geocoding
from weatherwidget.forecast import ForecastError, ForecastSnapshot
from weatherwidget.geocoding import (
    AutoSelected,
    CandidateList,
    GeocodeCandidate,
    GeocodeFailedError,
    LocationNotFoundError,
    place_display,
)
from weatherwidget.location import parse_location
from weatherwidget.presentation import WeatherView
from weatherwidget.states import StateNormalizer
from weatherwidget.store import LastLocationStore, RawOnly, ResolvedLocation

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeatherWidget:
    """Drives the view from user searches, candidate picks and startup restore.

    Every search or pick takes a new sequence number; results that arrive for
    an older number are dropped so a superseded request cannot overwrite the
    display.

    Args:
        view: The view model to update.
        store: Last-location store.
        resolver: Callable (city, state) -> AutoSelected | CandidateList.
        forecaster: Callable (lat, lon) -> ForecastSnapshot.
        clock: Returns the current aware datetime.
        normalizer: State table used for header labels.
    """

    def __init__(
        self,
        view: WeatherView,
        store: LastLocationStore,
        resolver: Callable[[str, str], AutoSelected | CandidateList] = geocoding.resolve,
        forecaster: Callable[[float, float], ForecastSnapshot] = forecast.get_forecast,
        clock: Callable[[], datetime] = _utcnow,
        normalizer: StateNormalizer | None = None,
    ) -> None:
        self.view = view
        self.store = store
        self.resolver = resolver
        self.forecaster = forecaster
        self.clock = clock
        self.normalizer = normalizer or StateNormalizer()
        self.raw = ""
        self._sequence = 0

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _is_stale(self, seq: int) -> bool:
        if seq != self._sequence:
            logger.debug("Dropping stale completion %d (current %d)", seq, self._sequence)
            return True
        return False

    def search(self, raw: str) -> None:
        """Handle a submitted search box value."""
        raw = (raw or "").strip()
        if not raw:
            return
        query = parse_location(raw)
        if not query.city:
            return

        seq = self._next_sequence()
        self.raw = raw
        self.view.show_searching()
        self.store.save_raw(raw)

        try:
            outcome = self.resolver(query.city, query.state)
        except LocationNotFoundError:
            if not self._is_stale(seq):
                logger.info("No location found for %r", raw)
                self.view.show_not_found()
            return
        except GeocodeFailedError as exc:
            if not self._is_stale(seq):
                logger.warning("Error finding location %r: %s", raw, exc)
                self.view.show_find_error()
            return

        if self._is_stale(seq):
            return
        if isinstance(outcome, AutoSelected):
            self.choose(outcome.candidate)
        else:
            self.view.show_candidates(outcome.candidates)

    def place_label(self, candidate: GeocodeCandidate) -> str:
        return place_display(candidate, self.normalizer)

    def candidate_label(self, candidate: GeocodeCandidate) -> str:
        """Button text for the "did you mean" list.

        US states are spelled out: "Concord, New Hampshire  (43.21, -71.54)".
        """
        abbr = self.normalizer.to_abbreviation(candidate.state)
        state_name = self.normalizer.to_state_name(abbr)
        if state_name and state_name != abbr:
            place = f"{candidate.name}, {state_name}"
        else:
            place = self.place_label(candidate)
        return f"{place}  ({candidate.latitude:.2f}, {candidate.longitude:.2f})"

    def choose(self, candidate: GeocodeCandidate) -> None:
        """Use a place, whether auto-selected or picked from the list."""
        seq = self._next_sequence()
        display = self.place_label(candidate)
        self.view.set_header(display)
        self.store.save(
            ResolvedLocation(
                raw=self.raw,
                latitude=candidate.latitude,
                longitude=candidate.longitude,
                display=display,
            )
        )
        self._load_weather(seq, candidate.latitude, candidate.longitude)

    def restore(self) -> bool:
        """Show the last location on startup. Returns False if nothing was stored."""
        saved = self.store.load()
        if isinstance(saved, ResolvedLocation):
            self.raw = saved.raw
            seq = self._next_sequence()
            self.view.set_header(saved.display)
            self._load_weather(seq, saved.latitude, saved.longitude)
            return True
        if isinstance(saved, RawOnly):
            self.search(saved.raw)
            return True
        self.view.show_idle()
        return False

    def _load_weather(self, seq: int, latitude: float, longitude: float) -> None:
        try:
            snapshot = self.forecaster(latitude, longitude)
        except ForecastError as exc:
            if not self._is_stale(seq):
                logger.warning("Error loading weather for %s,%s: %s", latitude, longitude, exc)
                self.view.show_weather_error()
            return
        if not self._is_stale(seq):
            self.view.render(snapshot, self.clock())
