"""Persist the last successfully resolved location between sessions.

The record is four string entries in a small key-value backend: the raw
search text, latitude, longitude and the header label. In the Streamlit app
the backend is the visitor's own URL query string, so each browser keeps its
own record; JsonFileBackend serves local runs and tests. Storage problems are
logged and otherwise ignored; the widget works the same without them.
"""

from __future__ import annotations

import json
import logging
import math
import os
import tempfile
import threading
from collections.abc import MutableMapping
from dataclasses import dataclass
from pathlib import Path

from weatherwidget import config

logger = logging.getLogger(__name__)

KEY_RAW = "wx:lastRaw"
KEY_LAT = "wx:lastLat"
KEY_LON = "wx:lastLon"
KEY_DISPLAY = "wx:lastDisplay"
RECORD_KEYS = (KEY_RAW, KEY_LAT, KEY_LON, KEY_DISPLAY)

# One lock per file, shared by every backend opened on it
_path_locks: dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.expanduser().absolute()
    with _path_locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


class StorageUnavailableError(Exception):
    """Raised by a backend that cannot be read or written."""


@dataclass(frozen=True)
class ResolvedLocation:
    """A chosen place plus the text the user typed to find it.

    Attributes:
        raw: Original search text.
        latitude: Decimal latitude.
        longitude: Decimal longitude.
        display: Header label (e.g., "Austin, TX").
    """

    raw: str
    latitude: float
    longitude: float
    display: str


@dataclass(frozen=True)
class RawOnly:
    """Only the search text survived; it has to be geocoded again."""

    raw: str


@dataclass(frozen=True)
class Empty:
    """Nothing stored."""


class JsonFileBackend:
    """String key-value storage in a single JSON file.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a reader sees either the old record or the new one.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.lock = _lock_for(self.path)

    def read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageUnavailableError(f"Cannot read {self.path}: {exc}")
        if not isinstance(data, dict):
            raise StorageUnavailableError(f"{self.path} does not hold a JSON object.")
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def write(self, values: dict[str, str]) -> None:
        text = json.dumps(values, indent=2, sort_keys=True) + "\n"
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageUnavailableError(f"Cannot write {self.path}: {exc}")


class MappingBackend:
    """Keeps the record in a caller-owned string mapping.

    The app passes ``st.query_params``, which belongs to one browser tab and
    survives reloads of its URL. Keys outside the record are left alone.
    """

    def __init__(self, mapping: MutableMapping[str, str]) -> None:
        self.mapping = mapping
        self.lock = threading.Lock()

    def read(self) -> dict[str, str]:
        return {key: str(self.mapping[key]) for key in RECORD_KEYS if key in self.mapping}

    def write(self, values: dict[str, str]) -> None:
        for key in RECORD_KEYS:
            if key in values:
                self.mapping[key] = values[key]


def _parse_coordinate(value: str | None) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class LastLocationStore:
    """Reads and writes the last-location record.

    Args:
        backend: Object with read() -> dict and write(dict) methods, and
            optionally a `lock` shared by everything using the same storage.
            Defaults to a JsonFileBackend at config.STORE_PATH.
    """

    def __init__(self, backend: JsonFileBackend | MappingBackend | None = None) -> None:
        self.backend = backend if backend is not None else JsonFileBackend(config.STORE_PATH)
        self._lock = getattr(self.backend, "lock", None) or threading.Lock()

    def _read(self) -> dict[str, str]:
        try:
            with self._lock:
                return self.backend.read()
        except StorageUnavailableError as exc:
            logger.warning("Local storage not available: %s", exc)
            return {}

    def _update(self, values: dict[str, str]) -> None:
        with self._lock:
            try:
                record = self.backend.read()
            except StorageUnavailableError:
                record = {}
            record.update(values)
            try:
                self.backend.write(record)
            except StorageUnavailableError as exc:
                logger.warning("Local storage not available: %s", exc)

    def save_raw(self, raw: str) -> None:
        """Remember the search text as soon as a search is submitted."""
        if raw:
            self._update({KEY_RAW: raw})

    def save(self, resolved: ResolvedLocation) -> None:
        """Overwrite the record with a newly resolved location."""
        values = {}
        if resolved.raw:
            values[KEY_RAW] = resolved.raw
        if math.isfinite(resolved.latitude) and math.isfinite(resolved.longitude):
            values[KEY_LAT] = repr(float(resolved.latitude))
            values[KEY_LON] = repr(float(resolved.longitude))
        if resolved.display:
            values[KEY_DISPLAY] = resolved.display
        self._update(values)

    def load(self) -> ResolvedLocation | RawOnly | Empty:
        """Return the stored location, just its raw text, or Empty."""
        record = self._read()
        raw = record.get(KEY_RAW, "")
        lat = _parse_coordinate(record.get(KEY_LAT))
        lon = _parse_coordinate(record.get(KEY_LON))

        if lat is not None and lon is not None:
            return ResolvedLocation(
                raw=raw,
                latitude=lat,
                longitude=lon,
                display=record.get(KEY_DISPLAY, ""),
            )
        if raw:
            return RawOnly(raw)
        return Empty()
