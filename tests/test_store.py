"""Tests for the last-location store."""

import json
import logging
import threading

from weatherwidget.store import (
    KEY_DISPLAY,
    KEY_LAT,
    KEY_LON,
    KEY_RAW,
    Empty,
    JsonFileBackend,
    LastLocationStore,
    MappingBackend,
    RawOnly,
    ResolvedLocation,
    StorageUnavailableError,
)

AUSTIN = ResolvedLocation(
    raw="Austin, TX", latitude=30.2672, longitude=-97.7431, display="Austin, TX"
)
DENVER = ResolvedLocation(
    raw="Denver", latitude=39.7392, longitude=-104.9903, display="Denver, CO"
)


class _BrokenBackend:
    """Backend whose storage is denied."""

    def read(self):
        raise StorageUnavailableError("denied")

    def write(self, values):
        raise StorageUnavailableError("denied")


class TestSaveAndLoad:

    def test_empty_when_nothing_stored(self, tmp_path):
        store = LastLocationStore(JsonFileBackend(tmp_path / "last.json"))

        assert store.load() == Empty()

    def test_round_trip(self, tmp_path):
        store = LastLocationStore(JsonFileBackend(tmp_path / "last.json"))

        store.save(AUSTIN)

        assert store.load() == AUSTIN

    def test_writes_four_string_entries(self, tmp_path):
        path = tmp_path / "last.json"
        LastLocationStore(JsonFileBackend(path)).save(AUSTIN)

        data = json.loads(path.read_text())

        assert data == {
            KEY_RAW: "Austin, TX",
            KEY_LAT: "30.2672",
            KEY_LON: "-97.7431",
            KEY_DISPLAY: "Austin, TX",
        }

    def test_resave_is_byte_identical(self, tmp_path):
        path = tmp_path / "last.json"
        store = LastLocationStore(JsonFileBackend(path))
        store.save(AUSTIN)
        before = path.read_bytes()

        store.save(store.load())

        assert path.read_bytes() == before

    def test_new_location_overwrites(self, tmp_path):
        store = LastLocationStore(JsonFileBackend(tmp_path / "last.json"))
        store.save(AUSTIN)
        store.save(DENVER)

        assert store.load() == DENVER

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "last.json"

        LastLocationStore(JsonFileBackend(path)).save(AUSTIN)

        assert path.exists()


class TestPartialRecords:

    def test_raw_only(self, tmp_path):
        store = LastLocationStore(JsonFileBackend(tmp_path / "last.json"))

        store.save_raw("Concord NH")

        assert store.load() == RawOnly("Concord NH")

    def test_non_numeric_coordinates_fall_back_to_raw(self, tmp_path):
        path = tmp_path / "last.json"
        path.write_text(json.dumps({KEY_RAW: "Austin", KEY_LAT: "abc", KEY_LON: "1.0"}))

        assert LastLocationStore(JsonFileBackend(path)).load() == RawOnly("Austin")

    def test_non_finite_coordinates_are_rejected(self, tmp_path):
        path = tmp_path / "last.json"
        path.write_text(json.dumps({KEY_LAT: "nan", KEY_LON: "inf"}))

        assert LastLocationStore(JsonFileBackend(path)).load() == Empty()

    def test_coordinates_without_display(self, tmp_path):
        path = tmp_path / "last.json"
        path.write_text(json.dumps({KEY_LAT: "30.0", KEY_LON: "-97.0"}))

        loaded = LastLocationStore(JsonFileBackend(path)).load()

        assert loaded == ResolvedLocation(raw="", latitude=30.0, longitude=-97.0, display="")


class TestStorageUnavailable:

    def test_corrupt_file_loads_empty(self, tmp_path, caplog):
        path = tmp_path / "last.json"
        path.write_text("{not json")

        with caplog.at_level(logging.WARNING, logger="weatherwidget.store"):
            assert LastLocationStore(JsonFileBackend(path)).load() == Empty()
        assert "Local storage not available" in caplog.text

    def test_denied_backend_is_silent(self, caplog):
        store = LastLocationStore(_BrokenBackend())

        with caplog.at_level(logging.WARNING, logger="weatherwidget.store"):
            store.save(AUSTIN)
            store.save_raw("Austin")
            assert store.load() == Empty()
        assert "denied" in caplog.text

    def test_unwritable_path_is_silent(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = LastLocationStore(JsonFileBackend(blocker / "last.json"))

        store.save(AUSTIN)

        assert store.load() == Empty()


class TestPerClientRecords:
    """Each visitor's record lives in that visitor's own mapping."""

    def test_two_clients_do_not_see_each_other(self):
        client_a = LastLocationStore(MappingBackend({}))
        client_b = LastLocationStore(MappingBackend({}))

        client_a.save(AUSTIN)

        assert client_b.load() == Empty()

        client_b.save(DENVER)

        assert client_a.load() == AUSTIN
        assert client_b.load() == DENVER

    def test_writes_string_entries_into_the_mapping(self):
        params = {}

        LastLocationStore(MappingBackend(params)).save(AUSTIN)

        assert params == {
            KEY_RAW: "Austin, TX",
            KEY_LAT: "30.2672",
            KEY_LON: "-97.7431",
            KEY_DISPLAY: "Austin, TX",
        }

    def test_unrelated_keys_are_left_alone(self):
        params = {"utm_source": "newsletter"}
        store = LastLocationStore(MappingBackend(params))

        store.save_raw("Concord NH")

        assert params["utm_source"] == "newsletter"
        assert store.load() == RawOnly("Concord NH")


class TestConcurrentAccess:

    def test_backends_on_one_file_share_a_lock(self, tmp_path):
        path = tmp_path / "last.json"

        assert JsonFileBackend(path).lock is JsonFileBackend(path).lock
        assert JsonFileBackend(path).lock is not JsonFileBackend(tmp_path / "other.json").lock

    def test_parallel_save_and_load_never_sees_a_partial_record(self, tmp_path, caplog):
        path = tmp_path / "last.json"
        LastLocationStore(JsonFileBackend(path)).save(AUSTIN)
        locations = [AUSTIN, DENVER]
        loads = []

        def worker(n):
            store = LastLocationStore(JsonFileBackend(path))
            for i in range(200):
                store.save(locations[(n + i) % 2])
                loads.append(store.load())

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        with caplog.at_level(logging.WARNING, logger="weatherwidget.store"):
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert len(loads) == 800
        assert all(loaded in locations for loaded in loads)
        assert "Local storage not available" not in caplog.text

    def test_write_leaves_no_temporary_files(self, tmp_path):
        path = tmp_path / "last.json"
        store = LastLocationStore(JsonFileBackend(path))

        store.save(AUSTIN)
        store.save(DENVER)

        assert [p.name for p in tmp_path.iterdir()] == ["last.json"]
