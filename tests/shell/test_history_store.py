"""Tests for HistoryStore - persistence, retention and concurrency."""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta
from unittest.mock import patch

import pytest

from calorie_coach.shell.history_store import HISTORY_KEY, HistoryStore
from calorie_coach.shell.storage import (
    FirestoreKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    StorageError,
)


class FakeClock:
    """Controllable calendar day."""

    def __init__(self, today: date) -> None:
        self.today = today

    def __call__(self) -> date:
        return self.today

    def advance(self, days: int = 1) -> None:
        self.today += timedelta(days=days)


class FailingStore(InMemoryKeyValueStore):
    """Storage whose writes always fail."""

    def set(self, key: str, value: str) -> bool:
        return False


@pytest.fixture
def clock():
    return FakeClock(date(2025, 3, 10))


@pytest.fixture
def storage():
    return InMemoryKeyValueStore()


@pytest.fixture
def store(storage, clock):
    return HistoryStore(storage, clock=clock)


class TestAddCalories:
    """Tests for HistoryStore.add_calories."""

    def test_first_log_on_empty_store(self, store):
        """One log gives seven days with only today filled."""
        store.add_calories(150)
        week = store.get_weekly_records()

        assert len(week) == 7
        assert week[-1].date_string == "2025-03-10"
        assert week[-1].total_calories == 150
        assert all(r.total_calories == 0 for r in week[:-1])

    def test_same_day_accumulates(self, store, storage):
        """Two logs on one day make a single record."""
        store.add_calories(100)
        store.add_calories(100)

        stored = json.loads(storage.get(HISTORY_KEY))
        assert stored == [{"dateString": "2025-03-10", "totalCalories": 200}]

    def test_persisted_layout_sorted_descending(self, store, storage, clock):
        """Stored list is newest first with camelCase field names."""
        store.add_calories(300)
        clock.advance()
        store.add_calories(400)

        stored = json.loads(storage.get(HISTORY_KEY))
        assert stored == [
            {"dateString": "2025-03-11", "totalCalories": 400},
            {"dateString": "2025-03-10", "totalCalories": 300},
        ]

    def test_retains_seven_days(self, store, storage, clock):
        """After eight days of logs only the latest seven are stored."""
        for _ in range(8):
            store.add_calories(100)
            clock.advance()
        clock.advance(-1)

        stored = json.loads(storage.get(HISTORY_KEY))
        assert len(stored) == 7
        assert stored[-1]["dateString"] == "2025-03-11"

        week = store.get_weekly_records()
        oldest_allowed = (clock.today - timedelta(days=6)).isoformat()
        assert len(week) == 7
        assert all(r.date_string >= oldest_allowed for r in week)

    def test_negative_amount_rejected(self, store):
        """Calories cannot be subtracted."""
        with pytest.raises(ValueError):
            store.add_calories(-10)

    def test_returns_written_log(self, store):
        """The new log is returned newest first."""
        records = store.add_calories(250)
        assert records[0].date_string == "2025-03-10"
        assert records[0].total_calories == 250


class TestGetWeeklyRecords:
    """Tests for HistoryStore.get_weekly_records."""

    def test_empty_store(self, store):
        """No history gives seven zero days."""
        week = store.get_weekly_records()
        assert [r.total_calories for r in week] == [0] * 7

    def test_window_follows_clock(self, store, clock):
        """Old logs scroll out of the window as days pass."""
        store.add_calories(500)
        clock.advance(7)
        week = store.get_weekly_records()
        assert sum(r.total_calories for r in week) == 0
        assert week[-1].date_string == "2025-03-17"

    def test_today_calories(self, store):
        store.add_calories(120)
        store.add_calories(80)
        assert store.today_calories() == 200


class TestPersistence:
    """Tests for reloading and damaged data."""

    def test_restart_reproduces_records(self, tmp_path, clock):
        """A new store over the same file sees the same log."""
        path = tmp_path / "data.json"
        first = HistoryStore(JsonFileKeyValueStore(path), clock=clock)
        first.add_calories(300)
        clock.advance()
        first.add_calories(450)
        before = first.get_weekly_records()

        second = HistoryStore(JsonFileKeyValueStore(path), clock=clock)
        assert second.get_weekly_records() == before

    def test_corrupt_payload_is_empty(self, storage, clock):
        """Unreadable history is treated as empty."""
        storage.set(HISTORY_KEY, "not json at all")
        store = HistoryStore(storage, clock=clock)
        assert sum(r.total_calories for r in store.get_weekly_records()) == 0

    def test_invalid_records_are_empty(self, storage, clock):
        """Well-formed JSON with bad records is treated as empty."""
        storage.set(HISTORY_KEY, json.dumps([{"dateString": "yesterday", "totalCalories": 5}]))
        store = HistoryStore(storage, clock=clock)
        assert store.today_calories() == 0

    def test_corrupt_payload_heals_on_write(self, storage, clock):
        """The next log starts a fresh history."""
        storage.set(HISTORY_KEY, "{broken")
        store = HistoryStore(storage, clock=clock)
        store.add_calories(90)

        assert json.loads(storage.get(HISTORY_KEY)) == [
            {"dateString": "2025-03-10", "totalCalories": 90}
        ]

    def test_write_failure_not_raised(self, clock):
        """A failed write is not surfaced and the log stays empty."""
        store = HistoryStore(FailingStore(), clock=clock)
        records = store.add_calories(200)

        assert records[0].total_calories == 200
        assert store.today_calories() == 0


@pytest.fixture
def firestore_ref():
    """Document reference of a mocked Firestore holding 1500 kcal today."""
    with patch("calorie_coach.shell.storage.firestore") as mock_fs:
        ref = (
            mock_fs.Client.return_value
            .collection.return_value
            .document.return_value
            .collection.return_value
            .document.return_value
        )
        doc = ref.get.return_value
        doc.exists = True
        doc.to_dict.return_value = {
            "value": json.dumps([{"dateString": "2025-03-10", "totalCalories": 1500}])
        }
        yield ref


class TestBackendOutage:
    """Tests for a storage backend that cannot be read."""

    def test_failed_read_skips_write(self, firestore_ref, clock):
        """Logging during an outage raises and leaves the stored log alone."""
        store = HistoryStore(FirestoreKeyValueStore(), clock=clock)
        firestore_ref.get.side_effect = RuntimeError("503")

        with pytest.raises(StorageError):
            store.add_calories(200)
        firestore_ref.set.assert_not_called()

    def test_log_after_recovery_adds_to_stored_total(self, firestore_ref, clock):
        """Once reads work again the next log builds on the stored week."""
        store = HistoryStore(FirestoreKeyValueStore(), clock=clock)
        firestore_ref.get.side_effect = RuntimeError("503")
        with pytest.raises(StorageError):
            store.add_calories(200)

        firestore_ref.get.side_effect = None
        store.add_calories(200)

        written = json.loads(firestore_ref.set.call_args.args[0]["value"])
        assert written == [{"dateString": "2025-03-10", "totalCalories": 1700}]

    def test_weekly_read_during_outage(self, firestore_ref, clock):
        """Reads degrade to an empty week without writing."""
        store = HistoryStore(FirestoreKeyValueStore(), clock=clock)
        firestore_ref.get.side_effect = RuntimeError("503")

        week = store.get_weekly_records()

        assert [r.total_calories for r in week] == [0] * 7
        firestore_ref.set.assert_not_called()


class TestConcurrency:
    """Tests for concurrent access."""

    def test_no_lost_updates(self, store):
        """Parallel increments all land."""
        calls = 200
        with ThreadPoolExecutor(max_workers=16) as pool:
            list(pool.map(lambda _: store.add_calories(1), range(calls)))

        assert store.today_calories() == calls

    def test_reads_during_writes_are_consistent(self, store):
        """Readers always get a full week while writers run."""
        def write(_):
            store.add_calories(5)
            return None

        def read(_):
            return store.get_weekly_records()

        with ThreadPoolExecutor(max_workers=8) as pool:
            writes = [pool.submit(write, i) for i in range(50)]
            reads = [pool.submit(read, i) for i in range(50)]
            weeks = [f.result() for f in reads]
            for f in writes:
                f.result()

        assert all(len(week) == 7 for week in weeks)
        assert store.today_calories() == 250
