"""History Store - Single owner of the persisted 7-day calorie log.

All reads and load-modify-save sequences run under one lock, so concurrent
callers never lose an increment. The log math itself is in core.history.
"""

import logging
import threading
from datetime import date
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from ..core.history import add_to_history, date_key, weekly_records
from ..core.models import DailyRecord
from .storage import KeyValueStore, StorageError


logger = logging.getLogger(__name__)

HISTORY_KEY = "user_diet_history_v1"

_records_adapter = TypeAdapter(list[DailyRecord])


class HistoryStore:
    """Rolling daily calorie totals backed by a KeyValueStore.

    Create one instance per process and hand it to whoever needs it; no
    other component should touch HISTORY_KEY directly.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        clock: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the store.

        Args:
            storage: Durable key-value backend
            clock: Returns the current calendar day
        """
        self._storage = storage
        self._clock = clock
        self._lock = threading.Lock()

    def _load(self) -> list[DailyRecord]:
        """Stored log; missing or corrupt data is empty, outages raise."""
        payload = self._storage.get(HISTORY_KEY)
        if payload is None:
            return []
        try:
            return _records_adapter.validate_json(payload)
        except ValidationError as e:
            logger.warning("Discarding unreadable history: %s", str(e))
            return []

    def _save(self, records: list[DailyRecord]) -> bool:
        payload = _records_adapter.dump_json(records, by_alias=True).decode("utf-8")
        saved = self._storage.set(HISTORY_KEY, payload)
        if not saved:
            logger.error("History was not persisted (%d records)", len(records))
        return saved

    def add_calories(self, amount: int) -> list[DailyRecord]:
        """Add calories to today's total.

        Args:
            amount: Calories to add

        Returns:
            The log as written, newest first

        Raises:
            ValueError: If amount is negative
            StorageError: If the stored log could not be read; nothing is written
        """
        if amount < 0:
            raise ValueError("amount must be non-negative")

        with self._lock:
            today = self._clock()
            try:
                current = self._load()
            except StorageError:
                logger.error("Skipping log of %d kcal: history unreadable", amount)
                raise
            records = add_to_history(current, amount, today)
            self._save(records)

        logger.info("Logged %d kcal for %s", amount, date_key(today))
        return records

    def get_weekly_records(self) -> list[DailyRecord]:
        """Last 7 days including today, oldest first, zero-filled.

        A backend outage shows an empty week; the stored log is untouched.
        """
        with self._lock:
            today = self._clock()
            try:
                records = self._load()
            except StorageError:
                logger.warning("History unreadable, showing an empty week")
                records = []
        return weekly_records(records, today)

    def today_calories(self) -> int:
        return self.get_weekly_records()[-1].total_calories
