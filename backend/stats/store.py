"""In-memory record store for the selected day.

The list is never mutated in place: every add/remove builds a new list,
swaps it in and notifies subscribers with (day_date, records). Subscribers
are how the rest of the app learns about a change (persisting the day,
refreshing the activity log); the store itself does no I/O.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

from stats.schemas import ExamRecord, RecordCreate

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str, list[ExamRecord]], None]


class RecordIdFactory:
    """Millisecond timestamp ids, bumped so two ids are never equal."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        now_ms = int(self._clock() * 1000)
        self._last = max(now_ms, self._last + 1)
        return str(self._last)


class RecordStore:
    def __init__(self, day_date: str, new_id: Callable[[], str] | None = None):
        self._day_date = day_date
        self._records: list[ExamRecord] = []
        self._new_id = new_id or RecordIdFactory()
        self._listeners: list[ChangeListener] = []

    # ---- Read-only views ----

    @property
    def day_date(self) -> str:
        return self._day_date

    @property
    def records(self) -> list[ExamRecord]:
        """Insertion order (the persisted order)."""
        return list(self._records)

    def display_order(self) -> list[ExamRecord]:
        """Most recent first."""
        return list(reversed(self._records))

    def __len__(self) -> int:
        return len(self._records)

    # ---- Subscriptions ----

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.records
        for listener in list(self._listeners):
            listener(self._day_date, snapshot)

    # ---- Mutations ----

    def add(self, candidate: RecordCreate) -> ExamRecord | None:
        """Append a new record. Zero-solved candidates are ignored (returns None)."""
        if candidate.solved == 0:
            logger.debug("Ignoring record with zero solved for %s", self._day_date)
            return None

        record = ExamRecord(id=self._new_id(), **candidate.model_dump())
        self._records = [*self._records, record]
        self._notify()
        return record

    def remove(self, record_id: str) -> bool:
        """Drop the record with this id. Unknown ids still notify, like any mutation."""
        updated = [r for r in self._records if r.id != record_id]
        removed = len(updated) != len(self._records)
        self._records = updated
        self._notify()
        return removed

    def replace_all(self, day_date: str, records: Iterable[ExamRecord]) -> None:
        """Swap in a freshly loaded day. Does not notify: nothing changed on disk."""
        self._day_date = day_date
        self._records = list(records)
