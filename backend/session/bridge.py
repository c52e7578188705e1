"""
Day session: the selected date plus everything scoped to it.

Owns the record store and note for one selected day and talks to the
storage backend on their behalf:
  - select_date() loads note and records for the new day independently;
    a failure in one leaves that slice at its default and never blocks
    the other. Each call bumps a generation token and responses carrying
    an older token are dropped, so a slow load for a previous day can
    never overwrite the current one.
  - record and note edits wait for an in-flight day load to land first,
    so an edit is applied on top of the loaded day instead of being
    overwritten by it (or overwriting it on disk).
  - every record store change (add or remove) saves the full list for
    that day and then re-reads the global activity log. The activity log
    spans all days, so it is re-fetched as a whole rather than patched
    for the edited day.
  - every note edit is saved immediately, whole content, no debouncing.
Storage failures are logged and absorbed; nothing here raises them.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Callable, Optional

from starlette.concurrency import run_in_threadpool

from activity.heatmap import HeatmapCell, build_heatmap
from stats.aggregator import summarize
from stats.schemas import ActivityPoint, ExamRecord, RecordCreate, StatsSummary
from stats.store import RecordStore
from storage.base import NotFound, Storage

logger = logging.getLogger(__name__)


class DaySession:
    def __init__(
        self,
        storage: Storage,
        day_date: Optional[str] = None,
        today: Callable[[], date] = date.today,
        new_id: Optional[Callable[[], str]] = None,
    ):
        self.storage = storage
        self._today = today
        self.store = RecordStore(day_date or today().isoformat(), new_id=new_id)
        self.note: str = ""
        self.activity_log: list[ActivityPoint] = []
        self._generation = 0
        self._loading: Optional[asyncio.Future] = None
        self._last_sync: Optional[asyncio.Task] = None
        self._pending: set[asyncio.Task] = set()
        self.store.subscribe(self._on_records_changed)

    @property
    def selected_date(self) -> str:
        return self.store.day_date

    async def open(self) -> None:
        """Initial load: the selected day plus the activity log."""
        await self.select_date(self.selected_date)
        await self.refresh_activity()

    async def close(self) -> None:
        await self.flush()

    # ─── Day selection ───────────────────────────────────────

    async def select_date(self, day_date: str) -> None:
        self._generation += 1
        token = self._generation
        self.store.replace_all(day_date, [])
        self.note = ""
        self._loading = asyncio.ensure_future(asyncio.gather(
            self._load_note(day_date, token),
            self._load_records(day_date, token),
        ))
        await self._loading

    async def _wait_for_load(self) -> None:
        # A newer select_date may replace the load while we wait
        while self._loading is not None and not self._loading.done():
            await asyncio.wait({self._loading})

    def _is_current(self, token: int, day_date: str, what: str) -> bool:
        if token != self._generation:
            logger.debug(f"Dropping stale {what} load for {day_date} (token {token} < {self._generation})")
            return False
        return True

    async def _load_note(self, day_date: str, token: int) -> None:
        try:
            content = await run_in_threadpool(self.storage.load_note, day_date)
        except NotFound:
            content = ""
        except Exception as e:
            logger.warning(f"Note load failed for {day_date}: {e}")
            return
        if self._is_current(token, day_date, "note"):
            self.note = content

    async def _load_records(self, day_date: str, token: int) -> None:
        try:
            records = await run_in_threadpool(self.storage.load_stats, day_date)
        except Exception as e:
            logger.warning(f"Stats load failed for {day_date}: {e}")
            records = []
        if self._is_current(token, day_date, "stats"):
            self.store.replace_all(day_date, records)

    # ─── Records ─────────────────────────────────────────────

    async def add_record(self, candidate: RecordCreate) -> Optional[ExamRecord]:
        await self._wait_for_load()
        record = self.store.add(candidate)
        await self.flush()
        return record

    async def remove_record(self, record_id: str) -> bool:
        await self._wait_for_load()
        removed = self.store.remove(record_id)
        await self.flush()
        return removed

    def _on_records_changed(self, day_date: str, records: list[ExamRecord]) -> None:
        # Saves run one after another in mutation order
        previous = self._last_sync
        task = asyncio.get_running_loop().create_task(self._sync(day_date, records, previous))
        self._last_sync = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _sync(self, day_date: str, records: list[ExamRecord], previous: Optional[asyncio.Task]) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})
        try:
            await run_in_threadpool(self.storage.save_stats, day_date, records)
        except Exception as e:
            logger.error(f"Stats save failed for {day_date}: {e}")
        await self.refresh_activity()

    async def flush(self) -> None:
        """Wait until every queued save (and its activity refresh) is done."""
        while self._pending:
            await asyncio.wait(set(self._pending))

    # ─── Notes ───────────────────────────────────────────────

    async def save_note(self, content: str) -> None:
        await self._wait_for_load()
        self.note = content
        day_date = self.selected_date
        try:
            await run_in_threadpool(self.storage.save_note, day_date, content)
        except Exception as e:
            logger.error(f"Note save failed for {day_date}: {e}")

    # ─── Derived views ───────────────────────────────────────

    async def refresh_activity(self) -> None:
        try:
            log = await run_in_threadpool(self.storage.get_activity_log)
        except Exception as e:
            logger.warning(f"Activity log refresh failed: {e}")
            return
        self.activity_log = list(log)

    def summary(self) -> StatsSummary:
        return summarize(self.store.records)

    def current_day(self) -> date:
        return self._today()

    def heatmap(self, today: Optional[date] = None) -> list[HeatmapCell]:
        return build_heatmap(self.activity_log, today or self._today())
