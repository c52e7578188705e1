"""Tests for the day session: loads, saves, activity refresh and stale loads."""

import asyncio
from datetime import date

import pytest

from conftest import FlakyStorage
from session.bridge import DaySession
from stats.schemas import ExamRecord, RecordCreate
from storage.base import NotFound

TODAY = date(2026, 10, 17)


def candidate(solved=10, correct=7, subject="Physics"):
    return RecordCreate(subject=subject, task_type="#1", solved=solved, correct=correct)


def make_session(storage, day="2026-10-17"):
    return DaySession(storage, day_date=day, today=lambda: TODAY)


class TestOpen:
    @pytest.mark.asyncio
    async def test_defaults_to_today(self, sqlite_storage):
        session = DaySession(sqlite_storage, today=lambda: TODAY)
        assert session.selected_date == "2026-10-17"

    @pytest.mark.asyncio
    async def test_loads_day_and_activity(self, sqlite_storage):
        sqlite_storage.save_note("2026-10-17", "hello")
        sqlite_storage.save_stats("2026-10-17", [
            ExamRecord(id="a", subject="Physics", task_type="", solved=4, correct=3)
        ])
        sqlite_storage.save_stats("2026-10-01", [
            ExamRecord(id="b", subject="Physics", task_type="", solved=9, correct=3)
        ])
        session = make_session(sqlite_storage)
        await session.open()
        assert session.note == "hello"
        assert [r.id for r in session.store.records] == ["a"]
        assert {p.date for p in session.activity_log} == {"2026-10-17", "2026-10-01"}


class TestSelectDate:
    @pytest.mark.asyncio
    async def test_switch_loads_new_day(self, sqlite_storage):
        sqlite_storage.save_note("2026-10-16", "yesterday")
        session = make_session(sqlite_storage)
        await session.open()
        await session.add_record(candidate())
        await session.select_date("2026-10-16")
        assert session.selected_date == "2026-10-16"
        assert session.note == "yesterday"
        assert session.store.records == []
        # nothing lost on the previous day
        assert len(sqlite_storage.load_stats("2026-10-17")) == 1

    @pytest.mark.asyncio
    async def test_note_failure_does_not_block_records(self, sqlite_storage):
        sqlite_storage.save_stats("2026-10-16", [
            ExamRecord(id="a", subject="Physics", task_type="", solved=4, correct=3)
        ])
        storage = FlakyStorage(sqlite_storage, failing={"load_note"})
        session = make_session(storage)
        session.note = "stale"
        await session.select_date("2026-10-16")
        assert session.note == ""
        assert [r.id for r in session.store.records] == ["a"]

    @pytest.mark.asyncio
    async def test_records_failure_does_not_block_note(self, sqlite_storage):
        sqlite_storage.save_note("2026-10-16", "kept")
        storage = FlakyStorage(sqlite_storage, failing={"load_stats"})
        session = make_session(storage)
        await session.select_date("2026-10-16")
        assert session.note == "kept"
        assert session.store.records == []

    @pytest.mark.asyncio
    async def test_date_change_alone_does_not_refresh_activity(self, sqlite_storage):
        storage = FlakyStorage(sqlite_storage)
        session = make_session(storage)
        await session.select_date("2026-10-16")
        assert ("get_activity_log",) not in storage.calls

    @pytest.mark.asyncio
    async def test_stale_load_is_dropped(self, sqlite_storage):
        sqlite_storage.save_note("2026-10-15", "old day")
        sqlite_storage.save_note("2026-10-16", "new day")
        release = asyncio.Event()

        class SlowFirstDay(FlakyStorage):
            def load_note(self, day_date):
                if day_date == "2026-10-15":
                    # blocks the worker thread until the newer load has landed
                    asyncio.run_coroutine_threadsafe(release.wait(), loop).result()
                return super().load_note(day_date)

        loop = asyncio.get_running_loop()
        session = make_session(SlowFirstDay(sqlite_storage))
        first = asyncio.create_task(session.select_date("2026-10-15"))
        await asyncio.sleep(0.05)
        await session.select_date("2026-10-16")
        release.set()
        await first
        assert session.selected_date == "2026-10-16"
        assert session.note == "new day"


class BlockingLoads(FlakyStorage):
    """Holds load_note/load_stats for one day in the worker thread until released."""

    def __init__(self, inner, day_date, loop):
        super().__init__(inner)
        self.day_date = day_date
        self.loop = loop
        self.release = asyncio.Event()

    def _hold(self, day_date):
        if day_date == self.day_date:
            asyncio.run_coroutine_threadsafe(self.release.wait(), self.loop).result()

    def load_note(self, day_date):
        self._hold(day_date)
        return super().load_note(day_date)

    def load_stats(self, day_date):
        self._hold(day_date)
        return super().load_stats(day_date)


class TestEditsDuringLoad:
    @pytest.mark.asyncio
    async def test_add_waits_for_day_records(self, sqlite_storage):
        sqlite_storage.save_stats("2026-10-16", [
            ExamRecord(id="old1", subject="Physics", task_type="", solved=4, correct=3),
            ExamRecord(id="old2", subject="Mathematics", task_type="", solved=6, correct=6),
        ])
        storage = BlockingLoads(sqlite_storage, "2026-10-16", asyncio.get_running_loop())
        session = make_session(storage)
        switching = asyncio.create_task(session.select_date("2026-10-16"))
        await asyncio.sleep(0.05)
        adding = asyncio.create_task(session.add_record(candidate()))
        await asyncio.sleep(0.05)
        # nothing written while the day is still loading
        assert not any(call[0] == "save_stats" for call in storage.calls)
        storage.release.set()
        await switching
        added = await adding

        on_disk = [r.id for r in sqlite_storage.load_stats("2026-10-16")]
        in_memory = [r.id for r in session.store.records]
        assert on_disk == in_memory == ["old1", "old2", added.id]

    @pytest.mark.asyncio
    async def test_remove_waits_for_day_records(self, sqlite_storage):
        sqlite_storage.save_stats("2026-10-16", [
            ExamRecord(id="old1", subject="Physics", task_type="", solved=4, correct=3),
            ExamRecord(id="old2", subject="Mathematics", task_type="", solved=6, correct=6),
        ])
        storage = BlockingLoads(sqlite_storage, "2026-10-16", asyncio.get_running_loop())
        session = make_session(storage)
        switching = asyncio.create_task(session.select_date("2026-10-16"))
        await asyncio.sleep(0.05)
        removing = asyncio.create_task(session.remove_record("old1"))
        await asyncio.sleep(0.05)
        storage.release.set()
        await switching
        assert await removing is True
        assert [r.id for r in sqlite_storage.load_stats("2026-10-16")] == ["old2"]
        assert [r.id for r in session.store.records] == ["old2"]

    @pytest.mark.asyncio
    async def test_note_edit_not_overwritten_by_load(self, sqlite_storage):
        sqlite_storage.save_note("2026-10-16", "loaded")
        storage = BlockingLoads(sqlite_storage, "2026-10-16", asyncio.get_running_loop())
        session = make_session(storage)
        switching = asyncio.create_task(session.select_date("2026-10-16"))
        await asyncio.sleep(0.05)
        editing = asyncio.create_task(session.save_note("edited"))
        await asyncio.sleep(0.05)
        storage.release.set()
        await switching
        await editing
        assert session.note == "edited"
        assert sqlite_storage.load_note("2026-10-16") == "edited"


class TestRecords:
    @pytest.mark.asyncio
    async def test_add_persists_full_list_and_refreshes_activity(self, sqlite_storage):
        session = make_session(sqlite_storage)
        await session.open()
        first = await session.add_record(candidate(solved=10))
        second = await session.add_record(candidate(solved=5, subject="Mathematics"))
        assert sqlite_storage.load_stats("2026-10-17") == [first, second]
        assert [(p.date, p.count) for p in session.activity_log] == [("2026-10-17", 15)]

    @pytest.mark.asyncio
    async def test_zero_solved_not_persisted(self, sqlite_storage):
        storage = FlakyStorage(sqlite_storage)
        session = make_session(storage)
        assert await session.add_record(candidate(solved=0, correct=0)) is None
        assert not [c for c in storage.calls if c[0] == "save_stats"]

    @pytest.mark.asyncio
    async def test_remove_persists(self, sqlite_storage):
        session = make_session(sqlite_storage)
        record = await session.add_record(candidate())
        assert await session.remove_record(record.id) is True
        assert sqlite_storage.load_stats("2026-10-17") == []
        assert session.activity_log == []

    @pytest.mark.asyncio
    async def test_remove_unknown_id(self, sqlite_storage):
        session = make_session(sqlite_storage)
        await session.add_record(candidate())
        assert await session.remove_record("nope") is False
        assert len(session.store) == 1

    @pytest.mark.asyncio
    async def test_save_failure_keeps_memory_state(self, sqlite_storage):
        storage = FlakyStorage(sqlite_storage, failing={"save_stats"})
        session = make_session(storage)
        record = await session.add_record(candidate())
        assert session.store.records == [record]
        assert sqlite_storage.load_stats("2026-10-17") == []

    @pytest.mark.asyncio
    async def test_saves_apply_in_mutation_order(self, sqlite_storage):
        session = make_session(sqlite_storage)
        session.store.add(candidate(solved=1))
        session.store.add(candidate(solved=2))
        session.store.add(candidate(solved=3))
        await session.flush()
        assert [r.solved for r in sqlite_storage.load_stats("2026-10-17")] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_summary(self, sqlite_storage):
        session = make_session(sqlite_storage)
        await session.add_record(candidate(solved=10, correct=7))
        await session.add_record(candidate(solved=5, correct=5))
        summary = session.summary()
        assert (summary.total_solved, summary.total_correct, summary.accuracy) == (15, 12, 80)


class TestNotes:
    @pytest.mark.asyncio
    async def test_edit_saves_immediately(self, sqlite_storage):
        session = make_session(sqlite_storage)
        await session.save_note("# Plan")
        await session.save_note("# Plan\n- optics")
        assert sqlite_storage.load_note("2026-10-17") == "# Plan\n- optics"

    @pytest.mark.asyncio
    async def test_save_failure_absorbed(self, sqlite_storage):
        session = make_session(FlakyStorage(sqlite_storage, failing={"save_note"}))
        await session.save_note("draft")
        assert session.note == "draft"
        with pytest.raises(NotFound):
            sqlite_storage.load_note("2026-10-17")


class TestHeatmap:
    @pytest.mark.asyncio
    async def test_built_from_activity_log(self, sqlite_storage):
        sqlite_storage.save_stats("2026-10-01", [
            ExamRecord(id="a", subject="Physics", task_type="", solved=40, correct=30)
        ])
        session = make_session(sqlite_storage)
        await session.open()
        cells = {c.date: c for c in session.heatmap()}
        assert len(cells) == 140
        assert cells["2026-10-01"].tier == 4

    @pytest.mark.asyncio
    async def test_activity_failure_keeps_previous_log(self, sqlite_storage):
        sqlite_storage.save_stats("2026-10-01", [
            ExamRecord(id="a", subject="Physics", task_type="", solved=3, correct=3)
        ])
        storage = FlakyStorage(sqlite_storage)
        session = make_session(storage)
        await session.open()
        storage.failing.add("get_activity_log")
        await session.add_record(candidate())
        assert [p.date for p in session.activity_log] == ["2026-10-01"]
