"""Shared fixtures: temp storage backends and a scheduler stand-in."""

from pathlib import Path

import pytest

from storage.base import Storage, StorageError
from storage.file_store import FileStorage
from storage.sqlite_store import SqliteStorage


class FakeJob:
    def __init__(self, func, kwargs):
        self.func = func
        self.kwargs = kwargs


class FakeScheduler:
    """Records jobs instead of running them; tests fire ticks by hand."""

    def __init__(self):
        self.jobs = {}
        self.running = True

    def add_job(self, func, trigger=None, id=None, replace_existing=False, **kwargs):
        if id in self.jobs and not replace_existing:
            raise ValueError(f"duplicate job {id}")
        self.jobs[id] = FakeJob(func, dict(trigger=trigger, **kwargs))
        return self.jobs[id]

    def get_job(self, job_id):
        return self.jobs.get(job_id)

    def remove_job(self, job_id):
        del self.jobs[job_id]

    def fire(self, job_id, times=1):
        for _ in range(times):
            job = self.jobs.get(job_id)
            if job is None:
                return
            job.func()

    def shutdown(self):
        self.running = False


class FlakyStorage(Storage):
    """Wraps a real backend; named operations raise StorageError."""

    def __init__(self, inner: Storage, failing=()):
        self.inner = inner
        self.failing = set(failing)
        self.calls = []

    def _call(self, name, *args):
        self.calls.append((name, *args))
        if name in self.failing:
            raise StorageError(f"{name} unavailable")
        return getattr(self.inner, name)(*args)

    def load_note(self, day_date):
        return self._call("load_note", day_date)

    def save_note(self, day_date, content):
        return self._call("save_note", day_date, content)

    def load_stats(self, day_date):
        return self._call("load_stats", day_date)

    def save_stats(self, day_date, records):
        return self._call("save_stats", day_date, records)

    def get_activity_log(self):
        return self._call("get_activity_log")


@pytest.fixture
def sqlite_storage(tmp_path: Path) -> SqliteStorage:
    return SqliteStorage(str(tmp_path / "zenplan.db"))


@pytest.fixture
def file_storage(tmp_path: Path) -> FileStorage:
    return FileStorage(str(tmp_path / "ZenPlan"))


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()
