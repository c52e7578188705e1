"""Plain-file storage: <date>.md notes and <date>.json record lists in one folder."""

import json
import logging
import os
from typing import List

from pydantic import ValidationError

from stats.schemas import ActivityPoint, ExamRecord
from storage.base import NotFound, Storage, StorageError

logger = logging.getLogger(__name__)


class FileStorage(Storage):
    def __init__(self, data_dir: str):
        self.data_dir = data_dir
        os.makedirs(data_dir, exist_ok=True)

    def _path(self, day_date: str, ext: str) -> str:
        return os.path.join(self.data_dir, f"{day_date}.{ext}")

    # ─── Notes ───────────────────────────────────────────────

    def load_note(self, day_date: str) -> str:
        path = self._path(day_date, "md")
        if not os.path.exists(path):
            raise NotFound(day_date)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def save_note(self, day_date: str, content: str) -> None:
        path = self._path(day_date, "md")
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e

    # ─── Stats ───────────────────────────────────────────────

    def _read_records(self, path: str) -> List[ExamRecord]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return [ExamRecord(**r) for r in raw]
        except (OSError, ValueError, TypeError, ValidationError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def load_stats(self, day_date: str) -> List[ExamRecord]:
        path = self._path(day_date, "json")
        if not os.path.exists(path):
            return []
        return self._read_records(path)

    def save_stats(self, day_date: str, records: List[ExamRecord]) -> None:
        path = self._path(day_date, "json")
        payload = json.dumps([r.model_dump() for r in records], ensure_ascii=False, indent=2)
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(payload)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e

    # ─── Activity ────────────────────────────────────────────

    def get_activity_log(self) -> List[ActivityPoint]:
        """Scan every <date>.json file and sum its solved counts.

        Unreadable files are skipped so one bad day never hides the rest.
        """
        points = []
        for name in sorted(os.listdir(self.data_dir)):
            stem, ext = os.path.splitext(name)
            if ext != ".json":
                continue
            try:
                records = self._read_records(os.path.join(self.data_dir, name))
            except StorageError as e:
                logger.warning(f"Skipping {name} in activity log: {e}")
                continue
            total = sum(r.solved for r in records)
            if total > 0:
                points.append(ActivityPoint(date=stem, count=total))
        return points
