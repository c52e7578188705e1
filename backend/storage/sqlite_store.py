"""SQLite-backed storage (default backend)."""

import logging
import sqlite3
from typing import List

from server.database import get_db, init_db
from stats.schemas import ActivityPoint, ExamRecord
from storage.base import NotFound, Storage, StorageError

logger = logging.getLogger(__name__)


class SqliteStorage(Storage):
    def __init__(self, db_path: str):
        self.db_path = db_path
        init_db(db_path)

    def load_note(self, day_date: str) -> str:
        db = get_db(self.db_path)
        try:
            row = db.execute(
                "SELECT content FROM notes WHERE day_date = ?", (day_date,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Could not load note for {day_date}: {e}") from e
        finally:
            db.close()
        if row is None:
            raise NotFound(day_date)
        return row["content"]

    def save_note(self, day_date: str, content: str) -> None:
        db = get_db(self.db_path)
        try:
            db.execute(
                """INSERT INTO notes (day_date, content, updated_at)
                   VALUES (?, ?, datetime('now'))
                   ON CONFLICT(day_date) DO UPDATE
                   SET content = excluded.content, updated_at = excluded.updated_at""",
                (day_date, content)
            )
            db.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not save note for {day_date}: {e}") from e
        finally:
            db.close()

    def load_stats(self, day_date: str) -> List[ExamRecord]:
        db = get_db(self.db_path)
        try:
            rows = db.execute(
                """SELECT id, subject, task_type, solved, correct FROM exam_records
                   WHERE day_date = ? ORDER BY position""",
                (day_date,)
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Could not load stats for {day_date}: {e}") from e
        finally:
            db.close()
        return [ExamRecord(**dict(r)) for r in rows]

    def save_stats(self, day_date: str, records: List[ExamRecord]) -> None:
        db = get_db(self.db_path)
        try:
            # Full replace: the list is the unit of persistence
            db.execute("DELETE FROM exam_records WHERE day_date = ?", (day_date,))
            db.executemany(
                """INSERT INTO exam_records (id, day_date, position, subject, task_type, solved, correct)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                [
                    (r.id, day_date, i, r.subject, r.task_type, r.solved, r.correct)
                    for i, r in enumerate(records)
                ]
            )
            db.commit()
        except sqlite3.Error as e:
            db.rollback()
            raise StorageError(f"Could not save stats for {day_date}: {e}") from e
        finally:
            db.close()
        logger.debug("Saved %d records for %s", len(records), day_date)

    def get_activity_log(self) -> List[ActivityPoint]:
        db = get_db(self.db_path)
        try:
            rows = db.execute(
                """SELECT day_date AS date, SUM(solved) AS count FROM exam_records
                   GROUP BY day_date HAVING SUM(solved) > 0
                   ORDER BY day_date"""
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Could not read activity log: {e}") from e
        finally:
            db.close()
        return [ActivityPoint(**dict(r)) for r in rows]
