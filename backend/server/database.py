"""SQLite database: connection + schema + migrations."""

import os
import sqlite3
from server.config import DB_PATH


def get_db(db_path: str = DB_PATH):
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DB_PATH):
    directory = os.path.dirname(db_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    conn = get_db(db_path)

    conn.executescript("""
        CREATE TABLE IF NOT EXISTS notes (
            day_date TEXT PRIMARY KEY,
            content TEXT NOT NULL DEFAULT '',
            updated_at TEXT DEFAULT (datetime('now'))
        );

        CREATE TABLE IF NOT EXISTS exam_records (
            id TEXT NOT NULL,
            day_date TEXT NOT NULL,
            position INTEGER NOT NULL,
            subject TEXT NOT NULL,
            task_type TEXT NOT NULL DEFAULT '',
            solved INTEGER NOT NULL CHECK(solved >= 0),
            correct INTEGER NOT NULL CHECK(correct >= 0),
            PRIMARY KEY (day_date, id)
        );

        CREATE INDEX IF NOT EXISTS idx_exam_records_day ON exam_records(day_date, position);
    """)

    # Migrations: add updated_at to notes if missing
    note_columns = {row[1] for row in conn.execute("PRAGMA table_info(notes)").fetchall()}
    if "updated_at" not in note_columns:
        conn.execute("ALTER TABLE notes ADD COLUMN updated_at TEXT")

    conn.commit()
    conn.close()
