"""SQLite persistence for submitted feedback."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from canteen.config import DB_PATH
from canteen.models import FeedbackRecord


@dataclass(frozen=True)
class SavedFeedback:
    """A stored feedback record and when it was written."""

    record: FeedbackRecord
    saved_at: str


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _connect(db_path: str | Path) -> sqlite3.Connection:
    db_file = Path(db_path)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(db_file)


def bootstrap_schema(db_path: str | Path = DB_PATH) -> None:
    """Create persistence schema if it does not already exist."""
    with _connect(db_path) as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS feedback (
                id TEXT PRIMARY KEY,
                order_id TEXT NOT NULL,
                rating INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5),
                comments TEXT NOT NULL DEFAULT '',
                saved_at TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_feedback_order_id
                ON feedback(order_id);
            """
        )


def save_feedback(record: FeedbackRecord, db_path: str | Path = DB_PATH) -> SavedFeedback:
    """Persist one feedback record."""
    bootstrap_schema(db_path)
    saved_at = _utc_now_iso()
    with _connect(db_path) as conn:
        conn.execute(
            "INSERT INTO feedback (id, order_id, rating, comments, saved_at) VALUES (?, ?, ?, ?, ?)",
            (record.feedback_id, record.order_id, record.rating, record.comments, saved_at),
        )
    return SavedFeedback(record=record, saved_at=saved_at)


def load_feedback(order_id: str | None = None, db_path: str | Path = DB_PATH) -> list[SavedFeedback]:
    """Read stored feedback in submission order, optionally for one order only."""
    bootstrap_schema(db_path)
    query = "SELECT id, order_id, rating, comments, saved_at FROM feedback"
    params: tuple[str, ...] = ()
    if order_id is not None:
        query += " WHERE order_id = ?"
        params = (order_id,)
    query += " ORDER BY rowid"

    with _connect(db_path) as conn:
        rows = conn.execute(query, params).fetchall()
    return [
        SavedFeedback(
            record=FeedbackRecord(feedback_id=row[0], order_id=row[1], rating=int(row[2]), comments=row[3]),
            saved_at=row[4],
        )
        for row in rows
    ]
