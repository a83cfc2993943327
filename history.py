"""Translation history store: create, cursor pagination, delete.

Records live in the ``translations`` table keyed by user id and ordered by
creation time, newest first. Pages are fetched with one extra row so
``has_more`` can be answered without a count query.
"""
import os
import json
import math
import time
import base64
import secrets
import sqlite3
from datetime import datetime, timezone
from typing import Optional, Tuple
from pathlib import Path

from log import get_logger
from errors import UpstreamError
from models import TranslationRecord, HistoryPage

logger = get_logger("cheve.history")

# --- Config ---
DB_PATH = Path(os.environ.get("CHEVE_DB_PATH", Path(__file__).parent / "cheve.db"))
PAGE_SIZE = 10

_COLUMNS = "seq, id, user_id, input_text, output_text, mode, created_at"
_SQLITE_INT_MIN, _SQLITE_INT_MAX = -2 ** 63, 2 ** 63 - 1


def _now() -> float:
    return time.time()


def get_db() -> sqlite3.Connection:
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_history_db():
    conn = get_db()
    conn.executescript("""
        CREATE TABLE IF NOT EXISTS translations (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT UNIQUE NOT NULL,
            user_id TEXT NOT NULL,
            input_text TEXT NOT NULL,
            output_text TEXT NOT NULL,
            mode TEXT NOT NULL,
            created_at REAL NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_translations_user_created
            ON translations (user_id, created_at DESC, seq DESC);
    """)
    conn.close()


# --- Cursor encoding ---

def encode_cursor(created_at: float, seq: int) -> str:
    raw = json.dumps([created_at, seq]).encode()
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def decode_cursor(cursor: str) -> Tuple[float, int]:
    """Inverse of encode_cursor. Raises ValueError for anything malformed."""
    try:
        padded = cursor + "=" * (-len(cursor) % 4)
        created_at, seq = json.loads(base64.urlsafe_b64decode(padded.encode()))
        created_at, seq = float(created_at), int(seq)
    except (TypeError, ValueError, OverflowError, UnicodeDecodeError) as e:
        raise ValueError("Invalid history cursor") from e
    if not math.isfinite(created_at) or not _SQLITE_INT_MIN <= seq <= _SQLITE_INT_MAX:
        raise ValueError("Invalid history cursor")
    return created_at, seq


def _row_to_record(row: sqlite3.Row) -> TranslationRecord:
    return TranslationRecord(
        id=row["id"],
        user_id=row["user_id"],
        input_text=row["input_text"],
        output_text=row["output_text"],
        mode=row["mode"],
        created_at=datetime.fromtimestamp(row["created_at"], tz=timezone.utc),
    )


# --- Operations ---

def save_translation(user_id: str, input_text: str, output_text: str, mode: str) -> TranslationRecord:
    record_id = secrets.token_hex(10)
    created_at = _now()
    conn = get_db()
    try:
        conn.execute(
            "INSERT INTO translations (id, user_id, input_text, output_text, mode, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (record_id, user_id, input_text, output_text, mode, created_at),
        )
        conn.commit()
    except sqlite3.Error as e:
        logger.error("Failed to save translation", extra={"component": "history", "detail": str(e)})
        raise UpstreamError(f"History store error: {e}") from e
    finally:
        conn.close()

    return TranslationRecord(
        id=record_id,
        user_id=user_id,
        input_text=input_text,
        output_text=output_text,
        mode=mode,
        created_at=datetime.fromtimestamp(created_at, tz=timezone.utc),
    )


def get_translations(user_id: str, cursor: Optional[str] = None) -> HistoryPage:
    """One page of a user's history, newest first.

    ``cursor`` is the ``next_cursor`` of the previous page; None starts at the
    newest record.
    """
    if cursor:
        after_ts, after_seq = decode_cursor(cursor)
        sql = (
            f"SELECT {_COLUMNS} FROM translations WHERE user_id = ? "
            "AND (created_at < ? OR (created_at = ? AND seq < ?)) "
            "ORDER BY created_at DESC, seq DESC LIMIT ?"
        )
        params = (user_id, after_ts, after_ts, after_seq, PAGE_SIZE + 1)
    else:
        sql = (
            f"SELECT {_COLUMNS} FROM translations WHERE user_id = ? "
            "ORDER BY created_at DESC, seq DESC LIMIT ?"
        )
        params = (user_id, PAGE_SIZE + 1)

    conn = get_db()
    try:
        rows = conn.execute(sql, params).fetchall()
    except sqlite3.Error as e:
        logger.error("Failed to load history", extra={"component": "history", "detail": str(e)})
        raise UpstreamError(f"History store error: {e}") from e
    finally:
        conn.close()

    has_more = len(rows) > PAGE_SIZE
    page_rows = rows[:PAGE_SIZE]
    next_cursor = None
    if page_rows:
        last = page_rows[-1]
        next_cursor = encode_cursor(last["created_at"], last["seq"])

    return HistoryPage(
        translations=[_row_to_record(r) for r in page_rows],
        next_cursor=next_cursor,
        has_more=has_more,
    )


def get_translation(record_id: str) -> Optional[TranslationRecord]:
    conn = get_db()
    try:
        row = conn.execute(f"SELECT {_COLUMNS} FROM translations WHERE id = ?", (record_id,)).fetchone()
    except sqlite3.Error as e:
        logger.error("Failed to load translation", extra={"component": "history", "detail": str(e)})
        raise UpstreamError(f"History store error: {e}") from e
    finally:
        conn.close()
    return _row_to_record(row) if row else None


def delete_translation(record_id: str) -> bool:
    """Remove one record. Nothing in the app flow calls this."""
    conn = get_db()
    try:
        deleted = conn.execute("DELETE FROM translations WHERE id = ?", (record_id,)).rowcount
        conn.commit()
    except sqlite3.Error as e:
        logger.error("Failed to delete translation", extra={"component": "history", "detail": str(e)})
        raise UpstreamError(f"History store error: {e}") from e
    finally:
        conn.close()
    return deleted > 0
