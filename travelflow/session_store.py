"""Session-scoped key/value storage backed by SQLite.

Each browser session gets its own namespace of keys. Entries disappear when
the session expires (``SESSION_TTL``) or when the session is cleared.
"""

import os
import secrets
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from . import config


def get_connection(db_path: Union[str, Path]):
    """Get a database connection."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db(db_path: Union[str, Path]):
    """Context manager for database connections."""
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Union[str, Path]):
    """Initialize the session storage table."""
    with get_db(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS session_storage (
                session_id TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                expires_at REAL NOT NULL,
                PRIMARY KEY (session_id, key)
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_session_storage_expires ON session_storage(expires_at)
        """)


class SessionStorage:
    """Key/value storage that lives only as long as one session.

    Storage failures are logged and treated as a miss, the same way a
    browser's sessionStorage can be unavailable without breaking the page.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        db_path: Union[str, Path, None] = None,
        ttl: Optional[int] = None,
    ):
        self.session_id = session_id or secrets.token_urlsafe(16)
        self.db_path = Path(db_path) if db_path else config.SESSION_DB_PATH
        self.ttl = ttl if ttl is not None else config.SESSION_TTL
        os.makedirs(self.db_path.parent, exist_ok=True)
        init_db(self.db_path)

    def get_item(self, key: str) -> Optional[str]:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT value, expires_at FROM session_storage WHERE session_id = ? AND key = ?",
                    (self.session_id, key),
                )
                row = cursor.fetchone()
                if not row:
                    return None
                if time.time() > row["expires_at"]:
                    cursor.execute(
                        "DELETE FROM session_storage WHERE session_id = ? AND key = ?",
                        (self.session_id, key),
                    )
                    return None
                return row["value"]
        except sqlite3.Error as e:
            print(f"[SESSION] Error reading {key}: {e}")
            return None

    def set_item(self, key: str, value: str) -> bool:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "INSERT OR REPLACE INTO session_storage (session_id, key, value, expires_at) "
                    "VALUES (?, ?, ?, ?)",
                    (self.session_id, key, value, time.time() + self.ttl),
                )
            return True
        except sqlite3.Error as e:
            print(f"[SESSION] Error writing {key}: {e}")
            return False

    def remove_item(self, key: str) -> None:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "DELETE FROM session_storage WHERE session_id = ? AND key = ?",
                    (self.session_id, key),
                )
        except sqlite3.Error as e:
            print(f"[SESSION] Error removing {key}: {e}")

    def clear(self) -> None:
        """Drop everything stored for this session (e.g. on logout)."""
        try:
            with get_db(self.db_path) as conn:
                conn.cursor().execute(
                    "DELETE FROM session_storage WHERE session_id = ?", (self.session_id,)
                )
        except sqlite3.Error as e:
            print(f"[SESSION] Error clearing session: {e}")


def purge_expired(db_path: Union[str, Path, None] = None) -> int:
    """Delete expired entries of all sessions. Returns the number removed."""
    db_path = db_path or config.SESSION_DB_PATH
    with get_db(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("DELETE FROM session_storage WHERE expires_at < ?", (time.time(),))
        removed = cursor.rowcount
    if removed:
        print(f"[SESSION] Purged {removed} expired entries")
    return removed
