"""Storage of shortened links in an SQLite database."""

from __future__ import annotations

import logging
import os
import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterator, Mapping, Optional

from .models import ShortUrl

log = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS short_url (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    link TEXT NOT NULL,
    times_clicked INTEGER NOT NULL DEFAULT 0,
    exp_time_minutes INTEGER NOT NULL,
    short_code TEXT NOT NULL UNIQUE,
    created_at REAL NOT NULL
)
"""

_SELECT = ("SELECT id, link, times_clicked, exp_time_minutes, short_code, created_at "
           "FROM short_url WHERE ")


class DatabaseError(Exception):
    """A database operation failed."""


class ShortUrlNotFound(DatabaseError, LookupError):
    """No link is stored under the requested short code."""


@dataclass(frozen=True)
class DatabaseConfig:
    """Where the database lives and how long to wait for it."""

    database: str = ":memory:"
    timeout: float = 1.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatabaseConfig":
        """Build a configuration from BLUEPRINT_DB_* variables."""
        env = os.environ if environ is None else environ
        timeout = env.get("BLUEPRINT_DB_TIMEOUT")
        return cls(database=env.get("BLUEPRINT_DB_DATABASE") or ":memory:",
                   timeout=float(timeout) if timeout else 1.0)


def _format_duration(seconds: float) -> str:
    if seconds <= 0:
        return "0s"
    for unit, scale in (("s", 1.0), ("ms", 1e-3), ("µs", 1e-6)):
        if seconds >= scale:
            return f"{seconds / scale:g}{unit}"
    return f"{seconds / 1e-9:g}ns"


def _row_to_model(row: sqlite3.Row) -> ShortUrl:
    return ShortUrl(
        id=row["id"],
        link=row["link"],
        times_clicked=row["times_clicked"],
        exp_time_minutes=row["exp_time_minutes"],
        short_code=row["short_code"],
        created_at=datetime.fromtimestamp(row["created_at"], timezone.utc),
    )


class Database:
    """A connection to the link store."""

    def __init__(self, config: Optional[DatabaseConfig] = None,
                 clock: Optional[Callable[[], datetime]] = None) -> None:
        self.config = config or DatabaseConfig()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._wait_count = 0
        self._wait_seconds = 0.0
        self.closed = False
        try:
            self._conn = sqlite3.connect(self.config.database, timeout=self.config.timeout,
                                         check_same_thread=False)
        except sqlite3.Error as exc:
            raise DatabaseError(f"cannot open database: {exc}") from exc
        self._conn.row_factory = sqlite3.Row

    @contextmanager
    def _transaction(self, what: str) -> Iterator[sqlite3.Connection]:
        if not self._lock.acquire(blocking=False):
            started = time.monotonic()
            self._lock.acquire()
            self._wait_count += 1
            self._wait_seconds += time.monotonic() - started
        try:
            if self.closed:
                raise DatabaseError("database is closed")
            with self._conn:
                yield self._conn
        except sqlite3.Error as exc:
            log.error("[database] %s failed: %s", what, exc)
            raise DatabaseError(f"{what} failed: {exc}") from exc
        finally:
            self._lock.release()

    def _now(self) -> float:
        moment = self._clock()
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.timestamp()

    def create_schema(self) -> None:
        """Create the short_url table if it does not exist."""
        with self._transaction("create schema") as conn:
            conn.execute(_SCHEMA)

    def health(self) -> dict[str, str]:
        """Ping the database and report connection statistics."""
        try:
            with self._transaction("ping") as conn:
                conn.execute("SELECT 1").fetchone()
        except DatabaseError as exc:
            log.error("db down: %s", exc)
            raise DatabaseError(f"db down: {exc}") from exc

        stats = {
            "status": "up",
            "message": "It's healthy",
            "open_connections": "1",
            "in_use": "0",
            "idle": "1",
            "wait_count": str(self._wait_count),
            "wait_duration": _format_duration(self._wait_seconds),
            "max_idle_closed": "0",
            "max_lifetime_closed": "0",
        }
        if self._wait_count > 1000:
            stats["message"] = ("The database has a high number of wait events, "
                                "indicating potential bottlenecks.")
        return stats

    def close(self) -> None:
        """Close the connection."""
        with self._lock:
            if self.closed:
                return
            log.info("Disconnected from database: %s", self.config.database)
            self.closed = True
            try:
                self._conn.close()
            except sqlite3.Error as exc:
                raise DatabaseError(f"cannot close database: {exc}") from exc

    def save_short_url(self, short_url: ShortUrl) -> ShortUrl:
        """Insert a new link and return it as stored."""
        created = self._now()
        with self._transaction("insert short url") as conn:
            cursor = conn.execute(
                "INSERT INTO short_url (link, times_clicked, exp_time_minutes, short_code, "
                "created_at) VALUES (?, 0, ?, ?, ?)",
                (short_url.link, short_url.exp_time_minutes, short_url.short_code, created),
            )
            row = conn.execute(_SELECT + "id = ?", (cursor.lastrowid,)).fetchone()
        inserted = _row_to_model(row)
        log.info("[database:save_short_url] Inserted: %r", inserted)
        return inserted

    def get_short_url(self, short_code: str) -> ShortUrl:
        """Look up a link by its short code."""
        with self._transaction("query short url") as conn:
            row = conn.execute(_SELECT + "short_code = ?", (short_code,)).fetchone()
        if row is None:
            log.info("[database:get_short_url] No rows for {%s}", short_code)
            raise ShortUrlNotFound(short_code)
        return _row_to_model(row)

    def update_times_clicked(self, short_code: str) -> None:
        """Count one more visit of the link."""
        with self._transaction("update short url") as conn:
            conn.execute("UPDATE short_url SET times_clicked = times_clicked + 1 "
                         "WHERE short_code = ?", (short_code,))

    def delete_expired_links(self) -> int:
        """Delete every expired link and return how many were removed."""
        now = self._now()
        with self._transaction("delete expired links") as conn:
            cursor = conn.execute(
                "DELETE FROM short_url WHERE ? >= created_at + exp_time_minutes * 60", (now,))
        log.info("[database:delete_expired_links] Deleted %d expired links", cursor.rowcount)
        return cursor.rowcount


_instance: Optional[Database] = None
_instance_lock = threading.Lock()


def get_database(config: Optional[DatabaseConfig] = None) -> Database:
    """Return the shared database, opening it on first use."""
    global _instance
    with _instance_lock:
        if _instance is None or _instance.closed:
            _instance = Database(config or DatabaseConfig.from_env())
            _instance.create_schema()
        return _instance