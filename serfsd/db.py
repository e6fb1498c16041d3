from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import closing
from typing import Any

from .runtime import utc_now

logger = logging.getLogger("serfsd.events")


class EventJournal:
    """Discovery event log backed by SQLite.

    Every event is also forwarded to the ``serfsd.events`` logger, so the
    process log and the journal tell the same story. Journal write failures
    are logged and swallowed: losing an event must not stop discovery.
    """

    def __init__(self, path: str) -> None:
        self.path = self._resolve_path(path)

    @staticmethod
    def _resolve_path(path: str) -> str:
        p = os.path.abspath(path)

        # A bind-mounted path that did not exist may have been created as a directory.
        if os.path.isdir(p):
            p = os.path.join(p, "serfsd.db")

        parent = os.path.dirname(p)
        if parent and not os.path.exists(parent):
            os.makedirs(parent, exist_ok=True)
        return p

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def init(self) -> None:
        """Create tables if they do not exist."""
        with closing(self.connect()) as conn, conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS events (
                  id INTEGER PRIMARY KEY AUTOINCREMENT,
                  ts TEXT NOT NULL,
                  level TEXT NOT NULL,
                  source TEXT,
                  message TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_events_ts ON events(ts);
                """
            )

    def log_event(self, level: str, message: str, source: str | None = None) -> None:
        level = level.upper()
        logger.log(_LEVELS.get(level, logging.INFO), message)
        try:
            with closing(self.connect()) as conn, conn:
                conn.execute(
                    "INSERT INTO events (ts, level, source, message) VALUES (?, ?, ?, ?)",
                    (utc_now(), level, source, message),
                )
        except sqlite3.Error as e:
            logger.warning("Could not journal event: %s: %s", type(e).__name__, e)

    def latest_events(self, limit: int = 100) -> list[dict[str, Any]]:
        with closing(self.connect()) as conn:
            rows = conn.execute("SELECT * FROM events ORDER BY id DESC LIMIT ?", (limit,)).fetchall()
            return [dict(r) for r in rows]


_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}
