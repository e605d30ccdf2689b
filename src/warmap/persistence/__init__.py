"""Client-local cache of the last successfully loaded raw datasets."""

from __future__ import annotations

import os
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional


@dataclass
class CachedDataset:
    key: str
    text: str
    updated_at: datetime


class CsvCache:
    """Simple SQLite-backed key/value store for raw CSV text."""

    def __init__(self, db_path: Path | str | None = None):
        self._use_uri = False
        if db_path is None:
            db_path = os.getenv("WARMAP_DB_PATH") or None
        if db_path is None and os.getenv("PYTEST_CURRENT_TEST"):
            test_dir = Path(tempfile.gettempdir()) / "warmap-test"
            test_dir.mkdir(parents=True, exist_ok=True)
            db_path = test_dir / "warmap.sqlite"
        if db_path is None:
            db_path = Path.home() / ".warmap" / "warmap.sqlite"
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _fallback_connection(self) -> sqlite3.Connection:
        fallback_dir = Path(tempfile.gettempdir()) / "warmap-runtime"
        fallback_dir.mkdir(parents=True, exist_ok=True)
        fallback = fallback_dir / "warmap.sqlite"
        conn = sqlite3.connect(fallback)
        self.db_path = fallback
        self._use_uri = False
        self._create_schema(conn)
        return conn

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except (sqlite3.OperationalError, OSError):
            conn = self._fallback_connection()
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS datasets (
                key TEXT PRIMARY KEY,
                text TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def get(self, key: str) -> Optional[str]:
        entry = self.get_entry(key)
        return entry.text if entry else None

    def get_entry(self, key: str) -> Optional[CachedDataset]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM datasets WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return CachedDataset(
            key=row["key"],
            text=row["text"],
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def set(self, key: str, text: str) -> None:
        now = datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO datasets (key, text, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET text = excluded.text, updated_at = excluded.updated_at
                """,
                (key, text, now.isoformat()),
            )
            conn.commit()

    def clear(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM datasets WHERE key = ?", (key,))
            conn.commit()

    def clear_all(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM datasets")
            conn.commit()

    def keys(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT key FROM datasets ORDER BY key").fetchall()
        return [row["key"] for row in rows]


__all__ = ["CachedDataset", "CsvCache"]
