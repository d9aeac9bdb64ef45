"""Local data store — SQLite at ~/.browser-matrix/data.db."""

from __future__ import annotations

import os
import sqlite3
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from browser_matrix.core.models import RunResult
from browser_matrix.core.runner import (
    DEFAULT_BROWSERS_FILE_VAR,
    DEFAULT_RUNNER_COMMAND,
)
from browser_matrix.data.loader import DEFAULT_SPECS_FILE


_DEFAULT_DB_PATH = os.path.join(
    str(Path.home()), ".browser-matrix", "data.db"
)

CONFIG_KEYS = ("specs-file", "runner-command", "browsers-var")
_DEFAULT_RUNNER = " ".join(DEFAULT_RUNNER_COMMAND)

_SCHEMA = f"""\
CREATE TABLE IF NOT EXISTS runs (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    specs_file TEXT NOT NULL,
    target_count INTEGER NOT NULL,
    exit_code INTEGER NOT NULL,
    outcome TEXT NOT NULL,
    duration_seconds REAL
);

CREATE TABLE IF NOT EXISTS config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

INSERT OR IGNORE INTO config (key, value) VALUES ('specs-file', '{DEFAULT_SPECS_FILE}');
INSERT OR IGNORE INTO config (key, value) VALUES ('runner-command', '{_DEFAULT_RUNNER}');
INSERT OR IGNORE INTO config (key, value) VALUES ('browsers-var', '{DEFAULT_BROWSERS_FILE_VAR}');
"""


class DataStore:
    """Local SQLite data store."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = (
            db_path or os.environ.get("BROWSER_MATRIX_DB") or _DEFAULT_DB_PATH
        )
        os.makedirs(os.path.dirname(self.db_path), exist_ok=True)
        self._conn: Optional[sqlite3.Connection] = None
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_db(self) -> None:
        conn = self._get_conn()
        conn.executescript(_SCHEMA)
        conn.commit()

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    # ── Config ───────────────────────────────────────────────────────

    def get_config(self, key: str) -> Optional[str]:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM config WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set_config(self, key: str, value: str) -> None:
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    # ── Runs ─────────────────────────────────────────────────────────

    def record_run(
        self, specs_file: str, target_count: int, result: RunResult
    ) -> str:
        run_id = str(uuid.uuid4())
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO runs
               (id, created_at, specs_file, target_count, exit_code,
                outcome, duration_seconds)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                run_id,
                datetime.now().isoformat(),
                specs_file,
                target_count,
                result.exit_code,
                "success" if result.success else "failed",
                result.duration_seconds,
            ),
        )
        conn.commit()
        return run_id

    def recent_runs(self, limit: int = 10) -> list[dict]:
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT * FROM runs ORDER BY created_at DESC LIMIT ?", (limit,)
        ).fetchall()
        return [dict(r) for r in rows]
