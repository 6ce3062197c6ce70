from __future__ import annotations

import sqlite3
import time
from pathlib import Path
from typing import Any, Iterable

_BASE_PRAGMAS: tuple[str, ...] = (
    "PRAGMA foreign_keys = ON",
    "PRAGMA busy_timeout = 5000",
    "PRAGMA journal_mode = WAL",
)

DEFAULT_PRAGMAS: tuple[str, ...] = _BASE_PRAGMAS + ("PRAGMA synchronous = NORMAL",)

# Credential, account status and legacy password writes must be on disk
# before the request that made them returns.
DURABLE_PRAGMAS: tuple[str, ...] = _BASE_PRAGMAS + ("PRAGMA synchronous = FULL",)

_OPEN_ATTEMPTS = 5
_TRANSIENT_OPEN_ERRORS = ("unable to open database file", "database is locked")


def _is_transient_open_error(err: sqlite3.OperationalError) -> bool:
    msg = str(err).lower()
    return any(fragment in msg for fragment in _TRANSIENT_OPEN_ERRORS)


def _open_with_retry(db_path: str | Path, timeout_s: float) -> sqlite3.Connection:
    # A restore swaps the database file; opens during that window can fail.
    # Backoff: 0.1s, 0.2s, 0.4s, 0.8s (about 1.5s before the last try).
    for attempt in range(_OPEN_ATTEMPTS):
        try:
            return sqlite3.connect(str(db_path), timeout=timeout_s)
        except sqlite3.OperationalError as e:
            if not _is_transient_open_error(e) or attempt == _OPEN_ATTEMPTS - 1:
                raise
            time.sleep(0.1 * (2**attempt))
    raise AssertionError("unreachable")


def connect_sqlite(
    db_path: str | Path,
    *,
    timeout_s: float = 30.0,
    row_factory: Any = sqlite3.Row,
    pragmas: Iterable[str] | None = None,
) -> sqlite3.Connection:
    """
    Open the auth database.

    Pass `pragmas=DURABLE_PRAGMAS` for writes other features rely on. Pragmas
    are applied best-effort; read-only or exotic filesystems may refuse WAL.
    """
    conn = _open_with_retry(db_path, timeout_s)
    conn.row_factory = row_factory

    for stmt in DEFAULT_PRAGMAS if pragmas is None else pragmas:
        try:
            conn.execute(stmt)
        except sqlite3.OperationalError:
            continue

    return conn
