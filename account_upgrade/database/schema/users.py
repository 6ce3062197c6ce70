from __future__ import annotations

import sqlite3

from .helpers import add_column_if_missing, table_exists


def ensure_users_table(conn: sqlite3.Connection) -> None:
    if table_exists(conn, "users"):
        return
    # password_hash is NULL for accounts that were imported without a usable
    # credential (e.g. awaiting a legacy password upgrade).
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            user_id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            password_hash TEXT,
            email TEXT,
            role TEXT NOT NULL DEFAULT 'viewer',
            status TEXT NOT NULL DEFAULT 'enabled',
            disabled_reason TEXT,
            created_at_ms INTEGER NOT NULL,
            last_login_at_ms INTEGER,
            created_by TEXT
        )
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_users_username ON users(username)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_users_status ON users(status)")


def ensure_users_disabled_reason_column(conn: sqlite3.Connection) -> None:
    if not table_exists(conn, "users"):
        return
    add_column_if_missing(conn, "users", "disabled_reason TEXT")
