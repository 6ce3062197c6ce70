from __future__ import annotations

import sqlite3


def ensure_legacy_passwds_table(conn: sqlite3.Connection) -> None:
    # No FK to users: restore may load this table before the user directory.
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS legacy_passwds (
            user_id INTEGER PRIMARY KEY,
            htpasswd TEXT NOT NULL,
            created_at_ms INTEGER NOT NULL
        )
        """
    )
