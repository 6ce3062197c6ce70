from __future__ import annotations

from pathlib import Path

from account_upgrade.database.sqlite import connect_sqlite

from .legacy_passwds import ensure_legacy_passwds_table
from .users import ensure_users_disabled_reason_column, ensure_users_table


def ensure_schema(db_path: str | Path) -> None:
    """
    Ensure baseline schema exists and apply additive schema changes.

    Safe to call repeatedly; no-op when schema already exists.
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = connect_sqlite(db_path)
    try:
        # User directory
        ensure_users_table(conn)
        ensure_users_disabled_reason_column(conn)

        # Legacy password upgrade
        ensure_legacy_passwds_table(conn)

        conn.commit()
    finally:
        conn.close()
