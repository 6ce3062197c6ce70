from __future__ import annotations

import logging
import time
from typing import Optional, Protocol

from account_upgrade.database.paths import resolve_auth_db_path
from account_upgrade.database.sqlite import DURABLE_PRAGMAS, connect_sqlite

from .models import HtPasswdHash, LegacyPasswdsTable

logger = logging.getLogger(__name__)


class LegacyPasswdStoreLike(Protocol):
    def lookup(self, user_id: int) -> Optional[HtPasswdHash]: ...

    def set(self, user_id: int, htpasswd: str) -> None: ...

    def delete(self, user_id: int) -> bool: ...

    def replace_all(self, table: LegacyPasswdsTable) -> None: ...

    def export_all(self) -> list[tuple[int, HtPasswdHash]]: ...

    def get_table(self) -> LegacyPasswdsTable: ...


class LegacyPasswdStore:
    """
    Legacy (htpasswd/crypt) password hashes for accounts awaiting upgrade.

    Notes:
    - A row exists only while the account still has to be upgraded; presence
      alone reveals the account predates the current login system.
    - Every mutation is committed with synchronous=FULL before returning.
    - No format validation here; callers check the hash before `set`.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = resolve_auth_db_path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self):
        return connect_sqlite(self.db_path, pragmas=DURABLE_PRAGMAS)

    def lookup(self, user_id: int) -> Optional[HtPasswdHash]:
        conn = self._get_connection()
        try:
            row = conn.execute("SELECT htpasswd FROM legacy_passwds WHERE user_id = ?", (int(user_id),)).fetchone()
            return HtPasswdHash(row[0]) if row else None
        finally:
            conn.close()

    def set(self, user_id: int, htpasswd: str) -> None:
        now_ms = int(time.time() * 1000)
        conn = self._get_connection()
        try:
            conn.execute(
                """
                INSERT INTO legacy_passwds (user_id, htpasswd, created_at_ms)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    htpasswd = excluded.htpasswd,
                    created_at_ms = excluded.created_at_ms
                """,
                (int(user_id), str(htpasswd), now_ms),
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, user_id: int) -> bool:
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM legacy_passwds WHERE user_id = ?", (int(user_id),))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def replace_all(self, table: LegacyPasswdsTable) -> None:
        now_ms = int(time.time() * 1000)
        conn = self._get_connection()
        try:
            # One transaction: readers see either the old table or the new one.
            with conn:
                conn.execute("DELETE FROM legacy_passwds")
                conn.executemany(
                    "INSERT INTO legacy_passwds (user_id, htpasswd, created_at_ms) VALUES (?, ?, ?)",
                    [(uid, str(htpasswd), now_ms) for uid, htpasswd in table.to_rows()],
                )
        finally:
            conn.close()
        logger.info(f"Legacy password table replaced ({len(table)} entries)")

    def export_all(self) -> list[tuple[int, HtPasswdHash]]:
        conn = self._get_connection()
        try:
            rows = conn.execute("SELECT user_id, htpasswd FROM legacy_passwds ORDER BY user_id").fetchall()
            return [(int(r[0]), HtPasswdHash(r[1])) for r in rows]
        finally:
            conn.close()

    def get_table(self) -> LegacyPasswdsTable:
        return LegacyPasswdsTable(self.export_all())

    def count(self) -> int:
        conn = self._get_connection()
        try:
            return int(conn.execute("SELECT COUNT(*) FROM legacy_passwds").fetchone()[0])
        finally:
            conn.close()
