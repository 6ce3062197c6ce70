from __future__ import annotations

import logging
import sqlite3
import time
from typing import Optional

from account_upgrade.app.core.config import settings
from account_upgrade.database.paths import resolve_auth_db_path
from account_upgrade.database.sqlite import DURABLE_PRAGMAS, connect_sqlite

from .models import AccountStatus, User
from .password import derive_credential

logger = logging.getLogger(__name__)

_USER_COLUMNS = """
    user_id, username, password_hash, email, role, status, disabled_reason,
    created_at_ms, last_login_at_ms, created_by
"""


def _row_to_user(row) -> User:
    return User(
        user_id=int(row[0]),
        username=row[1],
        password_hash=row[2],
        email=row[3],
        role=row[4],
        status=row[5],
        disabled_reason=row[6],
        created_at_ms=row[7],
        last_login_at_ms=row[8],
        created_by=row[9],
    )


class UserStore:
    """
    User directory.

    Owns account status and the new-scheme credential. Writes that other
    features depend on (credential install, enable/disable) are committed with
    synchronous=FULL before returning.
    """

    def __init__(self, db_path: str = None):
        self.db_path = resolve_auth_db_path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self, *, durable: bool = False):
        if durable:
            return connect_sqlite(self.db_path, pragmas=DURABLE_PRAGMAS)
        return connect_sqlite(self.db_path)

    def get_by_username(self, username: str) -> Optional[User]:
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE username = ?", (username,))
            row = cursor.fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    def get_by_user_id(self, user_id: int) -> Optional[User]:
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id = ?", (int(user_id),))
            row = cursor.fetchone()
            return _row_to_user(row) if row else None
        finally:
            conn.close()

    def create_user(
        self,
        username: str,
        password: Optional[str] = None,
        email: Optional[str] = None,
        role: str = "viewer",
        status: str = AccountStatus.ENABLED.value,
        disabled_reason: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> User:
        """
        Create an account.

        Passing `password=None` creates an account without a credential; with
        status="disabled" that is the state legacy-password imports start in.
        """
        now_ms = int(time.time() * 1000)
        password_hash_value = (
            derive_credential(settings.SERVER_REALM, username, password) if password is not None else None
        )

        conn = self._get_connection(durable=True)
        cursor = conn.cursor()
        try:
            cursor.execute(
                """
                INSERT INTO users (
                    username, password_hash, email, role, status, disabled_reason, created_at_ms, created_by
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (username, password_hash_value, email, role, status, disabled_reason, now_ms, created_by),
            )
            conn.commit()
            return User(
                user_id=int(cursor.lastrowid),
                username=username,
                password_hash=password_hash_value,
                email=email,
                role=role,
                status=status,
                disabled_reason=disabled_reason,
                created_at_ms=now_ms,
                created_by=created_by,
            )
        except sqlite3.IntegrityError:
            raise ValueError(f"Username '{username}' already exists")
        finally:
            conn.close()

    def set_credential(self, user_id: int, password_hash: str) -> None:
        conn = self._get_connection(durable=True)
        cursor = conn.cursor()
        try:
            cursor.execute("UPDATE users SET password_hash = ? WHERE user_id = ?", (password_hash, int(user_id)))
            conn.commit()
            if cursor.rowcount == 0:
                raise LookupError(f"user {user_id} not found")
        finally:
            conn.close()

    def set_enabled(self, user_id: int, enabled: bool) -> None:
        status = AccountStatus.ENABLED.value if enabled else AccountStatus.DISABLED.value
        conn = self._get_connection(durable=True)
        cursor = conn.cursor()
        try:
            if enabled:
                cursor.execute(
                    "UPDATE users SET status = ?, disabled_reason = NULL WHERE user_id = ?",
                    (status, int(user_id)),
                )
            else:
                cursor.execute("UPDATE users SET status = ? WHERE user_id = ?", (status, int(user_id)))
            conn.commit()
            if cursor.rowcount == 0:
                raise LookupError(f"user {user_id} not found")
        finally:
            conn.close()
        logger.info(f"User {user_id} status set to {status}")

    def update_last_login(self, user_id: int):
        now_ms = int(time.time() * 1000)
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute("UPDATE users SET last_login_at_ms = ? WHERE user_id = ?", (now_ms, int(user_id)))
            conn.commit()
        finally:
            conn.close()
