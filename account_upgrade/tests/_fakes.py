from __future__ import annotations

from typing import Optional

from account_upgrade.app.core.auth_hooks import AuthFailHooks
from account_upgrade.app.dependencies import create_templates
from account_upgrade.services.legacy_passwds import HtPasswdHash, LegacyPasswdsTable
from account_upgrade.services.users import AccountStatus, User


class MemoryLegacyPasswdStore:
    """In-memory stand-in for LegacyPasswdStore."""

    def __init__(self, entries: dict[int, str] | None = None):
        self.table: dict[int, HtPasswdHash] = {k: HtPasswdHash(v) for k, v in (entries or {}).items()}
        self.calls: list[tuple] = []

    def lookup(self, user_id: int) -> Optional[HtPasswdHash]:
        return self.table.get(int(user_id))

    def set(self, user_id: int, htpasswd: str) -> None:
        self.calls.append(("set", user_id))
        self.table[int(user_id)] = HtPasswdHash(htpasswd)

    def delete(self, user_id: int) -> bool:
        self.calls.append(("delete", user_id))
        return self.table.pop(int(user_id), None) is not None

    def replace_all(self, table: LegacyPasswdsTable) -> None:
        self.table = dict(table)

    def export_all(self) -> list[tuple[int, HtPasswdHash]]:
        return sorted(self.table.items())

    def get_table(self) -> LegacyPasswdsTable:
        return LegacyPasswdsTable(self.table)


class MemoryUserStore:
    def __init__(self, users: list[User] | None = None, *, calls: list[tuple] | None = None):
        self.users: dict[int, User] = {u.user_id: u for u in (users or [])}
        # Shared with the legacy store in ordering tests.
        self.calls = calls if calls is not None else []

    def get_by_username(self, username: str) -> Optional[User]:
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    def get_by_user_id(self, user_id: int) -> Optional[User]:
        return self.users.get(int(user_id))

    def set_credential(self, user_id: int, password_hash: str) -> None:
        self.calls.append(("set_credential", user_id))
        self.users[int(user_id)].password_hash = password_hash

    def set_enabled(self, user_id: int, enabled: bool) -> None:
        self.calls.append(("set_enabled", user_id, enabled))
        user = self.users[int(user_id)]
        user.status = AccountStatus.ENABLED.value if enabled else AccountStatus.DISABLED.value
        if enabled:
            user.disabled_reason = None

    def update_last_login(self, user_id: int) -> None:
        return None


class FakeDeps:
    def __init__(self, users: list[User] | None = None, legacy: dict[int, str] | None = None):
        self.legacy_passwd_store = MemoryLegacyPasswdStore(legacy)
        self.user_store = MemoryUserStore(users, calls=self.legacy_passwd_store.calls)
        self.templates = create_templates()
        self.auth_fail_hooks = AuthFailHooks()


def admin_user(user_id: int = 1) -> User:
    return User(user_id=user_id, username="admin", password_hash="x", role="admin")


def enabled_user(user_id: int, username: str, password_hash: str = "x") -> User:
    return User(user_id=user_id, username=username, password_hash=password_hash)


def legacy_user(user_id: int, username: str) -> User:
    return User(user_id=user_id, username=username, password_hash=None, status=AccountStatus.DISABLED.value)


def suspended_user(user_id: int, username: str) -> User:
    return User(
        user_id=user_id,
        username=username,
        password_hash=None,
        status=AccountStatus.DISABLED.value,
        disabled_reason="suspended",
    )
