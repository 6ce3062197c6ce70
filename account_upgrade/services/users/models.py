from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AccountStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    DELETED = "deleted"


@dataclass
class User:
    user_id: int
    username: str
    password_hash: Optional[str] = None
    email: Optional[str] = None
    role: str = "viewer"
    status: str = AccountStatus.ENABLED.value
    disabled_reason: Optional[str] = None
    created_at_ms: int = 0
    last_login_at_ms: Optional[int] = None
    created_by: Optional[str] = None

    @property
    def is_enabled(self) -> bool:
        return self.status == AccountStatus.ENABLED.value

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def is_disabled_without_credential(self) -> bool:
        """
        Disabled, no credential on file and no reason recorded.

        This is the only state in which a legacy password may be attached to
        (or consumed by) the account.
        """
        return (
            self.status == AccountStatus.DISABLED.value
            and self.password_hash is None
            and not self.disabled_reason
        )
