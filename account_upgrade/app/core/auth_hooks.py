from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from account_upgrade.app.core.errors import ErrorResponse
from account_upgrade.services.users import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoSuchUserError:
    username: str


@dataclass(frozen=True)
class UserStatusError:
    """The account exists but its status does not allow logging in."""

    user_id: int
    user: User


@dataclass(frozen=True)
class PasswordMismatchError:
    user_id: int
    user: User


AuthError = Union[NoSuchUserError, UserStatusError, PasswordMismatchError]

AuthFailHook = Callable[[AuthError], Optional[ErrorResponse]]


class AuthFailHooks:
    """
    Callbacks consulted when a login attempt fails.

    Each hook may return an ErrorResponse to replace the generic failure, or
    None for no opinion. The first response wins.
    """

    def __init__(self):
        self._hooks: list[AuthFailHook] = []

    def register(self, hook: AuthFailHook) -> None:
        self._hooks.append(hook)

    def __len__(self) -> int:
        return len(self._hooks)

    def run(self, error: AuthError) -> Optional[ErrorResponse]:
        for hook in self._hooks:
            response = hook(error)
            if response is not None:
                logger.debug(f"Auth failure {type(error).__name__} overridden by {getattr(hook, '__name__', hook)}")
                return response
        return None
