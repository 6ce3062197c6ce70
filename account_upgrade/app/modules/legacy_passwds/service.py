from __future__ import annotations

import logging

from fastapi.security import HTTPBasicCredentials

from account_upgrade.app.core.config import settings
from account_upgrade.app.core.errors import (
    AuthenticationFailed,
    BadRequest,
    Conflict,
    Forbidden,
    MText,
    NotFound,
    UnsupportedMediaType,
)
from account_upgrade.app.dependencies import AppDependencies
from account_upgrade.services.legacy_passwds import HtPasswdHash, is_valid_htpasswd, verify_legacy, verify_legacy_miss
from account_upgrade.services.users import User, derive_credential

logger = logging.getLogger(__name__)


def _no_such_user() -> NotFound:
    return NotFound("No such user", [MText("No such user")])


class LegacyPasswdsService:
    """
    Admin seeding of legacy hashes and the one-shot user upgrade.

    The upgrade writes, in order: new credential, enabled status, legacy row
    removal. A crash part-way leaves an upgraded account with a stale legacy
    row, never a deleted row on a still-disabled account.
    """

    def __init__(
        self,
        deps: AppDependencies,
        *,
        legacy_realm: str | None = None,
        server_realm: str | None = None,
    ):
        self._users = deps.user_store
        self._store = deps.legacy_passwd_store
        self.legacy_realm = legacy_realm or settings.LEGACY_REALM
        self.server_realm = server_realm or settings.SERVER_REALM

    def _get_user(self, username: str) -> User:
        user = self._users.get_by_username(username)
        if not user:
            raise _no_such_user()
        return user

    def set_legacy_passwd(self, username: str, body: bytes, content_type: str = "text/plain") -> User:
        user = self._get_user(username)
        if not user.is_disabled_without_credential():
            raise Conflict("Clashing auth details", [MText("The user already has auth info")])
        if content_type.split(";", 1)[0].strip().lower() != "text/plain":
            raise UnsupportedMediaType(
                "Unsupported media type",
                [MText("Expected a text/plain request body.")],
            )
        if not is_valid_htpasswd(body):
            raise BadRequest(
                "Invalid htpasswd hash",
                [MText("Only classic htpasswd crypt() passwords are supported.")],
            )
        self._store.set(user.user_id, HtPasswdHash(body.decode("ascii")))
        logger.info(f"Legacy password set for user {user.username} ({user.user_id})")
        return user

    def delete_legacy_passwd(self, username: str) -> User:
        user = self._get_user(username)
        if not self._store.delete(user.user_id):
            raise NotFound("No legacy password", [MText("The user has no legacy password")])
        logger.info(f"Legacy password deleted for user {user.username} ({user.user_id})")
        return user

    def authenticate(self, credentials: HTTPBasicCredentials | None) -> tuple[User, str]:
        """
        Verify Basic credentials against the legacy hash.

        Returns the user and the verified plaintext. Missing credentials,
        unknown users, accounts without a legacy row and wrong passwords all
        raise the same AuthenticationFailed.
        """
        if credentials is None:
            raise AuthenticationFailed(self.legacy_realm)
        user = self._users.get_by_username(credentials.username)
        htpasswd = self._store.lookup(user.user_id) if user else None
        if htpasswd is None:
            verified = verify_legacy_miss(credentials.password)
        else:
            verified = verify_legacy(htpasswd, credentials.password)
        if not verified:
            logger.warning("Legacy upgrade authentication failed")
            raise AuthenticationFailed(self.legacy_realm)
        return user, credentials.password

    def upgrade(self, credentials: HTTPBasicCredentials | None) -> User:
        user, passwd = self.authenticate(credentials)
        # Status may have changed since the legacy hash was set.
        if not user.is_disabled_without_credential():
            logger.warning(f"Upgrade refused for user {user.username}: account status {user.status}")
            raise Forbidden(
                "Cannot set new password",
                [
                    MText(
                        "The account is not in a state where upgrading the "
                        "authentication is allowed. If this is unexpected, "
                        "please contact an administrator."
                    )
                ],
            )

        self._users.set_credential(user.user_id, derive_credential(self.server_realm, user.username, passwd))
        self._users.set_enabled(user.user_id, True)
        self._store.delete(user.user_id)
        logger.info(f"User {user.username} ({user.user_id}) upgraded from legacy password")
        return user
