from __future__ import annotations

import logging
from urllib.parse import urlsplit, urlunsplit

from account_upgrade.app.core.auth_hooks import AuthError, AuthFailHook, UserStatusError
from account_upgrade.app.core.errors import ErrorResponse, MLink, MText
from account_upgrade.services.legacy_passwds import LegacyPasswdStoreLike

logger = logging.getLogger(__name__)


def absolute_url(base_url: str, path: str) -> str:
    """Replace the path of `base_url` with `path` (query and fragment dropped)."""
    parts = urlsplit(base_url)
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def upgrade_redirect_response(upgrade_url: str) -> ErrorResponse:
    return ErrorResponse(
        403,
        "Account needs to be re-enabled",
        [
            MText("This site has been upgraded to use a more secure login system. Please go to "),
            MLink(upgrade_url, upgrade_url),
            MText(" to re-enable your account and for more details about this change."),
        ],
    )


def make_auth_fail_interceptor(
    store: LegacyPasswdStoreLike,
    *,
    base_url: str,
    upgrade_path: str,
) -> AuthFailHook:
    """
    Build the hook that points disabled legacy accounts at the upgrade page.

    The caller has not authenticated, so this only ever acts on a disabled
    account with no credential and no reason, and only says that a legacy
    password exists. Every other failure gets no opinion.
    """
    upgrade_url = absolute_url(base_url, upgrade_path)

    def on_auth_fail(error: AuthError) -> ErrorResponse | None:
        if not isinstance(error, UserStatusError):
            return None
        if not error.user.is_disabled_without_credential():
            return None
        if store.lookup(error.user_id) is None:
            return None
        logger.info(f"Login for legacy account {error.user_id} redirected to upgrade page")
        return upgrade_redirect_response(upgrade_url)

    return on_auth_fail
