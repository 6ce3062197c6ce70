from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, Response

from account_upgrade.app.core.auth import get_deps
from account_upgrade.app.core.auth_hooks import (
    AuthError,
    NoSuchUserError,
    PasswordMismatchError,
    UserStatusError,
)
from account_upgrade.app.core.config import settings
from account_upgrade.app.core.errors import ErrorResponse, MText
from account_upgrade.app.dependencies import AppDependencies
from account_upgrade.core.security import auth
from account_upgrade.models.auth import ERROR_RESPONSES, LoginRequest, TokenResponse
from account_upgrade.services.users import check_credential

router = APIRouter(responses=ERROR_RESPONSES)
logger = logging.getLogger(__name__)


def _bad_credentials() -> ErrorResponse:
    return ErrorResponse(401, "Invalid username or password", [MText("Invalid username or password")])


def _account_disabled() -> ErrorResponse:
    return ErrorResponse(403, "Account disabled", [MText("This account is disabled.")])


def _fail(deps: AppDependencies, error: AuthError, default: ErrorResponse) -> NoReturn:
    override = deps.auth_fail_hooks.run(error)
    raise override if override is not None else default


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    response: Response,
    deps: AppDependencies = Depends(get_deps),
):
    user = deps.user_store.get_by_username(credentials.username)
    if not user:
        _fail(deps, NoSuchUserError(credentials.username), _bad_credentials())

    # Status first: a disabled account may have no credential to compare against.
    if not user.is_enabled:
        _fail(deps, UserStatusError(user.user_id, user), _account_disabled())

    if not check_credential(user.password_hash, settings.SERVER_REALM, user.username, credentials.password):
        _fail(deps, PasswordMismatchError(user.user_id, user), _bad_credentials())

    access_token = auth.create_access_token(uid=str(user.user_id))
    auth.set_access_cookies(access_token, response)

    deps.user_store.update_last_login(user.user_id)
    logger.info(f"User {user.username} logged in")

    return TokenResponse(access_token=access_token, token_type="bearer")
