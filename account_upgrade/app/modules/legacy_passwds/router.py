from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from account_upgrade.app.core.auth import get_deps
from account_upgrade.app.core.authz import AdminOnly
from account_upgrade.app.core.config import settings
from account_upgrade.app.dependencies import AppDependencies
from account_upgrade.app.modules.legacy_passwds.interceptor import make_auth_fail_interceptor
from account_upgrade.app.modules.legacy_passwds.service import LegacyPasswdsService
from account_upgrade.models.auth import ERROR_RESPONSES

logger = logging.getLogger(__name__)

UPGRADE_FORM_ROUTE = "legacy_passwds_upgrade_form"
UPGRADE_TEMPLATE = "LegacyPasswds/htpasswd-upgrade.html"
UPGRADE_SUCCESS_TEMPLATE = "LegacyPasswds/htpasswd-upgrade-success.html"

legacy_basic = HTTPBasic(realm=settings.LEGACY_REALM, auto_error=False)

router = APIRouter(responses=ERROR_RESPONSES)


def get_service(deps: AppDependencies = Depends(get_deps)) -> LegacyPasswdsService:
    return LegacyPasswdsService(deps)


@router.put("/user/{username}/htpasswd", status_code=204)
async def put_user_htpasswd(
    username: str,
    request: Request,
    _: AdminOnly,
    service: LegacyPasswdsService = Depends(get_service),
):
    """Set a legacy password for a user account"""
    body = await request.body()
    service.set_legacy_passwd(username, body, request.headers.get("content-type") or "")
    return Response(status_code=204)


@router.delete("/user/{username}/htpasswd", status_code=204)
async def delete_user_htpasswd(
    username: str,
    _: AdminOnly,
    service: LegacyPasswdsService = Depends(get_service),
):
    """Remove a pending legacy password"""
    service.delete_legacy_passwd(username)
    return Response(status_code=204)


@router.get("/users/htpasswd-upgrade", name=UPGRADE_FORM_ROUTE)
async def get_htpasswd_upgrade(
    request: Request,
    deps: AppDependencies = Depends(get_deps),
):
    """Upgrade a user account with a legacy password"""
    return deps.templates.TemplateResponse(
        request,
        UPGRADE_TEMPLATE,
        {"realm": settings.LEGACY_REALM},
    )


@router.post("/users/htpasswd-upgrade")
async def post_htpasswd_upgrade(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(legacy_basic),
    deps: AppDependencies = Depends(get_deps),
    service: LegacyPasswdsService = Depends(get_service),
):
    user = service.upgrade(credentials)
    return deps.templates.TemplateResponse(
        request,
        UPGRADE_SUCCESS_TEMPLATE,
        {"username": user.username},
    )


def init_legacy_passwds_feature(app: FastAPI, *, base_url: str | None = None) -> None:
    """Hook the upgrade redirect into login failures. Call once deps exist."""
    deps: AppDependencies = app.state.deps
    deps.auth_fail_hooks.register(
        make_auth_fail_interceptor(
            deps.legacy_passwd_store,
            base_url=base_url or settings.SERVER_BASE_URL,
            upgrade_path=app.url_path_for(UPGRADE_FORM_ROUTE),
        )
    )
    logger.info("Legacy password upgrade hook registered")
