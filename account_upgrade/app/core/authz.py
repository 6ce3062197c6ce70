from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Annotated, Any

from authx import TokenPayload
from fastapi import Depends, HTTPException

from account_upgrade.app.core.auth import get_current_payload, get_deps
from account_upgrade.app.dependencies import AppDependencies


@dataclass(frozen=True)
class AuthContext:
    deps: AppDependencies
    payload: TokenPayload
    user: Any


def get_auth_context(
    payload: TokenPayload = Depends(get_current_payload),
    deps: AppDependencies = Depends(get_deps),
) -> AuthContext:
    try:
        user_id = int(payload.sub)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid access token")
    try:
        user = deps.user_store.get_by_user_id(user_id)
    except sqlite3.OperationalError as e:
        # Avoid leaking transient sqlite errors as 500s (e.g. during restore IO).
        raise HTTPException(status_code=503, detail=f"db_unavailable: {e}") from e
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.is_enabled:
        raise HTTPException(status_code=403, detail="Account disabled")
    return AuthContext(deps=deps, payload=payload, user=user)


AuthContextDep = Annotated[AuthContext, Depends(get_auth_context)]


def admin_only(
    ctx: AuthContextDep,
) -> AuthContext:
    if not ctx.user.is_admin:
        raise HTTPException(status_code=403, detail="admin_required")
    return ctx


AdminOnly = Annotated[AuthContext, Depends(admin_only)]
