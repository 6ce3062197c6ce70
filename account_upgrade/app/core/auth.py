from __future__ import annotations

from authx import RequestToken, TokenPayload
from fastapi import HTTPException, Request

from account_upgrade.core.security import auth
from account_upgrade.app.dependencies import AppDependencies


def get_deps(request: Request) -> AppDependencies:
    return request.app.state.deps


async def get_current_payload(request: Request) -> TokenPayload:
    """
    Resolve the current access-token payload.

    Accepts:
    - Authorization: Bearer <access_token>
    - access_token cookie (AuthX compatible)

    Always returns 401 (not 422) when token is missing/invalid.
    """
    token: RequestToken | None = None
    try:
        token = await auth.get_access_token_from_request(request)
    except Exception:
        # Fall back to explicit header parsing.
        auth_header = request.headers.get("Authorization") or ""
        if auth_header.startswith("Bearer "):
            raw = auth_header.split(" ", 1)[1].strip()
            token = RequestToken(token=raw, location="headers") if raw else None

    if not token:
        raise HTTPException(status_code=401, detail="Missing access token")

    try:
        return auth.verify_token(token, verify_type=True)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid access token")
