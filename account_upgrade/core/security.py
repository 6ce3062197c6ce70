from __future__ import annotations

from datetime import timedelta

from authx import AuthX, AuthXConfig

from account_upgrade.app.core.config import settings

auth_config = AuthXConfig(
    JWT_ALGORITHM="HS256",
    JWT_SECRET_KEY=settings.JWT_SECRET_KEY,
    JWT_TOKEN_LOCATION=["headers", "cookies"],
    JWT_ACCESS_TOKEN_EXPIRES=timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRES_MINUTES),
    JWT_COOKIE_CSRF_PROTECT=False,
)

auth = AuthX(config=auth_config)
