from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from account_upgrade.app.core.config import settings
from account_upgrade.app.core.errors import register_exception_handlers
from account_upgrade.core.security import auth as authx_auth

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from account_upgrade.app.dependencies import create_dependencies
    from account_upgrade.app.modules.legacy_passwds.router import init_legacy_passwds_feature

    try:
        if getattr(app.state, "deps", None) is None:
            app.state.deps = create_dependencies()
        logger.info("Dependencies initialized")
        init_legacy_passwds_feature(app)
    except Exception as e:
        logger.error(f"Failed to initialize application: {e}", exc_info=True)
        raise

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Account upgrade service for legacy htpasswd passwords",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    authx_auth.handle_errors(app)

    from account_upgrade.app.modules.auth.router import router as auth_router
    from account_upgrade.app.modules.legacy_passwds.router import router as legacy_passwds_router

    app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(legacy_passwds_router, tags=["Legacy Passwords"])

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "account-upgrade"}

    @app.get("/")
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "auth": "AuthX JWT",
        }

    return app


app = create_app()
