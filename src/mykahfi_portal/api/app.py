"""FastAPI app bootstrap for mykahfi_portal."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.middleware.sessions import SessionMiddleware

from mykahfi_portal.api.error_handlers import register_error_handlers
from mykahfi_portal.api.routes import api_router
from mykahfi_portal.api.session import (
    MIN_SESSION_SECRET_LENGTH,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE_SECONDS,
)
from mykahfi_portal.core.settings import Settings, get_settings
from mykahfi_portal.db.session import get_db_session
from mykahfi_portal.domain.errors import ConfigurationError, compose_error_message
from mykahfi_portal.domain.rate_limit import FixedWindowRateLimiter


def _require_session_secret(settings: Settings) -> str:
    secret = (settings.session_secret or "").strip()
    if len(secret) < MIN_SESSION_SECRET_LENGTH:
        raise ConfigurationError(
            message=compose_error_message(
                cause="SESSION_SECRET is missing or shorter than 32 characters.",
                action="Set a random SESSION_SECRET of at least 32 characters.",
            )
        )
    return secret


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure FastAPI application instance."""

    resolved_settings = settings or get_settings()
    logging.basicConfig(level=resolved_settings.log_level.upper())

    app = FastAPI(
        title="MyKahfi Parent Portal API",
        version="0.1.0",
    )
    app.state.settings = resolved_settings
    app.state.login_rate_limiter = FixedWindowRateLimiter(
        limit=resolved_settings.login_rate_limit,
        window_seconds=resolved_settings.login_rate_window_seconds,
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=_require_session_secret(resolved_settings),
        session_cookie=SESSION_COOKIE_NAME,
        max_age=SESSION_MAX_AGE_SECONDS,
        same_site="lax",
        https_only=resolved_settings.session_cookie_secure,
    )

    @app.get("/health/live", include_in_schema=False)
    def health_live() -> dict[str, str]:
        return {"status": "alive"}

    @app.get("/health/ready", include_in_schema=False)
    def health_ready(
        db_session: Annotated[Session, Depends(get_db_session)],
    ) -> dict[str, str]:
        try:
            db_session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database is unavailable",
            ) from exc
        return {"status": "ready"}

    register_error_handlers(app)
    app.include_router(api_router)
    return app
