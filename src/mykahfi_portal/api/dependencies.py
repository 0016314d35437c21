"""API dependency providers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session, sessionmaker

from mykahfi_portal.core.settings import Settings
from mykahfi_portal.db.session import get_db_session, get_session_factory
from mykahfi_portal.domain.rate_limit import FixedWindowRateLimiter
from mykahfi_portal.infrastructure.push.onesignal import OneSignalPushClient, PushClient
from mykahfi_portal.repositories.device_repository import DeviceRepository
from mykahfi_portal.repositories.learner_repository import LearnerRepository
from mykahfi_portal.repositories.notification_log_repository import (
    NotificationLogRepository,
)
from mykahfi_portal.services.auth_service import AuthService
from mykahfi_portal.services.dashboard_service import DashboardService
from mykahfi_portal.services.device_service import DeviceService
from mykahfi_portal.services.notification_dispatcher import NotificationDispatcher
from mykahfi_portal.webhooks.envelope import WebhookEnvelope
from mykahfi_portal.webhooks.gate import authenticate_and_normalize


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was created with."""

    return request.app.state.settings


def get_login_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    return request.app.state.login_rate_limiter


def get_push_client(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PushClient:
    """Build OneSignal client from configured credentials."""

    return OneSignalPushClient(
        app_id=settings.onesignal_app_id,
        rest_api_key=settings.onesignal_rest_api_key,
        base_url=settings.onesignal_api_url,
        timeout_seconds=settings.push_timeout_seconds,
    )


def get_notification_dispatcher(
    session: Annotated[Session, Depends(get_db_session)],
    push_client: Annotated[PushClient, Depends(get_push_client)],
) -> NotificationDispatcher:
    """Build dispatcher with per-request session."""

    return NotificationDispatcher(
        push_client=push_client,
        log_repository=NotificationLogRepository(session),
    )


def get_dashboard_service(
    session_factory: Annotated[sessionmaker[Session], Depends(get_session_factory)],
) -> DashboardService:
    """Build dashboard service; it opens one session per concurrent branch."""

    return DashboardService(session_factory=session_factory)


def get_auth_service(
    session: Annotated[Session, Depends(get_db_session)],
    rate_limiter: Annotated[FixedWindowRateLimiter, Depends(get_login_rate_limiter)],
) -> AuthService:
    """Build auth service with per-request session."""

    return AuthService(
        learner_repository=LearnerRepository(session),
        rate_limiter=rate_limiter,
        session=session,
    )


async def get_webhook_envelope(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> WebhookEnvelope:
    """Authenticate the webhook call and normalize its body."""

    return await authenticate_and_normalize(request, settings)


def get_device_service(
    session: Annotated[Session, Depends(get_db_session)],
    push_client: Annotated[PushClient, Depends(get_push_client)],
) -> DeviceService:
    return DeviceService(
        device_repository=DeviceRepository(session),
        push_client=push_client,
    )
