"""Authentication and normalization gate for inbound change webhooks."""

from __future__ import annotations

import hmac
from collections.abc import Mapping

from fastapi import Request

from mykahfi_portal.core.settings import Settings
from mykahfi_portal.domain.errors import (
    WebhookConfigurationError,
    WebhookUnauthorizedError,
)
from mykahfi_portal.webhooks.envelope import (
    WebhookEnvelope,
    normalize_change_event,
    parse_webhook_body,
)

WEBHOOK_SECRET_HEADER = "x-webhook-secret"
AUTHORIZATION_HEADER = "authorization"
BEARER_PREFIX = "bearer "


def accepted_webhook_secrets(settings: Settings) -> list[str]:
    """Return configured secrets; raise when none is set (fail closed)."""

    secrets: list[str] = []
    for candidate in (settings.webhook_secret, settings.service_role_key):
        value = (candidate or "").strip()
        if value and value not in secrets:
            secrets.append(value)
    if not secrets:
        raise WebhookConfigurationError()
    return secrets


def parse_bearer_token(authorization_header: str) -> str:
    if not authorization_header.lower().startswith(BEARER_PREFIX):
        return ""
    return authorization_header[len(BEARER_PREFIX) :].strip()


def _matches(presented: str, secret: str) -> bool:
    if not presented:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), secret.encode("utf-8"))


def authenticate_webhook(headers: Mapping[str, str], secrets: list[str]) -> None:
    """Accept the shared-secret header or a bearer token matching any secret."""

    incoming_secret = headers.get(WEBHOOK_SECRET_HEADER) or ""
    bearer_token = parse_bearer_token(headers.get(AUTHORIZATION_HEADER) or "")
    authorized = any(
        _matches(incoming_secret, secret) or _matches(bearer_token, secret)
        for secret in secrets
    )
    if not authorized:
        raise WebhookUnauthorizedError()


async def authenticate_and_normalize(
    request: Request,
    settings: Settings,
) -> WebhookEnvelope:
    """Authenticate before reading the body, then normalize it."""

    authenticate_webhook(request.headers, accepted_webhook_secrets(settings))
    body = await request.body()
    return normalize_change_event(parse_webhook_body(body))
