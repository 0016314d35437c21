"""Change-capture webhook routes that trigger push notifications."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from mykahfi_portal.api.dependencies import (
    get_notification_dispatcher,
    get_webhook_envelope,
)
from mykahfi_portal.services.notification_dispatcher import NotificationDispatcher
from mykahfi_portal.webhooks.envelope import WebhookEnvelope

router = APIRouter(prefix="/push", tags=["Webhooks"])

WEBHOOK_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"description": "Unauthorized webhook"},
    503: {"description": "Push delivery failed or webhook not configured"},
}


@router.post("/notify-message", responses=WEBHOOK_RESPONSES)
def notify_message(
    event: Annotated[WebhookEnvelope, Depends(get_webhook_envelope)],
    dispatcher: Annotated[
        NotificationDispatcher,
        Depends(get_notification_dispatcher),
    ],
) -> dict[str, Any]:
    """Push the new school message when an announcement row changes."""

    return dispatcher.dispatch_message_change(event).to_response()


@router.post("/notify-payment", responses=WEBHOOK_RESPONSES)
def notify_payment(
    event: Annotated[WebhookEnvelope, Depends(get_webhook_envelope)],
    dispatcher: Annotated[
        NotificationDispatcher,
        Depends(get_notification_dispatcher),
    ],
) -> dict[str, Any]:
    """Push a payment receipt when a ledger row is inserted or updated."""

    return dispatcher.dispatch_payment_change(event).to_response()
