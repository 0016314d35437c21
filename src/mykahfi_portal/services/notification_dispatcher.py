"""Push-notification dispatch for message and payment change events."""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError

from mykahfi_portal.db.models.notification_log import (
    NotificationEventKind,
    NotificationLog,
    NotificationStatus,
)
from mykahfi_portal.domain.academic_calendar import parse_sort_order, resolve_month_code
from mykahfi_portal.domain.errors import PushDeliveryError
from mykahfi_portal.domain.money import (
    amount_to_number,
    amount_to_text,
    format_rupiah,
    parse_amount,
)
from mykahfi_portal.infrastructure.push.onesignal import PushClient, PushResult
from mykahfi_portal.webhooks.envelope import ChangeEventType, WebhookEnvelope

logger = logging.getLogger(__name__)

NOTIFICATION_BODY_MAX_LENGTH = 120
ELLIPSIS = "..."
IDEMPOTENCY_SCAN_LIMIT = 30
DASHBOARD_DEEPLINK = "/dashboard"
MESSAGE_FIELDS = ("msg_app", "message_text", "message", "text")
LEGACY_MESSAGE_FIELD = "msg_app"
PAYMENT_AUDIT_SOURCE = "ledger_change_webhook"

_WHITESPACE = re.compile(r"\s+")


class NotificationLogRepositoryProtocol(Protocol):
    """Audit log contract used by the dispatcher."""

    def append(self, entry: NotificationLog) -> bool: ...

    def list_recent_sent_payloads(
        self,
        *,
        nis: str,
        event_type: NotificationEventKind,
        limit: int,
    ) -> list[dict[str, Any]]: ...


class SkipReason(enum.StrEnum):
    """Benign reasons for not sending a notification."""

    MISSING_NIS = "missing_nis"
    EMPTY_MESSAGE = "empty_message"
    UNCHANGED_MESSAGE = "unchanged_message"
    MISSING_TRANSACTION_IDENTITY = "missing_transaction_identity"
    UNCHANGED_PAYMENT = "unchanged_payment"
    DUPLICATE = "duplicate"


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Result of a dispatch that did not fail."""

    notification_id: str | None = None
    skipped: SkipReason | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def skip(cls, reason: SkipReason, **extra: Any) -> DispatchOutcome:
        return cls(skipped=reason, extra=extra)

    def to_response(self) -> dict[str, Any]:
        if self.skipped is not None:
            return {"ok": True, "skipped": self.skipped.value, **self.extra}
        return {"ok": True, "notification_id": self.notification_id, **self.extra}


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def to_notification_body(message: str) -> str:
    """Collapse whitespace and cap the body, marking cuts with an ellipsis."""

    clean = _WHITESPACE.sub(" ", message).strip()
    if len(clean) <= NOTIFICATION_BODY_MAX_LENGTH:
        return clean
    return clean[: NOTIFICATION_BODY_MAX_LENGTH - len(ELLIPSIS)] + ELLIPSIS


def pick_message(record: Mapping[str, Any]) -> tuple[str, str | None]:
    """Return the first populated message field and its name."""

    for field_name in MESSAGE_FIELDS:
        value = _text(record.get(field_name))
        if value:
            return value, field_name
    return "", None


def detect_message_field(record: Mapping[str, Any]) -> str:
    for field_name in MESSAGE_FIELDS:
        if field_name in record:
            return field_name
    return LEGACY_MESSAGE_FIELD


def describe_message_source(table: str | None, field_name: str) -> str:
    if table:
        return f"{table}.{field_name}"
    if field_name == LEGACY_MESSAGE_FIELD:
        return "users.msg_app"
    return f"user_messages_web.{field_name}"


def build_payment_body(amount_text: str, month_code: str) -> str:
    if month_code:
        return f"Pembayaran {month_code} sebesar {amount_text} sudah diterima."
    return f"Pembayaran baru sebesar {amount_text} sudah diterima."


class NotificationDispatcher:
    """Decides whether a change deserves a push, sends it and audits it."""

    def __init__(
        self,
        *,
        push_client: PushClient,
        log_repository: NotificationLogRepositoryProtocol,
    ) -> None:
        self._push_client = push_client
        self._log_repository = log_repository

    def dispatch_message_change(self, event: WebhookEnvelope) -> DispatchOutcome:
        record = event.record
        nis = _text(
            record.get("nis") or event.payload.get("nis") or event.envelope.get("nis")
        )

        new_message, field_name = pick_message(record)
        if not new_message:
            new_message, _ = pick_message(event.payload)
        if not new_message:
            new_message, _ = pick_message(event.envelope)
        old_message, _ = pick_message(event.old_record)

        if not nis:
            return self._skip(SkipReason.MISSING_NIS, event)
        if not new_message:
            return self._skip(
                SkipReason.EMPTY_MESSAGE,
                event,
                payload_keys=sorted(event.payload.keys()),
            )
        if old_message and new_message == old_message:
            return self._skip(SkipReason.UNCHANGED_MESSAGE, event)

        body = to_notification_body(new_message)
        source_field = field_name or detect_message_field(record)
        return self._send(
            nis=nis,
            event_kind=NotificationEventKind.MESSAGE,
            title="Pesan Sekolah",
            body=body,
            data={
                "event_type": NotificationEventKind.MESSAGE.value,
                "nis": nis,
                "deeplink": DASHBOARD_DEEPLINK,
            },
            audit_payload={
                "source": describe_message_source(event.table, source_field),
                "webhook_type": event.raw_event_type,
                "webhook_table": event.table,
                "body_preview": body,
            },
        )

    def dispatch_payment_change(self, event: WebhookEnvelope) -> DispatchOutcome:
        record = event.record
        nis = _text(record.get("nis"))
        idtrx = _text(record.get("idtrx"))
        idtag = _text(record.get("idtag"))
        amount = parse_amount(record.get("nominal"))
        old_amount = parse_amount(event.old_record.get("nominal"))
        sort_order = parse_sort_order(record.get("sortasi"))
        month_code = resolve_month_code(sort_order, record.get("bulan"))

        if not nis:
            return self._skip(SkipReason.MISSING_NIS, event)
        if not idtrx and not idtag:
            return self._skip(SkipReason.MISSING_TRANSACTION_IDENTITY, event)
        if event.event_type is ChangeEventType.UPDATE and amount == old_amount:
            return self._skip(SkipReason.UNCHANGED_PAYMENT, event)
        if idtrx and self._already_notified(nis=nis, idtrx=idtrx):
            return self._skip(SkipReason.DUPLICATE, event, idtrx=idtrx)

        amount_text = amount_to_text(amount)
        outcome = self._send(
            nis=nis,
            event_kind=NotificationEventKind.PAYMENT,
            title="Pembayaran Baru",
            body=build_payment_body(format_rupiah(amount), month_code),
            data={
                "event_type": NotificationEventKind.PAYMENT.value,
                "nis": nis,
                "idtrx": idtrx or "-",
                "idtag": idtag or "-",
                "month": month_code or "-",
                "nominal": amount_text,
                "deeplink": DASHBOARD_DEEPLINK,
            },
            audit_payload={
                "source": PAYMENT_AUDIT_SOURCE,
                "webhook_type": event.raw_event_type,
                "webhook_table": event.table,
                "idtrx": idtrx or None,
                "idtag": idtag or None,
                "sortasi": sort_order,
                "month_code": month_code or None,
                "nominal": amount_to_number(amount),
            },
        )
        return DispatchOutcome(
            notification_id=outcome.notification_id,
            extra={"idtrx": idtrx or None},
        )

    def send_test_notification(self, nis: str) -> DispatchOutcome:
        return self._send(
            nis=nis,
            event_kind=NotificationEventKind.TEST,
            title="Test Notifikasi",
            body="Push OneSignal berhasil terhubung.",
            data={
                "event_type": NotificationEventKind.TEST.value,
                "nis": nis,
                "deeplink": DASHBOARD_DEEPLINK,
            },
            audit_payload={"source": "push_test"},
        )

    def _already_notified(self, *, nis: str, idtrx: str) -> bool:
        """Best-effort duplicate check against recent successful pushes."""

        try:
            payloads = self._log_repository.list_recent_sent_payloads(
                nis=nis,
                event_type=NotificationEventKind.PAYMENT,
                limit=IDEMPOTENCY_SCAN_LIMIT,
            )
        except SQLAlchemyError:
            logger.warning(
                "payment_idempotency_check_failed",
                exc_info=True,
                extra={"nis": nis, "idtrx": idtrx},
            )
            return False
        return any(_text(payload.get("idtrx")) == idtrx for payload in payloads)

    def _send(
        self,
        *,
        nis: str,
        event_kind: NotificationEventKind,
        title: str,
        body: str,
        data: dict[str, str],
        audit_payload: dict[str, Any],
    ) -> DispatchOutcome:
        result = self._push_client.send_notification(
            external_user_ids=[nis],
            title=title,
            body=body,
            data=data,
        )
        self._audit(
            nis=nis,
            event_kind=event_kind,
            result=result,
            payload=audit_payload,
        )

        if not result.success:
            logger.warning(
                "push_delivery_failed",
                extra={
                    "nis": nis,
                    "event_type": event_kind.value,
                    "error": result.error,
                },
            )
            raise PushDeliveryError(message=result.error or "Push send failed")

        logger.info(
            "push_delivered",
            extra={
                "nis": nis,
                "event_type": event_kind.value,
                "notification_id": result.id,
            },
        )
        return DispatchOutcome(notification_id=result.id)

    def _audit(
        self,
        *,
        nis: str,
        event_kind: NotificationEventKind,
        result: PushResult,
        payload: dict[str, Any],
    ) -> None:
        self._log_repository.append(
            NotificationLog(
                nis=nis,
                event_type=event_kind,
                provider=self._push_client.provider,
                status=NotificationStatus.SENT
                if result.success
                else NotificationStatus.FAILED,
                provider_message_id=result.id,
                error_message=None
                if result.success
                else result.error or "Unknown error",
                payload=payload,
            )
        )

    @staticmethod
    def _skip(
        reason: SkipReason,
        event: WebhookEnvelope,
        **extra: Any,
    ) -> DispatchOutcome:
        logger.info(
            "notification_skipped",
            extra={
                "reason": reason.value,
                "webhook_type": event.raw_event_type,
                "webhook_table": event.table,
            },
        )
        return DispatchOutcome.skip(reason, **extra)
