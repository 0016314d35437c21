"""Append-only notification audit log ORM model."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, Enum, Index, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from mykahfi_portal.db.base import Base


class NotificationEventKind(enum.StrEnum):
    """Kinds of events that trigger a push notification."""

    MESSAGE = "message"
    PAYMENT = "payment"
    TEST = "test"


class NotificationStatus(enum.StrEnum):
    """Outcome of one push delivery attempt."""

    SENT = "sent"
    FAILED = "failed"


class NotificationLog(Base):
    """One row per push dispatch attempt, also used as idempotency ledger."""

    __tablename__ = "notification_logs"
    __table_args__ = (
        Index(
            "ix_notification_logs_nis_event_status_created",
            "nis",
            "event_type",
            "status",
            "created_at",
        ),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    nis: Mapped[str] = mapped_column(String(6), nullable=False)
    event_type: Mapped[NotificationEventKind] = mapped_column(
        Enum(
            NotificationEventKind,
            name="notification_event_kind",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    provider: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[NotificationStatus] = mapped_column(
        Enum(
            NotificationStatus,
            name="notification_status",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
            validate_strings=True,
        ),
        nullable=False,
    )
    provider_message_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
