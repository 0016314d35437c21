"""Notification audit log persistence operations."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mykahfi_portal.db.models.notification_log import (
    NotificationEventKind,
    NotificationLog,
    NotificationStatus,
)

logger = logging.getLogger(__name__)


class NotificationLogRepository:
    """Append-only audit log, also scanned for payment idempotency."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def append(self, entry: NotificationLog) -> bool:
        """Insert one audit row; write failures are logged, never raised."""

        try:
            self._session.add(entry)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            logger.exception(
                "notification_log_write_failed",
                extra={
                    "nis": entry.nis,
                    "event_type": str(entry.event_type),
                    "status": str(entry.status),
                },
            )
            return False
        return True

    def list_recent_sent_payloads(
        self,
        *,
        nis: str,
        event_type: NotificationEventKind,
        limit: int,
    ) -> list[dict[str, Any]]:
        statement = (
            select(NotificationLog.payload)
            .where(
                NotificationLog.nis == nis,
                NotificationLog.event_type == event_type,
                NotificationLog.status == NotificationStatus.SENT,
            )
            .order_by(NotificationLog.created_at.desc())
            .limit(limit)
        )
        try:
            payloads = self._session.scalars(statement).all()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        return [payload if isinstance(payload, dict) else {} for payload in payloads]
