from __future__ import annotations

from sqlalchemy import select, text
from sqlalchemy.orm import Session, sessionmaker

from mykahfi_portal.db.models.notification_log import (
    NotificationEventKind,
    NotificationLog,
    NotificationStatus,
)
from mykahfi_portal.repositories.notification_log_repository import (
    NotificationLogRepository,
)


def build_entry(
    idtrx: str,
    *,
    status: NotificationStatus = NotificationStatus.SENT,
    event_type: NotificationEventKind = NotificationEventKind.PAYMENT,
) -> NotificationLog:
    return NotificationLog(
        nis="123456",
        event_type=event_type,
        provider="onesignal",
        status=status,
        provider_message_id="push-1" if status is NotificationStatus.SENT else None,
        error_message=None if status is NotificationStatus.SENT else "failed",
        payload={"idtrx": idtrx},
    )


def test_recent_sent_payloads_only_include_successful_payment_rows(
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    with sqlite_session_factory() as session:
        repository = NotificationLogRepository(session)
        assert repository.append(build_entry("TRX-1"))
        assert repository.append(build_entry("TRX-2", status=NotificationStatus.FAILED))
        assert repository.append(
            build_entry("TRX-3", event_type=NotificationEventKind.MESSAGE)
        )

        payloads = repository.list_recent_sent_payloads(
            nis="123456",
            event_type=NotificationEventKind.PAYMENT,
            limit=30,
        )

    assert payloads == [{"idtrx": "TRX-1"}]


def test_append_failure_is_swallowed_and_reported(
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    with sqlite_session_factory() as session:
        session.execute(text("DROP TABLE notification_logs"))
        session.commit()

        written = NotificationLogRepository(session).append(build_entry("TRX-1"))

    assert written is False


def test_enum_values_are_persisted_lowercase(
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    with sqlite_session_factory() as session:
        NotificationLogRepository(session).append(build_entry("TRX-1"))
        raw_status = session.execute(
            text("SELECT status, event_type FROM notification_logs")
        ).one()
        stored = session.scalars(select(NotificationLog)).one()

    assert tuple(raw_status) == ("sent", "payment")
    assert stored.status is NotificationStatus.SENT
