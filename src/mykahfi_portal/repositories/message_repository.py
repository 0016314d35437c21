"""Announcement lookups: per-message table and legacy learner field."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from mykahfi_portal.db.models.learner import Learner
from mykahfi_portal.db.models.user_message import UserMessage
from mykahfi_portal.domain.errors import DataUnavailableError, LearnerNotFoundError

UNDEFINED_TABLE_SQLSTATE = "42P01"


class PrimaryMessageTableMissingError(Exception):
    """Raised when ``user_messages_web`` does not exist in the database."""


def is_undefined_table_error(exc: SQLAlchemyError) -> bool:
    """Detect the "relation does not exist" condition across drivers."""

    if not isinstance(exc, DBAPIError):
        return False
    original = exc.orig
    sqlstate = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if sqlstate == UNDEFINED_TABLE_SQLSTATE:
        return True
    return "no such table" in str(original).lower()


class MessageRepository:
    """Repository for the primary and legacy announcement sources."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_latest_active_text(self, nis: str) -> str | None:
        statement = (
            select(UserMessage.message_text)
            .where(
                UserMessage.nis == nis,
                UserMessage.is_active.is_(True),
            )
            .order_by(UserMessage.created_at.desc(), UserMessage.id.desc())
            .limit(1)
        )
        try:
            return self._session.scalar(statement)
        except SQLAlchemyError as exc:
            self._session.rollback()
            if is_undefined_table_error(exc):
                raise PrimaryMessageTableMissingError(str(exc)) from exc
            raise DataUnavailableError(
                details={"source": "user_messages_web"}
            ) from exc

    def get_legacy_text(self, nis: str) -> str | None:
        """Return ``users.msg_app``; a missing learner is a hard failure."""

        statement = select(Learner.nis, Learner.msg_app).where(Learner.nis == nis)
        try:
            row = self._session.execute(statement).first()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise LearnerNotFoundError() from exc
        if row is None:
            raise LearnerNotFoundError()
        return row.msg_app
