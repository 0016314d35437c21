"""Learner account persistence operations."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mykahfi_portal.db.models.admin_contact import AdminContact
from mykahfi_portal.db.models.learner import Learner
from mykahfi_portal.domain.errors import LearnerNotFoundError

logger = logging.getLogger(__name__)

LOGIN_DEVICE_MAX_LENGTH = 200


class LearnerRepository:
    """Repository for learner accounts and related lookup data."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_by_nis(self, nis: str) -> Learner | None:
        return self._session.get(Learner, nis)

    def get_by_nis(self, nis: str) -> Learner:
        """Load a learner; lookup failures and absence are both fatal."""

        try:
            learner = self.find_by_nis(nis)
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise LearnerNotFoundError() from exc
        if learner is None:
            raise LearnerNotFoundError()
        return learner

    def list_admin_contacts(self) -> list[AdminContact]:
        """Return admin contacts; an unreadable table yields an empty list."""

        statement = select(AdminContact).order_by(AdminContact.id.asc())
        try:
            return list(self._session.scalars(statement).all())
        except SQLAlchemyError:
            self._session.rollback()
            logger.warning("admin_contacts_unavailable", exc_info=True)
            return []

    def record_login(
        self,
        nis: str,
        *,
        logged_in_at: datetime,
        device: str,
        app_version: str,
    ) -> None:
        statement = (
            update(Learner)
            .where(Learner.nis == nis)
            .values(
                last_login_at=logged_in_at,
                last_login_device=device[:LOGIN_DEVICE_MAX_LENGTH],
                last_login_app_version=app_version,
            )
        )
        self._session.execute(statement)

    def list_credentials_page(
        self, *, offset: int, limit: int
    ) -> list[tuple[str, str]]:
        """Return ``(nis, password)`` pairs ordered by NIS."""

        statement = (
            select(Learner.nis, Learner.password)
            .order_by(Learner.nis.asc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.execute(statement).all()
        return [(str(nis), str(password or "")) for nis, password in rows]

    def update_password(self, nis: str, password_hash: str) -> None:
        statement = (
            update(Learner).where(Learner.nis == nis).values(password=password_hash)
        )
        self._session.execute(statement)
