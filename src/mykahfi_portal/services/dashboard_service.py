"""Dashboard view: learner profile, payment months and announcement."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from mykahfi_portal.repositories.learner_repository import LearnerRepository
from mykahfi_portal.repositories.ledger_repository import LedgerRepository
from mykahfi_portal.repositories.message_repository import MessageRepository
from mykahfi_portal.services.message_resolver import MessageResolver, ResolvedMessage
from mykahfi_portal.services.payment_reconciler import (
    PaymentProjection,
    PaymentReconciler,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LearnerProfile:
    nis: str
    nama_siswa: str
    jenjang: str | None


@dataclass(frozen=True, slots=True)
class ContactEntry:
    unit: str
    nohp: str


@dataclass(frozen=True, slots=True)
class DashboardView:
    """Combined view returned to the guardian."""

    student: LearnerProfile
    payments: PaymentProjection
    message: ResolvedMessage
    contacts: list[ContactEntry]


class DashboardService:
    """Runs payment reconciliation and message resolution concurrently.

    Each concurrent branch opens its own session from the factory; no
    session is shared across threads.
    """

    def __init__(self, *, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def load(self, nis: str) -> DashboardView:
        student, contacts = await run_in_threadpool(self._load_learner, nis)
        payments, message = await asyncio.gather(
            run_in_threadpool(self._reconcile_payments, nis),
            run_in_threadpool(self._resolve_message, nis),
        )
        logger.info(
            "dashboard_loaded",
            extra={
                "nis": nis,
                "ledger_source": payments.source,
                "message_source": message.source.value,
                "paid_months": sum(1 for month in payments.months if month.paid),
            },
        )
        return DashboardView(
            student=student,
            payments=payments,
            message=message,
            contacts=contacts,
        )

    def _load_learner(self, nis: str) -> tuple[LearnerProfile, list[ContactEntry]]:
        with self._session_factory() as session:
            repository = LearnerRepository(session)
            learner = repository.get_by_nis(nis)
            contacts = [
                ContactEntry(unit=contact.unit, nohp=contact.nohp)
                for contact in repository.list_admin_contacts()
            ]
            return (
                LearnerProfile(
                    nis=learner.nis,
                    nama_siswa=learner.nama_siswa,
                    jenjang=learner.jenjang,
                ),
                contacts,
            )

    def _reconcile_payments(self, nis: str) -> PaymentProjection:
        with self._session_factory() as session:
            reconciler = PaymentReconciler(ledger_repository=LedgerRepository(session))
            return reconciler.reconcile(nis)

    def _resolve_message(self, nis: str) -> ResolvedMessage:
        with self._session_factory() as session:
            resolver = MessageResolver(message_repository=MessageRepository(session))
            return resolver.resolve_latest_message(nis)
