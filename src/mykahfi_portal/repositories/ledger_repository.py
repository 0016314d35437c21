"""Read-only queries against the payment ledger."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mykahfi_portal.db.models.payment_transaction import PaymentTransaction
from mykahfi_portal.domain.academic_calendar import parse_sort_order
from mykahfi_portal.domain.errors import DataUnavailableError
from mykahfi_portal.domain.money import parse_amount

FALLBACK_ROW_LIMIT = 250

LATEST_PER_MONTH_STATEMENT = text(
    "SELECT idtrx, idtag, nis, nominal, tgl_trx, jenjang, sortasi "
    "FROM latest_transactions_by_month(:nis)"
)


class AggregationUnavailableError(Exception):
    """Raised when the server-side aggregation routine cannot be used."""


@dataclass(frozen=True, slots=True)
class LedgerRow:
    """Payment ledger row as consumed by the reconciler."""

    idtrx: str
    nis: str
    nominal: Decimal
    tgl_trx: date | None
    jenjang: str | None
    sortasi: int | None
    idtag: str | None = None

    @classmethod
    def from_model(cls, transaction: PaymentTransaction) -> LedgerRow:
        return cls(
            idtrx=str(transaction.idtrx),
            nis=transaction.nis,
            nominal=transaction.nominal,
            tgl_trx=transaction.tgl_trx,
            jenjang=transaction.jenjang,
            sortasi=transaction.sortasi,
            idtag=transaction.idtag,
        )

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> LedgerRow:
        paid_at = row.get("tgl_trx")
        if isinstance(paid_at, str):
            paid_at = date.fromisoformat(paid_at[:10])
        return cls(
            idtrx=str(row.get("idtrx") or ""),
            nis=str(row.get("nis") or ""),
            nominal=parse_amount(row.get("nominal")),
            tgl_trx=paid_at,
            jenjang=row.get("jenjang"),
            sortasi=parse_sort_order(row.get("sortasi")),
            idtag=row.get("idtag"),
        )


class LedgerRepository:
    """Repository for the two ledger read paths used by reconciliation."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def fetch_latest_per_month(self, nis: str) -> list[LedgerRow]:
        """Call the aggregation routine returning at most one row per month."""

        try:
            result = self._session.execute(LATEST_PER_MONTH_STATEMENT, {"nis": nis})
            rows = [LedgerRow.from_mapping(row) for row in result.mappings()]
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise AggregationUnavailableError(str(exc)) from exc
        return rows

    def list_recent_transactions(
        self,
        nis: str,
        sort_orders: Iterable[int],
        *,
        limit: int = FALLBACK_ROW_LIMIT,
    ) -> list[LedgerRow]:
        """Return the learner's rows, most recent payment first.

        Ties on ``tgl_trx`` are broken by ``idtrx`` descending. ``idtrx`` is a
        text column, so the tie-break is lexicographic ("9" before "10").
        """

        statement = (
            select(PaymentTransaction)
            .where(
                PaymentTransaction.nis == nis,
                PaymentTransaction.sortasi.in_(list(sort_orders)),
            )
            .order_by(
                PaymentTransaction.tgl_trx.desc(),
                PaymentTransaction.idtrx.desc(),
            )
            .limit(limit)
        )
        try:
            transactions = self._session.scalars(statement).all()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DataUnavailableError(details={"source": "transactions"}) from exc
        return [LedgerRow.from_model(transaction) for transaction in transactions]
