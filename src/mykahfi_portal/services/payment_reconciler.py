"""Projects the sparse payment ledger onto the fixed academic calendar."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Protocol

from mykahfi_portal.domain.academic_calendar import (
    ACADEMIC_MONTHS,
    ACADEMIC_SORT_ORDERS,
    map_sort_order_to_month_code,
)
from mykahfi_portal.repositories.ledger_repository import (
    FALLBACK_ROW_LIMIT,
    AggregationUnavailableError,
    LedgerRow,
)

logger = logging.getLogger(__name__)


class LedgerRepositoryProtocol(Protocol):
    """Ledger read contract used by the reconciler."""

    def fetch_latest_per_month(self, nis: str) -> list[LedgerRow]: ...

    def list_recent_transactions(
        self,
        nis: str,
        sort_orders: Iterable[int],
        *,
        limit: int = FALLBACK_ROW_LIMIT,
    ) -> list[LedgerRow]: ...


@dataclass(frozen=True, slots=True)
class TransactionSummary:
    """Identifying fields of the payment shown for one month."""

    idtrx: str
    nominal: Decimal
    tgl_trx: date | None
    jenjang: str | None


@dataclass(frozen=True, slots=True)
class MonthProjection:
    """Payment status of one academic month."""

    code: str
    label: str
    paid: bool
    transaction: TransactionSummary | None


@dataclass(frozen=True, slots=True)
class PaymentProjection:
    """Eleven month projections in AGU..JUN order."""

    months: list[MonthProjection]
    source: str


def project_ledger_rows(rows: Sequence[LedgerRow]) -> list[MonthProjection]:
    """Keep the first row seen per month and emit all eleven slots.

    Rows are expected most-recent-first, so the first row seen for a month
    is its latest payment. Rows whose sort order maps to no slot (July,
    out-of-range, missing) are dropped.
    """

    latest_by_code: dict[str, LedgerRow] = {}
    for row in rows:
        code = map_sort_order_to_month_code(row.sortasi)
        if code is None or code in latest_by_code:
            continue
        latest_by_code[code] = row

    projections: list[MonthProjection] = []
    for month in ACADEMIC_MONTHS:
        row = latest_by_code.get(month.code)
        projections.append(
            MonthProjection(
                code=month.code,
                label=month.label,
                paid=row is not None,
                transaction=TransactionSummary(
                    idtrx=row.idtrx,
                    nominal=row.nominal,
                    tgl_trx=row.tgl_trx,
                    jenjang=row.jenjang,
                )
                if row is not None
                else None,
            )
        )
    return projections


class PaymentReconciler:
    """Builds the month-by-month payment view for one learner."""

    def __init__(self, *, ledger_repository: LedgerRepositoryProtocol) -> None:
        self._ledger_repository = ledger_repository

    def reconcile(self, nis: str) -> PaymentProjection:
        rows, source = self._load_rows(nis)
        return PaymentProjection(months=project_ledger_rows(rows), source=source)

    def _load_rows(self, nis: str) -> tuple[list[LedgerRow], str]:
        try:
            rows = self._ledger_repository.fetch_latest_per_month(nis)
        except AggregationUnavailableError as exc:
            logger.warning(
                "ledger_aggregation_unavailable",
                extra={"nis": nis, "error": str(exc)},
            )
        else:
            if rows:
                return rows, "aggregation"

        rows = self._ledger_repository.list_recent_transactions(
            nis,
            ACADEMIC_SORT_ORDERS,
            limit=FALLBACK_ROW_LIMIT,
        )
        return rows, "fallback_query"
