"""Payment ledger ORM model (read-only for the portal)."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from mykahfi_portal.db.base import Base


class PaymentTransaction(Base):
    """One tuition payment row written by the school's finance system."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_nis_sortasi", "nis", "sortasi"),
    )

    idtrx: Mapped[str] = mapped_column(String(64), primary_key=True)
    idtag: Mapped[str | None] = mapped_column(String(64), nullable=True)
    nis: Mapped[str] = mapped_column(String(6), nullable=False)
    nama: Mapped[str | None] = mapped_column(String(160), nullable=True)
    bulan: Mapped[str | None] = mapped_column(String(16), nullable=True)
    nominal: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    tgl_trx: Mapped[date] = mapped_column(Date, nullable=False)
    jenjang: Mapped[str | None] = mapped_column(String(32), nullable=True)
    sortasi: Mapped[int | None] = mapped_column(Integer, nullable=True)
