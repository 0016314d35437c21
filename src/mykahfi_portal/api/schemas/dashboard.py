"""Schemas for the dashboard response."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from mykahfi_portal.domain.money import amount_to_text
from mykahfi_portal.services.dashboard_service import DashboardView
from mykahfi_portal.services.payment_reconciler import MonthProjection


class StudentResponse(BaseModel):
    nis: str
    nama_siswa: str
    jenjang: str | None


class MessageResponse(BaseModel):
    text: str
    isNew: bool = True


class TransactionResponse(BaseModel):
    idtrx: str
    nominal: str
    tgl_trx: date | None
    jenjang: str | None


class MonthResponse(BaseModel):
    """Payment status of one academic month."""

    code: str = Field(pattern=r"^[A-Z]{3}$")
    label: str
    paid: bool
    transaction: TransactionResponse | None

    @classmethod
    def from_projection(cls, projection: MonthProjection) -> MonthResponse:
        transaction = projection.transaction
        return cls(
            code=projection.code,
            label=projection.label,
            paid=projection.paid,
            transaction=TransactionResponse(
                idtrx=transaction.idtrx,
                nominal=amount_to_text(transaction.nominal),
                tgl_trx=transaction.tgl_trx,
                jenjang=transaction.jenjang,
            )
            if transaction is not None
            else None,
        )


class ContactResponse(BaseModel):
    unit: str
    nohp: str


class DashboardResponse(BaseModel):
    """Combined dashboard payload for one guardian."""

    ok: bool = True
    student: StudentResponse
    message: MessageResponse | None
    months: list[MonthResponse] = Field(min_length=11, max_length=11)
    contacts: list[ContactResponse]

    @classmethod
    def from_view(cls, view: DashboardView) -> DashboardResponse:
        return cls(
            student=StudentResponse(
                nis=view.student.nis,
                nama_siswa=view.student.nama_siswa,
                jenjang=view.student.jenjang,
            ),
            message=MessageResponse(text=view.message.text)
            if view.message.text
            else None,
            months=[
                MonthResponse.from_projection(month) for month in view.payments.months
            ],
            contacts=[
                ContactResponse(unit=contact.unit, nohp=contact.nohp)
                for contact in view.contacts
            ],
        )
