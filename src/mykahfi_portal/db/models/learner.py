"""Learner (guardian account) ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mykahfi_portal.db.base import Base


class Learner(Base):
    """Student account keyed by NIS, also holding the legacy message field."""

    __tablename__ = "users"

    nis: Mapped[str] = mapped_column(String(6), primary_key=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    nama_siswa: Mapped[str] = mapped_column(String(160), nullable=False)
    jenjang: Mapped[str | None] = mapped_column(String(32), nullable=True)
    msg_app: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_login_device: Mapped[str | None] = mapped_column(String(200), nullable=True)
    last_login_app_version: Mapped[str | None] = mapped_column(
        String(32),
        nullable=True,
    )
