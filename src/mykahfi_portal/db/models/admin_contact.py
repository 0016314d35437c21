"""School admin contact ORM model."""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from mykahfi_portal.db.base import Base


class AdminContact(Base):
    """Administrative contact number per school unit."""

    __tablename__ = "kontak_admin"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unit: Mapped[str] = mapped_column(String(64), nullable=False)
    nohp: Mapped[str] = mapped_column(String(32), nullable=False)
