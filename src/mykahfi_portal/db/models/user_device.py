"""Registered push device ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from mykahfi_portal.db.base import Base


class UserDevice(Base):
    """OneSignal subscription of one guardian browser, per platform."""

    __tablename__ = "user_devices_web"
    __table_args__ = (
        UniqueConstraint(
            "onesignal_subscription_id",
            "platform",
            name="uq_user_devices_web_subscription_platform",
        ),
        Index("ix_user_devices_web_nis_last_seen", "nis", "last_seen_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nis: Mapped[str] = mapped_column(String(6), nullable=False)
    onesignal_subscription_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
    )
    external_id: Mapped[str] = mapped_column(String(128), nullable=False)
    platform: Mapped[str] = mapped_column(String(32), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )
    last_seen_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
