"""Per-learner announcement ORM model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from mykahfi_portal.db.base import Base


class UserMessage(Base):
    """Announcement addressed to one learner; the latest active row wins."""

    __tablename__ = "user_messages_web"
    __table_args__ = (
        Index("ix_user_messages_web_nis_created_at", "nis", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nis: Mapped[str] = mapped_column(String(6), nullable=False)
    message_text: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default="true",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
