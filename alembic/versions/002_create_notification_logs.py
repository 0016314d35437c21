"""Create append-only notification audit log.

Revision ID: 002_create_notification_logs
Revises: 001_create_portal_core
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "002_create_notification_logs"
down_revision: str | None = "001_create_portal_core"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


notification_event_kind_enum = sa.Enum(
    "message",
    "payment",
    "test",
    name="notification_event_kind",
)
notification_status_enum = sa.Enum("sent", "failed", name="notification_status")


def upgrade() -> None:
    op.create_table(
        "notification_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("nis", sa.String(length=6), nullable=False),
        sa.Column("event_type", notification_event_kind_enum, nullable=False),
        sa.Column("provider", sa.String(length=32), nullable=False),
        sa.Column("status", notification_status_enum, nullable=False),
        sa.Column("provider_message_id", sa.String(length=128), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_notification_logs_nis_event_status_created",
        "notification_logs",
        ["nis", "event_type", "status", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "ix_notification_logs_nis_event_status_created",
        table_name="notification_logs",
    )
    op.drop_table("notification_logs")
    notification_status_enum.drop(op.get_bind(), checkfirst=True)
    notification_event_kind_enum.drop(op.get_bind(), checkfirst=True)
