"""Create registered push device table.

Revision ID: 004_create_user_devices
Revises: 003_latest_transactions_by_month
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "004_create_user_devices"
down_revision: str | None = "003_latest_transactions_by_month"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "user_devices_web",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nis", sa.String(length=6), nullable=False),
        sa.Column("onesignal_subscription_id", sa.String(length=128), nullable=False),
        sa.Column("external_id", sa.String(length=128), nullable=False),
        sa.Column("platform", sa.String(length=32), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "onesignal_subscription_id",
            "platform",
            name="uq_user_devices_web_subscription_platform",
        ),
    )
    op.create_index(
        "ix_user_devices_web_nis_last_seen",
        "user_devices_web",
        ["nis", "last_seen_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "ix_user_devices_web_nis_last_seen",
        table_name="user_devices_web",
    )
    op.drop_table("user_devices_web")
