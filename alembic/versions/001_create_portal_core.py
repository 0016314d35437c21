"""Create learner, ledger, announcement and contact tables.

Revision ID: 001_create_portal_core
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_create_portal_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("nis", sa.String(length=6), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=False),
        sa.Column("nama_siswa", sa.String(length=160), nullable=False),
        sa.Column("jenjang", sa.String(length=32), nullable=True),
        sa.Column("msg_app", sa.Text(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login_device", sa.String(length=200), nullable=True),
        sa.Column("last_login_app_version", sa.String(length=32), nullable=True),
        sa.PrimaryKeyConstraint("nis"),
    )

    op.create_table(
        "transactions",
        sa.Column("idtrx", sa.String(length=64), nullable=False),
        sa.Column("idtag", sa.String(length=64), nullable=True),
        sa.Column("nis", sa.String(length=6), nullable=False),
        sa.Column("nama", sa.String(length=160), nullable=True),
        sa.Column("bulan", sa.String(length=16), nullable=True),
        sa.Column("nominal", sa.Numeric(14, 2), nullable=False),
        sa.Column("tgl_trx", sa.Date(), nullable=False),
        sa.Column("jenjang", sa.String(length=32), nullable=True),
        sa.Column("sortasi", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("idtrx"),
    )
    op.create_index(
        "ix_transactions_nis_sortasi",
        "transactions",
        ["nis", "sortasi"],
        unique=False,
    )

    op.create_table(
        "user_messages_web",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nis", sa.String(length=6), nullable=False),
        sa.Column("message_text", sa.Text(), nullable=False),
        sa.Column(
            "is_active",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("true"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_user_messages_web_nis_created_at",
        "user_messages_web",
        ["nis", "created_at"],
        unique=False,
    )

    op.create_table(
        "kontak_admin",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("unit", sa.String(length=64), nullable=False),
        sa.Column("nohp", sa.String(length=32), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("kontak_admin")
    op.drop_index(
        "ix_user_messages_web_nis_created_at",
        table_name="user_messages_web",
    )
    op.drop_table("user_messages_web")
    op.drop_index("ix_transactions_nis_sortasi", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("users")
