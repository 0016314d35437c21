"""Create aggregation routine returning the latest payment per month.

Revision ID: 003_latest_transactions_by_month
Revises: 002_create_notification_logs
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "003_latest_transactions_by_month"
down_revision: str | None = "002_create_notification_logs"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute(
        sa.text(
            """
            CREATE OR REPLACE FUNCTION latest_transactions_by_month(p_nis text)
            RETURNS SETOF transactions
            LANGUAGE sql
            STABLE
            AS $$
                SELECT DISTINCT ON (t.sortasi) t.*
                FROM transactions AS t
                WHERE t.nis = p_nis
                  AND t.sortasi BETWEEN 2 AND 12
                -- idtrx is text: the tie-break is lexicographic.
                ORDER BY t.sortasi, t.tgl_trx DESC, t.idtrx DESC
            $$
            """
        )
    )


def downgrade() -> None:
    op.execute(sa.text("DROP FUNCTION IF EXISTS latest_transactions_by_month(text)"))
