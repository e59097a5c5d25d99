"""add affiliate activities

Revision ID: 20261019_000002
Revises: 20261019_000001
Create Date: 2026-10-19 00:00:02.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_000002"
down_revision: Union[str, None] = "20261019_000001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One activity row per transaction
    op.create_table(
        "affiliate_activities",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("affiliate_id", sa.String(length=64), nullable=False),
        sa.Column("transaction_id", sa.String(length=64), nullable=False),
        sa.Column("transaction_type", sa.String(length=16), nullable=False),
        sa.Column(
            "volume",
            sa.DECIMAL(precision=18, scale=8),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "recorded_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"]),
        sa.UniqueConstraint(
            "transaction_id", name="uq_affiliate_activity_transaction"
        ),
    )
    op.create_index(
        "ix_affiliate_activities_affiliate_id",
        "affiliate_activities",
        ["affiliate_id"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_affiliate_activities_affiliate_id",
        table_name="affiliate_activities",
    )
    op.drop_table("affiliate_activities")
