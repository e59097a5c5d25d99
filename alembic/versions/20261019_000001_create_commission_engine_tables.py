"""create commission engine tables

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:01.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.DECIMAL(precision=18, scale=8)


def upgrade() -> None:
    # Affiliates
    op.create_table(
        "affiliates",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("sponsor_id", sa.String(length=64), nullable=True),
        sa.Column(
            "category",
            sa.String(length=32),
            nullable=False,
            server_default="jogador",
        ),
        sa.Column(
            "category_level", sa.Integer(), nullable=False, server_default="1"
        ),
        sa.Column(
            "direct_indications",
            sa.Integer(),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "total_indications",
            sa.Integer(),
            nullable=False,
            server_default="0",
        ),
        sa.Column(
            "total_commissions", MONEY, nullable=False, server_default="0"
        ),
        sa.Column(
            "available_balance", MONEY, nullable=False, server_default="0"
        ),
        sa.Column(
            "current_month_volume", MONEY, nullable=False, server_default="0"
        ),
        sa.Column(
            "last_activity_at", sa.DateTime(timezone=True), nullable=True
        ),
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
        sa.ForeignKeyConstraint(
            ["sponsor_id"], ["affiliates.id"], ondelete="SET NULL"
        ),
    )
    op.create_index("ix_affiliates_sponsor_id", "affiliates", ["sponsor_id"])
    op.create_index(
        "idx_affiliate_category_level",
        "affiliates",
        ["category", "category_level"],
    )

    # Transactions (written by the monitoring service)
    op.create_table(
        "transactions",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("customer_id", sa.String(length=64), nullable=False),
        sa.Column("affiliate_id", sa.String(length=64), nullable=True),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column(
            "status",
            sa.String(length=16),
            nullable=False,
            server_default="completed",
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
        "ix_transactions_customer_id", "transactions", ["customer_id"]
    )
    op.create_index(
        "ix_transactions_affiliate_id", "transactions", ["affiliate_id"]
    )
    op.create_index(
        "idx_transaction_customer_status_created",
        "transactions",
        ["customer_id", "status", "created_at"],
    )

    # Commissions
    op.create_table(
        "commissions",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("affiliate_id", sa.String(length=64), nullable=False),
        sa.Column("source_affiliate_id", sa.String(length=64), nullable=False),
        sa.Column("customer_id", sa.String(length=64), nullable=False),
        sa.Column("transaction_id", sa.String(length=64), nullable=False),
        sa.Column(
            "type", sa.String(length=16), nullable=False, server_default="cpa"
        ),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("validation_model", sa.String(length=8), nullable=False),
        sa.Column("base_amount", MONEY, nullable=False),
        sa.Column(
            "percentage", sa.DECIMAL(precision=10, scale=4), nullable=False
        ),
        sa.Column("commission_amount", MONEY, nullable=False),
        sa.Column("final_amount", MONEY, nullable=False),
        sa.Column(
            "status",
            sa.String(length=16),
            nullable=False,
            server_default="calculated",
        ),
        sa.Column("metadata", sa.JSON(), nullable=True),
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
        sa.ForeignKeyConstraint(["affiliate_id"], ["affiliates.id"]),
        sa.UniqueConstraint(
            "transaction_id",
            "affiliate_id",
            "level",
            "validation_model",
            name="uq_commission_idempotency",
        ),
    )
    op.create_index(
        "ix_commissions_affiliate_id", "commissions", ["affiliate_id"]
    )
    op.create_index(
        "ix_commissions_source_affiliate_id",
        "commissions",
        ["source_affiliate_id"],
    )
    op.create_index(
        "ix_commissions_transaction_id", "commissions", ["transaction_id"]
    )
    op.create_index("ix_commissions_status", "commissions", ["status"])
    op.create_index(
        "idx_commission_affiliate_status",
        "commissions",
        ["affiliate_id", "status"],
    )

    # Indications
    op.create_table(
        "indications",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("source_affiliate_id", sa.String(length=64), nullable=False),
        sa.Column("customer_id", sa.String(length=64), nullable=False),
        sa.Column(
            "status",
            sa.String(length=16),
            nullable=False,
            server_default="validated",
        ),
        sa.Column("bonus_amount", MONEY, nullable=False, server_default="0"),
        sa.Column("validated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["source_affiliate_id"], ["affiliates.id"]),
    )
    op.create_index(
        "ix_indications_source_affiliate_id",
        "indications",
        ["source_affiliate_id"],
    )
    op.create_index(
        "uq_indication_active_pair",
        "indications",
        ["source_affiliate_id", "customer_id"],
        unique=True,
        postgresql_where=sa.text("status IN ('validated', 'paid')"),
    )

    # Domain event outbox
    op.create_table(
        "domain_events",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_error", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("dispatched_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_domain_event_pending",
        "domain_events",
        ["dispatched_at", "created_at"],
    )

    # Audit trail
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False, autoincrement=True),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("resource", sa.String(length=50), nullable=False),
        sa.Column("resource_id", sa.String(length=64), nullable=True),
        sa.Column(
            "severity",
            sa.String(length=16),
            nullable=False,
            server_default="info",
        ),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])
    op.create_index(
        "idx_audit_log_resource", "audit_logs", ["resource", "resource_id"]
    )


def downgrade() -> None:
    op.drop_index("idx_audit_log_resource", table_name="audit_logs")
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("idx_domain_event_pending", table_name="domain_events")
    op.drop_table("domain_events")

    op.drop_index("uq_indication_active_pair", table_name="indications")
    op.drop_index(
        "ix_indications_source_affiliate_id", table_name="indications"
    )
    op.drop_table("indications")

    op.drop_index("idx_commission_affiliate_status", table_name="commissions")
    op.drop_index("ix_commissions_status", table_name="commissions")
    op.drop_index("ix_commissions_transaction_id", table_name="commissions")
    op.drop_index(
        "ix_commissions_source_affiliate_id", table_name="commissions"
    )
    op.drop_index("ix_commissions_affiliate_id", table_name="commissions")
    op.drop_table("commissions")

    op.drop_index(
        "idx_transaction_customer_status_created", table_name="transactions"
    )
    op.drop_index("ix_transactions_affiliate_id", table_name="transactions")
    op.drop_index("ix_transactions_customer_id", table_name="transactions")
    op.drop_table("transactions")

    op.drop_index("idx_affiliate_category_level", table_name="affiliates")
    op.drop_index("ix_affiliates_sponsor_id", table_name="affiliates")
    op.drop_table("affiliates")
