"""
Declarative base for the commission engine tables.

Every table (affiliates, transactions, commissions, indications, domain
events, audit log) hangs off ``Base.metadata``; Alembic migrations and
the test schema are both built from it.
"""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from commission_engine.utils.time import utcnow


class Base(DeclarativeBase):
    """Declarative base shared by all engine models."""


class TimestampMixin:
    """
    Row bookkeeping for mutable records.

    Affiliates and commissions change after insert (balance credits,
    category promotion, status transitions); ``updated_at`` tracks the
    last change.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
