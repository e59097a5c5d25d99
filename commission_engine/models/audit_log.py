"""
AuditLog model.

Audit trail of commission engine actions.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base
from commission_engine.models.enums import AuditSeverity


class AuditLog(Base):
    """
    AuditLog entity.

    Attributes:
        id: Primary key
        action: Action name (commission.cpa.calculated, ...)
        resource: Resource type
        resource_id: Resource identifier
        severity: debug / info / warning / error / critical
        details: Action details (JSON)
        created_at: Action timestamp
    """

    __tablename__ = "audit_logs"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Action
    action: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )
    resource: Mapped[str] = mapped_column(String(50), nullable=False)
    resource_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )
    severity: Mapped[str] = mapped_column(
        String(16), nullable=False, default=AuditSeverity.INFO.value
    )
    details: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AuditLog(id={self.id}, action={self.action!r}, "
            f"resource_id={self.resource_id!r}, "
            f"severity={self.severity!r})>"
        )


# Indexes
Index(
    "idx_audit_log_resource",
    AuditLog.resource,
    AuditLog.resource_id,
)
