"""
Audit service.

Handles logging of commission engine actions for the audit trail.
Audit failures never affect the primary outcome.
"""

from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.audit_log import AuditLog
from commission_engine.models.enums import AuditSeverity
from commission_engine.repositories.audit_log_repository import (
    AuditLogRepository,
)

CPA_CALCULATED = "commission.cpa.calculated"
CPA_REJECTED = "commission.cpa.rejected"
CPA_ERROR = "commission.cpa.error"
CPA_NOT_SETTLED = "commission.cpa.not_settled"
COMMISSION_STATUS_CHANGED = "commission.status_changed"


class AuditService:
    """Service for logging engine actions."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize audit service.

        Args:
            session: Database session
        """
        self.session = session
        self.audit_repo = AuditLogRepository(session)

    async def log(
        self,
        action: str,
        resource_id: str | None,
        details: dict[str, Any] | None = None,
        severity: str = AuditSeverity.INFO,
        resource: str = "commission",
        commit: bool = False,
    ) -> AuditLog | None:
        """
        Log action.

        Args:
            action: Action name
            resource_id: Resource identifier
            details: Additional details (JSON)
            severity: Severity level
            resource: Resource type
            commit: Commit the session after writing (used on error
                paths where the caller already rolled back)

        Returns:
            Created entry, or None if logging failed
        """
        try:
            async with self.session.begin_nested():
                entry = await self.audit_repo.create(
                    action=action,
                    resource=resource,
                    resource_id=resource_id,
                    severity=str(severity),
                    details=details,
                )
            if commit:
                await self.session.commit()

            logger.debug(
                f"Audit entry logged: {action}",
                extra={"resource_id": resource_id, "severity": str(severity)},
            )
            return entry

        except Exception as e:
            logger.error(
                f"Failed to log audit entry: {e}",
                extra={"action": action, "resource_id": resource_id},
            )
            # Don't raise - audit failure shouldn't break the action
            return None

    async def log_cpa_calculated(
        self,
        transaction_id: str,
        details: dict[str, Any],
    ) -> AuditLog | None:
        """Log successful CPA calculation."""
        return await self.log(
            action=CPA_CALCULATED,
            resource_id=transaction_id,
            details=details,
        )

    async def log_cpa_rejected(
        self,
        transaction_id: str,
        details: dict[str, Any],
    ) -> AuditLog | None:
        """Log transaction that failed validation."""
        return await self.log(
            action=CPA_REJECTED,
            resource_id=transaction_id,
            details=details,
        )

    async def log_cpa_error(
        self,
        transaction_id: str,
        details: dict[str, Any],
    ) -> AuditLog | None:
        """Log persistence fault (committed on its own)."""
        return await self.log(
            action=CPA_ERROR,
            resource_id=transaction_id,
            details=details,
            severity=AuditSeverity.ERROR,
            commit=True,
        )

    async def log_cpa_not_settled(
        self,
        transaction_id: str,
        details: dict[str, Any],
    ) -> AuditLog | None:
        """Log event that arrived before its transaction settled."""
        return await self.log(
            action=CPA_NOT_SETTLED,
            resource_id=transaction_id,
            details=details,
            severity=AuditSeverity.WARNING,
            commit=True,
        )
