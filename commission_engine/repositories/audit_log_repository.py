"""
AuditLog repository.

Data access layer for AuditLog model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.audit_log import AuditLog
from commission_engine.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """AuditLog repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize audit log repository."""
        super().__init__(AuditLog, session)

    async def get_by_resource(
        self, resource_id: str, action: str | None = None
    ) -> list[AuditLog]:
        """
        Get audit entries for a resource, oldest first.

        Args:
            resource_id: Resource identifier
            action: Optional action filter

        Returns:
            List of audit entries
        """
        stmt = select(AuditLog).where(AuditLog.resource_id == resource_id)
        if action:
            stmt = stmt.where(AuditLog.action == action)
        stmt = stmt.order_by(AuditLog.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
