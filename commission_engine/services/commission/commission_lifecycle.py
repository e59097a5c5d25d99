"""
Commission lifecycle service.

Status transitions after calculation:
calculated -> approved -> paid, and calculated|approved -> cancelled.
Paid and cancelled are terminal.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.commission import Commission
from commission_engine.models.enums import (
    AuditSeverity,
    CommissionStatus,
    DomainEventType,
)
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from commission_engine.repositories.commission_repository import (
    CommissionRepository,
)
from commission_engine.services.audit_service import (
    COMMISSION_STATUS_CHANGED,
    AuditService,
)
from commission_engine.services.event_publisher import EventPublisher
from commission_engine.utils.exceptions import (
    CommissionNotFoundError,
    InvalidStatusTransition,
)

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    CommissionStatus.CALCULATED: frozenset(
        {CommissionStatus.APPROVED, CommissionStatus.CANCELLED}
    ),
    CommissionStatus.APPROVED: frozenset(
        {CommissionStatus.PAID, CommissionStatus.CANCELLED}
    ),
    CommissionStatus.PAID: frozenset(),
    CommissionStatus.CANCELLED: frozenset(),
}


class CommissionLifecycleService:
    """Commission status state machine."""

    def __init__(
        self,
        session: AsyncSession,
        event_publisher: EventPublisher | None = None,
        audit_service: AuditService | None = None,
    ) -> None:
        """Initialize commission lifecycle service."""
        self.session = session
        self.event_publisher = event_publisher or EventPublisher(session)
        self.audit_service = audit_service or AuditService(session)
        self.commission_repo = CommissionRepository(session)
        self.affiliate_repo = AffiliateRepository(session)

    async def approve(self, commission_id: int) -> Commission:
        """Approve calculated commission."""
        return await self._transition(
            commission_id, CommissionStatus.APPROVED
        )

    async def mark_paid(self, commission_id: int) -> Commission:
        """Mark approved commission as paid."""
        return await self._transition(commission_id, CommissionStatus.PAID)

    async def cancel(
        self, commission_id: int, reason: str | None = None
    ) -> Commission:
        """
        Cancel commission and debit the credited amount.

        Args:
            commission_id: Commission ID
            reason: Cancellation reason

        Returns:
            Cancelled commission
        """
        return await self._transition(
            commission_id, CommissionStatus.CANCELLED, reason=reason
        )

    async def _transition(
        self,
        commission_id: int,
        target: CommissionStatus,
        reason: str | None = None,
    ) -> Commission:
        commission = await self.commission_repo.get_for_update(commission_id)
        if commission is None:
            raise CommissionNotFoundError(commission_id)

        current = commission.status
        if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
            await self.session.rollback()
            raise InvalidStatusTransition(
                commission_id, current, target.value
            )

        commission.status = target.value
        if target == CommissionStatus.CANCELLED:
            await self.affiliate_repo.credit_commission(
                commission.affiliate_id, -commission.final_amount
            )
        await self.session.flush()

        details = {
            "commission_id": commission_id,
            "affiliate_id": commission.affiliate_id,
            "transaction_id": commission.transaction_id,
            "from": current,
            "to": target.value,
            "final_amount": str(commission.final_amount),
        }
        if reason:
            details["reason"] = reason

        await self.event_publisher.publish(
            DomainEventType.COMMISSION_STATUS_CHANGED,
            {
                "commissionId": commission_id,
                "affiliateId": commission.affiliate_id,
                "previousStatus": current,
                "status": target.value,
                "finalAmount": str(commission.final_amount),
                "reason": reason,
            },
        )
        await self.audit_service.log(
            action=COMMISSION_STATUS_CHANGED,
            resource_id=str(commission_id),
            details=details,
            severity=(
                AuditSeverity.WARNING
                if target == CommissionStatus.CANCELLED
                else AuditSeverity.INFO
            ),
        )
        await self.session.commit()

        logger.info("Commission status changed", extra=details)
        return commission
