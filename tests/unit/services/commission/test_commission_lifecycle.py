"""
Unit tests for CommissionLifecycleService.
"""

from decimal import Decimal

import pytest
import pytest_asyncio

from commission_engine.models.enums import (
    AuditSeverity,
    CommissionStatus,
    DomainEventType,
)
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from commission_engine.repositories.audit_log_repository import (
    AuditLogRepository,
)
from commission_engine.repositories.commission_repository import (
    CommissionRepository,
)
from commission_engine.services.audit_service import COMMISSION_STATUS_CHANGED
from commission_engine.services.commission.commission_distributor import (
    CommissionDistributor,
)
from commission_engine.services.commission.commission_lifecycle import (
    ALLOWED_TRANSITIONS,
    CommissionLifecycleService,
)
from commission_engine.services.event_publisher import EventPublisher
from commission_engine.utils.exceptions import (
    CommissionNotFoundError,
    InvalidStatusTransition,
)


@pytest.fixture
def lifecycle(db_session, event_publisher) -> CommissionLifecycleService:
    """Lifecycle service sharing the test outbox."""
    return CommissionLifecycleService(db_session, event_publisher)


@pytest_asyncio.fixture
async def credited_commission(db_session, create_affiliate, make_input):
    """Level-1 commission of 0.35 credited to aff-A."""
    await create_affiliate("aff-A")
    distributor = CommissionDistributor(db_session, EventPublisher(db_session))
    result = await distributor.distribute(make_input())
    return result.commissions[0]


def test_terminal_statuses():
    """Test paid and cancelled allow no further transition."""
    assert ALLOWED_TRANSITIONS[CommissionStatus.PAID] == frozenset()
    assert ALLOWED_TRANSITIONS[CommissionStatus.CANCELLED] == frozenset()


class TestTransitions:
    """Tests for status changes."""

    @pytest.mark.asyncio
    async def test_approve_then_pay(
        self, lifecycle, event_publisher, credited_commission
    ):
        """Test calculated -> approved -> paid."""
        commission_id = credited_commission.id

        approved = await lifecycle.approve(commission_id)
        assert approved.status == CommissionStatus.APPROVED.value

        paid = await lifecycle.mark_paid(commission_id)
        assert paid.status == CommissionStatus.PAID.value

        assert event_publisher.queued_types() == [
            DomainEventType.COMMISSION_STATUS_CHANGED.value
        ] * 2
        payload = event_publisher.queued[1].payload
        assert payload["previousStatus"] == "approved"
        assert payload["status"] == "paid"

    @pytest.mark.asyncio
    @pytest.mark.critical
    async def test_cancel_debits_balance(
        self, db_session, lifecycle, credited_commission
    ):
        """Test cancellation reverses the credited amount."""
        await lifecycle.cancel(credited_commission.id, reason="chargeback")

        affiliate = await AffiliateRepository(db_session).get_by_id(
            "aff-A", refresh=True
        )
        assert affiliate.available_balance == Decimal("0")
        assert affiliate.total_commissions == Decimal("0")

        total = await CommissionRepository(db_session).get_total_credited(
            "aff-A"
        )
        assert total == Decimal("0")

    @pytest.mark.asyncio
    async def test_cancel_writes_warning_audit(
        self, db_session, lifecycle, credited_commission
    ):
        """Test cancellation is audited with its reason."""
        await lifecycle.cancel(credited_commission.id, reason="chargeback")

        entries = await AuditLogRepository(db_session).get_by_resource(
            str(credited_commission.id), action=COMMISSION_STATUS_CHANGED
        )
        assert len(entries) == 1
        assert entries[0].severity == AuditSeverity.WARNING.value
        assert entries[0].details["reason"] == "chargeback"
        assert entries[0].details["from"] == "calculated"
        assert entries[0].details["to"] == "cancelled"

    @pytest.mark.asyncio
    async def test_approved_can_be_cancelled(
        self, lifecycle, credited_commission
    ):
        """Test approved -> cancelled."""
        await lifecycle.approve(credited_commission.id)

        cancelled = await lifecycle.cancel(credited_commission.id)

        assert cancelled.status == CommissionStatus.CANCELLED.value

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "steps,target",
        [
            ([], "mark_paid"),
            (["approve", "mark_paid"], "cancel"),
            (["cancel"], "approve"),
            (["approve"], "approve"),
        ],
    )
    async def test_invalid_transitions(
        self, db_session, lifecycle, credited_commission, steps, target
    ):
        """Test disallowed moves raise and leave the status unchanged."""
        commission_id = credited_commission.id
        for step in steps:
            await getattr(lifecycle, step)(commission_id)
        repo = CommissionRepository(db_session)
        before = (await repo.get_for_update(commission_id)).status

        with pytest.raises(InvalidStatusTransition) as exc_info:
            await getattr(lifecycle, target)(commission_id)

        assert exc_info.value.current == before
        after = (await repo.get_for_update(commission_id)).status
        assert after == before

    @pytest.mark.asyncio
    async def test_cancel_twice_debits_once(
        self, db_session, lifecycle, credited_commission
    ):
        """Test a second cancellation is refused."""
        await lifecycle.cancel(credited_commission.id)

        with pytest.raises(InvalidStatusTransition):
            await lifecycle.cancel(credited_commission.id)

        affiliate = await AffiliateRepository(db_session).get_by_id(
            "aff-A", refresh=True
        )
        assert affiliate.available_balance == Decimal("0")

    @pytest.mark.asyncio
    async def test_unknown_commission(self, lifecycle):
        """Test missing commission raises."""
        with pytest.raises(CommissionNotFoundError):
            await lifecycle.approve(999)
