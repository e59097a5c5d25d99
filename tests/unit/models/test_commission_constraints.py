"""
Tests for the database guards on commissions and indications.
"""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from commission_engine.models import Commission, Indication
from commission_engine.models.enums import IndicationStatus


def _commission(**overrides) -> Commission:
    fields = {
        "affiliate_id": "aff-A",
        "source_affiliate_id": "aff-A",
        "customer_id": "cust-1",
        "transaction_id": "tx-1",
        "level": 1,
        "validation_model": "1.1",
        "base_amount": Decimal("35.00"),
        "percentage": Decimal("1.00"),
        "commission_amount": Decimal("0.35"),
        "final_amount": Decimal("0.35"),
    }
    fields.update(overrides)
    return Commission(**fields)


class TestCommissionIdempotencyKey:
    """Tests for uq_commission_idempotency."""

    @pytest.mark.asyncio
    @pytest.mark.critical
    async def test_duplicate_key_rejected(self, db_session, create_affiliate):
        """Test same transaction, affiliate, level and model is unique."""
        await create_affiliate("aff-A")
        db_session.add(_commission())
        await db_session.commit()

        with pytest.raises(IntegrityError):
            async with db_session.begin_nested():
                db_session.add(_commission())
                await db_session.flush()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"level": 2},
            {"validation_model": "1.2"},
            {"transaction_id": "tx-2"},
        ],
    )
    async def test_different_key_allowed(
        self, db_session, create_affiliate, overrides
    ):
        """Test any differing key component makes a new record."""
        await create_affiliate("aff-A")
        db_session.add(_commission())
        db_session.add(_commission(**overrides))

        await db_session.commit()

    @pytest.mark.asyncio
    async def test_defaults(self, db_session, create_affiliate):
        """Test type and status defaults and wire shape."""
        await create_affiliate("aff-A")
        commission = _commission(extra_data={"validationModel": "1.1"})
        db_session.add(commission)
        await db_session.commit()

        data = commission.to_dict()
        assert data["type"] == "cpa"
        assert data["status"] == "calculated"
        assert data["affiliateId"] == "aff-A"
        assert data["metadata"] == {"validationModel": "1.1"}
        assert Decimal(data["finalAmount"]) == Decimal("0.35")


class TestIndicationActivePair:
    """Tests for uq_indication_active_pair."""

    @pytest.mark.asyncio
    @pytest.mark.critical
    async def test_two_validated_rejected(self, db_session, create_affiliate):
        """Test only one active indication per pair."""
        await create_affiliate("aff-A")
        db_session.add(Indication(source_affiliate_id="aff-A", customer_id="c"))
        await db_session.commit()

        with pytest.raises(IntegrityError):
            async with db_session.begin_nested():
                db_session.add(
                    Indication(
                        source_affiliate_id="aff-A",
                        customer_id="c",
                        status=IndicationStatus.PAID.value,
                    )
                )
                await db_session.flush()

    @pytest.mark.asyncio
    async def test_rejected_duplicates_allowed(
        self, db_session, create_affiliate
    ):
        """Test rejected indications fall outside the guard."""
        await create_affiliate("aff-A")
        for _ in range(2):
            db_session.add(
                Indication(
                    source_affiliate_id="aff-A",
                    customer_id="c",
                    status=IndicationStatus.REJECTED.value,
                )
            )
        db_session.add(Indication(source_affiliate_id="aff-A", customer_id="c"))

        await db_session.commit()
