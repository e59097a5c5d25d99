"""
Unit tests for TransactionValidator.

Tests validation models 1.1 (first deposit) and 1.2 (activity).
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from commission_engine.models.enums import TransactionStatus, TransactionType
from commission_engine.services.commission.transaction_validator import (
    CpaValidationInput,
    TransactionValidator,
)
from commission_engine.utils.exceptions import TransactionNotSettledError
from commission_engine.utils.time import utcnow


class TestFirstDepositModel:
    """Tests for model 1.1."""

    @pytest.mark.asyncio
    async def test_first_deposit_qualifies(
        self, db_session, create_transaction, make_input
    ):
        """Test first completed deposit of 50.00."""
        await create_transaction("tx-1", amount="50.00")

        assert await TransactionValidator(db_session).validate(make_input())

    @pytest.mark.asyncio
    async def test_amount_below_minimum(
        self, db_session, create_transaction, make_input
    ):
        """Test deposit under 50.00."""
        await create_transaction("tx-1", amount="49.99")

        result = await TransactionValidator(db_session).validate(
            make_input(transaction_amount="49.99")
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_not_a_deposit(self, db_session, make_input):
        """Test non-deposit transaction type."""
        result = await TransactionValidator(db_session).validate(
            make_input(transaction_type=TransactionType.BET.value)
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_second_deposit(
        self, db_session, create_transaction, make_input
    ):
        """Test customer that already deposited."""
        await create_transaction("tx-0", amount="100.00")
        await create_transaction("tx-1", amount="60.00")

        result = await TransactionValidator(db_session).validate(
            make_input(transaction_amount="60.00")
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_failed_deposits_not_counted(
        self, db_session, create_transaction, make_input
    ):
        """Test earlier failed deposit does not disqualify."""
        await create_transaction(
            "tx-0", status=TransactionStatus.FAILED.value
        )
        await create_transaction("tx-1", amount="75.00")

        assert await TransactionValidator(db_session).validate(
            make_input(transaction_amount="75.00")
        )

    @pytest.mark.asyncio
    async def test_unsaved_transaction_raises(self, db_session, make_input):
        """Test transaction must be stored before validation."""
        with pytest.raises(TransactionNotSettledError):
            await TransactionValidator(db_session).validate(make_input())

    @pytest.mark.asyncio
    async def test_pending_transaction_raises(
        self, db_session, create_transaction, make_input
    ):
        """Test transaction must be completed before validation."""
        await create_transaction(
            "tx-1", status=TransactionStatus.PENDING.value
        )

        with pytest.raises(TransactionNotSettledError):
            await TransactionValidator(db_session).validate(make_input())


class TestActivityModel:
    """Tests for model 1.2."""

    @pytest.mark.asyncio
    async def test_qualifies_by_count(
        self, db_session, create_transaction, make_input
    ):
        """Test 3 deposits totaling 150.00 qualify by count."""
        for index in range(3):
            await create_transaction(f"tx-{index}", amount="50.00")

        result = await TransactionValidator(db_session).validate(
            make_input(transaction_id="tx-2", validation_model="1.2")
        )

        assert result is True

    @pytest.mark.asyncio
    async def test_qualifies_by_volume(
        self, db_session, create_transaction, make_input
    ):
        """Test single large transaction qualifies by volume."""
        await create_transaction(
            "tx-1", amount="200.00", type=TransactionType.BET.value
        )

        result = await TransactionValidator(db_session).validate(
            make_input(validation_model="1.2")
        )

        assert result is True

    @pytest.mark.asyncio
    async def test_below_both_thresholds(
        self, db_session, create_transaction, make_input
    ):
        """Test 2 transactions totaling 199.98."""
        await create_transaction("tx-1", amount="99.99")
        await create_transaction("tx-2", amount="99.99")

        result = await TransactionValidator(db_session).validate(
            make_input(validation_model="1.2")
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_old_transactions_ignored(
        self, db_session, create_transaction, make_input
    ):
        """Test transactions outside the 30 day window."""
        old = utcnow() - timedelta(days=31)
        for index in range(3):
            await create_transaction(
                f"tx-old-{index}", amount="500.00", created_at=old
            )

        result = await TransactionValidator(db_session).validate(
            make_input(validation_model="1.2")
        )

        assert result is False

    @pytest.mark.asyncio
    async def test_other_customers_ignored(
        self, db_session, create_transaction, make_input
    ):
        """Test activity of other customers does not count."""
        for index in range(3):
            await create_transaction(f"tx-{index}", customer_id="cust-2")

        result = await TransactionValidator(db_session).validate(
            make_input(validation_model="1.2")
        )

        assert result is False


class TestUnknownModel:
    """Tests for unknown validation models."""

    @pytest.mark.asyncio
    async def test_unknown_model_is_ineligible(self, db_session, make_input):
        """Test fail-closed behaviour."""
        result = await TransactionValidator(db_session).validate(
            make_input(validation_model="9.9")
        )

        assert result is False


class TestValidationInput:
    """Tests for CpaValidationInput parsing."""

    def test_from_camel_case(self):
        """Test monitoring service payload."""
        data = CpaValidationInput.from_dict(
            {
                "affiliateId": "aff-A",
                "customerId": "cust-1",
                "transactionId": "tx-1",
                "validationModel": "1.1",
                "transactionType": "deposit",
                "transactionAmount": 50.1,
                "metadata": {"source": "monitor"},
            }
        )

        assert data.transaction_amount == Decimal("50.1")
        assert data.metadata == {"source": "monitor"}

    def test_from_snake_case(self):
        """Test snake_case payload."""
        data = CpaValidationInput.from_dict(
            {
                "affiliate_id": "aff-A",
                "customer_id": "cust-1",
                "transaction_id": "tx-1",
                "validation_model": "1.2",
                "transaction_type": "bet",
                "transaction_amount": "10",
            }
        )

        assert data.validation_model == "1.2"
        assert data.metadata == {}

    def test_missing_field(self):
        """Test payload without transaction id."""
        with pytest.raises(ValueError, match="transactionId"):
            CpaValidationInput.from_dict(
                {
                    "affiliateId": "aff-A",
                    "customerId": "cust-1",
                    "validationModel": "1.1",
                    "transactionType": "deposit",
                    "transactionAmount": "50",
                }
            )
