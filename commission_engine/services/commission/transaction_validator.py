"""
Transaction validator.

Decides whether a transaction qualifies for CPA under a validation
model. Read-only.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.enums import (
    TransactionStatus,
    TransactionType,
    ValidationModel,
)
from commission_engine.repositories.transaction_repository import (
    TransactionRepository,
)
from commission_engine.services.commission.config import (
    ACTIVITY_MIN_TRANSACTIONS,
    ACTIVITY_MIN_VOLUME,
    ACTIVITY_WINDOW_DAYS,
    FIRST_DEPOSIT_MIN_AMOUNT,
)
from commission_engine.utils.exceptions import TransactionNotSettledError
from commission_engine.utils.money import to_decimal
from commission_engine.utils.time import utcnow


@dataclass
class CpaValidationInput:
    """Validated-transaction event from the monitoring service."""

    affiliate_id: str
    customer_id: str
    transaction_id: str
    validation_model: str
    transaction_type: str
    transaction_amount: Decimal
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CpaValidationInput":
        """
        Parse event payload (camelCase or snake_case keys).

        Args:
            data: Event payload

        Returns:
            CpaValidationInput

        Raises:
            ValueError: If a required field is missing
        """

        def pick(camel: str, snake: str) -> Any:
            if camel in data:
                return data[camel]
            if snake in data:
                return data[snake]
            raise ValueError(f"Missing field: {camel}")

        return cls(
            affiliate_id=str(pick("affiliateId", "affiliate_id")),
            customer_id=str(pick("customerId", "customer_id")),
            transaction_id=str(pick("transactionId", "transaction_id")),
            validation_model=str(
                pick("validationModel", "validation_model")
            ),
            transaction_type=str(
                pick("transactionType", "transaction_type")
            ),
            transaction_amount=to_decimal(
                pick("transactionAmount", "transaction_amount")
            ),
            metadata=dict(data.get("metadata") or {}),
        )


class TransactionValidator:
    """Validation model dispatcher."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction validator."""
        self.session = session
        self.transaction_repo = TransactionRepository(session)

    async def validate(self, data: CpaValidationInput) -> bool:
        """
        Check transaction against its validation model.

        Args:
            data: Validation input

        Returns:
            True if eligible (unknown models are ineligible)

        Raises:
            TransactionNotSettledError: Model 1.1 transaction is not yet
                stored as completed
        """
        if data.validation_model == ValidationModel.FIRST_DEPOSIT:
            eligible = await self._validate_first_deposit(data)
        elif data.validation_model == ValidationModel.ACTIVITY:
            eligible = await self._validate_activity(data)
        else:
            logger.warning(
                "Unknown validation model",
                extra={
                    "validation_model": data.validation_model,
                    "transaction_id": data.transaction_id,
                },
            )
            return False

        logger.debug(
            "Transaction validated",
            extra={
                "transaction_id": data.transaction_id,
                "validation_model": data.validation_model,
                "eligible": eligible,
            },
        )
        return eligible

    async def _validate_first_deposit(
        self, data: CpaValidationInput
    ) -> bool:
        if data.transaction_type != TransactionType.DEPOSIT:
            return False

        # The first-deposit count includes the triggering transaction,
        # so it must already be stored as completed
        transaction = await self.transaction_repo.get_by_id(
            data.transaction_id
        )
        if (
            transaction is None
            or transaction.status != TransactionStatus.COMPLETED
        ):
            raise TransactionNotSettledError(data.transaction_id)

        deposits = await self.transaction_repo.count_completed_deposits(
            data.customer_id
        )
        if deposits != 1:
            return False

        return data.transaction_amount >= FIRST_DEPOSIT_MIN_AMOUNT

    async def _validate_activity(self, data: CpaValidationInput) -> bool:
        since = utcnow() - timedelta(days=ACTIVITY_WINDOW_DAYS)
        count, volume = await self.transaction_repo.get_completed_activity(
            data.customer_id, since
        )
        return (
            count >= ACTIVITY_MIN_TRANSACTIONS
            or volume >= ACTIVITY_MIN_VOLUME
        )
