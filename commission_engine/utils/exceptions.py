"""
Exception handling utilities.

Defines the commission engine exception types and their retry
categories.
"""

from sqlalchemy.exc import OperationalError


class CommissionEngineError(Exception):
    """Base class for commission engine errors."""


class PersistenceFault(CommissionEngineError):
    """
    Storage failure during a commission run.

    Carries the identifiers of the run so the caller can retry it.
    """

    def __init__(
        self,
        message: str,
        *,
        affiliate_id: str | None = None,
        customer_id: str | None = None,
        transaction_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.affiliate_id = affiliate_id
        self.customer_id = customer_id
        self.transaction_id = transaction_id

    def context(self) -> dict[str, str | None]:
        """Run identifiers for logs and audit details."""
        return {
            "affiliate_id": self.affiliate_id,
            "customer_id": self.customer_id,
            "transaction_id": self.transaction_id,
        }


class TransactionNotSettledError(CommissionEngineError):
    """Triggering transaction is not yet stored as completed."""

    def __init__(self, transaction_id: str) -> None:
        super().__init__(
            f"Transaction {transaction_id} is not persisted as completed"
        )
        self.transaction_id = transaction_id


class InvalidStatusTransition(CommissionEngineError):
    """Commission status change not allowed by the lifecycle."""

    def __init__(self, commission_id: int, current: str, target: str) -> None:
        super().__init__(
            f"Commission {commission_id}: cannot move from "
            f"{current!r} to {target!r}"
        )
        self.commission_id = commission_id
        self.current = current
        self.target = target


class AffiliateNotFoundError(CommissionEngineError):
    """Affiliate does not exist."""

    def __init__(self, affiliate_id: str) -> None:
        super().__init__(f"Affiliate {affiliate_id} not found")
        self.affiliate_id = affiliate_id


class CommissionNotFoundError(CommissionEngineError):
    """Commission does not exist."""

    def __init__(self, commission_id: int) -> None:
        super().__init__(f"Commission {commission_id} not found")
        self.commission_id = commission_id


# Exception categories based on handling strategy

# Transient - the at-least-once consumer re-runs the whole transaction
RETRYABLE_ERRORS = (
    PersistenceFault,
    TransactionNotSettledError,
    OperationalError,
)

# Permanent - retrying cannot change the outcome
NON_RETRYABLE_ERRORS = (
    InvalidStatusTransition,
    AffiliateNotFoundError,
    CommissionNotFoundError,
    ValueError,
)


def is_retryable(exc: BaseException) -> bool:
    """
    Check if exception should trigger a retry.

    Args:
        exc: Exception to check

    Returns:
        True if the operation can be retried
    """
    return isinstance(exc, RETRYABLE_ERRORS)


def should_retry(retries_so_far: int, exc: BaseException) -> bool:
    """
    Dramatiq ``retry_when`` predicate.

    Args:
        retries_so_far: Retries already performed
        exc: Exception raised by the actor

    Returns:
        True if the message should be retried
    """
    return retries_so_far < 5 and is_retryable(exc)
