"""
Database enums.

Centralized enums used across database models.
"""

from enum import StrEnum


class AffiliateCategory(StrEnum):
    """Affiliate category tiers, lowest first."""

    JOGADOR = "jogador"
    INICIANTE = "iniciante"
    AFILIADO = "afiliado"
    PROFISSIONAL = "profissional"
    EXPERT = "expert"
    MESTRE = "mestre"
    LENDA = "lenda"


# Fixed progression ordering
CATEGORY_ORDER: tuple[AffiliateCategory, ...] = tuple(AffiliateCategory)


class TransactionType(StrEnum):
    """Customer transaction type values."""

    DEPOSIT = "deposit"
    BET = "bet"
    GGR = "ggr"


class TransactionStatus(StrEnum):
    """Customer transaction status values."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ValidationModel(StrEnum):
    """CPA validation models."""

    FIRST_DEPOSIT = "1.1"
    ACTIVITY = "1.2"


class CommissionType(StrEnum):
    """Commission type values."""

    CPA = "cpa"


class CommissionStatus(StrEnum):
    """Commission status values."""

    CALCULATED = "calculated"
    APPROVED = "approved"
    PAID = "paid"
    CANCELLED = "cancelled"


class IndicationStatus(StrEnum):
    """Indication status values."""

    PENDING = "pending"
    VALIDATED = "validated"
    PAID = "paid"
    REJECTED = "rejected"


# Statuses that block a second bonus for the same pair
ACTIVE_INDICATION_STATUSES: tuple[IndicationStatus, ...] = (
    IndicationStatus.VALIDATED,
    IndicationStatus.PAID,
)


class DomainEventType(StrEnum):
    """Domain event types published through the outbox."""

    COMMISSION_CALCULATED = "commission.calculated"
    COMMISSION_STATUS_CHANGED = "commission.status_changed"
    INDICATION_VALIDATED = "indication.validated"
    AFFILIATE_LEVEL_UP = "affiliate.levelup"


class AuditSeverity(StrEnum):
    """Audit log severity values."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
