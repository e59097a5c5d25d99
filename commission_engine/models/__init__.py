"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from commission_engine.models.affiliate import Affiliate
from commission_engine.models.affiliate_activity import AffiliateActivity
from commission_engine.models.audit_log import AuditLog
from commission_engine.models.base import Base
from commission_engine.models.commission import Commission
from commission_engine.models.domain_event import DomainEvent
from commission_engine.models.enums import (
    ACTIVE_INDICATION_STATUSES,
    CATEGORY_ORDER,
    AffiliateCategory,
    AuditSeverity,
    CommissionStatus,
    CommissionType,
    DomainEventType,
    IndicationStatus,
    TransactionStatus,
    TransactionType,
    ValidationModel,
)
from commission_engine.models.indication import Indication
from commission_engine.models.transaction import Transaction

__all__ = [
    "ACTIVE_INDICATION_STATUSES",
    "CATEGORY_ORDER",
    "Affiliate",
    "AffiliateActivity",
    "AffiliateCategory",
    "AuditLog",
    "AuditSeverity",
    "Base",
    "Commission",
    "CommissionStatus",
    "CommissionType",
    "DomainEvent",
    "DomainEventType",
    "Indication",
    "IndicationStatus",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "ValidationModel",
]
