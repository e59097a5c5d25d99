"""
Repositories.

Data access layer for all models.
"""

from commission_engine.repositories.affiliate_activity_repository import (
    AffiliateActivityRepository,
)
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from commission_engine.repositories.audit_log_repository import (
    AuditLogRepository,
)
from commission_engine.repositories.base import BaseRepository
from commission_engine.repositories.commission_repository import (
    CommissionRepository,
)
from commission_engine.repositories.domain_event_repository import (
    DomainEventRepository,
)
from commission_engine.repositories.indication_repository import (
    IndicationRepository,
)
from commission_engine.repositories.transaction_repository import (
    TransactionRepository,
)

__all__ = [
    "AffiliateActivityRepository",
    "AffiliateRepository",
    "AuditLogRepository",
    "BaseRepository",
    "CommissionRepository",
    "DomainEventRepository",
    "IndicationRepository",
    "TransactionRepository",
]
