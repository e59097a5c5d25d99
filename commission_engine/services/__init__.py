"""
Services.

Business logic layer. The commission engine itself lives in
``commission_engine.services.commission``.
"""

from commission_engine.services.affiliate_metrics_service import (
    AffiliateMetricsService,
)
from commission_engine.services.audit_service import AuditService
from commission_engine.services.event_dispatch_service import (
    EventDispatchService,
)
from commission_engine.services.event_publisher import (
    EventPublisher,
    QueuedEvent,
)

__all__ = [
    "AffiliateMetricsService",
    "AuditService",
    "EventDispatchService",
    "EventPublisher",
    "QueuedEvent",
]
