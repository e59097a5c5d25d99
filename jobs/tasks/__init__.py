"""
Background tasks.

Dramatiq task definitions.
"""

from jobs.tasks.commission_processing import process_validated_transaction
from jobs.tasks.event_dispatch import dispatch_domain_events

__all__ = [
    "dispatch_domain_events",
    "process_validated_transaction",
]
