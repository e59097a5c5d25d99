"""
Message broker for the commission workers.

Validated-transaction events and the outbox dispatcher run as Dramatiq
actors over Redis. Importing this module installs the broker globally,
so it must be imported before any actor module (the worker and the
scheduler both do). Tests install a StubBroker instead.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from loguru import logger

from commission_engine.config.settings import Settings, get_settings


def create_broker(settings: Settings) -> RedisBroker:
    """Build the Redis broker from engine settings."""
    return RedisBroker(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password or None,
        db=settings.redis_db,
    )


settings = get_settings()
broker = create_broker(settings)
dramatiq.set_broker(broker)

logger.info(
    "Commission broker ready",
    extra={"redis_host": settings.redis_host, "redis_db": settings.redis_db},
)
