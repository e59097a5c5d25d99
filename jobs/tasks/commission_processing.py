"""
Commission processing task.

Consumes validated-transaction events: runs the CPA pipeline, then
records the referring affiliate's activity. Retryable failures are
re-raised so Dramatiq redelivers the message; the pipeline is
idempotent, so a redelivery only completes what is missing.
"""

import asyncio
from typing import Any

import dramatiq
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.config.categories import (
    DEFAULT_CATEGORY_TABLE,
    load_category_table,
)
from commission_engine.config.database import (
    create_engine_from_settings,
    create_session_maker,
)
from commission_engine.config.settings import Settings, get_settings
from commission_engine.services.affiliate_metrics_service import (
    AffiliateMetricsService,
)
from commission_engine.services.commission.category_config_provider import (
    CategoryConfigProvider,
)
from commission_engine.services.commission.cpa_pipeline import CpaPipeline
from commission_engine.services.commission.transaction_validator import (
    CpaValidationInput,
)
from commission_engine.utils.exceptions import (
    AffiliateNotFoundError,
    should_retry,
)


def build_config_provider(settings: Settings) -> CategoryConfigProvider:
    """
    Create category provider from settings.

    Args:
        settings: Application settings

    Returns:
        Provider over the configured (or built-in) category table
    """
    if settings.category_config_path:
        table = load_category_table(settings.category_config_path)
        logger.info(
            "Category table loaded",
            extra={"path": settings.category_config_path},
        )
    else:
        table = DEFAULT_CATEGORY_TABLE
    return CategoryConfigProvider(table)


async def handle_validated_transaction(
    session: AsyncSession,
    payload: dict[str, Any],
    settings: Settings | None = None,
    config_provider: CategoryConfigProvider | None = None,
) -> dict[str, Any]:
    """
    Process one validated-transaction event.

    Args:
        session: Database session
        payload: Event payload
        settings: Application settings
        config_provider: Category rate lookup

    Returns:
        CPA calculation result in its wire shape
    """
    settings = settings or get_settings()
    data = CpaValidationInput.from_dict(payload)

    pipeline = CpaPipeline(
        session,
        config_provider=config_provider or build_config_provider(settings),
        max_depth=settings.hierarchy_max_depth,
    )
    result = await pipeline.calculate_cpa_commissions(data)

    # After the pipeline, so decay reflected the previous activity
    try:
        await AffiliateMetricsService(session).record_transaction(
            data.affiliate_id,
            data.transaction_id,
            data.transaction_type,
            data.transaction_amount,
        )
    except AffiliateNotFoundError as e:
        logger.warning(
            f"Activity not recorded: {e}",
            extra={"transaction_id": data.transaction_id},
        )

    return result.to_dict()


@dramatiq.actor(
    retry_when=should_retry,
    min_backoff=1_000,
    max_backoff=300_000,
    time_limit=120_000,  # 2 min timeout
)
def process_validated_transaction(payload: dict[str, Any]) -> None:
    """
    Process validated-transaction event.

    Args:
        payload: Event payload from the monitoring service
    """
    logger.info(
        "Processing validated transaction",
        extra={"transaction_id": payload.get("transactionId")},
    )
    asyncio.run(_process_validated_transaction_async(payload))


async def _process_validated_transaction_async(
    payload: dict[str, Any],
) -> None:
    """Async implementation of validated transaction processing."""
    settings = get_settings()

    # Per-run engine bound to the event loop created by asyncio.run()
    local_engine = create_engine_from_settings(settings, null_pool=True)
    local_session_maker = create_session_maker(local_engine)

    try:
        async with local_session_maker() as session:
            result = await handle_validated_transaction(
                session, payload, settings=settings
            )
        logger.info(
            "Validated transaction processed",
            extra={
                "transaction_id": payload.get("transactionId"),
                "validation_passed": result["validationPassed"],
                "total_distributed": result["totalDistributed"],
            },
        )
    finally:
        await local_engine.dispose()
