"""
Integration tests for the commission processing task and scheduler.
"""

import json
from decimal import Decimal

import pytest

from commission_engine.config.categories import DEFAULT_CATEGORY_TABLE
from commission_engine.config.settings import Settings
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from jobs.scheduler import create_scheduler
from jobs.tasks.commission_processing import (
    build_config_provider,
    handle_validated_transaction,
    process_validated_transaction,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def settings() -> Settings:
    """Settings for the test database."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        environment="test",
        log_file=None,
    )


def _payload(**overrides) -> dict:
    payload = {
        "affiliateId": "aff-A",
        "customerId": "cust-1",
        "transactionId": "tx-1",
        "validationModel": "1.1",
        "transactionType": "deposit",
        "transactionAmount": "50.00",
    }
    payload.update(overrides)
    return payload


class TestHandleValidatedTransaction:
    """Tests for handle_validated_transaction()."""

    @pytest.mark.asyncio
    async def test_processes_event_and_records_activity(
        self, db_session, settings, create_affiliate, create_transaction
    ):
        """Test pipeline result and affiliate activity."""
        await create_affiliate("aff-A")
        await create_transaction("tx-1")

        result = await handle_validated_transaction(
            db_session, _payload(), settings=settings
        )

        assert result["validationPassed"] is True
        assert Decimal(result["totalDistributed"]) == Decimal("0.35")
        assert result["bonusTriggered"] is True

        affiliate = await AffiliateRepository(db_session).get_by_id(
            "aff-A", refresh=True
        )
        assert affiliate.last_activity_at is not None
        assert affiliate.current_month_volume == Decimal("50.00")

    @pytest.mark.asyncio
    @pytest.mark.critical
    async def test_redelivered_event_counts_volume_once(
        self, db_session, settings, create_affiliate, create_transaction
    ):
        """Test processing the same payload twice changes nothing more."""
        await create_affiliate("aff-A")
        await create_transaction("tx-1")

        await handle_validated_transaction(
            db_session, _payload(), settings=settings
        )
        second = await handle_validated_transaction(
            db_session, _payload(), settings=settings
        )

        assert second["commissions"] == []
        assert second["bonusTriggered"] is False
        affiliate = await AffiliateRepository(db_session).get_by_id(
            "aff-A", refresh=True
        )
        assert affiliate.available_balance == Decimal("5.35")
        assert affiliate.current_month_volume == Decimal("50.00")

    @pytest.mark.asyncio
    async def test_missing_affiliate_only_warns(
        self, db_session, settings, create_transaction
    ):
        """Test unknown affiliate yields an empty result."""
        await create_transaction("tx-1")

        result = await handle_validated_transaction(
            db_session, _payload(), settings=settings
        )

        assert result["validationPassed"] is True
        assert result["commissions"] == []
        assert result["bonusTriggered"] is False

    @pytest.mark.asyncio
    async def test_malformed_payload(self, db_session, settings):
        """Test missing field is rejected."""
        payload = _payload()
        del payload["transactionId"]

        with pytest.raises(ValueError, match="transactionId"):
            await handle_validated_transaction(
                db_session, payload, settings=settings
            )


class TestBuildConfigProvider:
    """Tests for build_config_provider()."""

    def test_default_table(self, settings):
        """Test built-in table without a path."""
        provider = build_config_provider(settings)

        assert provider.table is DEFAULT_CATEGORY_TABLE

    def test_table_from_file(self, settings, tmp_path):
        """Test JSON table replaces the built-in one."""
        data = DEFAULT_CATEGORY_TABLE.to_dict()
        data["explicit"]["jogador"][0]["rev_share_level_1"] = "2.00"
        path = tmp_path / "categories.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        settings.category_config_path = str(path)

        provider = build_config_provider(settings)

        config = provider.get_config("jogador", 1)
        assert config.rev_share_level_1 == Decimal("2.00")


def test_actor_retry_options():
    """Test actor retries through the retry predicate."""
    options = process_validated_transaction.options

    assert options["retry_when"].__name__ == "should_retry"
    assert options["max_backoff"] == 300_000


def test_scheduler_registers_dispatch_job(settings):
    """Test outbox dispatch job is scheduled."""
    scheduler = create_scheduler(settings)

    job = scheduler.get_job("domain_event_dispatch")
    assert job is not None
    assert job.trigger.interval.total_seconds() == (
        settings.event_dispatch_interval_seconds
    )
