"""
Unit tests for CategoryConfigProvider.

Tests explicit and parametric lookups, fallback and next-step resolution.
"""

from decimal import Decimal

import pytest

from commission_engine.config.categories import (
    DEFAULT_CATEGORY_TABLE,
    CategoryTable,
    ParametricRates,
)
from commission_engine.services.commission.category_config_provider import (
    CategoryConfigProvider,
)


@pytest.fixture
def provider() -> CategoryConfigProvider:
    """Provider over the built-in table."""
    return CategoryConfigProvider()


class TestExplicitCategories:
    """Tests for table categories."""

    def test_jogador_level_1(self, provider):
        """Test lowest tier rates."""
        config = provider.get_config("jogador", 1)

        assert config.rev_share_level_1 == Decimal("1.00")
        assert config.rev_share_levels_2_to_5 == Decimal("3.00")
        assert config.min_indications == 0
        assert config.level_up_bonus == Decimal("0")
        assert config.max_levels == 2

    def test_afiliado_level_6(self, provider):
        """Test a mid-table afiliado level."""
        config = provider.get_config("afiliado", 6)

        assert config.rev_share_level_1 == Decimal("18.00")
        assert config.min_direct_indications == 81
        assert config.min_total_indications == 81
        assert config.min_commissions == Decimal("0")
        assert config.level_up_bonus == Decimal("225")

    def test_rate_for_hierarchy_level(self, provider):
        """Test level 1 uses the direct rate and deeper levels the shared one."""
        config = provider.get_config("jogador", 2)

        assert config.rate_for(1) == Decimal("6.00")
        assert config.rate_for(2) == Decimal("3.00")
        assert config.rate_for(5) == Decimal("3.00")


class TestParametricCategories:
    """Tests for formula categories."""

    def test_profissional_level_1(self, provider):
        """Test base values at level 1."""
        config = provider.get_config("profissional", 1)

        assert config.rev_share_level_1 == Decimal("18.00")
        assert config.rev_share_levels_2_to_5 == Decimal("4.00")
        assert config.min_indications == 101
        assert config.level_up_bonus == Decimal("300")
        assert config.max_levels == 90

    def test_profissional_level_90(self, provider):
        """Test linear growth up to the last level."""
        config = provider.get_config("profissional", 90)

        assert config.rev_share_level_1 == Decimal("23.963")
        assert config.min_indications == 101 + 89 * 10
        assert config.level_up_bonus == Decimal("1190")

    def test_mestre_shared_rate_grows(self, provider):
        """Test levels 2-5 increment is applied."""
        config = provider.get_config("mestre", 3)

        assert config.rev_share_level_1 == Decimal("30.266")
        assert config.rev_share_levels_2_to_5 == Decimal("6.022")
        assert config.min_indications == 12001

    def test_rates_clamped_to_caps(self):
        """Test formula results above the caps are clamped."""
        parametric = dict(DEFAULT_CATEGORY_TABLE.parametric)
        parametric["lenda"] = parametric["lenda"]._replace(
            increment_level_1=Decimal("1"),
            increment_levels_2_to_5=Decimal("1"),
        )
        table = CategoryTable(
            explicit=DEFAULT_CATEGORY_TABLE.explicit,
            parametric=parametric,
        )
        config = CategoryConfigProvider(table).get_config("lenda", 90)

        assert config.rev_share_level_1 == Decimal("50")
        assert config.rev_share_levels_2_to_5 == Decimal("10")


class TestFallback:
    """Tests for unknown category/level fallback."""

    @pytest.mark.parametrize(
        "category,level",
        [("unknown", 1), ("jogador", 3), ("lenda", 91), ("expert", 0)],
    )
    def test_falls_back_to_lowest_tier(self, provider, category, level):
        """Test unknown lookups resolve to jogador level 1."""
        config = provider.get_config(category, level)

        assert config.category == "jogador"
        assert config.level == 1
        assert config.rev_share_level_1 == Decimal("1.00")


class TestNextConfig:
    """Tests for get_next_config()."""

    def test_next_level_same_category(self, provider):
        """Test step inside a category."""
        config = provider.get_next_config("jogador", 1)

        assert (config.category, config.level) == ("jogador", 2)
        assert config.min_indications == 5

    def test_next_category_after_last_level(self, provider):
        """Test step across categories."""
        config = provider.get_next_config("afiliado", 7)

        assert (config.category, config.level) == ("profissional", 1)

    def test_none_at_top(self, provider):
        """Test top of the ladder."""
        assert provider.get_next_config("lenda", 90) is None

    def test_none_for_unknown_category(self, provider):
        """Test unknown category has no next step."""
        assert provider.get_next_config("unknown", 1) is None

    def test_category_rank(self, provider):
        """Test ordering positions."""
        assert provider.category_rank("jogador") == 0
        assert provider.category_rank("lenda") == 6
        assert provider.category_rank("unknown") == -1


def test_parametric_rates_fields_match_json_keys():
    """Test JSON form of parametric rates uses the field names."""
    data = DEFAULT_CATEGORY_TABLE.to_dict()

    assert set(data["parametric"]["expert"]) == set(ParametricRates._fields)
