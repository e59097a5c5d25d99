"""
Category config provider.

Pure lookup of commission rates and progression thresholds for a
(category, level) pair.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger

from commission_engine.config.categories import (
    DEFAULT_CATEGORY_TABLE,
    CategoryTable,
)


@dataclass(frozen=True)
class CategoryConfig:
    """Rates and requirements of one category level."""

    category: str
    level: int
    max_levels: int
    min_direct_indications: int
    min_total_indications: int
    min_commissions: Decimal
    rev_share_level_1: Decimal
    rev_share_levels_2_to_5: Decimal
    level_up_bonus: Decimal

    @property
    def min_indications(self) -> int:
        """Indication threshold of this level."""
        return self.min_total_indications

    def rate_for(self, hierarchy_level: int) -> Decimal:
        """
        Get percentage applied at a hierarchy level.

        Args:
            hierarchy_level: Distance from source affiliate (1..5)

        Returns:
            Percentage
        """
        if hierarchy_level == 1:
            return self.rev_share_level_1
        return self.rev_share_levels_2_to_5


class CategoryConfigProvider:
    """
    Lookup over a CategoryTable.

    Explicit categories are read from their per-level rows; parametric
    categories are computed and clamped to the table caps. Unknown
    (category, level) pairs fall back to the lowest tier's first level.
    """

    def __init__(self, table: CategoryTable | None = None) -> None:
        self.table = table or DEFAULT_CATEGORY_TABLE

    def max_levels(self, category: str) -> int:
        """Number of levels in category (0 if unknown)."""
        if category in self.table.explicit:
            return len(self.table.explicit[category])
        if category in self.table.parametric:
            return self.table.parametric[category].levels
        return 0

    def get_config(self, category: str, level: int) -> CategoryConfig:
        """
        Get config for category level.

        Args:
            category: Category name
            level: Level inside category

        Returns:
            CategoryConfig (fallback: lowest tier, level 1)
        """
        config = self._lookup(category, level)
        if config is not None:
            return config

        logger.warning(
            "Unknown category level, using default",
            extra={"category": category, "level": level},
        )
        fallback = self._lookup(self.table.order[0], 1)
        if fallback is None:
            raise ValueError("Category table has no default level")
        return fallback

    def get_next_config(
        self, category: str, level: int
    ) -> CategoryConfig | None:
        """
        Get config of the next progression step.

        Args:
            category: Current category
            level: Current level

        Returns:
            Next level in the same category, else level 1 of the next
            category, else None at the top (or for an unknown category)
        """
        if category not in self.table.order:
            logger.warning(
                "Unknown category, no next config",
                extra={"category": category, "level": level},
            )
            return None

        if level + 1 <= self.max_levels(category):
            return self._lookup(category, level + 1)

        position = self.table.order.index(category)
        if position + 1 < len(self.table.order):
            return self._lookup(self.table.order[position + 1], 1)
        return None

    def category_rank(self, category: str) -> int:
        """Position in the progression ordering (-1 if unknown)."""
        try:
            return self.table.order.index(category)
        except ValueError:
            return -1

    def _lookup(self, category: str, level: int) -> CategoryConfig | None:
        if category in self.table.explicit:
            rows = self.table.explicit[category]
            if not 1 <= level <= len(rows):
                return None
            row = rows[level - 1]
            return CategoryConfig(
                category=category,
                level=level,
                max_levels=len(rows),
                min_direct_indications=row.min_indications,
                min_total_indications=row.min_indications,
                min_commissions=Decimal("0"),
                rev_share_level_1=row.rev_share_level_1,
                rev_share_levels_2_to_5=row.rev_share_levels_2_to_5,
                level_up_bonus=row.level_up_bonus,
            )

        params = self.table.parametric.get(category)
        if params is None or not 1 <= level <= params.levels:
            return None

        steps = level - 1
        min_indications = params.range_min + steps * params.indications_per_level
        return CategoryConfig(
            category=category,
            level=level,
            max_levels=params.levels,
            min_direct_indications=min_indications,
            min_total_indications=min_indications,
            min_commissions=Decimal("0"),
            rev_share_level_1=min(
                params.base_level_1 + steps * params.increment_level_1,
                self.table.level_1_cap,
            ),
            rev_share_levels_2_to_5=min(
                params.base_levels_2_to_5
                + steps * params.increment_levels_2_to_5,
                self.table.levels_2_to_5_cap,
            ),
            level_up_bonus=(
                params.base_level_up_bonus
                + steps * params.level_up_bonus_increment
            ),
        )
