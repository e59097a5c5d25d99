"""
Single source of truth for affiliate category rate tables.

The first three categories use hand-tuned per-level rows. The upper four
categories are parametric: rates grow linearly with the level and are
clamped to the caps. The whole table can be replaced by a JSON file
(see ``load_category_table``).
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, NamedTuple

from commission_engine.models.enums import CATEGORY_ORDER, AffiliateCategory

LEVEL_1_RATE_CAP = Decimal("50")
LEVELS_2_TO_5_RATE_CAP = Decimal("10")


class LevelRates(NamedTuple):
    """Explicit rates for one level of a table category."""

    level: int
    min_indications: int
    rev_share_level_1: Decimal  # % applied to the direct referrer
    rev_share_levels_2_to_5: Decimal  # % applied to ancestors 2..5
    level_up_bonus: Decimal


class ParametricRates(NamedTuple):
    """Formula parameters for a parametric category."""

    levels: int
    range_min: int  # Indications required for level 1
    indications_per_level: int
    base_level_1: Decimal
    increment_level_1: Decimal
    base_levels_2_to_5: Decimal
    increment_levels_2_to_5: Decimal
    base_level_up_bonus: Decimal
    level_up_bonus_increment: Decimal


def _rows(*rows: tuple[int, int, str, str, str]) -> tuple[LevelRates, ...]:
    return tuple(
        LevelRates(
            level=level,
            min_indications=min_indications,
            rev_share_level_1=Decimal(l1),
            rev_share_levels_2_to_5=Decimal(l2),
            level_up_bonus=Decimal(bonus),
        )
        for level, min_indications, l1, l2, bonus in rows
    )


@dataclass(frozen=True)
class CategoryTable:
    """Complete category/level rate configuration."""

    explicit: dict[str, tuple[LevelRates, ...]]
    parametric: dict[str, ParametricRates]
    level_1_cap: Decimal = LEVEL_1_RATE_CAP
    levels_2_to_5_cap: Decimal = LEVELS_2_TO_5_RATE_CAP
    order: tuple[str, ...] = field(
        default=tuple(c.value for c in CATEGORY_ORDER)
    )

    def validate(self) -> None:
        """
        Check the table is complete and within the caps.

        Raises:
            ValueError: If a category is missing, duplicated or over a cap
        """
        for category in self.order:
            in_explicit = category in self.explicit
            in_parametric = category in self.parametric
            if in_explicit == in_parametric:
                raise ValueError(
                    f"Category {category!r} must be defined exactly once"
                )

        for category, rows in self.explicit.items():
            if not rows:
                raise ValueError(f"Category {category!r} has no levels")
            expected = list(range(1, len(rows) + 1))
            if [row.level for row in rows] != expected:
                raise ValueError(
                    f"Category {category!r} levels must be 1..{len(rows)}"
                )
            for row in rows:
                self._check_rates(
                    category,
                    row.level,
                    row.rev_share_level_1,
                    row.rev_share_levels_2_to_5,
                )

        for category, params in self.parametric.items():
            if params.levels < 1 or params.indications_per_level < 0:
                raise ValueError(
                    f"Category {category!r} has invalid level parameters"
                )
            if (
                params.increment_level_1 < 0
                or params.increment_levels_2_to_5 < 0
            ):
                raise ValueError(
                    f"Category {category!r} rates must not decrease"
                )
            self._check_rates(
                category,
                1,
                params.base_level_1,
                params.base_levels_2_to_5,
            )

    def _check_rates(
        self,
        category: str,
        level: int,
        level_1: Decimal,
        levels_2_to_5: Decimal,
    ) -> None:
        if not (Decimal("0") <= level_1 <= self.level_1_cap):
            raise ValueError(
                f"{category} level {level}: level-1 rate {level_1} "
                f"outside 0..{self.level_1_cap}"
            )
        if not (Decimal("0") <= levels_2_to_5 <= self.levels_2_to_5_cap):
            raise ValueError(
                f"{category} level {level}: levels 2-5 rate {levels_2_to_5} "
                f"outside 0..{self.levels_2_to_5_cap}"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CategoryTable":
        """
        Build table from its JSON form.

        Args:
            data: Parsed JSON document

        Returns:
            CategoryTable (validated)
        """
        caps = data.get("caps", {})
        explicit = {
            category: tuple(
                LevelRates(
                    level=int(row["level"]),
                    min_indications=int(row["min_indications"]),
                    rev_share_level_1=Decimal(str(row["rev_share_level_1"])),
                    rev_share_levels_2_to_5=Decimal(
                        str(row["rev_share_levels_2_to_5"])
                    ),
                    level_up_bonus=Decimal(str(row.get("level_up_bonus", 0))),
                )
                for row in rows
            )
            for category, rows in data.get("explicit", {}).items()
        }
        parametric = {
            category: ParametricRates(
                **{
                    key: (
                        int(params[key])
                        if key in ("levels", "range_min", "indications_per_level")
                        else Decimal(str(params[key]))
                    )
                    for key in ParametricRates._fields
                }
            )
            for category, params in data.get("parametric", {}).items()
        }
        table = cls(
            explicit=explicit,
            parametric=parametric,
            level_1_cap=Decimal(str(caps.get("level_1", LEVEL_1_RATE_CAP))),
            levels_2_to_5_cap=Decimal(
                str(caps.get("levels_2_to_5", LEVELS_2_TO_5_RATE_CAP))
            ),
        )
        table.validate()
        return table

    def to_dict(self) -> dict[str, Any]:
        """Render table in its JSON form."""
        return {
            "caps": {
                "level_1": str(self.level_1_cap),
                "levels_2_to_5": str(self.levels_2_to_5_cap),
            },
            "explicit": {
                category: [
                    {key: str(value) if isinstance(value, Decimal) else value
                     for key, value in row._asdict().items()}
                    for row in rows
                ]
                for category, rows in self.explicit.items()
            },
            "parametric": {
                category: {
                    key: str(value) if isinstance(value, Decimal) else value
                    for key, value in params._asdict().items()
                }
                for category, params in self.parametric.items()
            },
        }


DEFAULT_CATEGORY_TABLE = CategoryTable(
    explicit={
        AffiliateCategory.JOGADOR.value: _rows(
            (1, 0, "1.00", "3.00", "0"),
            (2, 5, "6.00", "3.00", "25"),
        ),
        AffiliateCategory.INICIANTE.value: _rows(
            (1, 11, "12.00", "3.00", "50"),
            (2, 21, "12.00", "3.00", "75"),
        ),
        AffiliateCategory.AFILIADO.value: _rows(
            (1, 31, "12.00", "3.00", "100"),
            (2, 41, "14.00", "3.00", "125"),
            (3, 51, "14.00", "3.00", "150"),
            (4, 61, "16.00", "3.00", "175"),
            (5, 71, "16.00", "3.00", "200"),
            (6, 81, "18.00", "3.00", "225"),
            (7, 91, "18.00", "3.00", "250"),
        ),
    },
    parametric={
        AffiliateCategory.PROFISSIONAL.value: ParametricRates(
            levels=90,
            range_min=101,
            indications_per_level=10,
            base_level_1=Decimal("18.00"),
            increment_level_1=Decimal("0.067"),
            base_levels_2_to_5=Decimal("4.00"),
            increment_levels_2_to_5=Decimal("0"),
            base_level_up_bonus=Decimal("300"),
            level_up_bonus_increment=Decimal("10"),
        ),
        AffiliateCategory.EXPERT.value: ParametricRates(
            levels=90,
            range_min=1001,
            indications_per_level=100,
            base_level_1=Decimal("24.00"),
            increment_level_1=Decimal("0.067"),
            base_levels_2_to_5=Decimal("5.00"),
            increment_levels_2_to_5=Decimal("0"),
            base_level_up_bonus=Decimal("1200"),
            level_up_bonus_increment=Decimal("20"),
        ),
        AffiliateCategory.MESTRE.value: ParametricRates(
            levels=90,
            range_min=10001,
            indications_per_level=1000,
            base_level_1=Decimal("30.00"),
            increment_level_1=Decimal("0.133"),
            base_levels_2_to_5=Decimal("6.00"),
            increment_levels_2_to_5=Decimal("0.011"),
            base_level_up_bonus=Decimal("10200"),
            level_up_bonus_increment=Decimal("100"),
        ),
        AffiliateCategory.LENDA.value: ParametricRates(
            levels=90,
            range_min=100001,
            indications_per_level=10000,
            base_level_1=Decimal("42.00"),
            increment_level_1=Decimal("0"),
            base_levels_2_to_5=Decimal("7.00"),
            increment_levels_2_to_5=Decimal("0"),
            base_level_up_bonus=Decimal("19200"),
            level_up_bonus_increment=Decimal("200"),
        ),
    },
)


def load_category_table(path: str | Path) -> CategoryTable:
    """
    Load category table from a JSON file.

    Args:
        path: Path to JSON document

    Returns:
        Validated CategoryTable

    Raises:
        ValueError: If the document violates the table invariants
    """
    with open(path, encoding="utf-8") as fh:
        return CategoryTable.from_dict(json.load(fh))
