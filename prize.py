"""Prize table configuration and prize resolution."""

import json
import random
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

# Fixed prizes returned when the table cannot produce a real one.
FALLBACK_CATEGORY = "error"
FALLBACK_NAME = "guarantee-was-consumed-placeholder"
GUARANTEED_FALLBACK_CATEGORY = "guaranteed-fallback"
GUARANTEED_FALLBACK_NAME = "random-top-tier"


class CamelModel(BaseModel):
    """Base model accepting both camelCase wire names and snake_case names."""

    model_config = ConfigDict(populate_by_name=True)


class SubPrize(CamelModel):
    name: str = Field(..., description="Name of the sub prize")
    probability: float = Field(
        1.0,
        ge=0.0,
        le=1.0,
        description="Configured weight, shown to the user but not used when drawing",
    )


class PrizeCategory(CamelModel):
    """A top-level bucket of the prize table.

    The category probability decides the bucket, then one of its sub prizes is
    picked with equal weight regardless of the configured sub prize weights.
    """

    name: str = Field(..., description="Category name, unique within the table")
    probability: float = Field(
        ..., ge=0.0, le=1.0, description="Probability of drawing this category"
    )
    is_special: bool = Field(
        False, alias="isSpecial", description="Whether this is a featured outcome"
    )
    is_top_prize: bool = Field(
        False,
        alias="isTopPrize",
        description="Whether this category can satisfy the guarantee",
    )
    sub_prizes: list[SubPrize] = Field(
        default_factory=list, alias="subPrizes", description="Ordered sub prizes"
    )


class Messages(CamelModel):
    default: str = Field("感谢参与抽奖！", description="Shown after an ordinary batch")
    special: str = Field("恭喜获得特别奖！", description="Shown after a special prize")
    no_tickets: str = Field(
        "抽卡次数不足，请移步界面底部获取更多抽数",
        alias="noTickets",
        description="Shown when the ticket balance is too low",
    )


class GuaranteeConfig(CamelModel):
    count: int = Field(
        90, ge=1, description="Draws without a special prize before the guarantee"
    )
    # Kept for payload compatibility, the guarantee pool is built from is_top_prize.
    prize_category: str = Field("一等奖", alias="prizeCategory")


class PrizeTable(CamelModel):
    """Validated prize table configuration for one session."""

    prize_categories: list[PrizeCategory] = Field(
        default_factory=list, alias="prizeCategories"
    )
    messages: Messages = Field(default_factory=Messages)
    guarantee: GuaranteeConfig = Field(default_factory=GuaranteeConfig)
    history_size: int = Field(
        180, ge=1, alias="historySize", description="Maximum number of history records"
    )

    def validate_distribution(self) -> bool:
        """Check that the category probabilities sum to 1.0."""
        total = sum(category.probability for category in self.prize_categories)
        return abs(total - 1.0) <= 1e-9

    def top_prize_pool(self) -> list[tuple[str, SubPrize]]:
        """Flatten the sub prizes of every top prize category with their parent name."""
        return [
            (category.name, sub_prize)
            for category in self.prize_categories
            if category.is_top_prize
            for sub_prize in category.sub_prizes
        ]


class ResolvedPrize(CamelModel):
    category: str
    name: str
    is_special: bool = Field(False, alias="isSpecial")
    is_guaranteed: bool = Field(False, alias="isGuaranteed")
    is_top_prize: bool = Field(False, alias="isTopPrize")


def create_default_prize_table() -> PrizeTable:
    """Embedded prize table used when no configuration file can be read."""
    return PrizeTable(
        prize_categories=[
            PrizeCategory(
                name="一等奖",
                probability=0.05,
                is_special=True,
                is_top_prize=True,
                sub_prizes=[
                    SubPrize(name="wowo", probability=0.5),
                    SubPrize(name="nini", probability=0.3),
                    SubPrize(name="sbsb", probability=0.2),
                ],
            ),
            PrizeCategory(
                name="参与奖",
                probability=0.95,
                sub_prizes=[SubPrize(name="谢谢参与", probability=1.0)],
            ),
        ],
        messages=Messages(),
        guarantee=GuaranteeConfig(count=90, prize_category="一等奖"),
        history_size=180,
    )


def merge_prize_table(defaults: PrizeTable, payload: dict) -> PrizeTable:
    """Overlay a raw payload on the defaults.

    The payload replaces every top-level field it supplies except ``guarantee``
    and ``historySize``, which always keep the values of ``defaults``. Those two
    are still validated when present.

    Raises:
        ValidationError: If the payload does not describe a prize table.
    """
    loaded = PrizeTable.model_validate(payload)
    merged = defaults.model_copy(
        update={
            name: getattr(loaded, name)
            for name in loaded.model_fields_set
            if name not in ("guarantee", "history_size")
        },
        deep=True,
    )
    return merged


def load_prize_table(path: Union[str, Path]) -> PrizeTable:
    """Load the prize table from a JSON file, falling back to the embedded table."""
    defaults = create_default_prize_table()
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("prize table payload must be a JSON object")
        table = merge_prize_table(defaults, payload)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Using default prize table, cannot load {}: {}", path, e)
        return defaults

    if not table.validate_distribution():
        total = sum(category.probability for category in table.prize_categories)
        logger.warning("Prize category probabilities sum to {:.4f}, not 1.0", total)
    return table


class PrizeResolver:
    """Draws prizes from a prize table.

    Args:
        table: The prize table to draw from.
        rng: Source of randomness, anything with ``random()`` and ``randrange()``.
            Defaults to a fresh ``random.Random``.
    """

    def __init__(self, table: PrizeTable, rng: Optional[random.Random] = None):
        self.table = table
        self.rng = rng or random.Random()

    def draw_one(self) -> ResolvedPrize:
        """Single non-guaranteed draw."""
        roll = self.rng.random()
        cumulative = 0.0
        for category in self.table.prize_categories:
            cumulative += category.probability
            if roll <= cumulative:
                return self._select_sub_prize(category)

        # Probabilities do not cover the roll.
        return ResolvedPrize(
            category=FALLBACK_CATEGORY, name=FALLBACK_NAME, is_special=False
        )

    def _select_sub_prize(self, category: PrizeCategory) -> ResolvedPrize:
        # Configured sub prize weights are ignored, every sub prize gets an equal share.
        sub_prizes = category.sub_prizes
        if not sub_prizes:
            return self._make_prize(category, category.name)

        share = 1 / len(sub_prizes)
        roll = self.rng.random()
        cumulative = 0.0
        for sub_prize in sub_prizes:
            cumulative += share
            if roll <= cumulative:
                return self._make_prize(category, sub_prize.name)

        # Rounding left the roll uncovered
        return self._make_prize(category, sub_prizes[0].name)

    @staticmethod
    def _make_prize(category: PrizeCategory, name: str) -> ResolvedPrize:
        return ResolvedPrize(
            category=category.name,
            name=name,
            is_special=category.is_special,
            is_top_prize=category.is_top_prize,
        )

    def draw_guaranteed(self) -> ResolvedPrize:
        """Pity forced draw: a uniform pick over all top prize sub prizes."""
        pool = self.table.top_prize_pool()
        if not pool:
            logger.warning("No top prize sub prizes configured, using fallback prize")
            return ResolvedPrize(
                category=GUARANTEED_FALLBACK_CATEGORY,
                name=GUARANTEED_FALLBACK_NAME,
                is_special=True,
                is_guaranteed=True,
                is_top_prize=True,
            )

        category_name, sub_prize = pool[self.rng.randrange(len(pool))]
        return ResolvedPrize(
            category=category_name,
            name=sub_prize.name,
            is_special=True,
            is_guaranteed=True,
            is_top_prize=True,
        )
