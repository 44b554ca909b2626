from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest
from loguru import logger

from prize import PrizeCategory, PrizeTable, SubPrize
from storage import CounterStore, MemoryStorage


class ScriptedRandom:
    """Replays fixed values for ``random()`` and ``randrange()``.

    When a script runs out its last value is repeated.
    """

    def __init__(self, rolls=(0.5,), indexes=(0,)):
        self.rolls = list(rolls)
        self.indexes = list(indexes)

    def random(self) -> float:
        return self.rolls.pop(0) if len(self.rolls) > 1 else self.rolls[0]

    def randrange(self, stop: int) -> int:
        index = self.indexes.pop(0) if len(self.indexes) > 1 else self.indexes[0]
        assert 0 <= index < stop
        return index


@pytest.fixture
def scripted_random():
    return ScriptedRandom


@pytest.fixture
def two_tier_table() -> PrizeTable:
    return PrizeTable(
        prize_categories=[
            PrizeCategory(
                name="top",
                probability=0.05,
                is_special=True,
                is_top_prize=True,
                sub_prizes=[SubPrize(name="A"), SubPrize(name="B")],
            ),
            PrizeCategory(
                name="common",
                probability=0.95,
                sub_prizes=[SubPrize(name="thanks")],
            ),
        ],
    )


@pytest.fixture
def memory_store() -> CounterStore:
    return CounterStore(MemoryStorage(), history_size=180)


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]), level="WARNING"
    )
    yield messages
    logger.remove(handler_id)
