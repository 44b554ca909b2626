"""Batch draw engine."""

import random
from datetime import datetime
from typing import Callable, Optional

from loguru import logger
from pydantic import BaseModel, Field

from history import HistoryLog, HistoryRecord
from prize import Messages, PrizeResolver, PrizeTable, ResolvedPrize
from storage import CounterStore, DrawState


class BatchResult(BaseModel):
    """Outcome of one batch request handed back to the presentation layer."""

    accepted: bool = Field(
        True, description="False when the ticket balance was too low and nothing was drawn"
    )
    items: list[ResolvedPrize] = Field(
        default_factory=list, description="Resolved prizes in draw order"
    )
    got_special: bool = Field(False, description="Whether any prize is special")
    got_guaranteed: bool = Field(
        False, description="Whether the guarantee fired in this batch"
    )


class Lottery:
    """Runs batch draws against one DrawState.

    Every mutating operation holds the store's lock for its whole duration and
    first reloads the saved state, so Lottery instances of different sessions
    writing to the same storage never interleave or overwrite each other.

    Attributes:
        table: Prize table of the session.
        store: Store used to persist the state after each mutation.
        state: The mutable state, loaded from ``store`` when not given.
        resolver: Prize resolver drawing from ``table``.
    """

    def __init__(
        self,
        table: PrizeTable,
        store: CounterStore,
        state: Optional[DrawState] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.table = table
        self.store = store
        self.state = state if state is not None else store.load()
        self.resolver = PrizeResolver(table, rng=rng)
        self.clock = clock or datetime.now

    @property
    def history(self) -> HistoryLog:
        return HistoryLog(self.state.history, self.table.history_size)

    def refresh(self) -> None:
        """Pick up changes saved by other sessions sharing the storage."""
        with self.store.lock:
            self.store.refresh(self.state)

    def remaining_guarantee(self) -> int:
        """Draws left before the guarantee fires."""
        return max(0, self.table.guarantee.count - self.state.draw_count)

    def grant_ticket(self) -> None:
        with self.store.lock:
            self.store.refresh(self.state)
            self.store.grant_ticket(self.state)
        logger.info("Granted a ticket, balance {}", self.state.tickets)

    def perform_batch(self, count: int) -> BatchResult:
        """Draw ``count`` prizes, spending one ticket each.

        If the balance is short nothing changes and the result is not accepted.
        When the guarantee is due within the batch, the last prize is the
        guaranteed one.

        Raises:
            ValueError: If ``count`` is not positive.
        """
        if count < 1:
            raise ValueError(f"Draw count must be positive, got {count}")

        with self.store.lock:
            state = self.state
            self.store.refresh(state)
            remaining = self.remaining_guarantee()
            if not self.store.spend(state, count):
                logger.info(
                    "Rejected batch of {}, only {} ticket(s)", count, state.tickets
                )
                return BatchResult(accepted=False)

            trigger_guarantee = remaining <= count
            items: list[ResolvedPrize] = []
            got_guaranteed = False
            for i in range(count):
                if trigger_guarantee and not got_guaranteed and i == count - 1:
                    prize = self.resolver.draw_guaranteed()
                    got_guaranteed = True
                else:
                    prize = self.resolver.draw_one()
                items.append(prize)
            got_special = any(prize.is_special for prize in items)

            # The guarantee rule runs last and wins over the special reset.
            state.draw_count += count
            if got_special:
                state.draw_count = 0
            if got_guaranteed:
                state.draw_count = max(0, count - 1)

            self.history.append(items, time=self.clock())
            self.store.save(state)
            self.store.notify(state)

        logger.info(
            "Drew {} (special={}, guaranteed={}), pity {}, tickets {}",
            count,
            got_special,
            got_guaranteed,
            state.draw_count,
            state.tickets,
        )
        logger.debug("Batch items: {}", [f"{p.category}-{p.name}" for p in items])
        return BatchResult(
            items=items, got_special=got_special, got_guaranteed=got_guaranteed
        )

    def replay_history(self) -> list[HistoryRecord]:
        return list(self.history.replay())

    def clear_history(self) -> None:
        with self.store.lock:
            self.store.refresh(self.state)
            self.history.clear()
            self.store.save(self.state)
            self.store.notify(self.state)
        logger.info("Cleared draw history")


def summarize(result: BatchResult, messages: Messages) -> str:
    """Build the message shown to the user after a batch."""
    if not result.accepted:
        return messages.no_tickets
    if not result.got_special:
        return messages.default

    special_items = ", ".join(
        f"{item.category}-{item.name}" for item in result.items if item.is_special
    )
    lines = [messages.special, f"获得人格: {special_items}"]
    if result.got_guaranteed:
        lines.append("※ 你的三灯人格吃保底啦！")
    return "\n".join(lines)
