"""Bounded draw history."""

from datetime import datetime
from typing import Iterator, Optional

import pandas as pd
from pydantic import Field

from prize import CamelModel, ResolvedPrize


class HistoryRecord(CamelModel):
    """One batch of draws as it was shown to the user."""

    time: datetime = Field(..., description="When the batch was drawn")
    items: list[ResolvedPrize] = Field(
        default_factory=list, description="Prizes of the batch in draw order"
    )


class HistoryLog:
    """Newest-first view over a list of history records, bounded to ``history_size``.

    The log mutates the list it is given, so it can wrap the history of a
    ``DrawState`` in place.
    """

    def __init__(self, records: list[HistoryRecord], history_size: int):
        self.records = records
        self.history_size = history_size

    def append(
        self, items: list[ResolvedPrize], time: Optional[datetime] = None
    ) -> HistoryRecord:
        """Record a batch at the front, evicting the oldest records past the bound."""
        record = HistoryRecord(time=time or datetime.now(), items=list(items))
        self.records.insert(0, record)
        del self.records[self.history_size :]
        return record

    def replay(self) -> Iterator[HistoryRecord]:
        return iter(list(self.records))

    def clear(self) -> None:
        self.records.clear()

    def __len__(self) -> int:
        return len(self.records)


def to_frame(records: list[HistoryRecord]) -> pd.DataFrame:
    """Flatten history records into one row per prize, newest batch first."""
    rows = []
    for batch_idx, record in enumerate(records):
        for item in record.items:
            rows.append(
                {
                    "time": record.time,
                    "batch": batch_idx,
                    "draws": len(record.items),
                    "category": item.category,
                    "name": item.name,
                    "special": item.is_special,
                    "guaranteed": item.is_guaranteed,
                }
            )
    return pd.DataFrame(
        rows,
        columns=["time", "batch", "draws", "category", "name", "special", "guaranteed"],
    )
