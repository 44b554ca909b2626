"""Durable storage for the ticket balance, pity counter and draw history."""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, ContextManager, Optional, Protocol, Union

from loguru import logger
from pydantic import Field, ValidationError

from history import HistoryRecord
from prize import CamelModel

STATE_KEY = "lotteryState"

_shared_locks: dict[str, ContextManager] = {}
_shared_locks_guard = threading.Lock()


def shared_lock(name: str) -> ContextManager:
    """Return the process-wide lock registered under ``name``."""
    with _shared_locks_guard:
        return _shared_locks.setdefault(name, threading.RLock())


class DrawState(CamelModel):
    """Persistent lottery state for a single user session."""

    draw_count: int = Field(
        0, ge=0, alias="drawCount", description="Draws since the last special prize"
    )
    tickets: int = Field(1, ge=0, description="Spendable draws")
    history: list[HistoryRecord] = Field(
        default_factory=list, description="Past batches, newest first"
    )


class StorageBackend(Protocol):
    """String key/value storage, the shape of a browser's localStorage.

    ``lock`` serializes every writer of the same underlying storage.
    """

    lock: ContextManager

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Storage that lives as long as the process."""

    def __init__(self, items: Optional[dict[str, str]] = None):
        self.items: dict[str, str] = dict(items or {})
        self.lock = threading.RLock()

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class FileStorage:
    """Storage keeping one JSON file per key in a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        # Instances pointing at the same directory share one lock.
        self.lock = shared_lock(str(self.directory.resolve()))

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file first so a crash never leaves half a file.
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class CounterStore:
    """Loads and saves a DrawState, and applies ticket mutations to it.

    Storage problems never reach the caller: loading falls back to a fresh
    state and saving failures are only logged, leaving the in-memory state
    authoritative until the next successful save.
    """

    def __init__(
        self, backend: StorageBackend, history_size: int, key: str = STATE_KEY
    ):
        self.backend = backend
        self.history_size = history_size
        self.key = key
        self._listeners: list[Callable[[DrawState], None]] = []
        self._in_sync = True

    @property
    def lock(self) -> ContextManager:
        """Lock shared by every store writing to the same backend."""
        return self.backend.lock

    def load(self) -> DrawState:
        try:
            raw = self.backend.get_item(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read lottery state, using defaults: {}", e)
            return DrawState()
        if raw is None:
            logger.warning("No saved lottery state under '{}', using defaults", self.key)
            return DrawState()

        try:
            state = DrawState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Saved lottery state is corrupt, using defaults: {} error(s)",
                e.error_count(),
            )
            return DrawState()

        del state.history[self.history_size :]
        return state

    def save(self, state: DrawState) -> bool:
        """Persist the state, returning whether the write succeeded."""
        payload = {
            "drawCount": state.draw_count,
            "tickets": state.tickets,
            "history": [
                record.model_dump(mode="json", by_alias=True)
                for record in state.history[: self.history_size]
            ],
        }
        try:
            self.backend.set_item(self.key, json.dumps(payload, ensure_ascii=False))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save lottery state: {}", e)
            self._in_sync = False
            return False
        self._in_sync = True
        return True

    def refresh(self, state: DrawState) -> None:
        """Overwrite ``state`` with the saved copy written by any other store.

        Call while holding ``lock``. Nothing changes when there is no readable
        saved copy, or when the last save of this store failed and the
        in-memory state is the only up-to-date one.
        """
        if not self._in_sync:
            return
        try:
            raw = self.backend.get_item(self.key)
            if raw is None:
                return
            saved = DrawState.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("Cannot refresh lottery state, keeping memory copy: {}", e)
            return
        state.draw_count = saved.draw_count
        state.tickets = saved.tickets
        state.history[:] = saved.history[: self.history_size]

    def subscribe(self, listener: Callable[[DrawState], None]) -> None:
        """Register a callback run after every ticket or draw mutation."""
        self._listeners.append(listener)

    def notify(self, state: DrawState) -> None:
        for listener in self._listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("Lottery state listener {} failed", listener)

    def grant_ticket(self, state: DrawState) -> None:
        state.tickets += 1
        self.save(state)
        self.notify(state)

    def spend(self, state: DrawState, count: int) -> bool:
        """Deduct ``count`` tickets if the balance allows it."""
        if state.tickets < count:
            return False
        state.tickets -= count
        self.save(state)
        self.notify(state)
        return True
