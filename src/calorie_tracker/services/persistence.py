"""Synchronization between the entry store and durable storage."""

import asyncio
import logging
from collections.abc import Sequence
from enum import StrEnum
from typing import Protocol

from calorie_tracker.domain.calories import CalorieEntry, CaloriesState
from calorie_tracker.domain.errors import PersistenceError
from calorie_tracker.services.store import CalorieStore, ChangeCause, StoreChange

_logger = logging.getLogger(__name__)

_PERSISTED_CAUSES = frozenset(
    {
        ChangeCause.SET_GOAL,
        ChangeCause.REPLACE_ENTRIES,
        ChangeCause.ADD_ENTRY,
        ChangeCause.REMOVE_ENTRY,
        ChangeCause.UPDATE_ENTRY,
    }
)


class PreferenceRepository(Protocol):
    """Durable key-value storage for the goal and entries."""

    async def load_goal(self) -> int:
        """Return the stored daily goal."""

    async def load_entries(self) -> list[CalorieEntry]:
        """Return the stored calorie entries."""

    async def save_goal(self, goal: int) -> None:
        """Persist the daily goal."""

    async def save_entries(self, entries: Sequence[CalorieEntry]) -> None:
        """Persist the full list of calorie entries."""


class SyncState(StrEnum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    HYDRATED = "hydrated"


class PersistenceSync:
    """Loads the store once and writes full snapshots after each mutation.

    Mutations observed before hydration completes are applied in memory
    but never written, so the initial load cannot be clobbered by default
    state. Saves run as tasks on the running event loop and are written
    in the order they were scheduled. A mutation made while no loop is
    running is held as a pending snapshot and written by the next
    ``flush()``.
    """

    def __init__(self, store: CalorieStore, repository: PreferenceRepository) -> None:
        self.store = store
        self.repository = repository
        self.state = SyncState.UNINITIALIZED
        self.last_save_error: Exception | None = None
        self._load_lock = asyncio.Lock()
        self._save_lock = asyncio.Lock()
        self._pending: set[asyncio.Task[None]] = set()
        self._deferred: CaloriesState | None = None
        self._unsubscribe = store.subscribe(self._on_change)

    async def hydrate(self) -> None:
        """Load goal and entries from storage into the store exactly once."""
        async with self._load_lock:
            if self.state == SyncState.HYDRATED:
                return
            self.state = SyncState.LOADING
            try:
                goal, entries = await asyncio.gather(
                    self.repository.load_goal(),
                    self.repository.load_entries(),
                )
                if isinstance(goal, bool) or not isinstance(goal, int) or goal <= 0:
                    raise ValueError(f"Stored daily goal is not positive: {goal!r}")
            except Exception as exc:
                _logger.exception("Failed to load calorie data from storage")
                raise PersistenceError("Failed to load calorie data") from exc

            self.store.set_goal(goal)
            self.store.replace_entries(entries)
            self.store.set_hydrated(True)
            self.state = SyncState.HYDRATED
            _logger.info(
                "Calorie store hydrated: goal=%s entries=%s", goal, len(entries)
            )

    async def flush(self) -> None:
        """Wait until every scheduled save has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
        if self._deferred is not None:
            snapshot, self._deferred = self._deferred, None
            await self._save(snapshot)

    def close(self) -> None:
        """Stop observing the store."""
        self._unsubscribe()

    def _on_change(self, change: StoreChange) -> None:
        if change.cause not in _PERSISTED_CAUSES:
            return
        if not change.current.hydrated:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.debug("No running event loop, deferring calorie save")
            self._deferred = change.current
            return
        self._deferred = None
        task = loop.create_task(self._save(change.current))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save(self, snapshot: CaloriesState) -> None:
        async with self._save_lock:
            try:
                await asyncio.gather(
                    self.repository.save_goal(snapshot.daily_goal),
                    self.repository.save_entries(list(snapshot.entries)),
                )
            except Exception as exc:
                self.last_save_error = exc
                _logger.exception(
                    "Failed to save calorie data: goal=%s entries=%s",
                    snapshot.daily_goal,
                    len(snapshot.entries),
                )
                return
            self.last_save_error = None
