"""In-memory entry store with change notifications."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import StrEnum
from uuid import UUID

from calorie_tracker.domain.calories import (
    DEFAULT_DAILY_GOAL,
    CalorieEntry,
    CaloriesState,
)
from calorie_tracker.domain.errors import StorePreconditionError

_logger = logging.getLogger(__name__)


class ChangeCause(StrEnum):
    """Store operation that produced a change."""

    SET_GOAL = "set_goal"
    REPLACE_ENTRIES = "replace_entries"
    ADD_ENTRY = "add_entry"
    REMOVE_ENTRY = "remove_entry"
    UPDATE_ENTRY = "update_entry"
    SET_HYDRATED = "set_hydrated"


@dataclass(frozen=True)
class StoreChange:
    """Notification emitted after every applied mutation."""

    cause: ChangeCause
    previous: CaloriesState
    current: CaloriesState


StoreListener = Callable[[StoreChange], None]


class CalorieStore:
    """Single source of truth for the daily goal and calorie entries."""

    def __init__(self, daily_goal: int = DEFAULT_DAILY_GOAL) -> None:
        self._state = CaloriesState(daily_goal=daily_goal)
        self._listeners: list[StoreListener] = []

    @property
    def state(self) -> CaloriesState:
        return self._state

    def get_entry(self, entry_id: UUID) -> CalorieEntry | None:
        return self._state.find(entry_id)

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_goal(self, value: int) -> None:
        """Replace the daily goal."""
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise StorePreconditionError(
                f"Daily goal must be a positive int: {value!r}"
            )
        self._apply(ChangeCause.SET_GOAL, replace(self._state, daily_goal=value))

    def replace_entries(self, entries: Iterable[CalorieEntry]) -> None:
        """Bulk-replace entries from a trusted source."""
        self._apply(
            ChangeCause.REPLACE_ENTRIES, replace(self._state, entries=tuple(entries))
        )

    def add_entry(self, entry: CalorieEntry) -> None:
        """Insert a new entry at the head of the sequence."""
        if entry.calories <= 0:
            raise StorePreconditionError(
                f"Entry {entry.id} has non-positive calories: {entry.calories}"
            )
        if self._state.find(entry.id) is not None:
            raise StorePreconditionError(f"Entry {entry.id} already exists")
        self._apply(
            ChangeCause.ADD_ENTRY,
            replace(self._state, entries=(entry, *self._state.entries)),
        )

    def remove_entry(self, entry_id: UUID) -> None:
        """Delete an entry; unknown ids are ignored."""
        if self._state.find(entry_id) is None:
            return
        entries = tuple(entry for entry in self._state.entries if entry.id != entry_id)
        self._apply(ChangeCause.REMOVE_ENTRY, replace(self._state, entries=entries))

    def update_entry(self, entry: CalorieEntry) -> None:
        """Replace an existing entry wholesale, keeping its position."""
        if self._state.find(entry.id) is None:
            raise StorePreconditionError(f"Entry {entry.id} does not exist")
        if entry.calories <= 0:
            raise StorePreconditionError(
                f"Entry {entry.id} has non-positive calories: {entry.calories}"
            )
        entries = tuple(
            entry if existing.id == entry.id else existing
            for existing in self._state.entries
        )
        self._apply(ChangeCause.UPDATE_ENTRY, replace(self._state, entries=entries))

    def set_hydrated(self, flag: bool) -> None:
        self._apply(ChangeCause.SET_HYDRATED, replace(self._state, hydrated=flag))

    def _apply(self, cause: ChangeCause, new_state: CaloriesState) -> None:
        previous = self._state
        self._state = new_state
        change = StoreChange(cause=cause, previous=previous, current=new_state)
        for listener in list(self._listeners):
            listener(change)
        _logger.debug("Calorie store change: %s", cause)
