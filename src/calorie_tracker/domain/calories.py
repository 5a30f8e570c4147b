"""Calorie domain models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID

DEFAULT_DAILY_GOAL = 2400


class EntryType(StrEnum):
    """Aggregation bucket of an entry."""

    CONSUMED = "consumed"
    BURNED = "burned"


class EntrySource(StrEnum):
    """Where an entry came from. Display only."""

    MANUAL = "manual"
    EXTERNAL_LOOKUP = "external-lookup"


class GoalStatus(StrEnum):
    """Position of a day's net calories relative to the goal."""

    UNDER = "under"
    MET = "met"
    OVER = "over"


@dataclass(frozen=True)
class CalorieEntry:
    """A single logged calorie event."""

    id: UUID
    name: str
    calories: int
    type: EntryType
    recorded_at: datetime
    source: EntrySource = EntrySource.MANUAL
    note: str | None = None


@dataclass(frozen=True)
class CaloriesState:
    """Snapshot of the goal, the entries and the hydration flag."""

    entries: tuple[CalorieEntry, ...] = ()
    daily_goal: int = DEFAULT_DAILY_GOAL
    hydrated: bool = False

    def find(self, entry_id: UUID) -> CalorieEntry | None:
        """Return the entry with the given id, if any."""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None


@dataclass(frozen=True)
class DaySummary:
    """Per-day totals against the daily goal."""

    day: date
    goal: int
    consumed: int
    burned: int

    @property
    def net(self) -> int:
        return self.consumed - self.burned

    @property
    def remaining(self) -> int:
        """Calories left before the goal; negative once over it."""
        return self.goal - self.net

    @property
    def status(self) -> GoalStatus:
        if self.remaining > 0:
            return GoalStatus.UNDER
        if self.remaining == 0:
            return GoalStatus.MET
        return GoalStatus.OVER

    @property
    def over_by(self) -> int:
        return max(0, -self.remaining)


@dataclass(frozen=True)
class DayOverview:
    """Day summary together with the entries shown for that day."""

    summary: DaySummary
    entries: list[CalorieEntry] = field(default_factory=list)
