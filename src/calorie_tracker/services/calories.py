"""Calorie tracking service exposed to the UI layer."""

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from uuid import UUID, uuid4

from calorie_tracker.domain.calories import (
    CalorieEntry,
    DayOverview,
    EntrySource,
    EntryType,
)
from calorie_tracker.domain.errors import (
    InputValidationError,
    LookupUnavailableError,
    StorePreconditionError,
)
from calorie_tracker.domain.nutrition import FoodCandidate
from calorie_tracker.services.clock import Clock
from calorie_tracker.services.days import (
    entries_for_day,
    recorded_at_for_day,
    search_entries,
    summarize_day,
)
from calorie_tracker.services.goal_calculator import (
    BodyMetrics,
    GoalRecommendation,
    calculate_goal,
    validate_body_metrics,
)
from calorie_tracker.services.nutrition import NutritionService
from calorie_tracker.services.store import CalorieStore
from calorie_tracker.services.units import parse_number, round_half_up

_logger = logging.getLogger(__name__)


@dataclass
class CaloriesService:
    """Validates user intents and applies them to the calorie store."""

    store: CalorieStore
    clock: Clock
    nutrition_service: NutritionService | None = None

    def get_entry(self, entry_id: UUID) -> CalorieEntry | None:
        return self.store.get_entry(entry_id)

    def add_entry(
        self,
        name: str,
        calories: str | float,
        entry_type: EntryType,
        note: str | None = None,
        day: date | None = None,
    ) -> CalorieEntry:
        """Validate and log a manual entry for ``day`` (default today)."""
        entry = CalorieEntry(
            id=uuid4(),
            name=_validate_name(name),
            calories=_validate_calories(calories),
            type=EntryType(entry_type),
            recorded_at=self._recorded_at(day),
            source=EntrySource.MANUAL,
            note=_clean_note(note),
        )
        self.store.add_entry(entry)
        return entry

    def update_entry(  # noqa: PLR0913
        self,
        entry_id: UUID,
        name: str,
        calories: str | float,
        entry_type: EntryType,
        note: str | None = None,
        recorded_at: datetime | None = None,
    ) -> CalorieEntry:
        """Replace an entry, keeping its id, source and timestamp by default."""
        existing = self.store.get_entry(entry_id)
        if existing is None:
            raise StorePreconditionError(f"Entry {entry_id} does not exist")
        updated = replace(
            existing,
            name=_validate_name(name),
            calories=_validate_calories(calories),
            type=EntryType(entry_type),
            note=_clean_note(note),
            recorded_at=(
                _validate_instant(recorded_at) if recorded_at else existing.recorded_at
            ),
        )
        self.store.update_entry(updated)
        return updated

    def remove_entry(self, entry_id: UUID) -> None:
        self.store.remove_entry(entry_id)

    def set_goal(self, raw: str | int) -> int:
        """Validate and apply a manually entered daily goal."""
        value = parse_number(raw, decimal_comma=False)
        if value is None or int(value) <= 0:
            raise InputValidationError("Enter a positive calorie value.")
        goal = int(value)
        self.store.set_goal(goal)
        return goal

    def day_overview(
        self, day: date | None = None, query: str | None = None
    ) -> DayOverview:
        """Return the totals and matching entries for a local calendar day."""
        selected = day or self.clock.today()
        state = self.store.state
        summary = summarize_day(
            state.entries, selected, self.clock.tz, state.daily_goal
        )
        entries = search_entries(
            entries_for_day(state.entries, selected, self.clock.tz), query
        )
        return DayOverview(summary=summary, entries=entries)

    def recommend_goal(self, metrics: BodyMetrics) -> GoalRecommendation:
        return calculate_goal(validate_body_metrics(metrics))

    def apply_goal(self, recommendation: GoalRecommendation) -> int:
        """Write a recommended target as the daily goal."""
        if recommendation.target <= 0:
            raise InputValidationError("Enter a positive calorie value.")
        self.store.set_goal(recommendation.target)
        _logger.info("Applied recommended calorie goal: %s", recommendation.target)
        return recommendation.target

    async def search_foods(self, query: str) -> list[FoodCandidate]:
        return await self._require_nutrition().search(query)

    async def add_food_entry(
        self, fdc_id: int, day: date | None = None
    ) -> CalorieEntry:
        """Log a consumed entry from a looked-up food."""
        candidate = await self._require_nutrition().get_food(fdc_id)
        entry = entry_from_candidate(candidate, self._recorded_at(day))
        self.store.add_entry(entry)
        return entry

    def _require_nutrition(self) -> NutritionService:
        if self.nutrition_service is None:
            raise LookupUnavailableError("Please enter a USDA API key.")
        return self.nutrition_service

    def _recorded_at(self, day: date | None) -> datetime:
        now = self.clock.now()
        if day is None or day == self.clock.today():
            return now
        return recorded_at_for_day(day, now, self.clock.tz)


def entry_from_candidate(
    candidate: FoodCandidate, recorded_at: datetime
) -> CalorieEntry:
    """Convert a looked-up food into a consumed entry.

    Raises ``LookupUnavailableError`` when the food has no usable energy value.
    """
    if not candidate.has_energy:
        raise LookupUnavailableError("This food does not contain calorie information.")
    calories = round_half_up(candidate.energy_kcal)

    note_parts = []
    if candidate.serving_size and candidate.serving_size_unit:
        note_parts.append(
            f"Per {candidate.serving_size:g} {candidate.serving_size_unit}"
        )
    if candidate.brand_name:
        note_parts.append(f"Brand: {candidate.brand_name}")

    return CalorieEntry(
        id=uuid4(),
        name=candidate.description or f"Food {candidate.fdc_id}",
        calories=calories,
        type=EntryType.CONSUMED,
        recorded_at=recorded_at,
        source=EntrySource.EXTERNAL_LOOKUP,
        note=" • ".join(note_parts) or None,
    )


def _validate_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InputValidationError("Please provide a name for this entry.")
    return cleaned


def _validate_calories(raw: str | float) -> int:
    value = parse_number(raw)
    if value is None or value <= 0:
        raise InputValidationError("Enter a positive calorie value.")
    calories = round_half_up(value)
    if calories <= 0:
        raise InputValidationError("Enter a positive calorie value.")
    return calories


def _validate_instant(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise InputValidationError("Recorded time must include a time zone.")
    return value


def _clean_note(note: str | None) -> str | None:
    if note is None:
        return None
    cleaned = note.strip()
    return cleaned or None
