"""Pydantic models for the calorie tracker HTTP API."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel

from calorie_tracker.domain.calories import (
    CalorieEntry,
    DayOverview,
    EntrySource,
    EntryType,
    GoalStatus,
)
from calorie_tracker.domain.nutrition import FoodCandidate
from calorie_tracker.services.days import next_day, previous_day
from calorie_tracker.services.goal_calculator import (
    ActivityLevel,
    BodyMetrics,
    GoalRecommendation,
    GoalType,
    Sex,
    body_metrics_from_input,
)


class EntryCreate(BaseModel):
    """Manual entry payload."""

    name: str
    calories: str | float
    type: EntryType
    note: str | None = None
    day: date | None = None


class EntryUpdate(BaseModel):
    """Full replacement payload for an existing entry."""

    name: str
    calories: str | float
    type: EntryType
    note: str | None = None
    recorded_at: datetime | None = None


class EntryResponse(BaseModel):
    id: UUID
    name: str
    calories: int
    type: EntryType
    source: EntrySource
    note: str | None
    recorded_at: datetime

    @classmethod
    def from_entry(cls, entry: CalorieEntry) -> "EntryResponse":
        return cls(
            id=entry.id,
            name=entry.name,
            calories=entry.calories,
            type=entry.type,
            source=entry.source,
            note=entry.note,
            recorded_at=entry.recorded_at,
        )


class DayResponse(BaseModel):
    """Totals and entries for one calendar day."""

    day: date
    previous_day: date
    next_day: date
    goal: int
    consumed: int
    burned: int
    net: int
    remaining: int
    status: GoalStatus
    over_by: int
    entries: list[EntryResponse]

    @classmethod
    def from_overview(cls, overview: DayOverview) -> "DayResponse":
        summary = overview.summary
        return cls(
            day=summary.day,
            previous_day=previous_day(summary.day),
            next_day=next_day(summary.day),
            goal=summary.goal,
            consumed=summary.consumed,
            burned=summary.burned,
            net=summary.net,
            remaining=summary.remaining,
            status=summary.status,
            over_by=summary.over_by,
            entries=[EntryResponse.from_entry(entry) for entry in overview.entries],
        )


class GoalUpdate(BaseModel):
    goal: str | int


class GoalResponse(BaseModel):
    goal: int


class BodyMetricsRequest(BaseModel):
    """Calculator form values, in imperial units when ``imperial`` is set."""

    sex: Sex
    weight: str | float
    height: str | float
    age: str | int
    activity: ActivityLevel = ActivityLevel.MODERATE
    goal_type: GoalType = GoalType.LOSS
    weekly_change: str | float | None = "0.5"
    imperial: bool = False

    def to_metrics(self) -> BodyMetrics:
        return body_metrics_from_input(
            sex=self.sex,
            weight=self.weight,
            height=self.height,
            age=self.age,
            activity=self.activity,
            goal_type=self.goal_type,
            weekly_change=self.weekly_change,
            imperial=self.imperial,
        )


class RecommendationResponse(BaseModel):
    goal_type: GoalType
    bmr: float
    tdee: float
    daily_delta: int
    signed_daily_delta: int
    target: int

    @classmethod
    def from_recommendation(
        cls, recommendation: GoalRecommendation
    ) -> "RecommendationResponse":
        return cls(
            goal_type=recommendation.goal_type,
            bmr=recommendation.bmr,
            tdee=recommendation.tdee,
            daily_delta=recommendation.daily_delta,
            signed_daily_delta=recommendation.signed_daily_delta,
            target=recommendation.target,
        )


class FoodResponse(BaseModel):
    fdc_id: int
    description: str
    brand_name: str | None
    serving_size: float | None
    serving_size_unit: str | None
    energy_kcal: float | None
    usable: bool

    @classmethod
    def from_candidate(cls, candidate: FoodCandidate) -> "FoodResponse":
        return cls(
            fdc_id=candidate.fdc_id,
            description=candidate.description,
            brand_name=candidate.brand_name,
            serving_size=candidate.serving_size,
            serving_size_unit=candidate.serving_size_unit,
            energy_kcal=candidate.energy_kcal,
            usable=candidate.has_energy,
        )


class FoodEntryCreate(BaseModel):
    day: date | None = None
