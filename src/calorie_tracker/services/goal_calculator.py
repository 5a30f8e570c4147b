"""Daily calorie goal estimation using the Mifflin-St Jeor equation."""

from dataclasses import dataclass
from enum import StrEnum

from calorie_tracker.domain.errors import InputValidationError
from calorie_tracker.services.units import (
    inches_to_cm,
    parse_number,
    pounds_to_kg,
    round_half_up,
)

KCAL_PER_KG = 7700
DAYS_PER_WEEK = 7


class Sex(StrEnum):
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    """Activity tiers with their TDEE multipliers."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very-active"

    @property
    def factor(self) -> float:
        return _ACTIVITY_FACTORS[self]


_ACTIVITY_FACTORS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}


class GoalType(StrEnum):
    LOSS = "loss"
    MAINTAIN = "maintain"
    GAIN = "gain"


@dataclass(frozen=True)
class BodyMetrics:
    """Body metrics in metric units."""

    sex: Sex
    weight_kg: float
    height_cm: float
    age_years: int
    activity: ActivityLevel
    goal_type: GoalType
    weekly_change_kg: float = 0.0


@dataclass(frozen=True)
class GoalRecommendation:
    """Recommended daily target and the deficit or surplus behind it."""

    goal_type: GoalType
    bmr: float
    tdee: float
    daily_delta: int
    target: int

    @property
    def signed_daily_delta(self) -> int:
        """Negative for a deficit, positive for a surplus."""
        if self.goal_type == GoalType.LOSS:
            return -self.daily_delta
        return self.daily_delta


def calculate_goal(metrics: BodyMetrics) -> GoalRecommendation:
    """Estimate a daily calorie target from body metrics.

    ``metrics`` must already be in kilograms and centimetres with positive
    weight, height and age, and a positive weekly change unless the goal is
    to maintain.
    """
    if metrics.sex == Sex.MALE:
        offset = 5
    else:
        offset = -161
    bmr = (
        10 * metrics.weight_kg
        + 6.25 * metrics.height_cm
        - 5 * metrics.age_years
        + offset
    )
    tdee = bmr * metrics.activity.factor

    if metrics.goal_type == GoalType.MAINTAIN:
        daily_delta = 0.0
    else:
        daily_delta = metrics.weekly_change_kg * KCAL_PER_KG / DAYS_PER_WEEK

    if metrics.goal_type == GoalType.LOSS:
        target = tdee - daily_delta
    elif metrics.goal_type == GoalType.GAIN:
        target = tdee + daily_delta
    else:
        target = tdee

    return GoalRecommendation(
        goal_type=metrics.goal_type,
        bmr=bmr,
        tdee=tdee,
        daily_delta=round_half_up(daily_delta),
        target=max(0, round_half_up(target)),
    )


def validate_body_metrics(metrics: BodyMetrics) -> BodyMetrics:
    """Reject metrics the calculator cannot use."""
    if metrics.weight_kg <= 0:
        raise InputValidationError("Please enter your weight.")
    if metrics.height_cm <= 0:
        raise InputValidationError("Please enter your height.")
    if metrics.age_years <= 0:
        raise InputValidationError("Please enter your age.")
    if metrics.goal_type != GoalType.MAINTAIN and metrics.weekly_change_kg <= 0:
        raise InputValidationError("Please enter a weekly change greater than zero.")
    return metrics


def body_metrics_from_input(  # noqa: PLR0913
    *,
    sex: Sex,
    weight: str | float | None,
    height: str | float | None,
    age: str | int | None,
    activity: ActivityLevel,
    goal_type: GoalType,
    weekly_change: str | float | None = None,
    imperial: bool = False,
) -> BodyMetrics:
    """Validate raw form values and convert them to metric ``BodyMetrics``.

    Imperial input is read as pounds and inches. Raises
    ``InputValidationError`` with a user-facing reason on the first
    invalid field.
    """
    weight_value = parse_number(weight, decimal_comma=False)
    if weight_value is None or weight_value <= 0:
        raise InputValidationError("Please enter your weight.")

    height_value = parse_number(height, decimal_comma=False)
    if height_value is None or height_value <= 0:
        raise InputValidationError("Please enter your height.")

    age_value = parse_number(age, decimal_comma=False)
    if age_value is None or age_value <= 0 or not age_value.is_integer():
        raise InputValidationError("Please enter your age.")

    change_value = 0.0
    if goal_type != GoalType.MAINTAIN:
        parsed_change = parse_number(weekly_change, decimal_comma=False)
        if parsed_change is None or parsed_change <= 0:
            raise InputValidationError(
                "Please enter a weekly change greater than zero."
            )
        change_value = pounds_to_kg(parsed_change) if imperial else parsed_change

    return validate_body_metrics(
        BodyMetrics(
            sex=sex,
            weight_kg=pounds_to_kg(weight_value) if imperial else weight_value,
            height_cm=inches_to_cm(height_value) if imperial else height_value,
            age_years=int(age_value),
            activity=activity,
            goal_type=goal_type,
            weekly_change_kg=change_value,
        )
    )
