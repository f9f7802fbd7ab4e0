"""
Daily portion estimation for raw feeding.

Raw diets are portioned as a fraction of body weight per day:
    daily_grams = weight_kg × 1000 × activity multiplier
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

from app.core.units import MeasureUnit, WeightUnit, grams_to_ounces, to_kg


class ActivityLevel(str, Enum):
    PUPPY = "puppy"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    SENIOR = "senior"


class LifeStage(str, Enum):
    PUPPY = "puppy"
    ADULT = "adult"
    SENIOR = "senior"


# Fraction of body weight fed per day
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.PUPPY: Decimal("0.04"),
    ActivityLevel.LOW: Decimal("0.02"),
    ActivityLevel.MODERATE: Decimal("0.025"),
    ActivityLevel.HIGH: Decimal("0.03"),
    ActivityLevel.SENIOR: Decimal("0.0175"),
}

PUPPY_MAX_AGE = Decimal("1")
SENIOR_MIN_AGE = Decimal("7")

WHOLE_UNIT = Decimal("1")


@dataclass(frozen=True)
class PortionEstimate:
    """Recommended daily and per-meal portion in the requested measure unit."""
    daily_portion: Decimal
    meal_portion: Decimal


def life_stage_for_age(age_years: Decimal) -> LifeStage:
    """Bucket a dog's age into a life stage."""
    age = Decimal(age_years)
    if age < PUPPY_MAX_AGE:
        return LifeStage.PUPPY
    if age >= SENIOR_MIN_AGE:
        return LifeStage.SENIOR
    return LifeStage.ADULT


def suggest_activity_level(age_years: Decimal, activity_level: ActivityLevel) -> ActivityLevel:
    """
    Correct an activity level so it fits the dog's age.

    Puppies are always fed as puppies. Seniors default to the senior rate but
    keep an explicit low or moderate choice. Adults can't use the puppy or
    senior rates and fall back to moderate.

    Args:
        age_years: Dog's age in years
        activity_level: Level currently selected

    Returns:
        The activity level to use
    """
    level = ActivityLevel(activity_level)
    stage = life_stage_for_age(age_years)

    if stage == LifeStage.PUPPY:
        return ActivityLevel.PUPPY
    if stage == LifeStage.SENIOR:
        if level in (ActivityLevel.LOW, ActivityLevel.MODERATE):
            return level
        return ActivityLevel.SENIOR
    if level in (ActivityLevel.PUPPY, ActivityLevel.SENIOR):
        return ActivityLevel.MODERATE
    return level


def estimate_portion(
    weight: Decimal,
    weight_unit: WeightUnit,
    age_years: Decimal,
    activity_level: ActivityLevel,
    meals_per_day: int,
    measure_unit: MeasureUnit = MeasureUnit.G,
) -> PortionEstimate:
    """
    Estimate daily and per-meal portions.

    Inputs are assumed to be validated positive numbers; nothing is checked
    here. Age is part of the contract but only affects the result through the
    activity level the caller passes (see suggest_activity_level).

    Args:
        weight: Body weight in weight_unit
        weight_unit: kg or lbs
        age_years: Dog's age in years
        activity_level: One of ACTIVITY_MULTIPLIERS
        meals_per_day: Meals the daily portion is split across
        measure_unit: g or oz for the result

    Returns:
        PortionEstimate with both values rounded to whole units
    """
    weight_kg = to_kg(Decimal(weight), weight_unit)
    multiplier = ACTIVITY_MULTIPLIERS[ActivityLevel(activity_level)]

    daily = weight_kg * 1000 * multiplier
    if MeasureUnit(measure_unit) == MeasureUnit.OZ:
        daily = grams_to_ounces(daily)

    # Per-meal is rounded from the unrounded daily amount
    return PortionEstimate(
        daily_portion=daily.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP),
        meal_portion=(daily / Decimal(meals_per_day)).quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP),
    )
