"""Tests for portion estimation and age-based activity levels."""

from decimal import Decimal

import pytest

from app.core.portions import (
    ACTIVITY_MULTIPLIERS,
    ActivityLevel,
    LifeStage,
    estimate_portion,
    life_stage_for_age,
    suggest_activity_level,
)
from app.core.units import MeasureUnit, WeightUnit


class TestEstimatePortion:
    """Tests for daily and per-meal portions."""

    def test_moderate_10kg_grams(self):
        """10kg x 1000 x 0.025 = 250g/day, 125g per meal."""
        estimate = estimate_portion(
            Decimal("10"), WeightUnit.KG, Decimal("3"), ActivityLevel.MODERATE, 2, MeasureUnit.G
        )
        assert estimate.daily_portion == Decimal("250")
        assert estimate.meal_portion == Decimal("125")

    def test_multipliers(self):
        """Fraction of body weight per activity level."""
        assert ACTIVITY_MULTIPLIERS[ActivityLevel.PUPPY] == Decimal("0.04")
        assert ACTIVITY_MULTIPLIERS[ActivityLevel.LOW] == Decimal("0.02")
        assert ACTIVITY_MULTIPLIERS[ActivityLevel.HIGH] == Decimal("0.03")
        assert ACTIVITY_MULTIPLIERS[ActivityLevel.SENIOR] == Decimal("0.0175")

    def test_pounds_input(self):
        """22 lbs is 9.979kg -> 249.47g -> 249g."""
        estimate = estimate_portion(
            Decimal("22"), WeightUnit.LBS, Decimal("3"), ActivityLevel.MODERATE, 2, MeasureUnit.G
        )
        assert estimate.daily_portion == Decimal("249")
        assert estimate.meal_portion == Decimal("125")

    def test_ounces_output(self):
        """250g is 8.8185oz -> 9oz a day, 4.409oz -> 4oz a meal."""
        estimate = estimate_portion(
            Decimal("10"), WeightUnit.KG, Decimal("3"), ActivityLevel.MODERATE, 2, MeasureUnit.OZ
        )
        assert estimate.daily_portion == Decimal("9")
        assert estimate.meal_portion == Decimal("4")

    def test_meal_portion_rounded_independently(self):
        """Per-meal rounding may not add back up to the daily figure."""
        # 10kg puppy: 400g/day over 3 meals = 133.33 -> 133
        estimate = estimate_portion(
            Decimal("10"), WeightUnit.KG, Decimal("0.5"), ActivityLevel.PUPPY, 3, MeasureUnit.G
        )
        assert estimate.daily_portion == Decimal("400")
        assert estimate.meal_portion == Decimal("133")

    def test_rounds_half_up(self):
        """5.125kg at 2% is 102.5g, which rounds up to 103g."""
        estimate = estimate_portion(
            Decimal("5.125"), WeightUnit.KG, Decimal("3"), ActivityLevel.LOW, 1, MeasureUnit.G
        )
        assert estimate.daily_portion == Decimal("103")

    @pytest.mark.parametrize("level", list(ActivityLevel))
    def test_monotonic_in_weight(self, level):
        """Heavier dogs never get smaller portions."""
        previous = Decimal("0")
        for kg in range(1, 80):
            estimate = estimate_portion(Decimal(kg), WeightUnit.KG, Decimal("3"), level, 2)
            assert estimate.daily_portion >= previous
            previous = estimate.daily_portion


class TestActivityGating:
    """Tests for age-based activity level correction."""

    @pytest.mark.parametrize("level", list(ActivityLevel))
    def test_puppy_always_puppy(self, level):
        assert suggest_activity_level(Decimal("0.5"), level) == ActivityLevel.PUPPY

    @pytest.mark.parametrize("level,expected", [
        (ActivityLevel.LOW, ActivityLevel.LOW),
        (ActivityLevel.MODERATE, ActivityLevel.MODERATE),
        (ActivityLevel.HIGH, ActivityLevel.SENIOR),
        (ActivityLevel.PUPPY, ActivityLevel.SENIOR),
        (ActivityLevel.SENIOR, ActivityLevel.SENIOR),
    ])
    def test_senior(self, level, expected):
        assert suggest_activity_level(Decimal("7"), level) == expected

    @pytest.mark.parametrize("level,expected", [
        (ActivityLevel.PUPPY, ActivityLevel.MODERATE),
        (ActivityLevel.SENIOR, ActivityLevel.MODERATE),
        (ActivityLevel.LOW, ActivityLevel.LOW),
        (ActivityLevel.HIGH, ActivityLevel.HIGH),
    ])
    def test_adult(self, level, expected):
        assert suggest_activity_level(Decimal("1"), level) == expected

    def test_accepts_strings(self):
        assert suggest_activity_level(Decimal("4"), "senior") == ActivityLevel.MODERATE

    def test_life_stages(self):
        assert life_stage_for_age(Decimal("0.99")) == LifeStage.PUPPY
        assert life_stage_for_age(Decimal("6.99")) == LifeStage.ADULT
        assert life_stage_for_age(Decimal("7")) == LifeStage.SENIOR
