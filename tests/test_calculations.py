"""Tests for the meal plan quantity and cost engine."""

from decimal import Decimal

import pytest

from app.core.calculations import (
    FoodRef,
    MealPlan,
    add_item,
    default_quantity_per_meal,
    recalculate_total_cost,
    remove_item,
    update_item_meal_count,
    update_item_quantity,
    update_plan_schedule,
)
from app.core.errors import InvalidMealCount, InvalidQuantity, InvalidSchedule, ItemNotFound


@pytest.fixture
def chicken():
    return FoodRef(id=1, brand="Raw Paws", type="Chicken", weight=Decimal("2000"), cost=Decimal("20.00"))


@pytest.fixture
def tripe():
    return FoodRef(id=2, brand="Raw Paws", type="Tripe", weight=Decimal("1000"), cost=Decimal("7.50"))


@pytest.fixture
def plan():
    """A week of two meals a day (14 slots)."""
    return MealPlan(name="Week 1", duration_days=7, meals_per_day=2)


def assert_consistent(plan):
    """Sum and clamp invariants that must hold after every edit."""
    assert plan.total_cost == sum((i.total_cost for i in plan.items), Decimal("0"))
    for item in plan.items:
        assert item.number_of_meals <= plan.total_slots
        assert item.total_quantity == item.quantity_per_meal * item.number_of_meals
        assert item.total_cost == item.food.cost / item.food.weight * item.total_quantity


class TestFoodRef:
    """Tests for the food reference."""

    def test_cost_per_unit(self, chicken):
        """Package cost divided by package weight."""
        assert chicken.cost_per_unit == Decimal("0.01")

    def test_zero_weight_rejected(self):
        """A zero package weight can't be used as a divisor."""
        with pytest.raises(ValueError):
            FoodRef(id=1, weight=Decimal("0"), cost=Decimal("5"))


class TestAddItem:
    """Tests for adding foods to a plan."""

    def test_scenario_totals(self, plan, chicken):
        """200 per meal over 14 meals of a 2000g/20.00 food."""
        item = add_item(plan, chicken, Decimal("200"), 14)
        assert item.total_quantity == Decimal("2800")
        assert item.cost_per_unit == Decimal("0.01")
        assert item.total_cost == Decimal("28.00")
        assert plan.total_cost == Decimal("28.00")

    def test_defaults_to_every_slot(self, plan, chicken):
        """Omitting the meal count uses the whole schedule."""
        item = add_item(plan, chicken, 100)
        assert item.number_of_meals == 14

    def test_meal_count_clamped(self, plan, chicken):
        """Requests beyond the slot count are clamped, not rejected."""
        item = add_item(plan, chicken, 100, 50)
        assert item.number_of_meals == 14

    def test_food_not_modified(self, plan, chicken):
        """The food reference is shared, not copied or changed."""
        item = add_item(plan, chicken, 100)
        assert item.food is chicken
        assert chicken.cost == Decimal("20.00")

    def test_quantity_rounded_to_four_places(self, plan, chicken):
        """Quantities keep only the places the database stores."""
        item = add_item(plan, chicken, "100.12345", 2)
        assert item.quantity_per_meal == Decimal("100.1235")
        assert item.total_quantity == Decimal("200.2470")

    def test_quantity_rounding_to_zero_rejected(self, plan, chicken):
        with pytest.raises(InvalidQuantity):
            add_item(plan, chicken, "0.00001")

    def test_accepts_strings_and_floats(self, plan, chicken):
        """Quantities are coerced to exact decimals."""
        assert add_item(plan, chicken, "150.5", 2).quantity_per_meal == Decimal("150.5")
        assert add_item(plan, chicken, 0.1, 2).quantity_per_meal == Decimal("0.1")

    @pytest.mark.parametrize("quantity", [0, -5, "abc", None, Decimal("NaN")])
    def test_invalid_quantity(self, plan, chicken, quantity):
        """Zero, negative and non-numeric quantities are rejected."""
        with pytest.raises(InvalidQuantity):
            add_item(plan, chicken, quantity)
        assert plan.items == []

    @pytest.mark.parametrize("meals", [0, -1, 2.5])
    def test_invalid_meal_count(self, plan, chicken, meals):
        """Non-positive or fractional meal counts are rejected before clamping."""
        with pytest.raises(InvalidMealCount):
            add_item(plan, chicken, 100, meals)

    def test_multiple_items(self, plan, chicken, tripe):
        """Plan total is the sum of item totals."""
        add_item(plan, chicken, 200, 14)
        add_item(plan, tripe, 100, 7)
        # 28.00 + 0.0075 * 700
        assert plan.total_cost == Decimal("33.25")
        assert_consistent(plan)


class TestUpdateItems:
    """Tests for editing existing plan items."""

    def test_update_quantity_keeps_meal_count(self, plan, chicken):
        item = add_item(plan, chicken, 200, 10)
        update_item_quantity(plan, item.id, 300)
        assert item.number_of_meals == 10
        assert item.total_quantity == Decimal("3000")
        assert plan.total_cost == Decimal("30.00")

    def test_update_quantity_invalid(self, plan, chicken):
        item = add_item(plan, chicken, 200, 10)
        with pytest.raises(InvalidQuantity):
            update_item_quantity(plan, item.id, 0)
        assert item.quantity_per_meal == Decimal("200")

    def test_update_quantity_missing_item(self, plan):
        with pytest.raises(ItemNotFound):
            update_item_quantity(plan, "missing", 10)

    def test_update_meal_count(self, plan, chicken):
        item = add_item(plan, chicken, 200, 14)
        update_item_meal_count(plan, item.id, 4)
        assert item.total_quantity == Decimal("800")
        assert plan.total_cost == Decimal("8.00")

    def test_update_meal_count_clamped(self, plan, chicken):
        item = add_item(plan, chicken, 200, 2)
        update_item_meal_count(plan, item.id, 99)
        assert item.number_of_meals == 14
        assert_consistent(plan)

    def test_update_meal_count_invalid(self, plan, chicken):
        item = add_item(plan, chicken, 200, 2)
        with pytest.raises(InvalidMealCount):
            update_item_meal_count(plan, item.id, 0)

    def test_update_meal_count_missing_item(self, plan):
        with pytest.raises(ItemNotFound):
            update_item_meal_count(plan, "missing", 3)


class TestRemoveItem:
    """Tests for removing plan items."""

    def test_remove_only_item_zeroes_total(self, plan, chicken):
        """Total is decimal zero, not None."""
        item = add_item(plan, chicken, 200, 14)
        remove_item(plan, item.id)
        assert plan.items == []
        assert plan.total_cost == Decimal("0")
        assert isinstance(plan.total_cost, Decimal)

    def test_remove_one_of_two(self, plan, chicken, tripe):
        first = add_item(plan, chicken, 200, 14)
        add_item(plan, tripe, 100, 10)
        remove_item(plan, first.id)
        assert plan.total_cost == Decimal("7.50")

    def test_remove_missing(self, plan):
        with pytest.raises(ItemNotFound):
            remove_item(plan, "missing")


class TestUpdatePlanSchedule:
    """Tests for changing duration and meals per day."""

    def test_shrinking_clamps_items(self, plan, chicken):
        """7 days x 2 meals down to 5 days clamps 14 meals to 10."""
        item = add_item(plan, chicken, 200, 14)
        update_plan_schedule(plan, duration_days=5)
        assert plan.total_slots == 10
        assert item.number_of_meals == 10
        assert item.total_quantity == Decimal("2000")
        assert item.total_cost == Decimal("20.00")
        assert plan.total_cost == Decimal("20.00")

    def test_shrinking_leaves_small_items(self, plan, chicken, tripe):
        big = add_item(plan, chicken, 200, 14)
        small = add_item(plan, tripe, 100, 3)
        update_plan_schedule(plan, meals_per_day=1)
        assert big.number_of_meals == 7
        assert small.number_of_meals == 3
        assert big.quantity_per_meal == Decimal("200")
        assert_consistent(plan)

    def test_growing_keeps_meal_counts(self, plan, chicken):
        item = add_item(plan, chicken, 200, 14)
        update_plan_schedule(plan, duration_days=14)
        assert plan.total_slots == 28
        assert item.number_of_meals == 14

    @pytest.mark.parametrize("days,meals", [(0, None), (None, -2), (True, None)])
    def test_invalid_schedule(self, plan, days, meals):
        with pytest.raises(InvalidSchedule):
            update_plan_schedule(plan, days, meals)
        assert plan.total_slots == 14


class TestRecalculateTotalCost:
    """Tests for the plan total."""

    def test_idempotent(self, plan, chicken, tripe):
        add_item(plan, chicken, Decimal("133.33"), 13)
        add_item(plan, tripe, Decimal("77.7"), 9)
        first = recalculate_total_cost(plan)
        second = recalculate_total_cost(plan)
        assert first == second == plan.total_cost

    def test_empty_plan(self, plan):
        assert recalculate_total_cost(plan) == Decimal("0")

    def test_no_float_drift(self, plan):
        """Repeated small costs add up exactly."""
        food = FoodRef(id=3, weight=Decimal("3"), cost=Decimal("0.30"))
        for _ in range(10):
            add_item(plan, food, 1, 1)
        assert plan.total_cost == Decimal("1.00")


class TestDefaultQuantity:
    """Tests for seeding a quantity from a dog's daily portion."""

    def test_split_across_meals(self):
        assert default_quantity_per_meal(Decimal("250"), 2) == Decimal("125")

    def test_repeating_split_held_at_storage_scale(self):
        assert default_quantity_per_meal(Decimal("250"), 3) == Decimal("83.3333")

    def test_invalid_portion(self):
        with pytest.raises(InvalidQuantity):
            default_quantity_per_meal(0, 2)
