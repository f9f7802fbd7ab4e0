"""
Core math engine for raw meal plan quantities and costs.

Per item:
    total_quantity = quantity_per_meal × number_of_meals
    cost_per_unit  = package cost ÷ package weight   (food's own unit)
    total_cost     = cost_per_unit × total_quantity
Per plan:
    total_cost     = Σ item.total_cost

Everything is Decimal and nothing is rounded along the way.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from app.core.errors import (
    InvalidMealCount,
    InvalidQuantity,
    InvalidSchedule,
    ItemNotFound,
)

Number = Union[Decimal, int, str, float]

ZERO = Decimal("0")

# Quantities are held at the scale meal_plan_items stores them with
QUANTITY_SCALE = Decimal("0.0001")


@dataclass(frozen=True)
class FoodRef:
    """Read-only view of an inventory food item."""
    id: int
    weight: Decimal
    cost: Decimal
    brand: str = ""
    type: str = ""
    protein: Optional[Decimal] = None
    fat: Optional[Decimal] = None
    fiber: Optional[Decimal] = None

    def __post_init__(self):
        if Decimal(self.weight) <= 0:
            raise ValueError("Package weight must be positive")

    @property
    def cost_per_unit(self) -> Decimal:
        return Decimal(self.cost) / Decimal(self.weight)

    @classmethod
    def from_record(cls, record) -> "FoodRef":
        """Build from an ORM row or a response schema."""
        return cls(
            id=record.id,
            weight=Decimal(record.weight),
            cost=Decimal(record.cost),
            brand=record.brand,
            type=record.type,
            protein=_optional_decimal(record.protein),
            fat=_optional_decimal(record.fat),
            fiber=_optional_decimal(record.fiber),
        )


@dataclass
class PlanItem:
    """A quantity of one food allocated across some of a plan's meals."""
    food: FoodRef
    quantity_per_meal: Decimal
    number_of_meals: int
    total_quantity: Decimal = ZERO
    total_cost: Decimal = ZERO
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def cost_per_unit(self) -> Decimal:
        return self.food.cost_per_unit

    @property
    def cost_per_kg(self) -> Decimal:
        """Display-only price per 1000 package units."""
        return self.cost_per_unit * 1000

    def recalculate(self) -> None:
        self.total_quantity = self.quantity_per_meal * self.number_of_meals
        self.total_cost = self.cost_per_unit * self.total_quantity


@dataclass
class MealPlan:
    """A multi-day feeding schedule and the foods allocated to it."""
    name: str
    duration_days: int
    meals_per_day: int
    id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    dog_id: Optional[int] = None
    notes: str = ""
    items: list[PlanItem] = field(default_factory=list)
    total_cost: Decimal = ZERO
    # Shared by every snapshot of the same plan, kept through copies
    draft_id: str = field(default_factory=lambda: uuid.uuid4().hex, compare=False)

    @property
    def total_slots(self) -> int:
        """Meal opportunities across the whole plan."""
        return self.duration_days * self.meals_per_day


def _optional_decimal(value) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def to_quantity(value: Number) -> Decimal:
    """
    Coerce a quantity to Decimal.

    Floats go through str() so 0.1 stays 0.1. The result is rounded half-up
    to QUANTITY_SCALE so a saved plan loads back with the same totals.

    Raises:
        InvalidQuantity: if the value is not numeric or not positive
    """
    if isinstance(value, bool):
        raise InvalidQuantity(f"Quantity must be a number, got {value!r}")
    try:
        quantity = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidQuantity(f"Quantity must be a number, got {value!r}")
    if not quantity.is_finite():
        raise InvalidQuantity(f"Quantity must be a number, got {value!r}")
    try:
        quantity = quantity.quantize(QUANTITY_SCALE, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidQuantity(f"Quantity is too large, got {value!r}")
    if quantity <= 0:
        raise InvalidQuantity(f"Quantity per meal must be positive, got {value}")
    return quantity


def to_meal_count(value: int) -> int:
    """
    Validate a requested meal count before clamping.

    Raises:
        InvalidMealCount: if the value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidMealCount(f"Number of meals must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidMealCount(f"Number of meals must be positive, got {value}")
    return value


def clamp_meal_count(requested: int, total_slots: int) -> int:
    return min(requested, total_slots)


def default_quantity_per_meal(portion_size: Number, meals_per_day: int) -> Decimal:
    """
    Seed a per-meal quantity from a dog's daily portion.

    Formula: quantity_per_meal = portion_size ÷ meals_per_day
    """
    return to_quantity(to_quantity(portion_size) / Decimal(meals_per_day))


def find_item(plan: MealPlan, item_id: str) -> PlanItem:
    for item in plan.items:
        if item.id == item_id:
            return item
    raise ItemNotFound(item_id)


def recalculate_total_cost(plan: MealPlan) -> Decimal:
    """Set and return the plan total as the exact sum of item totals."""
    plan.total_cost = sum((item.total_cost for item in plan.items), ZERO)
    return plan.total_cost


def add_item(
    plan: MealPlan,
    food: FoodRef,
    quantity_per_meal: Number,
    number_of_meals: Optional[int] = None,
) -> PlanItem:
    """
    Allocate a food to the plan.

    Args:
        plan: Plan to add to
        food: Food being allocated (not modified)
        quantity_per_meal: Amount per meal in the food's unit
        number_of_meals: Meals this food appears in; defaults to every slot
            and is clamped to the plan's slot count

    Returns:
        The new PlanItem
    """
    quantity = to_quantity(quantity_per_meal)
    if number_of_meals is None:
        meals = plan.total_slots
    else:
        meals = clamp_meal_count(to_meal_count(number_of_meals), plan.total_slots)

    item = PlanItem(food=food, quantity_per_meal=quantity, number_of_meals=meals)
    item.recalculate()
    plan.items.append(item)
    recalculate_total_cost(plan)
    return item


def update_item_quantity(plan: MealPlan, item_id: str, quantity_per_meal: Number) -> PlanItem:
    """Change an item's per-meal quantity, keeping its meal count."""
    quantity = to_quantity(quantity_per_meal)
    item = find_item(plan, item_id)

    item.quantity_per_meal = quantity
    item.recalculate()
    recalculate_total_cost(plan)
    return item


def update_item_meal_count(plan: MealPlan, item_id: str, number_of_meals: int) -> PlanItem:
    """Change how many meals an item appears in, clamped to the plan's slots."""
    requested = to_meal_count(number_of_meals)
    item = find_item(plan, item_id)

    item.number_of_meals = clamp_meal_count(requested, plan.total_slots)
    item.recalculate()
    recalculate_total_cost(plan)
    return item


def remove_item(plan: MealPlan, item_id: str) -> PlanItem:
    item = find_item(plan, item_id)
    plan.items.remove(item)
    recalculate_total_cost(plan)
    return item


def update_plan_schedule(
    plan: MealPlan,
    duration_days: Optional[int] = None,
    meals_per_day: Optional[int] = None,
) -> MealPlan:
    """
    Change the plan's length and/or meals per day.

    Items that now exceed the slot count are clamped down to it; quantity per
    meal is kept. Every item and the plan total are recomputed.
    """
    for value in (duration_days, meals_per_day):
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidSchedule(f"Schedule values must be positive integers, got {value!r}")

    if duration_days is not None:
        plan.duration_days = duration_days
    if meals_per_day is not None:
        plan.meals_per_day = meals_per_day

    slots = plan.total_slots
    for item in plan.items:
        if item.number_of_meals > slots:
            item.number_of_meals = slots
        item.recalculate()

    recalculate_total_cost(plan)
    return plan
