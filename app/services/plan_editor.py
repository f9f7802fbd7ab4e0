"""
In-memory meal plan editing with undo/redo.

A PlanEditor owns one current MealPlan and its History. Every edit runs on a
copy of the plan; the copy only replaces the current plan when the edit
succeeds, and the replaced plan becomes the undo snapshot. Plans held in
history are never edited afterwards; the only change they see is a save
stamping its persisted id onto every snapshot of the same plan.
"""

import copy
import logging
import math
from collections import deque
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from app.core import calculations
from app.core.calculations import FoodRef, MealPlan, PlanItem
from app.core.config import settings
from app.core.errors import FoodNotFound, InvalidQuantity, NoActivePlan
from app.schemas.schemas import MealPlanCreate, MealPlanItemInput

logger = logging.getLogger(__name__)

DETAIL_FIELDS = ("name", "start_date", "end_date", "dog_id", "notes")

# Detail fields that an explicit None clears; a None name is ignored
CLEARABLE_FIELDS = ("start_date", "end_date", "dog_id", "notes")


class History:
    """Undo (past) and redo (future) stacks of whole-plan snapshots.

    With a limit, each stack keeps only the most recent `limit` snapshots.
    """

    def __init__(self, limit: Optional[int] = None):
        self.limit = limit
        self.past: deque[MealPlan] = deque(maxlen=limit)
        self.future: deque[MealPlan] = deque(maxlen=limit)

    @property
    def can_undo(self) -> bool:
        return len(self.past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self.future) > 0

    def checkpoint(self, plan: MealPlan) -> None:
        self.past.append(plan)
        self.future.clear()

    def clear(self) -> None:
        self.past.clear()
        self.future.clear()


class PlanEditor:
    """Applies edits to the current plan and tracks undo/redo history."""

    def __init__(
        self,
        default_meals_per_day: Optional[int] = None,
        default_duration_days: Optional[int] = None,
        history_limit: Optional[int] = None,
    ):
        self.default_meals_per_day = default_meals_per_day or settings.DEFAULT_MEALS_PER_DAY
        self.default_duration_days = default_duration_days or settings.DEFAULT_DURATION_DAYS
        self.history = History(limit=history_limit)
        self.plan: Optional[MealPlan] = None

    def _require_plan(self) -> MealPlan:
        if self.plan is None:
            raise NoActivePlan()
        return self.plan

    def _replace_plan(self, plan: MealPlan) -> None:
        if self.plan is not None:
            self.history.checkpoint(self.plan)
        else:
            self.history.future.clear()
        self.plan = plan

    def create_new_plan(self, **fields) -> MealPlan:
        """Start an empty plan; the previous plan (if any) becomes undoable."""
        plan = MealPlan(
            name=fields.get("name") or "New Meal Plan",
            duration_days=fields.get("duration_days") or self.default_duration_days,
            meals_per_day=fields.get("meals_per_day") or self.default_meals_per_day,
            start_date=fields.get("start_date"),
            end_date=fields.get("end_date"),
            dog_id=fields.get("dog_id"),
            notes=fields.get("notes") or "",
        )
        calculations.update_plan_schedule(plan, plan.duration_days, plan.meals_per_day)
        self._replace_plan(plan)
        return plan

    def load_plan(self, record, foods: Iterable[FoodRef]) -> MealPlan:
        """
        Make a persisted plan current.

        Item totals are recomputed from the foods' current cost and weight,
        not read back from storage. A missing meal count is recovered as
        ceil(total_quantity ÷ quantity_per_meal).

        Args:
            record: Persisted plan (ORM row or MealPlanResponse)
            foods: Foods available to the plan

        Raises:
            FoodNotFound: if an item's food is not in foods
        """
        foods_by_id = {food.id: food for food in foods}
        plan = MealPlan(
            id=record.id,
            name=record.name,
            start_date=record.start_date,
            end_date=record.end_date,
            duration_days=record.duration_days,
            meals_per_day=record.meals_per_day,
            dog_id=record.dog_id,
            notes=record.notes or "",
        )

        for stored in record.items:
            food = foods_by_id.get(stored.food_item_id)
            if food is None:
                raise FoodNotFound(stored.food_item_id)

            quantity = Decimal(stored.quantity_per_meal)
            meals = stored.number_of_meals or math.ceil(Decimal(stored.total_quantity) / quantity)
            item = PlanItem(
                food=food,
                quantity_per_meal=quantity,
                number_of_meals=calculations.clamp_meal_count(meals, plan.total_slots),
            )
            item.recalculate()
            plan.items.append(item)

        calculations.recalculate_total_cost(plan)
        self._replace_plan(plan)
        logger.info("Loaded meal plan %s with %d items", plan.id, len(plan.items))
        return plan

    def apply_edit(self, operation: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Run operation(plan, *args, **kwargs) as one undoable edit.

        A failing operation leaves both the plan and the history unchanged.

        Raises:
            NoActivePlan: if no plan is loaded
        """
        current = self._require_plan()
        working = copy.deepcopy(current)
        result = operation(working, *args, **kwargs)
        self.history.checkpoint(current)
        self.plan = working
        return result

    def add_item(
        self,
        food: FoodRef,
        quantity_per_meal=None,
        number_of_meals: Optional[int] = None,
        portion_size: Optional[Decimal] = None,
    ) -> PlanItem:
        """Add a food; without a quantity, seed it from a dog's daily portion."""

        def add(plan: MealPlan) -> PlanItem:
            quantity = quantity_per_meal
            if quantity is None:
                if portion_size is None:
                    raise InvalidQuantity("Quantity per meal is required")
                quantity = calculations.default_quantity_per_meal(portion_size, plan.meals_per_day)
            return calculations.add_item(plan, food, quantity, number_of_meals)

        return self.apply_edit(add)

    def update_item_quantity(self, item_id: str, quantity_per_meal) -> PlanItem:
        return self.apply_edit(calculations.update_item_quantity, item_id, quantity_per_meal)

    def update_item_meal_count(self, item_id: str, number_of_meals: int) -> PlanItem:
        return self.apply_edit(calculations.update_item_meal_count, item_id, number_of_meals)

    def remove_item(self, item_id: str) -> PlanItem:
        return self.apply_edit(calculations.remove_item, item_id)

    def update_plan_schedule(
        self,
        duration_days: Optional[int] = None,
        meals_per_day: Optional[int] = None,
    ) -> MealPlan:
        return self.apply_edit(calculations.update_plan_schedule, duration_days, meals_per_day)

    def update_plan_details(self, **updates) -> MealPlan:
        """Change descriptive fields and/or the schedule in a single edit."""

        def update(plan: MealPlan) -> MealPlan:
            for name in DETAIL_FIELDS:
                if name not in updates:
                    continue
                value = updates[name]
                if value is None:
                    if name not in CLEARABLE_FIELDS:
                        continue
                    if name == "notes":
                        value = ""
                setattr(plan, name, value)
            if updates.get("duration_days") is not None or updates.get("meals_per_day") is not None:
                calculations.update_plan_schedule(
                    plan, updates.get("duration_days"), updates.get("meals_per_day")
                )
            return plan

        return self.apply_edit(update)

    def undo(self) -> Optional[MealPlan]:
        if not self.history.can_undo:
            return self.plan
        previous = self.history.past.pop()
        if self.plan is not None:
            self.history.future.append(self.plan)
        self.plan = previous
        return self.plan

    def redo(self) -> Optional[MealPlan]:
        if not self.history.can_redo:
            return self.plan
        following = self.history.future.pop()
        if self.plan is not None:
            self.history.past.append(self.plan)
        self.plan = following
        return self.plan

    def clear_history(self) -> None:
        self.history.clear()

    def to_payload(self) -> MealPlanCreate:
        """The current plan in the shape the storage layer accepts."""
        plan = self._require_plan()
        return MealPlanCreate(
            name=plan.name,
            start_date=plan.start_date,
            end_date=plan.end_date,
            duration_days=plan.duration_days,
            meals_per_day=plan.meals_per_day,
            dog_id=plan.dog_id,
            notes=plan.notes,
            items=[
                MealPlanItemInput(
                    food_item_id=item.food.id,
                    quantity_per_meal=item.quantity_per_meal,
                    total_quantity=item.total_quantity,
                    number_of_meals=item.number_of_meals,
                )
                for item in plan.items
            ],
        )

    def save(self, store) -> Any:
        """
        Persist the current plan through store.save(payload, plan_id).

        On PersistenceError the in-memory plan is left as it was. On success
        the plan and its undo/redo snapshots take the persisted id, so a
        later save updates the record even after undoing past this one.
        """
        plan = self._require_plan()
        saved = store.save(self.to_payload(), plan.id)
        for snapshot in (plan, *self.history.past, *self.history.future):
            if snapshot.draft_id == plan.draft_id:
                snapshot.id = saved.id
        logger.info("Saved meal plan %s", saved.id)
        return saved
