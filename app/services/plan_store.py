"""
Meal plan storage backed by SQLAlchemy.

The store never trusts a client's cost figures: every create/update prices the
submitted item quantities against the current food costs and weights.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.core.calculations import ZERO, FoodRef
from app.core.errors import FoodNotFound, PersistenceError
from app.models.models import FoodItem, MealPlan, MealPlanItem
from app.schemas.schemas import MealPlanCreate, MealPlanItemInput, MealPlanUpdate

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

PLAN_DETAIL_FIELDS = (
    "name",
    "start_date",
    "end_date",
    "duration_days",
    "meals_per_day",
    "dog_id",
    "notes",
)

# Detail columns that are NOT NULL; an explicit null leaves them unchanged
REQUIRED_FIELDS = ("name", "duration_days", "meals_per_day")


def price_items(items: Iterable[MealPlanItemInput], foods: dict[int, FoodItem]) -> Decimal:
    """
    Total cost of submitted items at current food prices.

    Formula: Σ (food.cost ÷ food.weight) × item.total_quantity

    Raises:
        FoodNotFound: if an item references a food not in foods
    """
    total = ZERO
    for item in items:
        food = foods.get(item.food_item_id)
        if food is None:
            raise FoodNotFound(item.food_item_id)
        total += FoodRef.from_record(food).cost_per_unit * Decimal(item.total_quantity)
    return total


class PlanStore:
    """Persistence for meal plans owned by a single user (or no user)."""

    def __init__(self, db: Session, user_id: Optional[str] = None):
        self.db = db
        self.user_id = user_id

    def _plans(self):
        return (
            self.db.query(MealPlan)
            .options(selectinload(MealPlan.items).selectinload(MealPlanItem.food_item))
            .filter(MealPlan.user_id == self.user_id)
        )

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Failed to %s meal plan", action)
            raise PersistenceError(f"Failed to {action} meal plan") from e

    def list_plans(self) -> list[MealPlan]:
        """All plans for the owner, newest first."""
        try:
            return self._plans().order_by(MealPlan.created_at.desc(), MealPlan.id.desc()).all()
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch meal plans")
            raise PersistenceError("Failed to fetch meal plans") from e

    def get_plan(self, plan_id: int) -> Optional[MealPlan]:
        try:
            return self._plans().filter(MealPlan.id == plan_id).first()
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch meal plan %s", plan_id)
            raise PersistenceError("Failed to fetch meal plan") from e

    def get_foods(self, food_ids: Iterable[int]) -> dict[int, FoodItem]:
        """Foods visible to the owner, keyed by id."""
        ids = set(food_ids)
        if not ids:
            return {}
        foods = (
            self.db.query(FoodItem)
            .filter(FoodItem.id.in_(ids), FoodItem.user_id == self.user_id)
            .all()
        )
        return {food.id: food for food in foods}

    def _build_items(self, items: list[MealPlanItemInput]) -> list[MealPlanItem]:
        return [
            MealPlanItem(
                food_item_id=item.food_item_id,
                quantity_per_meal=item.quantity_per_meal,
                total_quantity=item.total_quantity,
                number_of_meals=item.number_of_meals,
            )
            for item in items
        ]

    def _priced_total(self, items: list[MealPlanItemInput]) -> Decimal:
        foods = self.get_foods(item.food_item_id for item in items)
        return price_items(items, foods).quantize(CENTS, rounding=ROUND_HALF_UP)

    def create_plan(self, data: MealPlanCreate) -> MealPlan:
        """Insert a plan and its items with a server-computed total."""
        total_cost = self._priced_total(data.items)

        plan = MealPlan(
            user_id=self.user_id,
            total_cost=total_cost,
            items=self._build_items(data.items),
            **{name: getattr(data, name) for name in PLAN_DETAIL_FIELDS},
        )
        self.db.add(plan)
        self._commit("create")
        self.db.refresh(plan)
        logger.info("Created meal plan %s with %d items", plan.id, len(plan.items))
        return plan

    def update_plan(self, plan_id: int, data: MealPlanUpdate) -> Optional[MealPlan]:
        """
        Update plan details, and replace all items when items are supplied.

        Returns None when the plan does not exist for this owner.
        """
        plan = self.get_plan(plan_id)
        if plan is None:
            return None

        if data.items is not None:
            plan.total_cost = self._priced_total(data.items)
            plan.items = self._build_items(data.items)

        for field, value in data.model_dump(exclude_unset=True, exclude={"items"}).items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(plan, field, value)

        self._commit("update")
        self.db.refresh(plan)
        logger.info("Updated meal plan %s", plan.id)
        return plan

    def delete_plan(self, plan_id: int) -> bool:
        plan = self.get_plan(plan_id)
        if plan is None:
            return False
        self.db.delete(plan)
        self._commit("delete")
        logger.info("Deleted meal plan %s", plan_id)
        return True

    def save(self, data: MealPlanCreate, plan_id: Optional[int] = None) -> MealPlan:
        """Create or replace a plan from an editor payload."""
        if plan_id is None:
            return self.create_plan(data)

        saved = self.update_plan(plan_id, MealPlanUpdate(**data.model_dump()))
        if saved is None:
            raise PersistenceError(f"Meal plan {plan_id} not found")
        return saved
