"""Saved meal plan API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.dogs import get_owned_dog
from app.core.auth import AuthUser, optional_auth, owner_id
from app.core.database import get_db
from app.core.errors import FoodNotFound, PersistenceError
from app.schemas.schemas import MealPlanCreate, MealPlanResponse, MealPlanUpdate
from app.services.plan_store import PlanStore

router = APIRouter(prefix="/mealplans", tags=["meal plans"])


def get_plan_store(
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
) -> PlanStore:
    return PlanStore(db, owner_id(user))


def storage_error(e: PersistenceError) -> HTTPException:
    return HTTPException(status_code=503, detail=str(e))


@router.get("", response_model=list[MealPlanResponse])
def list_meal_plans(store: PlanStore = Depends(get_plan_store)):
    """List saved meal plans, newest first."""
    try:
        return store.list_plans()
    except PersistenceError as e:
        raise storage_error(e)


@router.get("/{plan_id}", response_model=MealPlanResponse)
def get_meal_plan(plan_id: int, store: PlanStore = Depends(get_plan_store)):
    """Get a saved meal plan with its items and foods."""
    try:
        plan = store.get_plan(plan_id)
    except PersistenceError as e:
        raise storage_error(e)
    if not plan:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    return plan


@router.post("", response_model=MealPlanResponse, status_code=201)
def create_meal_plan(
    data: MealPlanCreate,
    store: PlanStore = Depends(get_plan_store),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """
    Save a new meal plan.

    The total cost is computed here from current food prices and the
    submitted total quantities; any client-side total is ignored.
    """
    if data.dog_id is not None:
        get_owned_dog(store.db, data.dog_id, user)
    try:
        return store.create_plan(data)
    except FoodNotFound as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise storage_error(e)


@router.put("/{plan_id}", response_model=MealPlanResponse)
def update_meal_plan(
    plan_id: int,
    data: MealPlanUpdate,
    store: PlanStore = Depends(get_plan_store),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """
    Update a saved meal plan.

    When items are sent they replace all existing items and the total is
    recomputed; otherwise only plan details change.
    """
    if data.dog_id is not None:
        get_owned_dog(store.db, data.dog_id, user)
    try:
        plan = store.update_plan(plan_id, data)
    except FoodNotFound as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError as e:
        raise storage_error(e)
    if not plan:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    return plan


@router.delete("/{plan_id}", status_code=204)
def delete_meal_plan(plan_id: int, store: PlanStore = Depends(get_plan_store)):
    """Delete a meal plan and its items."""
    try:
        deleted = store.delete_plan(plan_id)
    except PersistenceError as e:
        raise storage_error(e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Meal plan not found")
    return None
