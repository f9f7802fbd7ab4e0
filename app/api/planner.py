"""
Interactive meal plan editing endpoints.

Each session holds one in-memory plan with undo/redo history. Totals shown
here are for display while editing; saving sends quantities to /mealplans
storage, which prices them again.
"""

from contextlib import contextmanager
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.preferences import get_or_create_preferences
from app.core.auth import AuthUser, optional_auth, owner_id
from app.core.calculations import FoodRef, MealPlan, to_meal_count, to_quantity
from app.core.database import get_db
from app.core.errors import (
    FoodNotFound,
    InvalidMealCount,
    InvalidQuantity,
    InvalidSchedule,
    ItemNotFound,
    NoActivePlan,
    PersistenceError,
)
from app.core.units import MeasureUnit, format_cost, format_quantity
from app.models.models import Dog
from app.schemas.schemas import (
    AddPlanItemRequest,
    NewPlanRequest,
    PlanDetailsUpdate,
    PlanItemView,
    PlannerSessionResponse,
    PlanView,
    UpdatePlanItemRequest,
)
from app.services.plan_editor import PlanEditor
from app.services.plan_store import PlanStore
from app.services.planner_sessions import planner_sessions

router = APIRouter(prefix="/planner", tags=["planner"])


@contextmanager
def planner_errors():
    """Translate planner errors into HTTP responses."""
    try:
        yield
    except (ItemNotFound, FoodNotFound) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except NoActivePlan as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (InvalidQuantity, InvalidMealCount, InvalidSchedule) as e:
        raise HTTPException(status_code=422, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))


def plan_view(plan: MealPlan, currency: str, measure_unit: MeasureUnit = MeasureUnit.G) -> PlanView:
    return PlanView(
        id=plan.id,
        name=plan.name,
        start_date=plan.start_date,
        end_date=plan.end_date,
        duration_days=plan.duration_days,
        meals_per_day=plan.meals_per_day,
        total_slots=plan.total_slots,
        dog_id=plan.dog_id,
        notes=plan.notes,
        total_cost=plan.total_cost,
        total_cost_display=format_cost(plan.total_cost, currency),
        items=[
            PlanItemView(
                id=item.id,
                food_item_id=item.food.id,
                brand=item.food.brand,
                type=item.food.type,
                quantity_per_meal=item.quantity_per_meal,
                number_of_meals=item.number_of_meals,
                total_quantity=item.total_quantity,
                total_quantity_display=format_quantity(item.total_quantity, measure_unit),
                cost_per_unit=item.cost_per_unit,
                cost_per_kg=item.cost_per_kg,
                total_cost=item.total_cost,
            )
            for item in plan.items
        ],
    )


def session_response(
    session_id: str, editor: PlanEditor, db: Session, user: Optional[AuthUser]
) -> PlannerSessionResponse:
    prefs = get_or_create_preferences(db, owner_id(user))
    return PlannerSessionResponse(
        session_id=session_id,
        plan=(
            plan_view(editor.plan, prefs.currency, prefs.measure_unit)
            if editor.plan is not None else None
        ),
        can_undo=editor.history.can_undo,
        can_redo=editor.history.can_redo,
    )


def get_editor(session_id: str, user: Optional[AuthUser] = Depends(optional_auth)) -> PlanEditor:
    editor = planner_sessions.get(session_id, owner_id(user))
    if editor is None:
        raise HTTPException(status_code=404, detail="Planner session not found")
    return editor


@router.post("", response_model=PlannerSessionResponse, status_code=201)
def open_session(
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Open an editing session with no plan loaded."""
    prefs = get_or_create_preferences(db, owner_id(user))
    session_id, editor = planner_sessions.open(
        user_id=owner_id(user),
        default_meals_per_day=prefs.default_meals_per_day,
    )
    return session_response(session_id, editor, db, user)


@router.get("/{session_id}", response_model=PlannerSessionResponse)
def get_session(
    session_id: str,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Current plan and undo/redo availability."""
    return session_response(session_id, editor, db, user)


@router.delete("/{session_id}", status_code=204)
def close_session(session_id: str, user: Optional[AuthUser] = Depends(optional_auth)):
    """Discard a session and its unsaved edits."""
    if not planner_sessions.close(session_id, owner_id(user)):
        raise HTTPException(status_code=404, detail="Planner session not found")
    return None


@router.post("/{session_id}/plan", response_model=PlannerSessionResponse)
def create_new_plan(
    session_id: str,
    request: NewPlanRequest,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Start a new empty plan (7 days and the preferred meals per day by default)."""
    with planner_errors():
        editor.create_new_plan(**request.model_dump(exclude_none=True))
    return session_response(session_id, editor, db, user)


@router.post("/{session_id}/load/{plan_id}", response_model=PlannerSessionResponse)
def load_plan(
    session_id: str,
    plan_id: int,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Load a saved plan, repricing its items at current food costs."""
    store = PlanStore(db, owner_id(user))
    with planner_errors():
        record = store.get_plan(plan_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Meal plan not found")
        foods = store.get_foods(item.food_item_id for item in record.items)
        editor.load_plan(record, [FoodRef.from_record(food) for food in foods.values()])
    return session_response(session_id, editor, db, user)


@router.patch("/{session_id}/plan", response_model=PlannerSessionResponse)
def update_plan_details(
    session_id: str,
    update: PlanDetailsUpdate,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Edit plan details; shortening the schedule clamps item meal counts."""
    with planner_errors():
        editor.update_plan_details(**update.model_dump(exclude_unset=True))
    return session_response(session_id, editor, db, user)


@router.post("/{session_id}/items", response_model=PlannerSessionResponse)
def add_item(
    session_id: str,
    request: AddPlanItemRequest,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """
    Add a food to the plan.

    Without quantity_per_meal, the plan dog's daily portion divided by the
    plan's meals per day is used.
    """
    store = PlanStore(db, owner_id(user))
    with planner_errors():
        if editor.plan is None:
            raise NoActivePlan()
        food = store.get_foods([request.food_item_id]).get(request.food_item_id)
        if food is None:
            raise FoodNotFound(request.food_item_id)

        portion_size = None
        if request.quantity_per_meal is None and editor.plan.dog_id is not None:
            dog = (
                db.query(Dog)
                .filter(Dog.id == editor.plan.dog_id, Dog.user_id == owner_id(user))
                .first()
            )
            portion_size = dog.portion_size if dog else None

        editor.add_item(
            FoodRef.from_record(food),
            quantity_per_meal=request.quantity_per_meal,
            number_of_meals=request.number_of_meals,
            portion_size=portion_size,
        )
    return session_response(session_id, editor, db, user)


@router.patch("/{session_id}/items/{item_id}", response_model=PlannerSessionResponse)
def update_item(
    session_id: str,
    item_id: str,
    request: UpdatePlanItemRequest,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Change an item's quantity per meal and/or meal count (one undo step each)."""
    if request.quantity_per_meal is None and request.number_of_meals is None:
        raise HTTPException(status_code=422, detail="Nothing to update")

    with planner_errors():
        # Validate both values before applying either edit
        if request.quantity_per_meal is not None:
            to_quantity(request.quantity_per_meal)
        if request.number_of_meals is not None:
            to_meal_count(request.number_of_meals)

        if request.quantity_per_meal is not None:
            editor.update_item_quantity(item_id, request.quantity_per_meal)
        if request.number_of_meals is not None:
            editor.update_item_meal_count(item_id, request.number_of_meals)
    return session_response(session_id, editor, db, user)


@router.delete("/{session_id}/items/{item_id}", response_model=PlannerSessionResponse)
def remove_item(
    session_id: str,
    item_id: str,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Remove an item from the plan."""
    with planner_errors():
        editor.remove_item(item_id)
    return session_response(session_id, editor, db, user)


@router.post("/{session_id}/undo", response_model=PlannerSessionResponse)
def undo(
    session_id: str,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    editor.undo()
    return session_response(session_id, editor, db, user)


@router.post("/{session_id}/redo", response_model=PlannerSessionResponse)
def redo(
    session_id: str,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    editor.redo()
    return session_response(session_id, editor, db, user)


@router.post("/{session_id}/clear-history", response_model=PlannerSessionResponse)
def clear_history(
    session_id: str,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    editor.clear_history()
    return session_response(session_id, editor, db, user)


@router.post("/{session_id}/save", response_model=PlannerSessionResponse)
def save_plan(
    session_id: str,
    editor: PlanEditor = Depends(get_editor),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Save the current plan; a failed save leaves the session untouched."""
    store = PlanStore(db, owner_id(user))
    with planner_errors():
        editor.save(store)
    return session_response(session_id, editor, db, user)
