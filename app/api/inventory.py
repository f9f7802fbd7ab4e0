"""Food inventory API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.auth import AuthUser, optional_auth, owner_id
from app.core.database import get_db
from app.models.models import FoodItem, MealPlanItem
from app.schemas.schemas import FoodItemCreate, FoodItemResponse, FoodItemUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["inventory"])

# Optional fields (description, macros) may be cleared with null
REQUIRED_FIELDS = ("brand", "type", "weight", "cost", "is_active")


def get_owned_food(db: Session, food_id: int, user: Optional[AuthUser]) -> FoodItem:
    food = (
        db.query(FoodItem)
        .filter(FoodItem.id == food_id, FoodItem.user_id == owner_id(user))
        .first()
    )
    if not food:
        raise HTTPException(status_code=404, detail="Food item not found")
    return food


@router.get("", response_model=list[FoodItemResponse])
def list_food_items(
    active: Optional[bool] = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """List inventory items, newest first."""
    query = db.query(FoodItem).filter(FoodItem.user_id == owner_id(user))
    if active is not None:
        query = query.filter(FoodItem.is_active == active)
    items = query.order_by(FoodItem.created_at.desc(), FoodItem.id.desc()).all()
    logger.debug("Found %d inventory items (active=%s)", len(items), active)
    return items


@router.post("", response_model=FoodItemResponse, status_code=201)
def create_food_item(
    food: FoodItemCreate,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Add a food to the inventory."""
    data = food.model_dump()
    # Empty strings from forms are stored as NULL
    for field in ("description", "image_url"):
        if data[field] == "":
            data[field] = None

    db_food = FoodItem(user_id=owner_id(user), **data)
    db.add(db_food)
    db.commit()
    db.refresh(db_food)
    return db_food


@router.get("/{food_id}", response_model=FoodItemResponse)
def get_food_item(
    food_id: int,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Get a single inventory item."""
    return get_owned_food(db, food_id, user)


@router.put("/{food_id}", response_model=FoodItemResponse)
def update_food_item(
    food_id: int,
    food_update: FoodItemUpdate,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """
    Update an inventory item.

    Price changes apply to every plan that uses the food the next time it is
    loaded or saved.
    """
    food = get_owned_food(db, food_id, user)

    for field, value in food_update.model_dump(exclude_unset=True).items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(food, field, value)

    db.commit()
    db.refresh(food)
    return food


@router.delete("/{food_id}", status_code=204)
def delete_food_item(
    food_id: int,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Delete an inventory item that no meal plan uses."""
    food = get_owned_food(db, food_id, user)

    in_use = db.query(MealPlanItem).filter(MealPlanItem.food_item_id == food.id).first()
    if in_use:
        raise HTTPException(
            status_code=409,
            detail="Food item is used by a meal plan; mark it inactive instead",
        )

    db.delete(food)
    db.commit()
    return None
