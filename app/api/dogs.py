"""Dog API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.preferences import get_or_create_preferences
from app.core.auth import AuthUser, optional_auth, owner_id
from app.core.database import get_db
from app.core.portions import estimate_portion, suggest_activity_level
from app.core.units import WeightUnit, convert_weight, format_quantity, format_weight
from app.models.models import Dog
from app.schemas.schemas import (
    DogCreate,
    DogResponse,
    DogUpdate,
    PortionEstimateRequest,
    PortionEstimateResponse,
)

router = APIRouter(prefix="/dog", tags=["dogs"])

PORTION_FIELDS = ("weight", "age", "activity_level")


def get_owned_dog(db: Session, dog_id: int, user: Optional[AuthUser]) -> Dog:
    dog = db.query(Dog).filter(Dog.id == dog_id, Dog.user_id == owner_id(user)).first()
    if not dog:
        raise HTTPException(status_code=404, detail="Dog not found")
    return dog


def estimate_daily_portion(db: Session, dog: Dog) -> None:
    """Set the dog's portion from its weight (kg) in the owner's measure unit."""
    prefs = get_or_create_preferences(db, dog.user_id)
    estimate = estimate_portion(
        weight=dog.weight,
        weight_unit=WeightUnit.KG,
        age_years=dog.age,
        activity_level=dog.activity_level,
        meals_per_day=prefs.default_meals_per_day,
        measure_unit=prefs.measure_unit,
    )
    dog.portion_size = estimate.daily_portion


@router.post("/portion", response_model=PortionEstimateResponse)
def estimate_dog_portion(request: PortionEstimateRequest):
    """
    Estimate daily and per-meal portions for a dog.

    The activity level is first corrected for the dog's age (puppies under 1
    year, seniors from 7 years).
    """
    level = suggest_activity_level(request.age, request.activity_level)
    estimate = estimate_portion(
        weight=request.weight,
        weight_unit=request.weight_unit,
        age_years=request.age,
        activity_level=level,
        meals_per_day=request.meals_per_day,
        measure_unit=request.measure_unit,
    )
    return PortionEstimateResponse(
        activity_level=level,
        weight_kg=convert_weight(request.weight, request.weight_unit, WeightUnit.KG),
        weight_display=format_weight(request.weight, request.weight_unit),
        daily_portion=estimate.daily_portion,
        meal_portion=estimate.meal_portion,
        measure_unit=request.measure_unit,
        daily_portion_display=format_quantity(estimate.daily_portion, request.measure_unit),
        meal_portion_display=format_quantity(estimate.meal_portion, request.measure_unit),
    )


@router.post("", response_model=DogResponse, status_code=201)
def create_dog(
    dog: DogCreate,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Create a dog profile, estimating its portion when none is given."""
    db_dog = Dog(
        user_id=owner_id(user),
        name=dog.name,
        weight=dog.weight,
        age=dog.age,
        activity_level=suggest_activity_level(dog.age, dog.activity_level),
        portion_size=dog.portion_size,
    )
    if db_dog.portion_size is None:
        estimate_daily_portion(db, db_dog)

    db.add(db_dog)
    db.commit()
    db.refresh(db_dog)
    return db_dog


@router.get("/{dog_id}", response_model=DogResponse)
def get_dog(
    dog_id: int,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Get a dog profile."""
    return get_owned_dog(db, dog_id, user)


@router.get("", response_model=list[DogResponse])
def list_dogs(
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """List dogs by name."""
    return db.query(Dog).filter(Dog.user_id == owner_id(user)).order_by(Dog.name).all()


@router.put("/{dog_id}", response_model=DogResponse)
def update_dog(
    dog_id: int,
    dog_update: DogUpdate,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Update a dog profile; the portion is re-estimated if its inputs change."""
    dog = get_owned_dog(db, dog_id, user)
    # Every dog column is required, so explicit nulls are ignored
    update_data = dog_update.model_dump(exclude_unset=True, exclude_none=True)

    for field, value in update_data.items():
        setattr(dog, field, value)
    dog.activity_level = suggest_activity_level(dog.age, dog.activity_level)

    if "portion_size" not in update_data and any(f in update_data for f in PORTION_FIELDS):
        estimate_daily_portion(db, dog)

    db.commit()
    db.refresh(dog)
    return dog


@router.delete("/{dog_id}", status_code=204)
def delete_dog(
    dog_id: int,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Delete a dog profile; its meal plans are kept without a dog."""
    dog = get_owned_dog(db, dog_id, user)

    db.delete(dog)
    db.commit()
    return None
