"""User preference API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import AuthUser, optional_auth, owner_id
from app.core.config import settings
from app.core.database import get_db
from app.core.units import MeasureUnit, WeightUnit
from app.models.models import UserPreference
from app.schemas.schemas import PreferencesResponse, PreferencesUpdate

router = APIRouter(prefix="/preferences", tags=["preferences"])


def get_or_create_preferences(db: Session, user_id: Optional[str]) -> UserPreference:
    """Load the owner's preferences, creating the defaults on first use."""
    prefs = db.query(UserPreference).filter(UserPreference.user_id == user_id).first()
    if prefs is None:
        prefs = UserPreference(
            user_id=user_id,
            weight_unit=WeightUnit.KG,
            measure_unit=MeasureUnit.G,
            currency=settings.CURRENCY,
            default_meals_per_day=settings.DEFAULT_MEALS_PER_DAY,
            theme="light",
        )
        db.add(prefs)
        db.commit()
        db.refresh(prefs)
    return prefs


@router.get("", response_model=PreferencesResponse)
def get_preferences(
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Get display units, currency and planner defaults."""
    return get_or_create_preferences(db, owner_id(user))


@router.put("", response_model=PreferencesResponse)
def update_preferences(
    update: PreferencesUpdate,
    db: Session = Depends(get_db),
    user: Optional[AuthUser] = Depends(optional_auth),
):
    """Replace the caller's preferences."""
    prefs = get_or_create_preferences(db, owner_id(user))

    prefs.weight_unit = update.weight_unit
    prefs.measure_unit = update.measure_unit
    prefs.currency = update.currency
    prefs.default_meals_per_day = update.default_meals_per_day
    prefs.theme = update.theme.value

    db.commit()
    db.refresh(prefs)
    return prefs
