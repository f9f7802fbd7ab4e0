"""Pydantic schemas for request/response validation."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.core.portions import ActivityLevel
from app.core.units import MeasureUnit, WeightUnit


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


# Food inventory schemas
class FoodItemBase(BaseModel):
    brand: str = Field(..., min_length=1, max_length=200)
    type: str = Field(..., min_length=1, max_length=200)
    weight: Decimal = Field(..., gt=0, decimal_places=2, description="Package weight in the food's unit (g or oz)")
    cost: Decimal = Field(..., gt=0, decimal_places=2, description="Package cost")
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_active: bool = True
    protein: Optional[Decimal] = Field(None, gt=0)
    fat: Optional[Decimal] = Field(None, gt=0)
    fiber: Optional[Decimal] = Field(None, gt=0)


class FoodItemCreate(FoodItemBase):
    pass


class FoodItemUpdate(BaseModel):
    brand: Optional[str] = Field(None, min_length=1, max_length=200)
    type: Optional[str] = Field(None, min_length=1, max_length=200)
    weight: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    cost: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    protein: Optional[Decimal] = Field(None, gt=0)
    fat: Optional[Decimal] = Field(None, gt=0)
    fiber: Optional[Decimal] = Field(None, gt=0)


class FoodItemResponse(FoodItemBase):
    id: int

    class Config:
        from_attributes = True


# Dog schemas
class DogCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    weight: Decimal = Field(..., gt=0, le=200, description="Body weight in kg")
    age: Decimal = Field(..., gt=0, le=30, description="Age in years")
    activity_level: ActivityLevel = ActivityLevel.MODERATE
    portion_size: Optional[Decimal] = Field(
        None, gt=0, description="Daily portion; estimated from weight when omitted"
    )


class DogUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    weight: Optional[Decimal] = Field(None, gt=0, le=200)
    age: Optional[Decimal] = Field(None, gt=0, le=30)
    activity_level: Optional[ActivityLevel] = None
    portion_size: Optional[Decimal] = Field(None, gt=0)


class DogResponse(BaseModel):
    id: int
    name: str
    weight: Decimal
    age: Decimal
    activity_level: ActivityLevel
    portion_size: Decimal

    class Config:
        from_attributes = True


class PortionEstimateRequest(BaseModel):
    weight: Decimal = Field(..., gt=0, description="Body weight in weight_unit")
    weight_unit: WeightUnit = WeightUnit.KG
    age: Decimal = Field(..., gt=0, le=30)
    activity_level: ActivityLevel = ActivityLevel.MODERATE
    meals_per_day: int = Field(2, ge=1, le=10)
    measure_unit: MeasureUnit = MeasureUnit.G


class PortionEstimateResponse(BaseModel):
    activity_level: ActivityLevel  # after age gating
    weight_kg: Decimal
    weight_display: str
    daily_portion: Decimal
    meal_portion: Decimal
    measure_unit: MeasureUnit
    daily_portion_display: str
    meal_portion_display: str


# Preference schemas
class PreferencesUpdate(BaseModel):
    weight_unit: WeightUnit
    measure_unit: MeasureUnit
    currency: str = Field(..., min_length=1, max_length=10)
    default_meals_per_day: int = Field(..., ge=1, le=6)
    theme: Theme = Theme.LIGHT


class PreferencesResponse(PreferencesUpdate):
    id: int

    class Config:
        from_attributes = True


# Meal plan schemas (persisted shape)
class MealPlanItemInput(BaseModel):
    food_item_id: int
    quantity_per_meal: Decimal = Field(..., gt=0, decimal_places=4)
    total_quantity: Decimal = Field(..., gt=0, decimal_places=4)
    number_of_meals: Optional[int] = Field(None, gt=0)


class MealPlanCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: int = Field(..., gt=0)
    meals_per_day: int = Field(..., gt=0)
    dog_id: Optional[int] = None
    notes: Optional[str] = None
    items: list[MealPlanItemInput] = []


class MealPlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = Field(None, gt=0)
    meals_per_day: Optional[int] = Field(None, gt=0)
    dog_id: Optional[int] = None
    notes: Optional[str] = None
    items: Optional[list[MealPlanItemInput]] = None


class MealPlanItemResponse(BaseModel):
    id: int
    food_item_id: int
    quantity_per_meal: Decimal
    total_quantity: Decimal
    number_of_meals: Optional[int]
    food_item: FoodItemResponse

    class Config:
        from_attributes = True


class MealPlanResponse(BaseModel):
    id: int
    name: str
    start_date: Optional[date]
    end_date: Optional[date]
    duration_days: int
    meals_per_day: int
    dog_id: Optional[int]
    notes: Optional[str]
    total_cost: Decimal
    created_at: datetime
    updated_at: datetime
    items: list[MealPlanItemResponse] = []

    class Config:
        from_attributes = True


# Planner session schemas (in-memory editing)
class NewPlanRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = Field(None, gt=0)
    meals_per_day: Optional[int] = Field(None, gt=0)
    dog_id: Optional[int] = None
    notes: Optional[str] = None


class PlanDetailsUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = Field(None, gt=0)
    meals_per_day: Optional[int] = Field(None, gt=0)
    dog_id: Optional[int] = None
    notes: Optional[str] = None


class AddPlanItemRequest(BaseModel):
    food_item_id: int
    # Omit to seed from the plan's dog portion size
    quantity_per_meal: Optional[Decimal] = None
    number_of_meals: Optional[int] = None


class UpdatePlanItemRequest(BaseModel):
    quantity_per_meal: Optional[Decimal] = None
    number_of_meals: Optional[int] = None


class PlanItemView(BaseModel):
    id: str
    food_item_id: int
    brand: str
    type: str
    quantity_per_meal: Decimal
    number_of_meals: int
    total_quantity: Decimal
    total_quantity_display: str
    cost_per_unit: Decimal
    cost_per_kg: Decimal  # display only
    total_cost: Decimal


class PlanView(BaseModel):
    id: Optional[int]
    name: str
    start_date: Optional[date]
    end_date: Optional[date]
    duration_days: int
    meals_per_day: int
    total_slots: int
    dog_id: Optional[int]
    notes: str
    total_cost: Decimal
    total_cost_display: str
    items: list[PlanItemView]


class PlannerSessionResponse(BaseModel):
    session_id: str
    plan: Optional[PlanView]
    can_undo: bool
    can_redo: bool
