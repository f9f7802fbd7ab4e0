from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.core.portions import ActivityLevel
from app.core.units import MeasureUnit, WeightUnit

# Money, package weights and quantities are exact decimals
Amount = Numeric(10, 2, asdecimal=True)
# Plan quantities keep four places; see calculations.QUANTITY_SCALE
Quantity = Numeric(12, 4, asdecimal=True)


class FoodItem(Base):
    __tablename__ = "food_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True, index=True)
    brand = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    weight = Column(Amount, nullable=False)
    cost = Column(Amount, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    protein = Column(Amount, nullable=True)
    fat = Column(Amount, nullable=True)
    fiber = Column(Amount, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    plan_items = relationship("MealPlanItem", back_populates="food_item")


class Dog(Base):
    __tablename__ = "dogs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False)
    weight = Column(Amount, nullable=False)  # kg
    age = Column(Numeric(5, 2, asdecimal=True), nullable=False)  # years
    activity_level = Column(Enum(ActivityLevel), nullable=False, default=ActivityLevel.MODERATE)
    portion_size = Column(Amount, nullable=False)  # daily, in the owner's measure unit

    meal_plans = relationship("MealPlan", back_populates="dog")


class MealPlan(Base):
    __tablename__ = "meal_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True, index=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    duration_days = Column(Integer, nullable=False)
    meals_per_day = Column(Integer, nullable=False)
    dog_id = Column(Integer, ForeignKey("dogs.id", ondelete="SET NULL"), nullable=True, index=True)
    total_cost = Column(Amount, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    dog = relationship("Dog", back_populates="meal_plans")
    items = relationship(
        "MealPlanItem",
        back_populates="meal_plan",
        cascade="all, delete-orphan",
        order_by="MealPlanItem.id",
    )


class MealPlanItem(Base):
    __tablename__ = "meal_plan_items"

    id = Column(Integer, primary_key=True, index=True)
    meal_plan_id = Column(Integer, ForeignKey("meal_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    food_item_id = Column(Integer, ForeignKey("food_items.id"), nullable=False, index=True)
    quantity_per_meal = Column(Quantity, nullable=False)
    total_quantity = Column(Quantity, nullable=False)
    number_of_meals = Column(Integer, nullable=True)

    meal_plan = relationship("MealPlan", back_populates="items")
    food_item = relationship("FoodItem", back_populates="plan_items")


class UserPreference(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=True, unique=True)
    weight_unit = Column(Enum(WeightUnit), nullable=False, default=WeightUnit.KG)
    measure_unit = Column(Enum(MeasureUnit), nullable=False, default=MeasureUnit.G)
    currency = Column(String, nullable=False, default="GBP")
    default_meals_per_day = Column(Integer, nullable=False, default=2)
    theme = Column(String, nullable=False, default="light")
