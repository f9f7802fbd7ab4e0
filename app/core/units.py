"""Weight and portion unit conversion utilities.

Conversions here are for display only. Plan costs and quantities are always
computed in the food's own package unit and never re-derived from these.
"""

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum


class WeightUnit(str, Enum):
    KG = "kg"
    LBS = "lbs"


class MeasureUnit(str, Enum):
    G = "g"
    OZ = "oz"


# Conversion constants
LBS_TO_KG = Decimal("0.45359237")
G_TO_OZ = Decimal("0.03527396195")

TWO_PLACES = Decimal("0.01")


def kg_to_lbs(kg: Decimal) -> Decimal:
    """Convert kilograms to pounds."""
    return (Decimal(kg) / LBS_TO_KG).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def lbs_to_kg(lbs: Decimal) -> Decimal:
    """Convert pounds to kilograms."""
    return Decimal(lbs) * LBS_TO_KG


def to_kg(value: Decimal, unit: WeightUnit) -> Decimal:
    """Normalize a body weight to kilograms."""
    if WeightUnit(unit) == WeightUnit.LBS:
        return lbs_to_kg(value)
    return Decimal(value)


def grams_to_ounces(grams: Decimal) -> Decimal:
    return Decimal(grams) * G_TO_OZ


def convert_weight(value: Decimal, from_unit: WeightUnit, to_unit: WeightUnit) -> Decimal:
    """Convert weight between units."""
    if from_unit == to_unit:
        return Decimal(value)
    if from_unit == WeightUnit.KG and to_unit == WeightUnit.LBS:
        return kg_to_lbs(value)
    if from_unit == WeightUnit.LBS and to_unit == WeightUnit.KG:
        return lbs_to_kg(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return Decimal(value)


def format_weight(value: Decimal, unit: WeightUnit) -> str:
    """Format weight with unit suffix."""
    return f"{Decimal(value):.1f} {WeightUnit(unit).value}"


def format_quantity(value: Decimal, unit: MeasureUnit) -> str:
    """Format a food quantity with its measure unit, no decimals."""
    return f"{Decimal(value):.0f}{MeasureUnit(unit).value}"


def format_cost(value: Decimal, currency: str) -> str:
    """Format a cost with a free-form currency label."""
    rounded = Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{rounded} {currency}"
