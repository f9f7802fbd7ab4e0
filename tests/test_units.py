"""Tests for unit conversion and display formatting."""

from decimal import Decimal

from app.core.units import (
    MeasureUnit,
    WeightUnit,
    convert_weight,
    format_cost,
    format_quantity,
    format_weight,
    grams_to_ounces,
    kg_to_lbs,
    to_kg,
)


class TestWeightConversion:
    """Tests for kg/lbs conversion."""

    def test_kg_to_lbs(self):
        assert kg_to_lbs(Decimal("10")) == Decimal("22.05")

    def test_to_kg_exact(self):
        """Body weight normalization is not rounded."""
        assert to_kg(Decimal("1"), WeightUnit.LBS) == Decimal("0.45359237")
        assert to_kg(Decimal("12.5"), "kg") == Decimal("12.5")

    def test_convert_weight_same_unit(self):
        assert convert_weight(Decimal("4.2"), WeightUnit.KG, WeightUnit.KG) == Decimal("4.2")

    def test_convert_weight_lbs_to_kg(self):
        assert convert_weight(Decimal("22"), WeightUnit.LBS, WeightUnit.KG) == Decimal("9.98")

    def test_grams_to_ounces(self):
        assert grams_to_ounces(Decimal("100")).quantize(Decimal("0.001")) == Decimal("3.527")


class TestFormatting:
    """Tests for display labels."""

    def test_format_weight(self):
        assert format_weight(Decimal("9.979"), WeightUnit.KG) == "10.0 kg"

    def test_format_quantity(self):
        assert format_quantity(Decimal("2800"), MeasureUnit.G) == "2800g"
        assert format_quantity(Decimal("8.82"), MeasureUnit.OZ) == "9oz"

    def test_format_cost(self):
        assert format_cost(Decimal("28"), "GBP") == "28.00 GBP"
        assert format_cost(Decimal("0.005"), "USD") == "0.01 USD"
