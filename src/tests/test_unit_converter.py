"""
Unit tests for the unit conversion system.

Tests cover:
- Identity and standard conversions (weight, volume, count)
- Multi-hop routing through grams and milliliters
- Ingredient-specific overrides and product type detection
- Display helpers and error handling
"""

import pytest

from src.services.exceptions import ConversionError, NoConversionPath
from src.services.unit_catalog import UNIT_FAMILIES
from src.services.unit_converter import (
    ProductType,
    can_convert,
    convert_units,
    detect_product_type,
    format_conversion,
)


WEIGHT_UNITS = ["lb", "kg", "g", "mg", "oz"]


# ============================================================================
# Standard Conversion Tests
# ============================================================================


class TestIdentity:
    """Converting a unit to itself."""

    @pytest.mark.parametrize("unit", sorted(UNIT_FAMILIES))
    def test_identity_for_every_unit(self, unit):
        """convert(v, u, u) == v for every catalogued unit."""
        result = convert_units(3.5, unit, unit)
        assert result.value == 3.5
        assert result.product_specific is False

    def test_identity_after_normalization(self):
        """Aliases of the same unit are an identity conversion."""
        result = convert_units(2, "Pounds", "lbs")
        assert result.value == 2
        assert result.from_unit == "lb"
        assert result.to_unit == "lb"


class TestStandardConversions:
    """Test tabulated and routed conversions."""

    def test_lb_to_oz(self):
        assert convert_units(1, "lb", "oz").value == 16

    def test_lb_to_kg(self):
        assert convert_units(1, "lb", "kg").value == pytest.approx(0.453592)

    def test_cup_to_ml(self):
        assert convert_units(1, "cup", "ml").value == pytest.approx(236.588)

    def test_cup_to_fluid_ounces(self):
        """Bare ounces measured against cups are fluid ounces."""
        assert convert_units(1, "cup", "oz").value == 8

    def test_inverted_factor(self):
        """A pair tabulated only in reverse is inverted."""
        result = convert_units(2, "oz", "tbsp")
        assert result.value == pytest.approx(4.0)
        assert result.conversion_path == ["inverse_tbsp_to_oz"]

    def test_weight_routes_through_grams(self):
        result = convert_units(1000, "mg", "lb")
        assert result.value == pytest.approx(1 / 453.592)
        assert result.conversion_path == ["mg", "g", "lb"]

    def test_volume_routes_through_milliliters(self):
        result = convert_units(1, "pint", "cup")
        assert result.value == pytest.approx(2.0, rel=1e-6)
        assert result.conversion_path == ["pint", "ml", "cup"]

    def test_fluid_ounces_to_tablespoons(self):
        assert convert_units(1, "fl oz", "tbsp").value == pytest.approx(2.0, rel=1e-3)

    @pytest.mark.parametrize("from_unit", WEIGHT_UNITS)
    @pytest.mark.parametrize("to_unit", WEIGHT_UNITS)
    def test_weight_round_trip(self, from_unit, to_unit):
        """Converting there and back returns the original value."""
        there = convert_units(7.25, from_unit, to_unit).value
        back = convert_units(there, to_unit, from_unit).value
        assert back == pytest.approx(7.25, rel=1e-6)


class TestCountConversions:
    """Count units are dimensionless."""

    def test_bottle_to_each(self):
        assert convert_units(5, "bottle", "each").value == 5

    def test_case_to_unit(self):
        result = convert_units(2, "case", "unit")
        assert result.value == 2
        assert result.conversion_path == ["case", "unit"]

    def test_dozen_to_each(self):
        assert convert_units(2, "dozen", "each").value == 24

    def test_each_to_dozen(self):
        assert convert_units(6, "each", "dozen").value == pytest.approx(0.5)


class TestConversionErrors:
    """Cross-family conversions without a product override fail."""

    def test_weight_to_count(self):
        with pytest.raises(NoConversionPath) as exc_info:
            convert_units(1, "lb", "each")
        assert exc_info.value.from_unit == "lb"
        assert exc_info.value.to_unit == "each"

    def test_volume_to_weight_without_product(self):
        """There is no generic cup to gram factor."""
        with pytest.raises(NoConversionPath):
            convert_units(1, "cup", "g")

    def test_unknown_unit(self):
        with pytest.raises(NoConversionPath):
            convert_units(1, "sleeve", "each")

    def test_fluid_ounces_to_milliliters_only_via_fl_oz(self):
        """Bare ounces have no standard path to milliliters."""
        with pytest.raises(NoConversionPath):
            convert_units(1, "oz", "ml")

    def test_error_is_conversion_error(self):
        with pytest.raises(ConversionError):
            convert_units(1, "kg", "inch")

    def test_error_names_product(self):
        with pytest.raises(NoConversionPath) as exc_info:
            convert_units(1, "each", "g", "House Vodka")
        assert "House Vodka" in str(exc_info.value)


# ============================================================================
# Ingredient Override Tests
# ============================================================================


class TestDetectProductType:
    """Test ingredient type detection from product names."""

    def test_rice(self):
        assert detect_product_type("Mahatma Jasmine Rice") == ProductType.RICE

    def test_flour(self):
        assert detect_product_type("King Arthur All-Purpose FLOUR") == ProductType.FLOUR

    def test_brown_sugar_before_sugar(self):
        assert detect_product_type("C&H Light Brown Sugar") == ProductType.BROWN_SUGAR
        assert detect_product_type("Granulated Sugar") == ProductType.SUGAR

    def test_butter(self):
        assert detect_product_type("Unsalted Butter") == ProductType.BUTTER

    def test_rice_checked_first(self):
        """Earlier rules win when a name matches several."""
        assert detect_product_type("Brown Rice") == ProductType.RICE
        assert detect_product_type("Rice Flour") == ProductType.RICE

    def test_no_match(self):
        assert detect_product_type("House Vodka") is None
        assert detect_product_type("") is None
        assert detect_product_type(None) is None


class TestProductOverrides:
    """Test ingredient-specific conversions."""

    def test_flour_cup_to_grams(self):
        result = convert_units(1, "cup", "g", "flour")
        assert result.value == 120
        assert result.product_specific is True
        assert result.conversion_path == ["flour", "cup_to_g"]

    def test_rice_cup_to_ounces(self):
        """The ingredient factor takes precedence over fluid ounces."""
        result = convert_units(1, "cup", "oz", "Jasmine Rice")
        assert result.value == 6.3
        assert result.product_specific is True

    def test_sugar_variants(self):
        assert convert_units(1, "cup", "g", "Granulated Sugar").value == 200
        assert convert_units(1, "cup", "g", "Light Brown Sugar").value == 213

    def test_tabulated_reverse_direction(self):
        result = convert_units(240, "g", "cup", "All-Purpose Flour")
        assert result.value == pytest.approx(2.0)
        assert result.product_specific is True

    def test_reverse_override(self):
        """A factor tabulated only forward is applied in reverse."""
        result = convert_units(28.4, "g", "tbsp", "Unsalted Butter")
        assert result.value == pytest.approx(2.0)
        assert result.conversion_path == ["butter", "reverse_tbsp_to_g"]

    def test_bridge_through_grams(self):
        """An override into grams continues to any mass unit."""
        result = convert_units(2, "cup", "kg", "Jasmine Rice")
        assert result.value == pytest.approx(0.36)
        assert result.conversion_path == ["rice", "cup_to_g", "g_to_kg"]

    def test_bridge_from_mass_unit(self):
        result = convert_units(0.36, "kg", "cup", "Jasmine Rice")
        assert result.value == pytest.approx(2.0)
        assert result.product_specific is True

    def test_bridge_from_other_volume_unit(self):
        """Other volume measures are scaled to the overridden one."""
        result = convert_units(1, "tbsp", "g", "All-Purpose Flour")
        assert result.value == pytest.approx(120 * 14.7868 / 236.588)

    def test_unrelated_units_fall_back_to_standard(self):
        """An override product still converts standard pairs normally."""
        result = convert_units(1, "lb", "oz", "All-Purpose Flour")
        assert result.value == 16
        assert result.product_specific is False


# ============================================================================
# Helper Tests
# ============================================================================


class TestHelpers:
    """Test can_convert and format_conversion."""

    def test_can_convert(self):
        assert can_convert("lb", "kg")
        assert can_convert("cup", "g", "Jasmine Rice")
        assert not can_convert("cup", "g")
        assert not can_convert("lb", "each")

    def test_format_conversion(self):
        assert format_conversion(1, "lb", "oz") == "1 lb = 16.00 oz"

    def test_format_conversion_precision(self):
        assert format_conversion(1, "cup", "ml", precision=1) == "1 cup = 236.6 ml"

    def test_format_conversion_error(self):
        text = format_conversion(1, "lb", "each")
        assert text.startswith("Error:")
        assert "lb" in text
