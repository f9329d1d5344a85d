"""
Tests for sale deductions.

Tests cover:
- Bar pours and kitchen portions against sized containers
- Density conversions for flour and rice
- Count items against packs
- 1:1 fallback with a warning when no conversion exists
- Pour cost and plate cost
- Reference IDs for duplicate detection
"""

import logging

import pytest

from src.models.enums import DeductionMethod
from src.services.exceptions import ProductNotFound
from src.services.inventory_impact_service import (
    calculate_deduction,
    calculate_total_cost,
    generate_reference_id,
)


def make_line(quantity, unit, **product):
    product.setdefault("name", "Test Product")
    product.setdefault("cost_per_unit", 10.0)
    return {"product_id": 1, "quantity": quantity, "unit": unit, "product": product}


VODKA = {"name": "Titos Vodka", "uom_purchase": "bottle", "size_value": 750, "size_unit": "ml"}
CHICKEN = {"name": "Chicken Breast", "uom_purchase": "case", "size_value": 40, "size_unit": "lb"}
FLOUR = {"name": "All-Purpose Flour", "uom_purchase": "bag", "size_value": 50, "size_unit": "lb"}


class TestBarDeductions:
    def test_vodka_pours(self):
        """100 drinks of 2 fl oz from 750 ml bottles."""
        deduction = calculate_deduction(make_line(2, "fl oz", cost_per_unit=32.99, **VODKA), 100)
        assert deduction.quantity == 200
        assert deduction.unit == "fl oz"
        assert deduction.purchase_unit_deduction == pytest.approx(7.8863, rel=1e-4)
        assert deduction.purchase_unit == "bottle"
        assert deduction.conversion_method == DeductionMethod.VOLUME_TO_VOLUME.value
        assert deduction.success is True
        assert deduction.warning is None

    def test_pour_cost(self):
        deduction = calculate_deduction(make_line(2, "fl oz", cost_per_unit=32.99, **VODKA), 1)
        assert deduction.total_cost == pytest.approx(2.60, abs=0.01)
        # Cost per fl oz times ounces poured
        assert calculate_total_cost(2, 1, deduction.cost_per_recipe_unit) == pytest.approx(
            deduction.total_cost
        )

    def test_ounces_against_milliliters_fall_back(self):
        """Weight ounces do not convert into a milliliter bottle size."""
        deduction = calculate_deduction(make_line(1.5, "oz", **VODKA), 10)
        assert deduction.conversion_method == DeductionMethod.FALLBACK_ONE_TO_ONE.value
        assert deduction.purchase_unit_deduction == pytest.approx(15)


class TestKitchenDeductions:
    def test_chicken_portions(self):
        """150 plates of 8 oz from 40 lb cases."""
        deduction = calculate_deduction(make_line(8, "oz", **CHICKEN), 150)
        assert deduction.purchase_unit_deduction == pytest.approx(1.875, rel=1e-4)
        assert deduction.purchase_unit == "case"
        assert deduction.conversion_method == DeductionMethod.WEIGHT_TO_WEIGHT.value

    def test_burger_plate_cost(self):
        deduction = calculate_deduction(
            make_line(6, "oz", name="Ground Beef 80/20", uom_purchase="case",
                      size_value=40, size_unit="lb", cost_per_unit=89.99),
            1,
        )
        assert deduction.total_cost == pytest.approx(0.8437, abs=0.001)

    def test_flour_by_density(self):
        """200 cups of flour at 120 g/cup from 50 lb bags."""
        deduction = calculate_deduction(make_line(2, "cup", **FLOUR), 100)
        assert deduction.purchase_unit_deduction == pytest.approx(24000 / 22679.6, rel=1e-4)
        assert deduction.conversion_method == DeductionMethod.DENSITY_TO_WEIGHT.value

    def test_rice_uses_its_own_density(self):
        deduction = calculate_deduction(
            make_line(1, "cup", name="Jasmine Rice", uom_purchase="bag",
                      size_value=50, size_unit="lb"),
            200,
        )
        assert deduction.purchase_unit_deduction == pytest.approx(36000 / 22679.6, rel=1e-4)
        assert deduction.conversion_method == DeductionMethod.DENSITY_TO_WEIGHT.value

    def test_cream_from_quart_containers(self):
        deduction = calculate_deduction(
            make_line(0.5, "cup", name="Heavy Cream", uom_purchase="container",
                      size_value=1, size_unit="qt"),
            60,
        )
        assert deduction.purchase_unit_deduction == pytest.approx(7.5, rel=1e-3)
        assert deduction.conversion_method == DeductionMethod.VOLUME_TO_VOLUME.value

    def test_direct_measure_without_size(self):
        """A product stocked by the pound converts straight into pounds."""
        deduction = calculate_deduction(
            make_line(4, "oz", name="Cheddar", uom_purchase="lb", cost_per_unit=6.0), 20
        )
        assert deduction.purchase_unit_deduction == pytest.approx(5.0)
        assert deduction.purchase_unit == "lb"
        assert deduction.total_cost == pytest.approx(30.0)


class TestCountDeductions:
    def test_each_against_each(self):
        deduction = calculate_deduction(
            make_line(2, "each", name="Eggs", uom_purchase="each", cost_per_unit=0.25), 100
        )
        assert deduction.purchase_unit_deduction == 200
        assert deduction.conversion_method == DeductionMethod.ONE_TO_ONE.value
        assert deduction.total_cost == pytest.approx(50.0)

    def test_unit_spelling_is_normalized(self):
        deduction = calculate_deduction(make_line(1, "EACH", name="Eggs", uom_purchase="each"), 3)
        assert deduction.unit == "each"
        assert deduction.conversion_method == DeductionMethod.ONE_TO_ONE.value

    def test_tortillas_from_packs(self):
        """3 tortillas per plate from packs of 12."""
        deduction = calculate_deduction(
            make_line(3, "each", name="Flour Tortillas", uom_purchase="package",
                      size_value=12, size_unit="each", cost_per_unit=4.80),
            50,
        )
        assert deduction.purchase_unit_deduction == pytest.approx(12.5)
        assert deduction.cost_per_recipe_unit == pytest.approx(0.40)
        assert deduction.conversion_method == DeductionMethod.COUNT_TO_CONTAINER.value


class TestFallbackDeductions:
    def test_salt_without_density(self):
        deduction = calculate_deduction(
            make_line(1, "tsp", name="Kosher Salt", uom_purchase="box",
                      size_value=3, size_unit="lb", cost_per_unit=4.0),
            10,
        )
        assert deduction.purchase_unit_deduction == 10
        assert deduction.cost_per_recipe_unit == 4.0
        assert deduction.conversion_method == DeductionMethod.FALLBACK_ONE_TO_ONE.value
        assert deduction.success is False
        assert "using 1:1" in deduction.warning

    def test_weight_against_volume_package(self):
        deduction = calculate_deduction(
            make_line(20, "g", name="Honey", uom_purchase="bottle",
                      size_value=500, size_unit="ml"),
            5,
        )
        assert deduction.conversion_method == DeductionMethod.FALLBACK_ONE_TO_ONE.value
        assert deduction.purchase_unit_deduction == 100

    def test_unknown_purchase_unit(self, caplog):
        with caplog.at_level(logging.WARNING):
            deduction = calculate_deduction(
                make_line(0.5, "oz", name="Parsley", uom_purchase="bunch"), 60
            )
        assert deduction.purchase_unit_deduction == 30
        assert deduction.purchase_unit == "bunch"
        assert "bunch" in deduction.warning
        assert "calculate_deduction: fallback_one_to_one" in caplog.text

    def test_non_positive_size_is_ignored(self):
        """A zero size is not used as a divisor."""
        deduction = calculate_deduction(
            make_line(2, "fl oz", name="Gin", uom_purchase="bottle", size_value=0, size_unit="ml"),
            4,
        )
        assert deduction.conversion_method == DeductionMethod.FALLBACK_ONE_TO_ONE.value
        assert deduction.purchase_unit_deduction == 8


class TestDeductionEdgeCases:
    def test_nothing_sold(self):
        deduction = calculate_deduction(make_line(2, "fl oz", **VODKA), 0)
        assert deduction.purchase_unit_deduction == 0
        assert deduction.total_cost == 0

    def test_missing_product(self):
        with pytest.raises(ProductNotFound):
            calculate_deduction({"product_id": 42, "quantity": 1, "unit": "each"}, 1)

    def test_to_dict(self):
        data = calculate_deduction(make_line(2, "fl oz", **VODKA), 1).to_dict()
        assert data["conversion_method"] == "volume_to_volume"
        assert data["purchase_unit"] == "bottle"


class TestTotalCost:
    def test_total_cost(self):
        assert calculate_total_cost(2, 100, 1.25) == pytest.approx(250.0)

    def test_zero_quantity_sold(self):
        assert calculate_total_cost(2, 0, 1.25) == 0


class TestReferenceId:
    def test_with_order_id(self):
        assert generate_reference_id("Burger", "2024-01-15", "ORD-123") == "ORD-123_Burger_2024-01-15"

    def test_without_order_id(self):
        assert generate_reference_id("Burger", "2024-01-15") == "Burger_2024-01-15"

    def test_empty_order_id_is_ignored(self):
        assert generate_reference_id("Burger", "2024-01-15", "") == "Burger_2024-01-15"
