"""
Inventory Impact Service - Inventory and cost consumed by a recipe line.

Given a recipe quantity/unit and a product's purchase packaging, this
module computes how much inventory (always in purchase units) the line
consumes and what that portion costs.

Resolution order:
1. Container case: the product is stocked by a count container ("bottle",
   "case") and the recipe measures something else. The recipe quantity
   is converted into the container's size unit and divided by the size.
   Volume measures require the size; other families use it when given.
2. Legacy shortcut: a "bottle" recipe line against a milliliter stock is
   multiplied by the purchase quantity.
3. General case: convert the recipe quantity into the purchase unit.
4. Fallback: hard-coded ounce/milliliter factors, else IncompatibleUnits.

Sale deductions (calculate_deduction) scale a recipe line by the portions
sold and never raise on unit mismatches: when no conversion exists the
quantity is deducted 1:1 and the result carries a warning.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from src.models.enums import DeductionMethod, UnitFamily
from src.services.dto import ConversionResult, InventoryImpact, RecipePortions, SaleDeduction
from src.services.dto_utils import record_value
from src.services.exceptions import (
    IncompatibleUnits,
    MissingContainerSize,
    NoConversionPath,
    ProductNotFound,
    ValidationError,
)
from src.services.logging_utils import get_service_logger, log_operation
from src.services.packaging_service import resolve_product_unit_info
from src.services.unit_catalog import get_unit_family, normalize_unit_name
from src.services.unit_converter import convert_units
from src.utils.constants import FALLBACK_FACTORS, WEIGHT_TO_GRAMS

logger = get_service_logger(__name__)


def _fallback_conversion(
    quantity: float, from_unit: str, to_unit: str
) -> Optional[ConversionResult]:
    """Apply a hard-coded fallback factor, or None if there is none."""
    factor = FALLBACK_FACTORS.get((from_unit, to_unit))
    if factor is None:
        return None
    return ConversionResult(
        value=quantity * factor,
        from_unit=from_unit,
        to_unit=to_unit,
        conversion_path=["fallback", f"{from_unit}_to_{to_unit}"],
    )


def _convert_with_fallback(
    quantity: float,
    from_unit: str,
    to_unit: str,
    product_name: str,
    operation: str,
) -> Tuple[ConversionResult, List[str]]:
    """
    Convert a quantity, trying the fallback factors when no path exists.

    Returns:
        (conversion, warnings)

    Raises:
        IncompatibleUnits: If neither the converter nor a fallback applies
    """
    try:
        return convert_units(quantity, from_unit, to_unit, product_name), []
    except NoConversionPath:
        fallback = _fallback_conversion(quantity, from_unit, to_unit)
        if fallback is None:
            log_operation(
                logger,
                operation=operation,
                outcome="incompatible_units",
                level=logging.WARNING,
                product_name=product_name,
                from_unit=from_unit,
                to_unit=to_unit,
            )
            raise IncompatibleUnits(from_unit, to_unit, product_name)

    message = (
        f"{product_name}: no standard conversion from {from_unit} to {to_unit}, "
        f"used fallback factor"
    )
    log_operation(
        logger,
        operation=operation,
        outcome="fallback_conversion",
        level=logging.WARNING,
        product_name=product_name,
        from_unit=from_unit,
        to_unit=to_unit,
    )
    return fallback, [message]


def calculate_inventory_impact(
    recipe_quantity: float,
    recipe_unit: str,
    purchase_quantity: float,
    purchase_unit: str,
    product_name: str,
    cost_per_package: float,
    size_value: Optional[float] = None,
    size_unit: Optional[str] = None,
) -> InventoryImpact:
    """
    Calculate the inventory deduction and cost of one recipe line.

    Args:
        recipe_quantity: Amount used by the recipe
        recipe_unit: Unit of recipe_quantity
        purchase_quantity: Quantity of purchase_unit that cost_per_package buys
        purchase_unit: Unit the product is stocked in
        product_name: Product name (also selects ingredient overrides)
        cost_per_package: Cost of purchase_quantity purchase units
        size_value: Physical size of one container (container products)
        size_unit: Unit of size_value

    Returns:
        InventoryImpact with the deduction expressed in purchase units

    Raises:
        MissingContainerSize: Volume measure against a container with no size
        IncompatibleUnits: No conversion or fallback between the units
        ValidationError: purchase_quantity is not positive in the general case

    Example:
        >>> impact = calculate_inventory_impact(
        ...     1.5, "fl oz", 1, "bottle", "Vodka", 20.0, size_value=750, size_unit="ml"
        ... )
        >>> round(impact.inventory_deduction, 4), round(impact.cost_impact, 2)
        (0.0591, 1.18)
    """
    recipe_unit = normalize_unit_name(recipe_unit)
    purchase_unit = normalize_unit_name(purchase_unit)
    size_unit = normalize_unit_name(size_unit) if size_unit else None

    recipe_family = get_unit_family(recipe_unit)
    purchase_family = get_unit_family(purchase_unit)

    if purchase_family == UnitFamily.COUNT and recipe_unit != purchase_unit:
        has_size = size_value is not None and size_value > 0 and bool(size_unit)

        if recipe_family == UnitFamily.VOLUME and not has_size:
            log_operation(
                logger,
                operation="calculate_inventory_impact",
                outcome="missing_container_size",
                level=logging.WARNING,
                product_name=product_name,
                recipe_unit=recipe_unit,
                purchase_unit=purchase_unit,
            )
            raise MissingContainerSize(product_name, recipe_unit, purchase_unit)

        if has_size:
            conversion, warnings = _convert_with_fallback(
                recipe_quantity,
                recipe_unit,
                size_unit,
                product_name,
                "calculate_inventory_impact",
            )
            containers_needed = conversion.value / size_value
            return InventoryImpact(
                inventory_deduction=containers_needed,
                inventory_deduction_unit=purchase_unit,
                cost_impact=containers_needed * cost_per_package,
                percentage_of_package=containers_needed * 100,
                conversion_details=conversion,
                warnings=warnings,
            )

    if recipe_unit == "bottle" and purchase_unit == "ml":
        inventory_deduction = recipe_quantity * purchase_quantity
        return InventoryImpact(
            inventory_deduction=inventory_deduction,
            inventory_deduction_unit=purchase_unit,
            cost_impact=recipe_quantity * cost_per_package,
            percentage_of_package=recipe_quantity * 100,
            conversion_details=ConversionResult(
                value=inventory_deduction,
                from_unit=recipe_unit,
                to_unit=purchase_unit,
                conversion_path=["bottle_to_ml"],
            ),
        )

    if not purchase_quantity or purchase_quantity <= 0:
        raise ValidationError([f"Purchase quantity must be positive for {product_name}"])

    conversion, warnings = _convert_with_fallback(
        recipe_quantity,
        recipe_unit,
        purchase_unit,
        product_name,
        "calculate_inventory_impact",
    )
    inventory_deduction = conversion.value
    percentage_of_package = inventory_deduction / purchase_quantity * 100

    return InventoryImpact(
        inventory_deduction=inventory_deduction,
        inventory_deduction_unit=purchase_unit,
        cost_impact=percentage_of_package / 100 * cost_per_package,
        percentage_of_package=percentage_of_package,
        conversion_details=conversion,
        warnings=warnings,
    )


def calculate_recipe_portions(
    purchase_quantity: float,
    purchase_unit: str,
    recipe_quantity: float,
    recipe_unit: str,
    product_name: str,
    cost_per_package: Optional[float] = None,
) -> RecipePortions:
    """
    Calculate how many recipe portions a purchase quantity contains.

    Args:
        purchase_quantity: Amount purchased, in purchase_unit
        purchase_unit: Unit of purchase_quantity
        recipe_quantity: Size of one portion, in recipe_unit
        recipe_unit: Unit of recipe_quantity
        product_name: Product name (selects ingredient overrides)
        cost_per_package: Optional cost of purchase_quantity

    Returns:
        RecipePortions; cost_per_portion is 0.0 when no cost is given

    Raises:
        NoConversionPath: If the portion cannot be expressed in purchase units
        ValidationError: If the portion size is not positive

    Example:
        >>> calculate_recipe_portions(80, "oz", 1, "cup", "Jasmine Rice").total_portions
        12.698...
    """
    conversion = convert_units(recipe_quantity, recipe_unit, purchase_unit, product_name)
    if conversion.value <= 0:
        raise ValidationError([f"Portion size must be positive for {product_name}"])

    total_portions = purchase_quantity / conversion.value
    cost_per_portion = 0.0
    if cost_per_package is not None and total_portions > 0:
        cost_per_portion = cost_per_package / total_portions

    return RecipePortions(
        total_portions=total_portions,
        cost_per_portion=cost_per_portion,
        conversion_details=conversion,
    )


# ============================================================================
# Sale Deductions
# ============================================================================


def _deduction_method(
    conversion: ConversionResult, recipe_unit: str, target_unit: str
) -> DeductionMethod:
    if conversion.product_specific:
        return DeductionMethod.DENSITY_TO_WEIGHT
    if recipe_unit in WEIGHT_TO_GRAMS and target_unit in WEIGHT_TO_GRAMS:
        return DeductionMethod.WEIGHT_TO_WEIGHT
    if get_unit_family(target_unit) == UnitFamily.COUNT:
        return DeductionMethod.COUNT_TO_CONTAINER
    return DeductionMethod.VOLUME_TO_VOLUME


def calculate_deduction(ingredient: Dict[str, Any], quantity_sold: float) -> SaleDeduction:
    """
    Calculate the inventory deduction for one ingredient of a sold item.

    The recipe quantity is multiplied by the portions sold and expressed in
    the product's purchase unit. Products with a recorded size are converted
    through the size unit (a 750 ml bottle, a 40 lb case); others convert
    directly into the purchase unit. When no conversion exists the quantity
    is deducted 1:1 and the result carries a warning instead of raising.

    Args:
        ingredient: Dict with product_id, quantity, unit and product
        quantity_sold: Number of portions sold

    Returns:
        SaleDeduction

    Raises:
        ProductNotFound: If the ingredient has no product record

    Example:
        >>> vodka = {"name": "Vodka", "uom_purchase": "bottle", "size_value": 750,
        ...          "size_unit": "ml", "cost_per_unit": 32.99}
        >>> deduction = calculate_deduction(
        ...     {"product_id": 1, "quantity": 2, "unit": "fl oz", "product": vodka}, 100
        ... )
        >>> round(deduction.purchase_unit_deduction, 4), deduction.conversion_method
        (7.8863, 'volume_to_volume')
    """
    product = ingredient.get("product")
    if not product:
        raise ProductNotFound(ingredient.get("product_id"))

    product_name = record_value(product, "name") or "Unknown product"
    cost_per_unit = record_value(product, "cost_per_unit") or 0
    recipe_unit = normalize_unit_name(ingredient.get("unit")) or ""
    purchase_unit = resolve_product_unit_info(product).purchase_unit
    total_quantity = (ingredient.get("quantity") or 0) * quantity_sold

    size_value = record_value(product, "size_value")
    size_unit = record_value(product, "size_unit")
    size_unit = normalize_unit_name(size_unit) if size_unit else None

    if recipe_unit == purchase_unit:
        return SaleDeduction(
            quantity=total_quantity,
            unit=recipe_unit,
            purchase_unit_deduction=total_quantity,
            purchase_unit=purchase_unit,
            cost_per_recipe_unit=cost_per_unit,
            total_cost=total_quantity * cost_per_unit,
            conversion_method=DeductionMethod.ONE_TO_ONE.value,
        )

    if size_value and size_value > 0 and size_unit:
        target_unit, units_per_purchase = size_unit, size_value
    else:
        target_unit, units_per_purchase = purchase_unit, 1

    try:
        conversion = convert_units(1, recipe_unit, target_unit, product_name)
    except NoConversionPath:
        warning = (
            f"Could not convert {total_quantity:g} {recipe_unit} to {purchase_unit} "
            f"(package unit: {size_unit or purchase_unit}), using 1:1"
        )
        log_operation(
            logger,
            operation="calculate_deduction",
            outcome="fallback_one_to_one",
            level=logging.WARNING,
            product_name=product_name,
            recipe_unit=recipe_unit,
            purchase_unit=purchase_unit,
        )
        return SaleDeduction(
            quantity=total_quantity,
            unit=recipe_unit,
            purchase_unit_deduction=total_quantity,
            purchase_unit=purchase_unit,
            cost_per_recipe_unit=cost_per_unit,
            total_cost=total_quantity * cost_per_unit,
            conversion_method=DeductionMethod.FALLBACK_ONE_TO_ONE.value,
            success=False,
            warning=warning,
        )

    # Purchase units consumed by one recipe unit
    factor = conversion.value / units_per_purchase
    purchase_unit_deduction = total_quantity * factor

    return SaleDeduction(
        quantity=total_quantity,
        unit=recipe_unit,
        purchase_unit_deduction=purchase_unit_deduction,
        purchase_unit=purchase_unit,
        cost_per_recipe_unit=cost_per_unit * factor,
        total_cost=purchase_unit_deduction * cost_per_unit,
        conversion_method=_deduction_method(conversion, recipe_unit, target_unit).value,
        conversion_path=conversion.conversion_path,
    )


def calculate_total_cost(
    recipe_quantity: float, quantity_sold: float, cost_per_recipe_unit: float
) -> float:
    """Cost of selling quantity_sold portions that each use recipe_quantity."""
    return recipe_quantity * quantity_sold * cost_per_recipe_unit


def generate_reference_id(
    pos_item_name: str, sale_date: str, external_order_id: Optional[str] = None
) -> str:
    """
    Build the reference ID used to detect a sale being deducted twice.

    Example:
        >>> generate_reference_id("Burger", "2024-01-15", "ORD-1")
        'ORD-1_Burger_2024-01-15'
        >>> generate_reference_id("Burger", "2024-01-15")
        'Burger_2024-01-15'
    """
    if external_order_id:
        return f"{external_order_id}_{pos_item_name}_{sale_date}"
    return f"{pos_item_name}_{sale_date}"
