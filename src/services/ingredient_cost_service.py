"""
Ingredient Cost Service - Cost of recipe and prep-batch ingredient lines.

This module costs ingredient lines against their products:
- calculate_ingredient_cost: one line, raising on bad data
- calculate_ingredients_cost: a list of lines, degrading failures to
  warnings and zero-cost placeholders so one bad line never blocks the batch
- calculate_recipe_cost: loads a stored recipe and costs it

Ingredient records are plain dicts:
    {"product_id": 7, "quantity": 1.5, "unit": "fl oz", "product": {...}}
where "product" carries name, uom_purchase, size_value, size_unit and
cost_per_unit. Inventory deductions are always expressed in the product's
purchase unit.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from src.models import Recipe, RecipeIngredient
from src.services.database import session_scope
from src.services.dto import IngredientCostResult, IngredientsCostSummary
from src.services.dto_utils import cost_to_string
from src.services.exceptions import ProductNotFound, RecipeNotFound, ServiceError
from src.services.inventory_impact_service import calculate_inventory_impact
from src.services.logging_utils import get_service_logger, log_operation
from src.services.packaging_service import resolve_product_unit_info
from src.services.unit_catalog import normalize_unit_name
from src.utils.constants import CURRENCY_SYMBOL, DEFAULT_PURCHASE_UNIT, QUANTITY_DECIMAL_PLACES

logger = get_service_logger(__name__)


def calculate_ingredient_cost(ingredient: Dict[str, Any]) -> IngredientCostResult:
    """
    Calculate the cost and inventory deduction of one ingredient line.

    Args:
        ingredient: Dict with product_id, quantity, unit and product

    Returns:
        IngredientCostResult; inventory_deduction_unit is the product's
        purchase unit

    Raises:
        ProductNotFound: If the line has no product record
        MissingContainerSize: Volume measure against an unsized container
        IncompatibleUnits: Recipe unit cannot be expressed in purchase units
    """
    product = ingredient.get("product")
    product_id = ingredient.get("product_id")
    if not product:
        raise ProductNotFound(product_id)

    product_name = product.get("name") or "Unknown product"
    quantity = ingredient.get("quantity") or 0
    unit = normalize_unit_name(ingredient.get("unit")) or ""
    cost_per_unit = product.get("cost_per_unit") or 0

    unit_info = resolve_product_unit_info(product)
    purchase_unit = unit_info.purchase_unit

    result = IngredientCostResult(
        product_id=product_id,
        product_name=product_name,
        quantity=quantity,
        unit=unit,
        cost_per_unit=cost_per_unit,
        inventory_deduction=quantity,
        inventory_deduction_unit=purchase_unit,
        cost_impact=0.0,
        conversion_applied=False,
        warnings=list(unit_info.warnings),
    )

    # No cost data: count the quantity 1:1 and skip conversion entirely
    if cost_per_unit <= 0:
        return result

    if unit == purchase_unit:
        result.cost_impact = quantity * cost_per_unit
        return result

    # A defaulted container size is not a real size; let the impact
    # calculation report it as missing
    has_recorded_size = unit_info.is_container_unit and not unit_info.warnings
    impact = calculate_inventory_impact(
        recipe_quantity=quantity,
        recipe_unit=unit,
        purchase_quantity=1,
        purchase_unit=purchase_unit,
        product_name=product_name,
        cost_per_package=cost_per_unit,
        size_value=unit_info.size_value if has_recorded_size else None,
        size_unit=unit_info.size_unit if has_recorded_size else None,
    )

    result.inventory_deduction = impact.inventory_deduction
    result.cost_impact = impact.cost_impact
    result.conversion_applied = True
    if impact.conversion_details is not None:
        result.conversion_path = impact.conversion_details.conversion_path
    result.warnings.extend(impact.warnings)
    return result


def _placeholder_result(ingredient: Dict[str, Any], warning: str) -> IngredientCostResult:
    product = ingredient.get("product") or {}
    if product:
        purchase_unit = resolve_product_unit_info(product).purchase_unit
    else:
        purchase_unit = DEFAULT_PURCHASE_UNIT

    return IngredientCostResult(
        product_id=ingredient.get("product_id"),
        product_name=product.get("name") or "Unknown product",
        quantity=ingredient.get("quantity") or 0,
        unit=ingredient.get("unit") or "",
        cost_per_unit=product.get("cost_per_unit") or 0,
        inventory_deduction=0.0,
        inventory_deduction_unit=purchase_unit,
        cost_impact=0.0,
        conversion_applied=False,
        warnings=[warning],
    )


def calculate_ingredients_cost(ingredients: List[Dict[str, Any]]) -> IngredientsCostSummary:
    """
    Cost a list of ingredient lines.

    Lines that fail are replaced by zero-cost placeholders, so the result
    list stays index-aligned with the input, and each failure adds one
    entry to the summary warnings.

    Args:
        ingredients: Ingredient dicts (see calculate_ingredient_cost)

    Returns:
        IngredientsCostSummary with total_cost, per-line results and warnings
    """
    results = []
    warnings = []

    for index, ingredient in enumerate(ingredients):
        try:
            results.append(calculate_ingredient_cost(ingredient))
        except ServiceError as e:
            product = ingredient.get("product") or {}
            label = product.get("name") or f"Ingredient {index + 1}"
            warning = f"{label}: {e}"
            warnings.append(warning)
            results.append(_placeholder_result(ingredient, warning))
            log_operation(
                logger,
                operation="calculate_ingredients_cost",
                outcome="ingredient_failed",
                level=logging.WARNING,
                line_index=index,
                product_id=ingredient.get("product_id"),
                error=str(e),
            )

    total_cost = sum(result.cost_impact for result in results)

    log_operation(
        logger,
        operation="calculate_ingredients_cost",
        outcome="success",
        level=logging.DEBUG,
        ingredient_count=len(results),
        failed_count=len(warnings),
        total_cost=total_cost,
    )

    return IngredientsCostSummary(total_cost=total_cost, ingredients=results, warnings=warnings)


def format_cost_result(result: IngredientCostResult) -> str:
    """
    Format an ingredient cost line for display.

    Example:
        "Vodka: 1.5 fl oz (0.0591 bottle) = $1.18"
        "Sugar: 2 kg = $16.00"
    """
    quantity = f"{result.quantity:g} {result.unit}"
    cost = f"{CURRENCY_SYMBOL}{cost_to_string(result.cost_impact)}"

    if result.conversion_applied:
        deduction = (
            f"{result.inventory_deduction:.{QUANTITY_DECIMAL_PLACES}f} "
            f"{result.inventory_deduction_unit}"
        )
        return f"{result.product_name}: {quantity} ({deduction}) = {cost}"

    return f"{result.product_name}: {quantity} = {cost}"


# ============================================================================
# Persistence-backed Entry Points
# ============================================================================


def _ingredient_record(line: RecipeIngredient) -> Dict[str, Any]:
    return {
        "product_id": line.product_id,
        "quantity": line.quantity,
        "unit": line.unit,
        "product": line.product.to_dict() if line.product is not None else None,
    }


def calculate_recipe_cost(
    recipe_id: int,
    session: Optional[Session] = None,
) -> IngredientsCostSummary:
    """
    Cost a stored recipe from its ingredient lines and their products.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        IngredientsCostSummary for the recipe's lines, in line order

    Raises:
        RecipeNotFound: If the recipe does not exist
    """
    if session is not None:
        return _calculate_recipe_cost_impl(recipe_id, session)
    with session_scope() as session:
        return _calculate_recipe_cost_impl(recipe_id, session)


def _calculate_recipe_cost_impl(recipe_id: int, session: Session) -> IngredientsCostSummary:
    recipe = (
        session.query(Recipe)
        .options(joinedload(Recipe.ingredients).joinedload(RecipeIngredient.product))
        .filter(Recipe.id == recipe_id)
        .first()
    )
    if recipe is None:
        raise RecipeNotFound(recipe_id)

    return calculate_ingredients_cost([_ingredient_record(line) for line in recipe.ingredients])
