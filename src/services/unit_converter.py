"""
Unit conversion system for recipe and inventory costing.

This module provides:
- Standard unit conversions (weight, volume, count)
- Ingredient-specific volume/mass overrides detected from product names
- Conversion display helpers

Conversion Strategy, in priority order:
- Same unit: identity
- Ingredient override for the product (direct, reverse, then bridged
  through grams)
- Direct standard factor (or its inverse)
- Weight units convert through grams, volume units through milliliters
- Count units are dimensionless and convert 1:1
- Anything else raises NoConversionPath
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..models.enums import UnitFamily
from ..utils.constants import (
    GRAMS_PER_LB,
    GRAMS_PER_OZ,
    ML_PER_CUP,
    ML_PER_GAL,
    ML_PER_QT,
    ML_PER_TBSP,
    ML_PER_TSP,
    VOLUME_TO_ML,
    WEIGHT_TO_GRAMS,
)
from .dto import ConversionResult
from .exceptions import NoConversionPath
from .unit_catalog import get_unit_family, normalize_unit_name


# ============================================================================
# Standard Conversion Tables
# ============================================================================

# Directed factors: quantity_in_to = quantity_in_from * factor.
# Pairs missing here are tried inverted, then routed through a base unit.
STANDARD_CONVERSIONS: Dict[str, Dict[str, float]] = {
    # Weight
    "oz": {"g": GRAMS_PER_OZ, "lb": 1 / 16, "kg": GRAMS_PER_OZ / 1000},
    "lb": {"g": GRAMS_PER_LB, "oz": 16, "kg": GRAMS_PER_LB / 1000},
    "kg": {"g": 1000, "lb": 1000 / GRAMS_PER_LB, "oz": 1000 / GRAMS_PER_OZ},
    "g": {"kg": 0.001, "oz": 1 / GRAMS_PER_OZ, "lb": 1 / GRAMS_PER_LB},
    # Volume ("oz" here is the fluid ounce of kitchen measures)
    "cup": {"ml": ML_PER_CUP, "oz": 8, "tbsp": 16, "tsp": 48, "L": ML_PER_CUP / 1000},
    "tbsp": {"ml": ML_PER_TBSP, "oz": 0.5, "cup": 1 / 16, "tsp": 3},
    "tsp": {"ml": ML_PER_TSP, "oz": 1 / 6, "tbsp": 1 / 3, "cup": 1 / 48},
    "ml": {"L": 0.001, "cup": 1 / ML_PER_CUP, "tbsp": 1 / ML_PER_TBSP, "tsp": 1 / ML_PER_TSP},
    "L": {"ml": 1000, "cup": 1000 / ML_PER_CUP, "gal": 1000 / ML_PER_GAL},
    "gal": {"L": ML_PER_GAL / 1000, "qt": 4, "cup": 16},
    "qt": {"gal": 0.25, "cup": 4, "L": ML_PER_QT / 1000},
    # Count
    "dozen": {"each": 12, "piece": 12, "unit": 12},
}


# ============================================================================
# Ingredient-Specific Overrides
# ============================================================================


class ProductType(str, Enum):
    """Ingredient types with their own volume-to-mass factors."""

    RICE = "rice"
    FLOUR = "flour"
    SUGAR = "sugar"
    BROWN_SUGAR = "brown_sugar"
    BUTTER = "butter"


# Evaluated in order against the lowercased product name; first match wins.
PRODUCT_TYPE_RULES: List[Tuple[Callable[[str], bool], ProductType]] = [
    (lambda name: "rice" in name, ProductType.RICE),
    (lambda name: "flour" in name, ProductType.FLOUR),
    (lambda name: "sugar" in name and "brown" in name, ProductType.BROWN_SUGAR),
    (lambda name: "sugar" in name, ProductType.SUGAR),
    (lambda name: "butter" in name, ProductType.BUTTER),
]

PRODUCT_SPECIFIC_CONVERSIONS: Dict[ProductType, Dict[Tuple[str, str], float]] = {
    ProductType.RICE: {
        ("cup", "g"): 180,  # uncooked
        ("cup", "oz"): 6.3,
        ("g", "cup"): 1 / 180,
        ("oz", "cup"): 1 / 6.3,
    },
    ProductType.FLOUR: {
        ("cup", "g"): 120,  # all-purpose
        ("cup", "oz"): 4.23,
        ("g", "cup"): 1 / 120,
        ("oz", "cup"): 1 / 4.23,
    },
    ProductType.SUGAR: {
        ("cup", "g"): 200,  # granulated
        ("cup", "oz"): 7.05,
        ("g", "cup"): 1 / 200,
        ("oz", "cup"): 1 / 7.05,
    },
    ProductType.BROWN_SUGAR: {
        ("cup", "g"): 213,  # packed
        ("cup", "oz"): 7.5,
        ("g", "cup"): 1 / 213,
        ("oz", "cup"): 1 / 7.5,
    },
    ProductType.BUTTER: {
        ("cup", "g"): 227,
        ("cup", "oz"): 8,
        ("tbsp", "g"): 14.2,
        ("g", "cup"): 1 / 227,
        ("oz", "cup"): 1 / 8,
    },
}


def detect_product_type(product_name: Optional[str]) -> Optional[ProductType]:
    """
    Detect the ingredient type of a product from its name.

    Args:
        product_name: Product name (case-insensitive substring match)

    Returns:
        Matching ProductType, or None

    Example:
        >>> detect_product_type("C&H Light Brown Sugar")
        <ProductType.BROWN_SUGAR: 'brown_sugar'>
    """
    if not product_name:
        return None

    name = product_name.lower()
    for predicate, product_type in PRODUCT_TYPE_RULES:
        if predicate(name):
            return product_type
    return None


def _grams_per_volume_unit(
    overrides: Dict[Tuple[str, str], float], volume_unit: str
) -> Optional[float]:
    """Grams in one `volume_unit` of the ingredient, derived from its overrides."""
    if (volume_unit, "g") in overrides:
        return overrides[(volume_unit, "g")]

    if volume_unit not in VOLUME_TO_ML:
        return None

    for (source, target), factor in overrides.items():
        if target == "g" and source in VOLUME_TO_ML:
            return factor * VOLUME_TO_ML[volume_unit] / VOLUME_TO_ML[source]
    return None


def _convert_with_override(
    value: float, from_unit: str, to_unit: str, product_type: ProductType
) -> Optional[ConversionResult]:
    overrides = PRODUCT_SPECIFIC_CONVERSIONS.get(product_type)
    if not overrides:
        return None

    tag = product_type.value
    key = (from_unit, to_unit)
    if key in overrides:
        return ConversionResult(
            value=value * overrides[key],
            from_unit=from_unit,
            to_unit=to_unit,
            conversion_path=[tag, f"{from_unit}_to_{to_unit}"],
            product_specific=True,
        )

    reverse_key = (to_unit, from_unit)
    if reverse_key in overrides:
        return ConversionResult(
            value=value / overrides[reverse_key],
            from_unit=from_unit,
            to_unit=to_unit,
            conversion_path=[tag, f"reverse_{to_unit}_to_{from_unit}"],
            product_specific=True,
        )

    # Volume measure into any mass unit, or back, bridged through grams
    if to_unit in WEIGHT_TO_GRAMS:
        grams_per_unit = _grams_per_volume_unit(overrides, from_unit)
        if grams_per_unit:
            grams = value * grams_per_unit
            return ConversionResult(
                value=grams / WEIGHT_TO_GRAMS[to_unit],
                from_unit=from_unit,
                to_unit=to_unit,
                conversion_path=[tag, f"{from_unit}_to_g", f"g_to_{to_unit}"],
                product_specific=True,
            )

    if from_unit in WEIGHT_TO_GRAMS:
        grams_per_unit = _grams_per_volume_unit(overrides, to_unit)
        if grams_per_unit:
            grams = value * WEIGHT_TO_GRAMS[from_unit]
            return ConversionResult(
                value=grams / grams_per_unit,
                from_unit=from_unit,
                to_unit=to_unit,
                conversion_path=[tag, f"{from_unit}_to_g", f"g_to_{to_unit}"],
                product_specific=True,
            )

    return None


# ============================================================================
# Conversion
# ============================================================================


def get_standard_factor(from_unit: str, to_unit: str) -> Optional[Tuple[float, bool]]:
    """
    Look up a tabulated factor between two canonical units.

    Returns:
        (factor, inverted) or None if neither direction is tabulated
    """
    factor = STANDARD_CONVERSIONS.get(from_unit, {}).get(to_unit)
    if factor:
        return factor, False

    reverse = STANDARD_CONVERSIONS.get(to_unit, {}).get(from_unit)
    if reverse:
        return 1 / reverse, True

    return None


def convert_units(
    value: float,
    from_unit: str,
    to_unit: str,
    product_name: Optional[str] = None,
) -> ConversionResult:
    """
    Convert a quantity between units, using ingredient overrides when available.

    Args:
        value: Quantity to convert
        from_unit: Source unit (any recognized spelling)
        to_unit: Target unit (any recognized spelling)
        product_name: Product name used to detect ingredient overrides

    Returns:
        ConversionResult with the converted value

    Raises:
        NoConversionPath: If the units cannot be converted (e.g. weight to count)

    Example:
        >>> convert_units(1, "cup", "g", "All-Purpose Flour").value
        120
    """
    source = normalize_unit_name(from_unit)
    target = normalize_unit_name(to_unit)

    if source == target:
        return ConversionResult(value=value, from_unit=source, to_unit=target)

    if product_name:
        product_type = detect_product_type(product_name)
        if product_type is not None:
            result = _convert_with_override(value, source, target, product_type)
            if result is not None:
                return result

    standard = get_standard_factor(source, target)
    if standard is not None:
        factor, inverted = standard
        return ConversionResult(
            value=value * factor,
            from_unit=source,
            to_unit=target,
            conversion_path=[f"inverse_{target}_to_{source}"] if inverted else None,
        )

    if source in WEIGHT_TO_GRAMS and target in WEIGHT_TO_GRAMS:
        return ConversionResult(
            value=value * WEIGHT_TO_GRAMS[source] / WEIGHT_TO_GRAMS[target],
            from_unit=source,
            to_unit=target,
            conversion_path=[source, "g", target],
        )

    if source in VOLUME_TO_ML and target in VOLUME_TO_ML:
        return ConversionResult(
            value=value * VOLUME_TO_ML[source] / VOLUME_TO_ML[target],
            from_unit=source,
            to_unit=target,
            conversion_path=[source, "ml", target],
        )

    if get_unit_family(source) == UnitFamily.COUNT and get_unit_family(target) == UnitFamily.COUNT:
        return ConversionResult(
            value=value,
            from_unit=source,
            to_unit=target,
            conversion_path=[source, target],
        )

    raise NoConversionPath(source, target, product_name)


def can_convert(from_unit: str, to_unit: str, product_name: Optional[str] = None) -> bool:
    """
    Check whether a conversion path exists between two units.

    Args:
        from_unit: Source unit
        to_unit: Target unit
        product_name: Optional product name for ingredient overrides

    Returns:
        True if convert_units would succeed
    """
    try:
        convert_units(1.0, from_unit, to_unit, product_name)
    except NoConversionPath:
        return False
    return True


def format_conversion(value: float, from_unit: str, to_unit: str, precision: int = 2) -> str:
    """
    Format a unit conversion for display.

    Args:
        value: Source quantity
        from_unit: Source unit
        to_unit: Target unit
        precision: Decimal places for result

    Returns:
        Formatted string (e.g., "1 lb = 16.00 oz")
        Returns error message if conversion fails
    """
    try:
        result = convert_units(value, from_unit, to_unit)
    except NoConversionPath as e:
        return f"Error: {e}"

    return f"{value:g} {from_unit} = {result.value:.{precision}f} {to_unit}"
