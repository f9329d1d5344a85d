"""
Unit catalog: static classification of measurement units.

Every known unit belongs to exactly one family (weight, volume, count or
length). Free-form unit strings from product and recipe records are
normalized through an alias table before classification, so "Cups",
" tablespoon " and "TBSP" all resolve to their canonical codes.
"""

from typing import Dict, List, Optional

from ..models.enums import UnitFamily
from ..utils.constants import (
    COUNT_UNITS,
    DEFAULT_RECIPE_UNIT_SUGGESTIONS,
    LENGTH_UNITS,
    RECIPE_UNIT_SUGGESTIONS,
    UNIT_ALIASES,
    VOLUME_UNITS,
    WEIGHT_UNITS,
)


def _build_family_map() -> Dict[str, UnitFamily]:
    family_map = {}
    for units, family in (
        (WEIGHT_UNITS, UnitFamily.WEIGHT),
        (VOLUME_UNITS, UnitFamily.VOLUME),
        (COUNT_UNITS, UnitFamily.COUNT),
        (LENGTH_UNITS, UnitFamily.LENGTH),
    ):
        for unit in units:
            family_map[unit] = family
    return family_map


UNIT_FAMILIES: Dict[str, UnitFamily] = _build_family_map()

# Canonical codes keyed by lowercase spelling ("l" -> "L")
_CANONICAL_BY_LOWER: Dict[str, str] = {unit.lower(): unit for unit in UNIT_FAMILIES}


def normalize_unit_name(unit: Optional[str]) -> Optional[str]:
    """
    Map a unit spelling to its canonical code.

    Matching is case-insensitive and ignores surrounding whitespace.
    Unmapped values (including blank strings) are returned unchanged.

    Args:
        unit: Unit as written on a product or recipe

    Returns:
        Canonical unit code, or the input if it is not recognized

    Example:
        >>> normalize_unit_name(" Fluid Ounce ")
        'fl oz'
        >>> normalize_unit_name("custom")
        'custom'
    """
    if unit is None:
        return None

    key = unit.strip().lower()
    if not key:
        return unit

    if key in UNIT_ALIASES:
        return UNIT_ALIASES[key]
    if key in _CANONICAL_BY_LOWER:
        return _CANONICAL_BY_LOWER[key]
    return unit


def get_unit_family(unit: Optional[str]) -> UnitFamily:
    """
    Determine the family of a unit.

    Args:
        unit: Unit string (any recognized spelling)

    Returns:
        UnitFamily, UNKNOWN if the unit is not in the catalog
    """
    if not unit:
        return UnitFamily.UNKNOWN
    return UNIT_FAMILIES.get(normalize_unit_name(unit), UnitFamily.UNKNOWN)


def is_weight_unit(unit: Optional[str]) -> bool:
    return get_unit_family(unit) == UnitFamily.WEIGHT


def is_volume_unit(unit: Optional[str]) -> bool:
    return get_unit_family(unit) == UnitFamily.VOLUME


def is_count_unit(unit: Optional[str]) -> bool:
    return get_unit_family(unit) == UnitFamily.COUNT


def units_compatible(unit1: Optional[str], unit2: Optional[str]) -> bool:
    """
    Check if two units belong to the same known family.

    Args:
        unit1: First unit
        unit2: Second unit

    Returns:
        True if both units are known and share a family
    """
    family1 = get_unit_family(unit1)
    family2 = get_unit_family(unit2)

    if family1 == UnitFamily.UNKNOWN or family2 == UnitFamily.UNKNOWN:
        return False

    return family1 == family2


def suggest_recipe_units(purchase_unit: Optional[str]) -> List[str]:
    """
    Suggest recipe units that make sense for a purchase unit.

    Args:
        purchase_unit: Unit the product is bought in

    Returns:
        Ordered list of recipe unit codes

    Example:
        >>> suggest_recipe_units("LB")
        ['lb', 'oz', 'g']
    """
    family = get_unit_family(purchase_unit)
    suggestions = RECIPE_UNIT_SUGGESTIONS.get(family.value, DEFAULT_RECIPE_UNIT_SUGGESTIONS)
    return list(suggestions)
