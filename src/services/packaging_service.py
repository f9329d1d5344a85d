"""
Packaging Service - Purchase-unit semantics for products.

This module derives how a product is bought and stocked from its raw
stored fields (uom_purchase, size_value, size_unit):

- Container products ("bottle", "case", "bag", ...) are stocked by the
  container, and their physical size is needed to cost volume measures.
- Direct-measure products ("kg", "lb", "L", ...) are stocked in the
  measurement unit itself.

Missing data never raises here. A container with no recorded size is
treated as one opaque unit and the defaulting is reported as a warning.
"""

import logging
from typing import Any, Optional

from src.services.dto import ProductUnitInfo
from src.services.dto_utils import record_value
from src.services.logging_utils import get_service_logger, log_operation
from src.services.unit_catalog import is_count_unit, normalize_unit_name
from src.utils.constants import DEFAULT_PURCHASE_UNIT

logger = get_service_logger(__name__)


def _clean_unit(unit: Optional[str]) -> Optional[str]:
    if unit is None or not str(unit).strip():
        return None
    return normalize_unit_name(str(unit))


def resolve_product_unit_info(product: Any) -> ProductUnitInfo:
    """
    Derive purchase-unit information for a product.

    Args:
        product: Product dict (or Product model) with uom_purchase,
            size_value, size_unit and name

    Returns:
        ProductUnitInfo. For container products purchase_unit is the
        container itself; for direct-measure products it is the stated
        purchase unit, then the size unit, then "unit".

    Example:
        >>> info = resolve_product_unit_info(
        ...     {"name": "Vodka", "uom_purchase": "bottle", "size_value": 750, "size_unit": "ml"}
        ... )
        >>> info.is_container_unit, info.purchase_unit, info.package_quantity
        (True, 'bottle', 750)
    """
    uom_purchase = _clean_unit(record_value(product, "uom_purchase"))
    size_unit = _clean_unit(record_value(product, "size_unit"))
    size_value = record_value(product, "size_value")

    package_type = uom_purchase or DEFAULT_PURCHASE_UNIT
    is_container = is_count_unit(package_type)
    warnings = []

    # Zero or negative sizes are treated as unrecorded
    if is_container and (not size_value or size_value <= 0 or not size_unit):
        product_name = record_value(product, "name") or "Unknown product"
        size_value = 1
        size_unit = package_type
        message = (
            f"{product_name}: container size not set for '{package_type}', "
            f"treating each {package_type} as 1 {package_type}"
        )
        warnings.append(message)
        log_operation(
            logger,
            operation="resolve_product_unit_info",
            outcome="defaulted_container_size",
            level=logging.WARNING,
            product_name=product_name,
            package_type=package_type,
        )

    if is_container:
        purchase_unit = package_type
    else:
        purchase_unit = uom_purchase or size_unit or DEFAULT_PURCHASE_UNIT

    package_quantity = max(size_value or 0, 1)

    return ProductUnitInfo(
        package_type=package_type,
        is_container_unit=is_container,
        size_value=size_value,
        size_unit=size_unit,
        purchase_unit=purchase_unit,
        package_quantity=package_quantity,
        warnings=warnings,
    )
