"""Service layer logging utilities.

Provides structured logging functions for service operations, enabling
consistent log format and context across costing and labor calculations.

Usage:
    from src.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    # Log a degraded-data fallback
    log_operation(
        logger,
        operation="resolve_product_unit_info",
        outcome="defaulted_container_size",
        level=logging.WARNING,
        product_name="House Vodka",
        package_type="bottle",
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "backoffice_costing.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for service operations.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger instance with the 'backoffice_costing.services' prefix.

    Example:
        >>> logger = get_service_logger("src.services.labor_cost_service")
        >>> logger.name
        'backoffice_costing.services.labor_cost_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The context is passed via the 'extra' parameter for structured logging,
    so handlers can read fields such as `product_name` directly from the
    log record.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g., "calculate_inventory_impact")
        outcome: Outcome description (e.g., "success", "fallback_oz_ml")
        level: Log level (default: INFO). Use DEBUG for verbose/frequent logs.
        **context: Additional context fields (product names, units, counts)
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
