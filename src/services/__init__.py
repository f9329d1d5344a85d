"""Services package - Business logic layer for Back-Office Costing.

This package contains the costing and labor calculation services. The
calculations are pure functions over plain records; only the
persistence-backed entry points open a database session.

Architecture:
- Services: Stateless functions organized by concern
- Transactions: Managed via session_scope() context manager
- Exceptions: Consistent error handling via ServiceError hierarchy
- Warnings: Degraded-data notes returned alongside results and logged

Service Modules:
- unit_catalog: Unit families, aliases and recipe unit suggestions
- unit_converter: Unit conversion with ingredient-specific overrides
- packaging_service: Purchase-unit semantics of products
- inventory_impact_service: Inventory and cost consumed by a recipe line
- ingredient_cost_service: Ingredient line and recipe costing
- compensation_service: Daily allocation of employee compensation
- time_punch_service: Pairing of time clock punches into work periods
- labor_cost_service: Scheduled and actual daily labor cost

Infrastructure:
- exceptions: Custom exception classes for service layer errors
- database: Session management and database utilities
- dto / dto_utils: Result structures and money helpers
- logging_utils: Structured service logging
"""

from . import (
    compensation_service,
    database,
    ingredient_cost_service,
    inventory_impact_service,
    labor_cost_service,
    packaging_service,
    time_punch_service,
    unit_catalog,
    unit_converter,
)

from .exceptions import (
    ConversionError,
    EmployeeNotFound,
    IncompatibleUnits,
    MissingContainerSize,
    NoConversionPath,
    ProductNotFound,
    RecipeNotFound,
    ServiceError,
    ValidationError,
)

__all__ = [
    "compensation_service",
    "database",
    "ingredient_cost_service",
    "inventory_impact_service",
    "labor_cost_service",
    "packaging_service",
    "time_punch_service",
    "unit_catalog",
    "unit_converter",
    "ConversionError",
    "EmployeeNotFound",
    "IncompatibleUnits",
    "MissingContainerSize",
    "NoConversionPath",
    "ProductNotFound",
    "RecipeNotFound",
    "ServiceError",
    "ValidationError",
]
