"""Service layer exception classes for the back-office costing core.

This module defines all custom exceptions used by the service layer to provide
consistent error handling across the application.

Exception Hierarchy:
    ServiceError (base)
    ├── ConversionError
    │   ├── NoConversionPath
    │   ├── MissingContainerSize
    │   └── IncompatibleUnits
    ├── ProductNotFound
    ├── RecipeNotFound
    ├── EmployeeNotFound
    └── ValidationError
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions should inherit from this class.
    """

    pass


class ConversionError(ServiceError):
    """Base exception for unit conversion and cost impact failures."""

    pass


class NoConversionPath(ConversionError):
    """Raised when no standard, product-specific or family-routed conversion exists.

    Args:
        from_unit: Source unit
        to_unit: Target unit
        product_name: Product hint that was tried, if any

    Example:
        >>> raise NoConversionPath("lb", "each")
        NoConversionPath: No conversion path from 'lb' to 'each'
    """

    def __init__(self, from_unit: str, to_unit: str, product_name: Optional[str] = None):
        self.from_unit = from_unit
        self.to_unit = to_unit
        self.product_name = product_name

        message = f"No conversion path from '{from_unit}' to '{to_unit}'"
        if product_name:
            message += f" for {product_name}"
        super().__init__(message)


class MissingContainerSize(ConversionError):
    """Raised when a volume measure is applied to a container with no known size.

    Args:
        product_name: Product whose size metadata is missing
        recipe_unit: Volume unit the recipe uses
        purchase_unit: Container unit the product is stocked in

    Example:
        >>> raise MissingContainerSize("House Vodka", "ml", "bottle")
        MissingContainerSize: Cannot convert ml to bottle for House Vodka: container size is not set
    """

    def __init__(self, product_name: str, recipe_unit: str, purchase_unit: str):
        self.product_name = product_name
        self.recipe_unit = recipe_unit
        self.purchase_unit = purchase_unit
        super().__init__(
            f"Cannot convert {recipe_unit} to {purchase_unit} for {product_name}: "
            f"container size is not set"
        )


class IncompatibleUnits(ConversionError):
    """Raised after every fallback conversion for a cost impact has been exhausted.

    Args:
        recipe_unit: Unit the recipe uses
        purchase_unit: Unit the product is stocked in
        product_name: Product being costed
    """

    def __init__(self, recipe_unit: str, purchase_unit: str, product_name: str):
        self.recipe_unit = recipe_unit
        self.purchase_unit = purchase_unit
        self.product_name = product_name
        super().__init__(
            f"Cannot convert {recipe_unit} to {purchase_unit} for {product_name}"
        )


class ProductNotFound(ServiceError):
    """Raised when a product cannot be found.

    Args:
        product_id: The product ID that was not found

    Example:
        >>> raise ProductNotFound(123)
        ProductNotFound: Product not found: 123
    """

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class RecipeNotFound(ServiceError):
    """Raised when a recipe cannot be found by ID."""

    def __init__(self, recipe_id: int):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe with ID {recipe_id} not found")


class EmployeeNotFound(ServiceError):
    """Raised when an employee cannot be found by ID."""

    def __init__(self, employee_id):
        self.employee_id = employee_id
        super().__init__(f"Employee with ID {employee_id} not found")


class ValidationError(ServiceError):
    """Raised when input validation fails.

    Args:
        errors: List of validation error messages
    """

    def __init__(self, errors: list):
        self.errors = errors
        error_msg = "; ".join(errors)
        super().__init__(f"Validation failed: {error_msg}")
