"""
Database models package.

This package contains the SQLAlchemy ORM models that the
persistence-backed service functions read from.
"""

from .base import Base, BaseModel
from .enums import (
    CompensationType,
    ContractorPaymentInterval,
    DeductionMethod,
    EmployeeStatus,
    PayPeriodType,
    PunchType,
    UnitFamily,
)
from .product import Product
from .recipe import Recipe, RecipeIngredient
from .employee import CompensationHistory, Employee
from .labor import Shift, TimePunch

__all__ = [
    "Base",
    "BaseModel",
    "CompensationType",
    "ContractorPaymentInterval",
    "DeductionMethod",
    "EmployeeStatus",
    "PayPeriodType",
    "PunchType",
    "UnitFamily",
    "Product",
    "Recipe",
    "RecipeIngredient",
    "CompensationHistory",
    "Employee",
    "Shift",
    "TimePunch",
]
