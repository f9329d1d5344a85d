"""
Enumerations for unit classification and labor costing.

This module contains enums used across models and services:
- UnitFamily: Measurement family a unit belongs to
- CompensationType: How an employee is paid
- PayPeriodType: Salary pay period lengths
- ContractorPaymentInterval: Contractor payment cadence
- EmployeeStatus: Employment state
- PunchType: Time clock punch kinds
- DeductionMethod: Conversion used for a sale deduction
"""

from enum import Enum


class UnitFamily(str, Enum):
    """
    Measurement family of a unit.

    Family membership decides which conversion paths are legal: weight
    routes through grams, volume through milliliters, count units are
    interchangeable 1:1, and length units are classified only.
    """

    WEIGHT = "weight"
    VOLUME = "volume"
    COUNT = "count"
    LENGTH = "length"
    UNKNOWN = "unknown"


class CompensationType(str, Enum):
    """
    Employee compensation type.

    Values:
        HOURLY: Paid per hour worked
        SALARY: Paid a fixed amount per pay period
        CONTRACTOR: Paid a fixed amount per interval, or per job
    """

    HOURLY = "hourly"
    SALARY = "salary"
    CONTRACTOR = "contractor"


class PayPeriodType(str, Enum):
    """Salary pay period length."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    SEMI_MONTHLY = "semi-monthly"
    MONTHLY = "monthly"


class ContractorPaymentInterval(str, Enum):
    """
    Contractor payment cadence.

    PER_JOB contractors never receive a daily allocation.
    """

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    PER_JOB = "per-job"


class EmployeeStatus(str, Enum):
    """Employment status. Only ACTIVE employees accrue labor cost."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"


class PunchType(str, Enum):
    """Time clock punch type."""

    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    BREAK_START = "break_start"
    BREAK_END = "break_end"


class DeductionMethod(str, Enum):
    """
    How a sale deduction was expressed in purchase units.

    FALLBACK_ONE_TO_ONE means no conversion applied and the recipe
    quantity was deducted as-is; such deductions carry a warning.
    """

    ONE_TO_ONE = "1:1"
    COUNT_TO_CONTAINER = "count_to_container"
    VOLUME_TO_VOLUME = "volume_to_volume"
    WEIGHT_TO_WEIGHT = "weight_to_weight"
    DENSITY_TO_WEIGHT = "density_to_weight"
    FALLBACK_ONE_TO_ONE = "fallback_1:1"
