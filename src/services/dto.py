"""Data Transfer Objects for service layer.

This module provides the plain result structures returned by the costing
and labor services. They hold no behavior beyond serialization, so callers
can hand them straight to a report or JSON encoder.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from .dto_utils import cents_to_dollars


@dataclass
class ConversionResult:
    """Outcome of a unit conversion.

    Attributes:
        value: Converted quantity, in to_unit
        from_unit: Source unit
        to_unit: Target unit
        conversion_path: How the value was reached, e.g.
            ["flour", "cup_to_g"] or ["lb", "g", "kg"]; None for a direct factor
        product_specific: True when an ingredient override was used
    """

    value: float
    from_unit: str
    to_unit: str
    conversion_path: Optional[List[str]] = None
    product_specific: bool = False


@dataclass
class ProductUnitInfo:
    """Purchase-unit semantics derived from a product's stored fields.

    Attributes:
        package_type: Stated purchase unit ("unit" when missing)
        is_container_unit: True when package_type is a count unit
        size_value: Physical size of one package
        size_unit: Unit of size_value
        purchase_unit: Unit inventory is tracked in
        package_quantity: size_value, at least 1
        warnings: Degraded-data notes raised while resolving
    """

    package_type: str
    is_container_unit: bool
    size_value: Optional[float]
    size_unit: Optional[str]
    purchase_unit: str
    package_quantity: float
    warnings: List[str] = field(default_factory=list)


@dataclass
class InventoryImpact:
    """Inventory and cost consumed by one recipe line."""

    inventory_deduction: float
    inventory_deduction_unit: str
    cost_impact: float
    percentage_of_package: float
    conversion_details: Optional[ConversionResult] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class SaleDeduction:
    """Inventory deduction for one ingredient of a sold menu item.

    Attributes:
        quantity: Total recipe quantity consumed (per-portion quantity times portions sold)
        unit: Recipe unit of quantity
        purchase_unit_deduction: Amount to deduct, in purchase_unit
        purchase_unit: Unit the product is stocked in
        cost_per_recipe_unit: Cost of one recipe unit
        total_cost: Cost of the whole deduction
        conversion_method: DeductionMethod value
        success: False when no conversion applied and 1:1 was assumed
        conversion_path: Converter path, when one was recorded
        warning: Set when success is False
    """

    quantity: float
    unit: str
    purchase_unit_deduction: float
    purchase_unit: str
    cost_per_recipe_unit: float
    total_cost: float
    conversion_method: str
    success: bool = True
    conversion_path: Optional[List[str]] = None
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)


@dataclass
class RecipePortions:
    """How many recipe portions one purchase quantity yields."""

    total_portions: float
    cost_per_portion: float
    conversion_details: Optional[ConversionResult] = None


@dataclass
class IngredientCostResult:
    """Cost breakdown of one ingredient line.

    inventory_deduction_unit is always the product's purchase unit.
    """

    product_id: Any
    product_name: str
    quantity: float
    unit: str
    cost_per_unit: float
    inventory_deduction: float
    inventory_deduction_unit: str
    cost_impact: float
    conversion_applied: bool
    conversion_path: Optional[List[str]] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)


@dataclass
class IngredientsCostSummary:
    """Aggregate cost of a list of ingredient lines.

    ingredients stays index-aligned with the input list.
    """

    total_cost: float
    ingredients: List[IngredientCostResult]
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a plain dict."""
        return asdict(self)


@dataclass
class WorkPeriod:
    """A contiguous stretch of work (or break) built from time punches."""

    start_time: datetime
    end_time: datetime
    hours: float
    is_break: bool = False


@dataclass
class DailyLaborCost:
    """Labor cost of one UTC calendar day. Amounts are integer cents."""

    date: str
    hourly_cost: int = 0
    salary_cost: int = 0
    contractor_cost: int = 0
    total_cost: int = 0
    hours_worked: float = 0.0

    def add(self, compensation_type: str, cents: int, hours: float = 0.0) -> None:
        """Add cost to the bucket for a compensation type, keeping total_cost in step."""
        if compensation_type == "hourly":
            self.hourly_cost += cents
            self.hours_worked += hours
        elif compensation_type == "salary":
            self.salary_cost += cents
        elif compensation_type == "contractor":
            self.contractor_cost += cents
        else:
            raise ValueError(f"Unknown compensation type: {compensation_type}")
        self.total_cost += cents

    def to_dict(self, major_units: bool = False) -> Dict[str, Any]:
        """
        Serialize to a plain dict.

        Args:
            major_units: Convert amounts from cents to dollars (Decimal)
        """
        data = asdict(self)
        if major_units:
            for key in ("hourly_cost", "salary_cost", "contractor_cost", "total_cost"):
                data[key] = cents_to_dollars(data[key])
        return data


@dataclass
class HourlyLaborSummary:
    cost: int = 0
    hours: float = 0.0


@dataclass
class FixedLaborSummary:
    cost: int = 0
    employees: int = 0
    days_scheduled: int = 0


@dataclass
class LaborCostBreakdown:
    """Period labor cost partitioned by compensation type. Amounts are integer cents."""

    hourly: HourlyLaborSummary = field(default_factory=HourlyLaborSummary)
    salary: FixedLaborSummary = field(default_factory=FixedLaborSummary)
    contractor: FixedLaborSummary = field(default_factory=FixedLaborSummary)
    total: int = 0

    def to_dict(self, major_units: bool = False) -> Dict[str, Any]:
        """
        Serialize to a plain dict.

        Args:
            major_units: Convert amounts from cents to dollars (Decimal)
        """
        data = asdict(self)
        if major_units:
            for key in ("hourly", "salary", "contractor"):
                data[key]["cost"] = cents_to_dollars(data[key]["cost"])
            data["total"] = cents_to_dollars(data["total"])
        return data


@dataclass
class LaborCostResult:
    """Breakdown plus the per-day schedule it was summed from."""

    breakdown: LaborCostBreakdown
    daily_costs: List[DailyLaborCost]

    def to_dict(self, major_units: bool = False) -> Dict[str, Any]:
        """Serialize to a plain dict."""
        return {
            "breakdown": self.breakdown.to_dict(major_units=major_units),
            "daily_costs": [day.to_dict(major_units=major_units) for day in self.daily_costs],
        }


@dataclass
class DailyAllocation:
    """A single employee's cost allocation for one day. Amount is integer cents."""

    employee_id: Any
    date: str
    compensation_type: str
    allocated_amount: int
    calculation_notes: str = ""
    source_pay_period_start: Optional[str] = None
    source_pay_period_end: Optional[str] = None


@dataclass
class CompensationSummary:
    """Totals for one employee over a set of daily allocations."""

    compensation_type: str
    total_amount: int
    hours_worked: Optional[float] = None
    days_worked: Optional[int] = None
    effective_hourly_rate: Optional[int] = None
