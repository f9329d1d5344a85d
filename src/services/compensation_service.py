"""
Compensation Service - Daily allocation of employee compensation.

Functions for calculating daily labor costs for each compensation type:
- Hourly employees: hours worked x hourly rate
- Salaried employees: salary / average days in pay period
- Contractors: payment amount / average days in interval (per-job: 0)

Plus pay period arithmetic, compensation history resolution, allocation
records and summaries, validation and display labels.

All monetary values are integer cents.

Employee records are plain dicts (see Employee.to_compensation_record):
    {"id": 1, "compensation_type": "salary", "salary_amount": 100000,
     "pay_period_type": "weekly", "compensation_history": [...], ...}
"""

import calendar
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from src.models.enums import CompensationType, ContractorPaymentInterval, PayPeriodType
from src.services.dto import CompensationSummary, DailyAllocation
from src.services.dto_utils import cents_to_dollars, cost_to_string, record_value, round_cents
from src.services.exceptions import ValidationError
from src.utils.constants import (
    BIWEEKLY_ANCHOR_DATE,
    CURRENCY_SYMBOL,
    DATE_FORMAT,
    DAYS_PER_CONTRACTOR_INTERVAL,
    DAYS_PER_PAY_PERIOD,
    DEFAULT_HOURS_PER_WEEK,
    PAY_PERIODS_PER_YEAR,
    PERIOD_TYPE_ALIASES,
)
from src.utils.datetime_utils import TimestampLike, to_utc_date


def _dollars(cents: int) -> str:
    return f"{CURRENCY_SYMBOL}{cost_to_string(cents_to_dollars(cents))}"


def normalize_period_type(value: Optional[str]) -> Optional[str]:
    """
    Normalize a pay period type or contractor interval.

    Example:
        >>> normalize_period_type("BiWeekly")
        'bi-weekly'
    """
    if value is None:
        return None
    key = str(value).strip().lower()
    return PERIOD_TYPE_ALIASES.get(key, key)


# ============================================================================
# Salary Calculations
# ============================================================================


def calculate_daily_salary_allocation(salary_amount: int, pay_period_type: str) -> int:
    """
    Calculate the daily allocation for a salaried employee.

    Args:
        salary_amount: Salary per pay period, in cents
        pay_period_type: weekly / bi-weekly / semi-monthly / monthly

    Returns:
        Daily allocation in cents (rounded to nearest cent)

    Raises:
        ValidationError: If the pay period type is unknown

    Example:
        >>> calculate_daily_salary_allocation(100000, "weekly")  # $1,000/week
        14286
    """
    days_in_period = DAYS_PER_PAY_PERIOD.get(normalize_period_type(pay_period_type))
    if days_in_period is None:
        raise ValidationError([f"Unknown pay period type: {pay_period_type}"])
    return round_cents(salary_amount / days_in_period)


def calculate_effective_hourly_rate(
    salary_amount: int,
    pay_period_type: str,
    hours_per_week: float = DEFAULT_HOURS_PER_WEEK,
) -> int:
    """
    Calculate the effective hourly rate of a salary, for comparison and reporting.

    Args:
        salary_amount: Salary per pay period, in cents
        pay_period_type: weekly / bi-weekly / semi-monthly / monthly
        hours_per_week: Expected hours worked per week

    Returns:
        Effective hourly rate in cents

    Example:
        >>> calculate_effective_hourly_rate(100000, "weekly", 40)
        2500
    """
    periods_per_year = PAY_PERIODS_PER_YEAR.get(normalize_period_type(pay_period_type))
    if periods_per_year is None:
        raise ValidationError([f"Unknown pay period type: {pay_period_type}"])
    if hours_per_week <= 0:
        raise ValidationError(["Hours per week must be greater than 0"])

    annual_salary = salary_amount * periods_per_year
    hours_per_year = hours_per_week * 52
    return round_cents(annual_salary / hours_per_year)


def get_pay_period_dates(
    day: TimestampLike,
    pay_period_type: str,
    pay_period_start_day: int = 0,
) -> Tuple[str, str]:
    """
    Get the pay period containing a given day.

    Args:
        day: Any day inside the period
        pay_period_type: weekly / bi-weekly / semi-monthly / monthly
        pay_period_start_day: Weekday weekly periods start on (0 = Sunday)

    Returns:
        (start, end) as YYYY-MM-DD strings, both inclusive

    Notes:
        Bi-weekly periods are counted in 14-day blocks from 2024-01-01.
        Semi-monthly periods run 1st-15th and 16th-end of month.
    """
    current = to_utc_date(day)
    pay_period_type = normalize_period_type(pay_period_type)

    if pay_period_type == PayPeriodType.WEEKLY.value:
        # date.weekday() counts from Monday; shift so Sunday is 0
        day_of_week = (current.weekday() + 1) % 7
        start = current - timedelta(days=(day_of_week - pay_period_start_day) % 7)
        end = start + timedelta(days=6)
    elif pay_period_type == PayPeriodType.BI_WEEKLY.value:
        anchor = to_utc_date(BIWEEKLY_ANCHOR_DATE)
        start = current - timedelta(days=(current - anchor).days % 14)
        end = start + timedelta(days=13)
    elif pay_period_type == PayPeriodType.SEMI_MONTHLY.value:
        last_day = calendar.monthrange(current.year, current.month)[1]
        if current.day <= 15:
            start = current.replace(day=1)
            end = current.replace(day=15)
        else:
            start = current.replace(day=16)
            end = current.replace(day=last_day)
    elif pay_period_type == PayPeriodType.MONTHLY.value:
        last_day = calendar.monthrange(current.year, current.month)[1]
        start = current.replace(day=1)
        end = current.replace(day=last_day)
    else:
        raise ValidationError([f"Unknown pay period type: {pay_period_type}"])

    return start.strftime(DATE_FORMAT), end.strftime(DATE_FORMAT)


def get_days_in_pay_period(start_date: TimestampLike, end_date: TimestampLike) -> int:
    """Actual number of days in a pay period, both ends inclusive."""
    return abs((to_utc_date(end_date) - to_utc_date(start_date)).days) + 1


# ============================================================================
# Contractor Calculations
# ============================================================================


def calculate_daily_contractor_allocation(payment_amount: int, interval: str) -> int:
    """
    Calculate the daily allocation for a contractor.

    Args:
        payment_amount: Payment per interval, in cents
        interval: weekly / bi-weekly / monthly / per-job

    Returns:
        Daily allocation in cents; 0 for per-job contractors, whose cost
        is recorded when the job completes

    Example:
        >>> calculate_daily_contractor_allocation(50000, "weekly")  # $500/week
        7143
    """
    interval = normalize_period_type(interval)
    if interval == ContractorPaymentInterval.PER_JOB.value:
        return 0

    days_in_interval = DAYS_PER_CONTRACTOR_INTERVAL.get(interval)
    if days_in_interval is None:
        raise ValidationError([f"Unknown contractor payment interval: {interval}"])
    return round_cents(payment_amount / days_in_interval)


# ============================================================================
# Compensation History
# ============================================================================


def resolve_compensation_for_date(employee: Dict[str, Any], day: TimestampLike) -> Dict[str, Any]:
    """
    Resolve the compensation in effect for an employee on a given day.

    The latest compensation_history entry whose effective_date is on or
    before the day replaces the employee's current type and amount. Salary
    entries carry their pay period and contractor entries their payment
    interval; when the entry leaves it unset the employee's own value is
    kept. With no applicable entry the employee record is returned unchanged.

    Args:
        employee: Employee record, optionally with compensation_history
        day: Day to resolve for

    Returns:
        Employee record (a copy when history applied)
    """
    target = to_utc_date(day)
    applicable = [
        entry
        for entry in employee.get("compensation_history") or []
        if to_utc_date(record_value(entry, "effective_date")) <= target
    ]
    if not applicable:
        return employee

    entry = max(applicable, key=lambda e: to_utc_date(record_value(e, "effective_date")))
    compensation_type = record_value(entry, "compensation_type")
    amount = record_value(entry, "amount_cents", 0)

    resolved = dict(employee)
    resolved["compensation_type"] = compensation_type
    if compensation_type == CompensationType.HOURLY.value:
        resolved["hourly_rate"] = amount
    elif compensation_type == CompensationType.SALARY.value:
        resolved["salary_amount"] = amount
        resolved["pay_period_type"] = record_value(
            entry, "pay_period_type", employee.get("pay_period_type")
        )
    elif compensation_type == CompensationType.CONTRACTOR.value:
        resolved["contractor_payment_amount"] = amount
        resolved["contractor_payment_interval"] = record_value(
            entry, "contractor_payment_interval", employee.get("contractor_payment_interval")
        )
    return resolved


def get_employee_snapshot_for_date(employee: Dict[str, Any], day: TimestampLike) -> Dict[str, Any]:
    """Compensation fields in effect for an employee on a day."""
    resolved = resolve_compensation_for_date(employee, day)
    return {
        "employee_id": employee.get("id"),
        "date": to_utc_date(day).strftime(DATE_FORMAT),
        "compensation_type": resolved.get("compensation_type"),
        "hourly_rate": resolved.get("hourly_rate"),
        "salary_amount": resolved.get("salary_amount"),
        "pay_period_type": resolved.get("pay_period_type"),
        "contractor_payment_amount": resolved.get("contractor_payment_amount"),
        "contractor_payment_interval": resolved.get("contractor_payment_interval"),
    }


# ============================================================================
# Unified Calculations
# ============================================================================


def calculate_daily_labor_cost(employee: Dict[str, Any], hours_worked: Optional[float] = None) -> int:
    """
    Calculate one day of labor cost for an employee, strictly.

    Args:
        employee: Employee record
        hours_worked: Hours worked (required for hourly employees)

    Returns:
        Daily cost in cents

    Raises:
        ValidationError: If the fields required by the compensation type are missing
    """
    compensation_type = employee.get("compensation_type")

    if compensation_type == CompensationType.HOURLY.value:
        if hours_worked is None:
            raise ValidationError(["Hours worked required for hourly employees"])
        return round_cents((employee.get("hourly_rate") or 0) * hours_worked)

    if compensation_type == CompensationType.SALARY.value:
        if not employee.get("salary_amount") or not employee.get("pay_period_type"):
            raise ValidationError(
                ["Salary amount and pay period required for salaried employees"]
            )
        return calculate_daily_salary_allocation(
            employee["salary_amount"], employee["pay_period_type"]
        )

    if compensation_type == CompensationType.CONTRACTOR.value:
        if not employee.get("contractor_payment_amount") or not employee.get(
            "contractor_payment_interval"
        ):
            raise ValidationError(["Payment amount and interval required for contractors"])
        return calculate_daily_contractor_allocation(
            employee["contractor_payment_amount"], employee["contractor_payment_interval"]
        )

    return 0


def generate_daily_allocation(
    employee: Dict[str, Any],
    day: TimestampLike,
    hours_worked: Optional[float] = None,
) -> DailyAllocation:
    """
    Build the allocation record of one employee for one day.

    Compensation history is resolved for the day before allocating.

    Args:
        employee: Employee record
        day: Allocation day
        hours_worked: Hours worked (hourly employees)

    Returns:
        DailyAllocation with calculation notes; salary allocations also
        name the pay period they come from
    """
    resolved = resolve_compensation_for_date(employee, day)
    amount = calculate_daily_labor_cost(resolved, hours_worked)
    day_str = to_utc_date(day).strftime(DATE_FORMAT)
    compensation_type = resolved.get("compensation_type")

    notes = ""
    period_start = None
    period_end = None

    if compensation_type == CompensationType.HOURLY.value:
        notes = f"{hours_worked:g} hrs x {_dollars(resolved.get('hourly_rate') or 0)}/hr"
    elif compensation_type == CompensationType.SALARY.value:
        pay_period_type = normalize_period_type(resolved["pay_period_type"])
        period_start, period_end = get_pay_period_dates(day, pay_period_type)
        days = DAYS_PER_PAY_PERIOD[pay_period_type]
        notes = f"{_dollars(resolved['salary_amount'])}/{pay_period_type} / {days:.1f} days"
    elif compensation_type == CompensationType.CONTRACTOR.value:
        interval = normalize_period_type(resolved["contractor_payment_interval"])
        if interval == ContractorPaymentInterval.PER_JOB.value:
            notes = "Per-job payment (not daily allocated)"
        else:
            days = DAYS_PER_CONTRACTOR_INTERVAL[interval]
            notes = (
                f"{_dollars(resolved['contractor_payment_amount'])}/{interval} "
                f"/ {days:.1f} days"
            )

    return DailyAllocation(
        employee_id=employee.get("id"),
        date=day_str,
        compensation_type=compensation_type,
        allocated_amount=amount,
        calculation_notes=notes,
        source_pay_period_start=period_start,
        source_pay_period_end=period_end,
    )


def calculate_labor_breakdown(allocations: Iterable[Any]) -> Dict[str, int]:
    """
    Total allocations by compensation type.

    Args:
        allocations: DailyAllocation objects or dicts with
            compensation_type and allocated_amount

    Returns:
        Dict with hourly_wages, salary_allocations, contractor_payments
        and total, all in cents
    """
    breakdown = {
        "hourly_wages": 0,
        "salary_allocations": 0,
        "contractor_payments": 0,
        "total": 0,
    }
    buckets = {
        CompensationType.HOURLY.value: "hourly_wages",
        CompensationType.SALARY.value: "salary_allocations",
        CompensationType.CONTRACTOR.value: "contractor_payments",
    }

    for allocation in allocations:
        amount = record_value(allocation, "allocated_amount", 0)
        bucket = buckets.get(record_value(allocation, "compensation_type"))
        if bucket:
            breakdown[bucket] += amount
        breakdown["total"] += amount

    return breakdown


def generate_compensation_summary(
    employee: Dict[str, Any],
    allocations: List[Any],
    total_hours_worked: Optional[float] = None,
) -> CompensationSummary:
    """
    Summarize an employee's allocations over a period.

    Args:
        employee: Employee record
        allocations: That employee's daily allocations
        total_hours_worked: Total hours worked (hourly employees)

    Returns:
        CompensationSummary; effective_hourly_rate is the hourly rate for
        hourly employees and the annualized rate for salaried ones
    """
    total_amount = sum(record_value(a, "allocated_amount", 0) for a in allocations)
    days_worked = len(allocations)
    compensation_type = employee.get("compensation_type")

    effective_hourly_rate = None
    if (
        compensation_type == CompensationType.SALARY.value
        and employee.get("salary_amount")
        and employee.get("pay_period_type")
    ):
        effective_hourly_rate = calculate_effective_hourly_rate(
            employee["salary_amount"], employee["pay_period_type"]
        )
    elif compensation_type == CompensationType.HOURLY.value:
        effective_hourly_rate = employee.get("hourly_rate")

    return CompensationSummary(
        compensation_type=compensation_type,
        total_amount=total_amount,
        hours_worked=total_hours_worked,
        days_worked=days_worked if days_worked > 0 else None,
        effective_hourly_rate=effective_hourly_rate,
    )


# ============================================================================
# Validation Helpers
# ============================================================================


def validate_compensation_fields(employee: Dict[str, Any]) -> List[str]:
    """
    Validate the compensation fields required by an employee's type.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    compensation_type = employee.get("compensation_type")

    if not compensation_type:
        errors.append("Compensation type is required")
        return errors

    if compensation_type == CompensationType.HOURLY.value:
        if not employee.get("hourly_rate") or employee["hourly_rate"] <= 0:
            errors.append("Hourly rate must be greater than 0")

    elif compensation_type == CompensationType.SALARY.value:
        if not employee.get("salary_amount") or employee["salary_amount"] <= 0:
            errors.append("Salary amount must be greater than 0")
        if not employee.get("pay_period_type"):
            errors.append("Pay period type is required for salaried employees")

    elif compensation_type == CompensationType.CONTRACTOR.value:
        if (
            not employee.get("contractor_payment_amount")
            or employee["contractor_payment_amount"] <= 0
        ):
            errors.append("Payment amount must be greater than 0")
        if not employee.get("contractor_payment_interval"):
            errors.append("Payment interval is required for contractors")

    else:
        errors.append(f"Unknown compensation type: {compensation_type}")

    return errors


def requires_time_punches(employee: Dict[str, Any]) -> bool:
    """Whether an employee must punch in; hourly employees by default."""
    if employee.get("requires_time_punch") is not None:
        return bool(employee["requires_time_punch"])
    return employee.get("compensation_type") == CompensationType.HOURLY.value


# ============================================================================
# Display Labels
# ============================================================================

COMPENSATION_TYPE_LABELS = {
    CompensationType.HOURLY.value: "Hourly",
    CompensationType.SALARY.value: "Salaried",
    CompensationType.CONTRACTOR.value: "Contractor",
}

PAY_PERIOD_LABELS = {
    PayPeriodType.WEEKLY.value: "Weekly",
    PayPeriodType.BI_WEEKLY.value: "Bi-Weekly",
    PayPeriodType.SEMI_MONTHLY.value: "Semi-Monthly",
    PayPeriodType.MONTHLY.value: "Monthly",
}

CONTRACTOR_INTERVAL_LABELS = {
    ContractorPaymentInterval.WEEKLY.value: "Weekly",
    ContractorPaymentInterval.BI_WEEKLY.value: "Bi-Weekly",
    ContractorPaymentInterval.MONTHLY.value: "Monthly",
    ContractorPaymentInterval.PER_JOB.value: "Per Job",
}


def format_compensation_type(compensation_type: str) -> str:
    return COMPENSATION_TYPE_LABELS.get(compensation_type, compensation_type)


def format_pay_period_type(pay_period_type: str) -> str:
    return PAY_PERIOD_LABELS.get(normalize_period_type(pay_period_type), pay_period_type)


def format_contractor_interval(interval: str) -> str:
    return CONTRACTOR_INTERVAL_LABELS.get(normalize_period_type(interval), interval)
