"""
Labor Cost Service - Daily and period labor cost schedules.

Single place where labor cost is computed, for both views:
- Scheduled (forward-looking): from planned shifts
- Actual (historical): from time punches

Both build one DailyLaborCost bucket per UTC calendar day of the requested
range (inclusive) and sum the buckets into a LaborCostBreakdown. All
amounts are integer cents, so for every result:

    breakdown.total == sum(day.total_cost for day in daily_costs)
    breakdown.total == hourly.cost + salary.cost + contractor.cost

Salary and contractor costs depend on calendar presence, never on hours.
Per-job contractors are never allocated here.
"""

import logging
from collections import defaultdict
from datetime import datetime, time, timedelta
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from src.models import Employee, Shift, TimePunch
from src.models.enums import CompensationType, ContractorPaymentInterval, EmployeeStatus
from src.services.compensation_service import (
    calculate_daily_contractor_allocation,
    calculate_daily_salary_allocation,
    normalize_period_type,
    resolve_compensation_for_date,
)
from src.services.database import session_scope
from src.services.dto import (
    DailyLaborCost,
    FixedLaborSummary,
    HourlyLaborSummary,
    LaborCostBreakdown,
    LaborCostResult,
    WorkPeriod,
)
from src.services.dto_utils import distribute_evenly, record_value, round_cents
from src.services.exceptions import EmployeeNotFound, ValidationError
from src.services.logging_utils import get_service_logger, log_operation
from src.services.time_punch_service import parse_work_periods
from src.utils.constants import CENTS_PER_DOLLAR
from src.utils.datetime_utils import (
    TimestampLike,
    format_date_utc,
    parse_timestamp,
    to_utc_date,
    utc_date_range,
)

logger = get_service_logger(__name__)

WorkPeriodParser = Callable[[List[Any]], List[WorkPeriod]]


# ============================================================================
# Helpers
# ============================================================================


def _is_active(employee: Dict[str, Any]) -> bool:
    return employee.get("status") == EmployeeStatus.ACTIVE.value


def _is_employed_on(employee: Dict[str, Any], day: str) -> bool:
    """False before the hire date and after the termination date."""
    current = to_utc_date(day)
    hire_date = employee.get("hire_date")
    if hire_date and current < to_utc_date(hire_date):
        return False
    termination_date = employee.get("termination_date")
    if termination_date and current > to_utc_date(termination_date):
        return False
    return True


def _is_per_job(employee: Dict[str, Any]) -> bool:
    interval = normalize_period_type(employee.get("contractor_payment_interval"))
    return interval == ContractorPaymentInterval.PER_JOB.value


def _fixed_compensation_days(
    employee: Dict[str, Any], dates: List[str]
) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """
    Yield (day, resolved record) for each employed day on which the
    employee is salaried or a non-per-job contractor.
    """
    for day in dates:
        if not _is_employed_on(employee, day):
            continue
        resolved = resolve_compensation_for_date(employee, day)
        compensation_type = resolved.get("compensation_type")
        if compensation_type == CompensationType.SALARY.value or (
            compensation_type == CompensationType.CONTRACTOR.value and not _is_per_job(resolved)
        ):
            yield day, resolved


def _shift_hours(shift: Any) -> float:
    start = parse_timestamp(record_value(shift, "start_time"))
    end = parse_timestamp(record_value(shift, "end_time"))
    total_minutes = (end - start).total_seconds() / 60
    net_minutes = max(total_minutes - record_value(shift, "break_duration", 0), 0)
    return net_minutes / 60


def _build_breakdown(
    daily_costs: List[DailyLaborCost],
    salary_employees: int,
    salary_days: int,
    contractor_employees: int,
    contractor_days: int,
) -> LaborCostBreakdown:
    return LaborCostBreakdown(
        hourly=HourlyLaborSummary(
            cost=sum(day.hourly_cost for day in daily_costs),
            hours=sum(day.hours_worked for day in daily_costs),
        ),
        salary=FixedLaborSummary(
            cost=sum(day.salary_cost for day in daily_costs),
            employees=salary_employees,
            days_scheduled=salary_days,
        ),
        contractor=FixedLaborSummary(
            cost=sum(day.contractor_cost for day in daily_costs),
            employees=contractor_employees,
            days_scheduled=contractor_days,
        ),
        total=sum(day.total_cost for day in daily_costs),
    )


# ============================================================================
# Core Calculation Functions
# ============================================================================


def calculate_employee_daily_cost(
    employee: Dict[str, Any], hours_worked: Optional[float] = None
) -> int:
    """
    Calculate one day of labor cost for an employee.

    Incomplete or invalid compensation data yields 0 rather than an
    error, logged as a warning, so one bad record never blocks a
    schedule.

    Args:
        employee: Employee record (amounts in cents)
        hours_worked: Hours worked that day (hourly employees only)

    Returns:
        Daily labor cost in cents

    Example:
        >>> calculate_employee_daily_cost({"compensation_type": "hourly", "hourly_rate": 1500}, 8)
        12000
    """
    compensation_type = employee.get("compensation_type")

    if compensation_type == CompensationType.HOURLY.value:
        if not hours_worked:
            return 0
        hourly_rate = employee.get("hourly_rate") or 0
        return round_cents(hourly_rate / CENTS_PER_DOLLAR * hours_worked * CENTS_PER_DOLLAR)

    if compensation_type not in (
        CompensationType.SALARY.value,
        CompensationType.CONTRACTOR.value,
    ):
        return 0

    if compensation_type == CompensationType.SALARY.value:
        amount = employee.get("salary_amount")
        period = employee.get("pay_period_type")
        allocate = calculate_daily_salary_allocation
    else:
        if _is_per_job(employee):
            return 0
        amount = employee.get("contractor_payment_amount")
        period = employee.get("contractor_payment_interval")
        allocate = calculate_daily_contractor_allocation

    if not amount or not period:
        log_operation(
            logger,
            operation="calculate_employee_daily_cost",
            outcome="incomplete_compensation",
            level=logging.WARNING,
            employee_id=employee.get("id"),
            compensation_type=compensation_type,
        )
        return 0

    try:
        return allocate(amount, period)
    except ValidationError as e:
        log_operation(
            logger,
            operation="calculate_employee_daily_cost",
            outcome="invalid_compensation",
            level=logging.WARNING,
            employee_id=employee.get("id"),
            compensation_type=compensation_type,
            error=str(e),
        )
        return 0


def calculate_employee_period_cost(
    employee: Dict[str, Any],
    start_date: TimestampLike,
    end_date: TimestampLike,
    hours_per_day: Optional[Dict[str, float]] = None,
) -> int:
    """
    Calculate an employee's labor cost over a date range.

    Each day uses the compensation in effect that day; days before the
    hire date or after the termination date cost nothing.

    Args:
        employee: Employee record
        start_date: First day
        end_date: Last day (inclusive)
        hours_per_day: YYYY-MM-DD -> hours worked (hourly employees)

    Returns:
        Period labor cost in cents
    """
    hours_per_day = hours_per_day or {}
    total_cost = 0

    for day in utc_date_range(start_date, end_date):
        if not _is_employed_on(employee, day):
            continue
        resolved = resolve_compensation_for_date(employee, day)
        if resolved.get("compensation_type") == CompensationType.HOURLY.value:
            total_cost += calculate_employee_daily_cost(resolved, hours_per_day.get(day, 0))
        else:
            total_cost += calculate_employee_daily_cost(resolved)

    return total_cost


# ============================================================================
# Scheduled Labor Calculations (Forward-Looking)
# ============================================================================


def calculate_scheduled_labor_cost(
    shifts: Iterable[Any],
    employees: List[Dict[str, Any]],
    start_date: TimestampLike,
    end_date: TimestampLike,
) -> LaborCostResult:
    """
    Project labor cost from scheduled shifts.

    Hourly shifts cost their net hours (duration minus break) on the UTC
    day the shift starts. Salary and non-per-job contractor cost follows
    the compensation in effect on each day, history included; each
    employee's period cost per type is spread evenly over the range.
    Only active employees are counted.

    Args:
        shifts: Shift records (employee_id, start_time, end_time, break_duration)
        employees: Employee records
        start_date: First day
        end_date: Last day (inclusive)

    Returns:
        LaborCostResult with the breakdown and one DailyLaborCost per day
    """
    employee_map = {employee.get("id"): employee for employee in employees}
    dates = utc_date_range(start_date, end_date)
    daily = {day: DailyLaborCost(date=day) for day in dates}
    scheduled_per_day = defaultdict(set)

    for shift in shifts:
        employee = employee_map.get(record_value(shift, "employee_id"))
        if not employee or not _is_active(employee):
            continue

        shift_day = format_date_utc(record_value(shift, "start_time"))
        day_cost = daily.get(shift_day)
        if day_cost is None or not _is_employed_on(employee, shift_day):
            continue

        scheduled_per_day[shift_day].add(employee.get("id"))

        resolved = resolve_compensation_for_date(employee, shift_day)
        if resolved.get("compensation_type") == CompensationType.HOURLY.value:
            hours = _shift_hours(shift)
            day_cost.add(
                CompensationType.HOURLY.value,
                calculate_employee_daily_cost(resolved, hours),
                hours,
            )

    # Group membership follows the compensation in effect on each day
    members = {CompensationType.SALARY.value: set(), CompensationType.CONTRACTOR.value: set()}
    for employee in employees:
        if not _is_active(employee):
            continue
        period_costs = defaultdict(int)
        for _, resolved in _fixed_compensation_days(employee, dates):
            compensation_type = resolved["compensation_type"]
            members[compensation_type].add(employee.get("id"))
            period_costs[compensation_type] += calculate_employee_daily_cost(resolved)

        for compensation_type, period_cost in period_costs.items():
            if period_cost <= 0:
                continue
            for day, cents in zip(dates, distribute_evenly(period_cost, len(dates))):
                daily[day].add(compensation_type, cents)

    salary_ids = members[CompensationType.SALARY.value]
    contractor_ids = members[CompensationType.CONTRACTOR.value]
    daily_costs = [daily[day] for day in dates]

    breakdown = _build_breakdown(
        daily_costs,
        salary_employees=len(salary_ids),
        salary_days=sum(1 for ids in scheduled_per_day.values() if ids & salary_ids),
        contractor_employees=len(contractor_ids),
        contractor_days=sum(1 for ids in scheduled_per_day.values() if ids & contractor_ids),
    )

    log_operation(
        logger,
        operation="calculate_scheduled_labor_cost",
        outcome="success",
        level=logging.DEBUG,
        day_count=len(dates),
        total_cents=breakdown.total,
    )

    return LaborCostResult(breakdown=breakdown, daily_costs=daily_costs)


# ============================================================================
# Actual Labor Calculations (Historical/Time Punches)
# ============================================================================


def calculate_actual_labor_cost(
    employees: List[Dict[str, Any]],
    time_punches: Iterable[Any],
    start_date: TimestampLike,
    end_date: TimestampLike,
    work_period_parser: WorkPeriodParser = parse_work_periods,
) -> LaborCostResult:
    """
    Calculate actual labor cost from time punches.

    Hours of a work period are credited to the UTC day the period starts,
    while the employee counts as active on every UTC day the period
    touches. Salary and contractor employees receive their daily
    allocation on each active day.

    Args:
        employees: Employee records
        time_punches: Punch records (employee_id, punch_time, punch_type)
        start_date: First day
        end_date: Last day (inclusive)
        work_period_parser: Pairs one employee's punches into work periods

    Returns:
        LaborCostResult with the breakdown and one DailyLaborCost per day
    """
    employee_map = {employee.get("id"): employee for employee in employees}
    dates = utc_date_range(start_date, end_date)
    daily = {day: DailyLaborCost(date=day) for day in dates}

    punches_by_employee = defaultdict(list)
    for punch in time_punches:
        punches_by_employee[record_value(punch, "employee_id")].append(punch)

    hours_per_employee_day = defaultdict(lambda: defaultdict(float))
    # Insertion-ordered so allocation order is deterministic
    active_per_day = defaultdict(dict)

    for employee_id, punches in punches_by_employee.items():
        employee = employee_map.get(employee_id)
        if not employee or not _is_active(employee):
            continue

        for period in work_period_parser(punches):
            if period.is_break:
                continue
            work_day = format_date_utc(period.start_time)
            hours_per_employee_day[employee_id][work_day] += period.hours
            for day in utc_date_range(period.start_time, period.end_time):
                active_per_day[day][employee_id] = True

    for day in dates:
        day_cost = daily[day]
        for employee_id in active_per_day.get(day, {}):
            employee = employee_map[employee_id]
            if not _is_employed_on(employee, day):
                continue

            resolved = resolve_compensation_for_date(employee, day)
            compensation_type = resolved.get("compensation_type")

            if compensation_type == CompensationType.HOURLY.value:
                hours = hours_per_employee_day[employee_id].get(day, 0)
                if hours > 0:
                    day_cost.add(
                        compensation_type,
                        calculate_employee_daily_cost(resolved, hours),
                        hours,
                    )
            elif compensation_type == CompensationType.SALARY.value:
                day_cost.add(compensation_type, calculate_employee_daily_cost(resolved))
            elif compensation_type == CompensationType.CONTRACTOR.value and not _is_per_job(
                resolved
            ):
                day_cost.add(compensation_type, calculate_employee_daily_cost(resolved))

    daily_costs = [daily[day] for day in dates]

    members = {CompensationType.SALARY.value: set(), CompensationType.CONTRACTOR.value: set()}
    for employee in employees:
        if _is_active(employee):
            for _, resolved in _fixed_compensation_days(employee, dates):
                members[resolved["compensation_type"]].add(employee.get("id"))

    breakdown = _build_breakdown(
        daily_costs,
        salary_employees=len(members[CompensationType.SALARY.value]),
        salary_days=sum(1 for day in daily_costs if day.salary_cost > 0),
        contractor_employees=len(members[CompensationType.CONTRACTOR.value]),
        contractor_days=sum(1 for day in daily_costs if day.contractor_cost > 0),
    )

    log_operation(
        logger,
        operation="calculate_actual_labor_cost",
        outcome="success",
        level=logging.DEBUG,
        day_count=len(dates),
        employee_count=len(punches_by_employee),
        total_cents=breakdown.total,
    )

    return LaborCostResult(breakdown=breakdown, daily_costs=daily_costs)


# ============================================================================
# Utility Functions
# ============================================================================


def is_employee_compensation_valid(employee: Dict[str, Any]) -> bool:
    """Check that the fields required by an employee's compensation type are set."""
    compensation_type = employee.get("compensation_type")

    if compensation_type == CompensationType.HOURLY.value:
        return bool(employee.get("hourly_rate")) and employee["hourly_rate"] > 0
    if compensation_type == CompensationType.SALARY.value:
        return (
            bool(employee.get("salary_amount"))
            and employee["salary_amount"] > 0
            and bool(employee.get("pay_period_type"))
        )
    if compensation_type == CompensationType.CONTRACTOR.value:
        return (
            bool(employee.get("contractor_payment_amount"))
            and employee["contractor_payment_amount"] > 0
            and bool(employee.get("contractor_payment_interval"))
        )
    return False


def get_employee_daily_rate_description(employee: Dict[str, Any]) -> str:
    """
    Describe an employee's rate for display.

    Examples:
        "$15.00/hr", "~$142.86/day (weekly)", "$500.00/job"
    """
    if not is_employee_compensation_valid(employee):
        return "No rate configured"

    compensation_type = employee.get("compensation_type")
    daily_rate = f"{calculate_employee_daily_cost(employee) / CENTS_PER_DOLLAR:.2f}"

    if compensation_type == CompensationType.HOURLY.value:
        return f"${employee['hourly_rate'] / CENTS_PER_DOLLAR:.2f}/hr"
    if compensation_type == CompensationType.SALARY.value:
        return f"~${daily_rate}/day ({employee['pay_period_type']})"
    if _is_per_job(employee):
        return f"${employee['contractor_payment_amount'] / CENTS_PER_DOLLAR:.2f}/job"
    return f"~${daily_rate}/day ({employee['contractor_payment_interval']})"


# ============================================================================
# Persistence-backed Entry Points
# ============================================================================


def _day_bounds(start_date: TimestampLike, end_date: TimestampLike, padding_days: int = 0):
    """Naive UTC datetimes bounding the range [start, end] plus padding."""
    start = datetime.combine(to_utc_date(start_date), time.min) - timedelta(days=padding_days)
    end = datetime.combine(to_utc_date(end_date), time.min) + timedelta(days=1 + padding_days)
    return start, end


def _load_employee_records(session: Session) -> List[Dict[str, Any]]:
    employees = (
        session.query(Employee).options(selectinload(Employee.compensation_history)).all()
    )
    return [employee.to_compensation_record() for employee in employees]


def get_scheduled_labor_cost(
    start_date: TimestampLike,
    end_date: TimestampLike,
    session: Optional[Session] = None,
) -> LaborCostResult:
    """
    Scheduled labor cost for stored shifts starting within the range.

    Args:
        start_date: First day
        end_date: Last day (inclusive)
        session: Optional database session

    Returns:
        LaborCostResult (see calculate_scheduled_labor_cost)
    """
    if session is not None:
        return _get_scheduled_labor_cost_impl(start_date, end_date, session)
    with session_scope() as session:
        return _get_scheduled_labor_cost_impl(start_date, end_date, session)


def _get_scheduled_labor_cost_impl(
    start_date: TimestampLike, end_date: TimestampLike, session: Session
) -> LaborCostResult:
    range_start, range_end = _day_bounds(start_date, end_date)
    shifts = (
        session.query(Shift)
        .filter(Shift.start_time >= range_start, Shift.start_time < range_end)
        .order_by(Shift.start_time)
        .all()
    )
    return calculate_scheduled_labor_cost(
        [shift.to_dict() for shift in shifts],
        _load_employee_records(session),
        start_date,
        end_date,
    )


def get_actual_labor_cost(
    start_date: TimestampLike,
    end_date: TimestampLike,
    session: Optional[Session] = None,
) -> LaborCostResult:
    """
    Actual labor cost from stored time punches.

    Punches from one day either side of the range are loaded so work
    periods crossing the range boundary pair correctly.

    Args:
        start_date: First day
        end_date: Last day (inclusive)
        session: Optional database session

    Returns:
        LaborCostResult (see calculate_actual_labor_cost)
    """
    if session is not None:
        return _get_actual_labor_cost_impl(start_date, end_date, session)
    with session_scope() as session:
        return _get_actual_labor_cost_impl(start_date, end_date, session)


def _get_actual_labor_cost_impl(
    start_date: TimestampLike, end_date: TimestampLike, session: Session
) -> LaborCostResult:
    range_start, range_end = _day_bounds(start_date, end_date, padding_days=1)
    punches = (
        session.query(TimePunch)
        .filter(TimePunch.punch_time >= range_start, TimePunch.punch_time < range_end)
        .order_by(TimePunch.punch_time)
        .all()
    )
    return calculate_actual_labor_cost(
        _load_employee_records(session),
        [punch.to_dict() for punch in punches],
        start_date,
        end_date,
    )


def get_employee_period_cost(
    employee_id: int,
    start_date: TimestampLike,
    end_date: TimestampLike,
    session: Optional[Session] = None,
) -> int:
    """
    Period labor cost of one stored employee.

    Hourly employees are costed from their stored time punches; hours of
    each work period count on the UTC day the period starts.

    Args:
        employee_id: Employee ID
        start_date: First day
        end_date: Last day (inclusive)
        session: Optional database session

    Returns:
        Period labor cost in cents

    Raises:
        EmployeeNotFound: If the employee does not exist
    """
    if session is not None:
        return _get_employee_period_cost_impl(employee_id, start_date, end_date, session)
    with session_scope() as session:
        return _get_employee_period_cost_impl(employee_id, start_date, end_date, session)


def _get_employee_period_cost_impl(
    employee_id: int, start_date: TimestampLike, end_date: TimestampLike, session: Session
) -> int:
    employee = (
        session.query(Employee)
        .options(selectinload(Employee.compensation_history))
        .filter(Employee.id == employee_id)
        .first()
    )
    if employee is None:
        raise EmployeeNotFound(employee_id)

    range_start, range_end = _day_bounds(start_date, end_date, padding_days=1)
    punches = (
        session.query(TimePunch)
        .filter(
            TimePunch.employee_id == employee_id,
            TimePunch.punch_time >= range_start,
            TimePunch.punch_time < range_end,
        )
        .all()
    )

    hours_per_day = defaultdict(float)
    for period in parse_work_periods([punch.to_dict() for punch in punches]):
        if not period.is_break:
            hours_per_day[format_date_utc(period.start_time)] += period.hours

    return calculate_employee_period_cost(
        employee.to_compensation_record(), start_date, end_date, dict(hours_per_day)
    )
