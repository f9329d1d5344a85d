"""
Time Punch Service - Pair raw time clock punches into work periods.

Punches are processed per employee in time order:
- Repeated punches of the same type within a few minutes are collapsed,
  keeping the last one (double taps on the clock).
- clock_in opens a work segment; clock_out or break_start closes it.
- break_end records the break and reopens a work segment.
- Segments that are not positive, or longer than a shift could be
  (a forgotten clock-out), are dropped.
"""

import logging
from datetime import timedelta
from typing import Any, Iterable, List, Optional

from src.models.enums import PunchType
from src.services.dto import WorkPeriod
from src.services.dto_utils import record_value
from src.services.logging_utils import get_service_logger, log_operation
from src.utils.constants import DUPLICATE_PUNCH_WINDOW_MINUTES, MAX_SHIFT_GAP_HOURS
from src.utils.datetime_utils import parse_timestamp

logger = get_service_logger(__name__)


def _normalize_punches(punches: Iterable[Any]) -> List[Any]:
    """Sort punches by time and collapse same-type repeats, keeping the last."""
    timed = sorted(
        (
            (parse_timestamp(record_value(punch, "punch_time")), record_value(punch, "punch_type"))
            for punch in punches
        ),
        key=lambda item: item[0],
    )
    window = timedelta(minutes=DUPLICATE_PUNCH_WINDOW_MINUTES)

    collapsed = []
    for punch_time, punch_type in timed:
        if collapsed:
            last_time, last_type = collapsed[-1]
            if last_type == punch_type and punch_time - last_time < window:
                collapsed[-1] = (punch_time, punch_type)
                continue
        collapsed.append((punch_time, punch_type))
    return collapsed


def _work_segment(start, end) -> Optional[WorkPeriod]:
    hours = (end - start).total_seconds() / 3600
    if hours <= 0:
        return None
    if hours > MAX_SHIFT_GAP_HOURS:
        log_operation(
            logger,
            operation="parse_work_periods",
            outcome="dropped_long_segment",
            level=logging.WARNING,
            start_time=start.isoformat(),
            end_time=end.isoformat(),
            hours=hours,
        )
        return None
    return WorkPeriod(start_time=start, end_time=end, hours=hours)


def parse_work_periods(punches: Iterable[Any]) -> List[WorkPeriod]:
    """
    Pair one employee's punches into work and break periods.

    Args:
        punches: Punch dicts or TimePunch models with punch_time and punch_type

    Returns:
        WorkPeriod list in time order; break periods have is_break=True

    Example:
        >>> periods = parse_work_periods([
        ...     {"punch_time": "2024-01-15T09:00:00Z", "punch_type": "clock_in"},
        ...     {"punch_time": "2024-01-15T17:00:00Z", "punch_type": "clock_out"},
        ... ])
        >>> periods[0].hours
        8.0
    """
    periods = []
    clock_in_time = None
    break_start_time = None

    for punch_time, punch_type in _normalize_punches(punches):
        if punch_type == PunchType.CLOCK_IN.value:
            clock_in_time = punch_time

        elif punch_type == PunchType.CLOCK_OUT.value:
            if clock_in_time is not None:
                segment = _work_segment(clock_in_time, punch_time)
                if segment:
                    periods.append(segment)
            clock_in_time = None
            break_start_time = None

        elif punch_type == PunchType.BREAK_START.value:
            if clock_in_time is not None:
                segment = _work_segment(clock_in_time, punch_time)
                if segment:
                    periods.append(segment)
            clock_in_time = None
            break_start_time = punch_time

        elif punch_type == PunchType.BREAK_END.value:
            if break_start_time is not None and punch_time > break_start_time:
                periods.append(
                    WorkPeriod(
                        start_time=break_start_time,
                        end_time=punch_time,
                        hours=(punch_time - break_start_time).total_seconds() / 3600,
                        is_break=True,
                    )
                )
            break_start_time = None
            clock_in_time = punch_time

    return periods
