"""Tests for pairing time clock punches into work periods."""

import logging
from datetime import datetime, timezone

import pytest

from src.models import TimePunch
from src.services.time_punch_service import parse_work_periods


def _punch(time_str, punch_type):
    return {"punch_time": f"2024-01-15T{time_str}:00Z", "punch_type": punch_type}


def _work(periods):
    return [period for period in periods if not period.is_break]


class TestParseWorkPeriods:
    """Punch pairing."""

    def test_simple_shift(self):
        periods = parse_work_periods([_punch("09:00", "clock_in"), _punch("17:00", "clock_out")])

        assert len(periods) == 1
        assert periods[0].hours == pytest.approx(8.0)
        assert periods[0].is_break is False
        assert periods[0].start_time == datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)

    def test_unsorted_input(self):
        periods = parse_work_periods([_punch("17:00", "clock_out"), _punch("09:00", "clock_in")])
        assert len(periods) == 1
        assert periods[0].hours == pytest.approx(8.0)

    def test_shift_with_break(self):
        """A break splits the shift and is recorded separately."""
        periods = parse_work_periods(
            [
                _punch("09:00", "clock_in"),
                _punch("12:00", "break_start"),
                _punch("12:30", "break_end"),
                _punch("17:00", "clock_out"),
            ]
        )

        work = _work(periods)
        breaks = [period for period in periods if period.is_break]
        assert [period.hours for period in work] == pytest.approx([3.0, 4.5])
        assert len(breaks) == 1
        assert breaks[0].hours == pytest.approx(0.5)

    def test_double_tap_keeps_last(self):
        """Same-type punches within five minutes collapse to the last one."""
        periods = parse_work_periods(
            [
                _punch("09:00", "clock_in"),
                _punch("09:03", "clock_in"),
                _punch("17:00", "clock_out"),
            ]
        )
        assert len(periods) == 1
        assert periods[0].start_time.minute == 3

    def test_repeats_outside_window_kept(self):
        """A second clock-in ten minutes later restarts the segment."""
        periods = parse_work_periods(
            [
                _punch("09:00", "clock_in"),
                _punch("09:10", "clock_in"),
                _punch("17:10", "clock_out"),
            ]
        )
        assert len(periods) == 1
        assert periods[0].hours == pytest.approx(8.0)

    def test_clock_out_without_clock_in_ignored(self):
        assert parse_work_periods([_punch("17:00", "clock_out")]) == []

    def test_unclosed_clock_in_ignored(self):
        assert parse_work_periods([_punch("09:00", "clock_in")]) == []

    def test_break_end_without_break_start_reopens_work(self):
        periods = parse_work_periods([_punch("13:00", "break_end"), _punch("15:00", "clock_out")])
        assert len(periods) == 1
        assert periods[0].hours == pytest.approx(2.0)
        assert periods[0].is_break is False

    def test_forgotten_clock_out_dropped(self, caplog):
        """A segment longer than any plausible shift is not counted."""
        punches = [
            {"punch_time": "2024-01-15T08:00:00Z", "punch_type": "clock_in"},
            {"punch_time": "2024-01-16T17:00:00Z", "punch_type": "clock_out"},
        ]
        with caplog.at_level(logging.WARNING):
            periods = parse_work_periods(punches)

        assert periods == []
        assert "parse_work_periods: dropped_long_segment" in caplog.text

    def test_overnight_shift(self):
        punches = [
            {"punch_time": "2024-01-15T22:00:00Z", "punch_type": "clock_in"},
            {"punch_time": "2024-01-16T06:00:00Z", "punch_type": "clock_out"},
        ]
        periods = parse_work_periods(punches)
        assert periods[0].hours == pytest.approx(8.0)

    def test_offset_timestamps_normalized_to_utc(self):
        punches = [
            {"punch_time": "2024-01-15T09:00:00-05:00", "punch_type": "clock_in"},
            {"punch_time": "2024-01-15T17:00:00-05:00", "punch_type": "clock_out"},
        ]
        periods = parse_work_periods(punches)
        assert periods[0].start_time.hour == 14
        assert periods[0].hours == pytest.approx(8.0)

    def test_model_instances(self):
        punches = [
            TimePunch(employee_id=1, punch_time=datetime(2024, 1, 15, 9, 0), punch_type="clock_in"),
            TimePunch(employee_id=1, punch_time=datetime(2024, 1, 15, 13, 0), punch_type="clock_out"),
        ]
        periods = parse_work_periods(punches)
        assert periods[0].hours == pytest.approx(4.0)

    def test_empty(self):
        assert parse_work_periods([]) == []
