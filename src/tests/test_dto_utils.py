"""Tests for DTO utility functions."""

import pytest
from decimal import Decimal

from src.services.dto_utils import (
    cents_to_dollars,
    cost_to_string,
    distribute_evenly,
    record_value,
    round_cents,
)


class TestCostToString:
    """Tests for cost_to_string function."""

    def test_none_returns_zero(self):
        """None value returns '0.00'."""
        assert cost_to_string(None) == "0.00"

    def test_decimal_value(self):
        """Decimal values are formatted correctly."""
        assert cost_to_string(Decimal("12.34")) == "12.34"
        assert cost_to_string(Decimal("0")) == "0.00"
        assert cost_to_string(Decimal("100")) == "100.00"

    def test_decimal_rounding(self):
        """Decimal values are rounded to 2 places using ROUND_HALF_UP."""
        assert cost_to_string(Decimal("12.345")) == "12.35"  # Round up
        assert cost_to_string(Decimal("12.344")) == "12.34"  # Round down
        assert cost_to_string(Decimal("12.3449")) == "12.34"  # Round down
        assert cost_to_string(Decimal("12.3450")) == "12.35"  # Round up at .5

    def test_float_value(self):
        """Float values are formatted correctly."""
        assert cost_to_string(12.34) == "12.34"
        assert cost_to_string(12.3) == "12.30"
        assert cost_to_string(12.0) == "12.00"

    def test_int_value(self):
        """Integer values are formatted with decimals."""
        assert cost_to_string(12) == "12.00"
        assert cost_to_string(0) == "0.00"
        assert cost_to_string(100) == "100.00"

    def test_string_value(self):
        """String numeric values are parsed and formatted."""
        assert cost_to_string("12.34") == "12.34"
        assert cost_to_string("15.999") == "16.00"
        assert cost_to_string("0") == "0.00"

    def test_negative_values(self):
        """Negative values are handled correctly."""
        assert cost_to_string(Decimal("-12.34")) == "-12.34"
        assert cost_to_string(-12.345) == "-12.35"

    def test_large_values(self):
        """Large values are formatted correctly."""
        assert cost_to_string(Decimal("999999.99")) == "999999.99"
        assert cost_to_string(1234567.89) == "1234567.89"

    def test_return_type_is_string(self):
        """Return value is always a string."""
        result = cost_to_string(Decimal("12.34"))
        assert isinstance(result, str)

        result = cost_to_string(12.34)
        assert isinstance(result, str)

        result = cost_to_string(None)
        assert isinstance(result, str)

    def test_json_serializable(self):
        """Result can be JSON serialized."""
        import json

        result = cost_to_string(Decimal("12.34"))
        # Should not raise
        json.dumps({"cost": result})


class TestCentsToDollars:
    """Tests for cents_to_dollars function."""

    def test_whole_cents(self):
        assert cents_to_dollars(14286) == Decimal("142.86")
        assert cents_to_dollars(0) == Decimal("0.00")

    def test_none_returns_zero(self):
        assert cents_to_dollars(None) == Decimal("0.00")

    def test_negative(self):
        assert cents_to_dollars(-150) == Decimal("-1.50")


class TestDistributeEvenly:
    """Tests for distribute_evenly function."""

    @pytest.mark.parametrize(
        "total,parts",
        [(100, 3), (42858, 7), (1, 5), (0, 4), (26282, 3), (999999, 31)],
    )
    def test_sums_to_total(self, total, parts):
        """Shares always add back up to the exact total."""
        shares = distribute_evenly(total, parts)
        assert len(shares) == parts
        assert sum(shares) == total
        assert max(shares) - min(shares) <= 1

    def test_remainder_goes_to_earliest(self):
        assert distribute_evenly(100, 3) == [34, 33, 33]
        assert distribute_evenly(5, 3) == [2, 2, 1]

    def test_no_parts(self):
        assert distribute_evenly(100, 0) == []


class TestRoundCents:
    """Tests for round_cents function."""

    def test_rounds_half_up(self):
        assert round_cents(0.5) == 1
        assert round_cents(2.5) == 3
        assert round_cents(14285.714) == 14286

    def test_rounds_down(self):
        assert round_cents(7142.4) == 7142

    def test_returns_int(self):
        assert isinstance(round_cents(Decimal("12.6")), int)


class TestRecordValue:
    """Tests for record_value function."""

    class _Record:
        name = "House Vodka"
        size_value = None

    def test_dict(self):
        assert record_value({"name": "House Vodka"}, "name") == "House Vodka"

    def test_object(self):
        assert record_value(self._Record(), "name") == "House Vodka"

    def test_missing_and_none_use_default(self):
        assert record_value({}, "name", "n/a") == "n/a"
        assert record_value({"name": None}, "name", "n/a") == "n/a"
        assert record_value(self._Record(), "size_value", 1) == 1
        assert record_value(self._Record(), "size_unit") is None
