"""DTO utilities for service layer.

Provides standardized helpers for data transfer objects: display
formatting of dollar amounts, cent/dollar conversion and rounding, exact
spreading of a cent total across days, and uniform field access for
records that arrive either as dicts or as model instances.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, List, Mapping, Union

from ..utils.constants import CENTS_PER_DOLLAR


def cost_to_string(value: Union[Decimal, float, int, str, None]) -> str:
    """
    Convert a cost value to a 2-decimal string format.

    Args:
        value: Cost value (Decimal, float, int, str, or None)

    Returns:
        String formatted as "12.34" (2 decimal places).
        Returns "0.00" if value is None.

    Examples:
        >>> cost_to_string(Decimal("12.345"))
        '12.35'
        >>> cost_to_string(12.3)
        '12.30'
        >>> cost_to_string(None)
        '0.00'
    """
    if value is None:
        return "0.00"

    decimal_value = Decimal(str(value))
    rounded = decimal_value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    return str(rounded)


def cents_to_dollars(cents: Union[int, float, None]) -> Decimal:
    """
    Convert an amount in cents to dollars.

    Examples:
        >>> cents_to_dollars(14286)
        Decimal('142.86')
        >>> cents_to_dollars(None)
        Decimal('0.00')
    """
    if cents is None:
        return Decimal("0.00")
    dollars = Decimal(str(cents)) / CENTS_PER_DOLLAR
    return dollars.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def distribute_evenly(total_cents: int, parts: int) -> List[int]:
    """
    Split a cent amount into `parts` integer shares that sum exactly to the total.

    Leftover cents go one each to the earliest shares.

    Examples:
        >>> distribute_evenly(100, 3)
        [34, 33, 33]
        >>> distribute_evenly(0, 2)
        [0, 0]
    """
    if parts <= 0:
        return []

    base, remainder = divmod(total_cents, parts)
    return [base + 1 if index < remainder else base for index in range(parts)]


def round_cents(value: Union[Decimal, float, int]) -> int:
    """
    Round an amount in cents to a whole cent, halves away from zero.

    Examples:
        >>> round_cents(14285.714)
        14286
        >>> round_cents(0.5)
        1
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def record_value(record: Any, key: str, default: Any = None) -> Any:
    """
    Read a field from a plain dict record or an object with attributes.

    Missing fields and None values both return `default`.
    """
    if isinstance(record, Mapping):
        value = record.get(key)
    else:
        value = getattr(record, key, None)
    return default if value is None else value
