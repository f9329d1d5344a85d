"""Utilities package for the back-office costing core."""

from .config import get_config, reset_config
from .datetime_utils import format_date_utc, parse_timestamp, utc_date_range, utc_now

__all__ = [
    "get_config",
    "reset_config",
    "format_date_utc",
    "parse_timestamp",
    "utc_date_range",
    "utc_now",
]
