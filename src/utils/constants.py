"""
Constants for the back-office costing core.

This module defines all system-wide constants including:
- Unit families (weight, volume, count, length)
- Base conversion factors (grams and milliliters)
- Unit aliases used for normalization
- Pay period and contractor interval lengths
- Application metadata
"""

from typing import Dict, List

# ============================================================================
# Application Metadata
# ============================================================================

APP_NAME = "Back-Office Costing"
APP_VERSION = "0.1.0"
DATABASE_VERSION = "1.0"
DATABASE_FILENAME = "backoffice_costing.db"

# ============================================================================
# Unit Families
# ============================================================================

WEIGHT_UNITS: List[str] = [
    "lb",  # Pound
    "kg",  # Kilogram
    "g",  # Gram
    "mg",  # Milligram
]

# "oz" is classified as volume; its mass meaning is reachable through
# the weight conversion tables.
VOLUME_UNITS: List[str] = [
    "oz",
    "fl oz",
    "cup",
    "tbsp",
    "tsp",
    "ml",
    "L",
    "gal",
    "qt",
    "pint",
]

COUNT_UNITS: List[str] = [
    "each",
    "piece",
    "serving",
    "unit",
    "bottle",
    "can",
    "box",
    "bag",
    "case",
    "container",
    "package",
    "dozen",
    "jar",
]

LENGTH_UNITS: List[str] = [
    "inch",
    "cm",
    "mm",
    "ft",
    "meter",
]

# ============================================================================
# Base Conversion Factors
# ============================================================================

GRAMS_PER_OZ = 28.3495
GRAMS_PER_LB = 453.592
ML_PER_CUP = 236.588
ML_PER_TBSP = 14.7868
ML_PER_TSP = 4.92892
ML_PER_FL_OZ = 29.5735
ML_PER_GAL = 3785.41
ML_PER_QT = 946.353
ML_PER_PINT = 473.176

# Weight conversions to grams (base unit)
WEIGHT_TO_GRAMS: Dict[str, float] = {
    "g": 1.0,
    "mg": 0.001,
    "kg": 1000.0,
    "oz": GRAMS_PER_OZ,
    "lb": GRAMS_PER_LB,
}

# Volume conversions to milliliters (base unit)
VOLUME_TO_ML: Dict[str, float] = {
    "ml": 1.0,
    "L": 1000.0,
    "tsp": ML_PER_TSP,
    "tbsp": ML_PER_TBSP,
    "fl oz": ML_PER_FL_OZ,
    "cup": ML_PER_CUP,
    "pint": ML_PER_PINT,
    "qt": ML_PER_QT,
    "gal": ML_PER_GAL,
}

# ============================================================================
# Unit Aliases
# ============================================================================

UNIT_ALIASES: Dict[str, str] = {
    # Volume
    "ounce": "oz",
    "ounces": "oz",
    "fl oz": "fl oz",
    "fl. oz": "fl oz",
    "floz": "fl oz",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "fluid oz": "fl oz",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "l": "L",
    "liter": "L",
    "liters": "L",
    "litre": "L",
    "litres": "L",
    "cups": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "gallon": "gal",
    "gallons": "gal",
    "quart": "qt",
    "quarts": "qt",
    "pints": "pint",
    "pt": "pint",
    # Weight
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "milligram": "mg",
    "milligrams": "mg",
    # Count
    "ea": "each",
    "pc": "piece",
    "pcs": "piece",
    "pieces": "piece",
    "servings": "serving",
    "units": "unit",
    "bottles": "bottle",
    "cans": "can",
    "boxes": "box",
    "bags": "bag",
    "cases": "case",
    "containers": "container",
    "packages": "package",
    "pack": "package",
    "packs": "package",
    "jars": "jar",
    # Length
    "inches": "inch",
    "in": "inch",
    "feet": "ft",
    "foot": "ft",
    "meters": "meter",
    "m": "meter",
}

# Legacy fallback when a recipe measures in ounces against a milliliter stock
# (and the reverse). Used only after standard conversion has failed.
FALLBACK_FACTORS: Dict[tuple, float] = {
    ("oz", "ml"): ML_PER_FL_OZ,
    ("ml", "oz"): 1 / ML_PER_FL_OZ,
}

# Recipe unit suggestions keyed by purchase unit family
RECIPE_UNIT_SUGGESTIONS: Dict[str, List[str]] = {
    "volume": ["fl oz", "ml", "cup", "tbsp", "tsp"],
    "weight": ["lb", "oz", "g"],
    "count": ["each", "piece", "serving"],
    "length": ["inch", "cm"],
}
DEFAULT_RECIPE_UNIT_SUGGESTIONS: List[str] = ["each", "piece"]

DEFAULT_PURCHASE_UNIT = "unit"

# ============================================================================
# Compensation
# ============================================================================

# Average days per pay period type (for salary allocation)
DAYS_PER_PAY_PERIOD: Dict[str, float] = {
    "weekly": 7,
    "bi-weekly": 14,
    "semi-monthly": 15.22,  # 365.25 / 24
    "monthly": 30.44,  # 365.25 / 12
}

# Average days per contractor payment interval (per-job is never allocated)
DAYS_PER_CONTRACTOR_INTERVAL: Dict[str, float] = {
    "weekly": 7,
    "bi-weekly": 14,
    "monthly": 30.44,
}

PAY_PERIODS_PER_YEAR: Dict[str, int] = {
    "weekly": 52,
    "bi-weekly": 26,
    "semi-monthly": 24,
    "monthly": 12,
}

# Alternate spellings of pay period and contractor interval values
PERIOD_TYPE_ALIASES: Dict[str, str] = {
    "biweekly": "bi-weekly",
    "bi_weekly": "bi-weekly",
    "semimonthly": "semi-monthly",
    "semi_monthly": "semi-monthly",
    "perjob": "per-job",
    "per_job": "per-job",
}

DEFAULT_HOURS_PER_WEEK = 40

# Bi-weekly pay periods are counted from this Monday
BIWEEKLY_ANCHOR_DATE = "2024-01-01"

# Work segments longer than this are treated as missed clock-outs
MAX_SHIFT_GAP_HOURS = 18

# Repeated punches of the same type closer than this are collapsed
DUPLICATE_PUNCH_WINDOW_MINUTES = 5

# ============================================================================
# Formatting
# ============================================================================

CURRENCY_SYMBOL = "$"
QUANTITY_DECIMAL_PLACES = 4
CENTS_PER_DOLLAR = 100

DATE_FORMAT = "%Y-%m-%d"
