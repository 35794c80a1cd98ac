"""Domain-level constants."""

from decimal import Decimal

DEFAULT_DISPLAY_CURRENCY = "PLN"
DEFAULT_MINOR_UNITS = 2

# ISO 4217 exponents that differ from two decimal places.
CURRENCY_MINOR_UNITS = {
    "BHD": 3,
    "CLP": 0,
    "HUF": 2,
    "ISK": 0,
    "JOD": 3,
    "JPY": 0,
    "KRW": 0,
    "KWD": 3,
    "OMR": 3,
    "TND": 3,
    "VND": 0,
}

ZERO = Decimal("0")

__all__ = [
    "DEFAULT_DISPLAY_CURRENCY",
    "DEFAULT_MINOR_UNITS",
    "CURRENCY_MINOR_UNITS",
    "ZERO",
]
