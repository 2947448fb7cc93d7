"""
Pure validation predicates.

Every function here takes a value and returns a bool. No I/O, no
exceptions, safe to call from forms before anything is submitted.
"""

import re
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[A-Za-z]{2,}$")
HEX_COLOR_PATTERN = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
SYMBOL_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.\-]{0,11}$")
CURRENCY_PATTERN = re.compile(r"^[A-Za-z]{3}$")


def is_valid_email(value: Any) -> bool:
    """local@domain.tld with a top-level domain of at least two letters."""
    return isinstance(value, str) and EMAIL_PATTERN.match(value.strip()) is not None


def is_valid_color(value: Any) -> bool:
    """#RGB or #RRGGBB."""
    return isinstance(value, str) and HEX_COLOR_PATTERN.match(value) is not None


def is_non_empty(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def is_valid_symbol(value: Any) -> bool:
    """Ticker symbols such as VWCE, BRK.B or RDS-A."""
    return isinstance(value, str) and SYMBOL_PATTERN.match(value) is not None


def is_valid_currency(value: Any) -> bool:
    """Three-letter ISO 4217 code."""
    return isinstance(value, str) and CURRENCY_PATTERN.match(value) is not None
