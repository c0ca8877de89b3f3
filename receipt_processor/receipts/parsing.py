"""Strict parsers for the text fields of a receipt.

Each parser returns None when the value does not parse, so callers decide
whether a failure rejects the receipt or just contributes nothing.
"""

import logging
import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)

# strptime alone accepts "2022-1-1" and " 9:05", so the shape is pinned first
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")
TIME_PATTERN = re.compile(r"\d{2}:\d{2}")
# Decimal() also takes whitespace, underscores, "NaN" and "Infinity"
AMOUNT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")

# Upper bound (exclusive) on item prices
MAX_ITEM_PRICE = Decimal("1000000000000")


def parse_purchase_date(value: str) -> date | None:
    """Parse a purchase date in exact YYYY-MM-DD form.

    Args:
        value: Date text from the receipt

    Returns:
        Parsed date or None if the text is not a valid calendar date
    """
    if not DATE_PATTERN.fullmatch(value):
        return None

    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        logger.debug(f"Could not parse purchase date: {value!r}")
        return None


def parse_purchase_time(value: str) -> time | None:
    """Parse a purchase time in exact 24-hour HH:MM form.

    Args:
        value: Time text from the receipt

    Returns:
        Parsed time or None if hours/minutes are out of range
    """
    if not TIME_PATTERN.fullmatch(value):
        return None

    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        logger.debug(f"Could not parse purchase time: {value!r}")
        return None


def parse_amount(value: str) -> Decimal | None:
    """Parse a monetary amount into an exact, finite Decimal.

    Args:
        value: Amount text such as "6.49"

    Returns:
        Decimal value, or None for empty, non-numeric, NaN or infinite input
    """
    if not AMOUNT_PATTERN.fullmatch(value):
        return None

    try:
        return Decimal(value)
    except InvalidOperation:
        logger.debug(f"Could not parse amount: {value!r}")
        return None


def split_amount(amount: Decimal) -> tuple[int, int]:
    """Split a finite Decimal into an exact integer coefficient and exponent.

    The value equals coefficient * 10 ** exponent with no rounding, which
    Decimal arithmetic under a finite context precision can't guarantee.

    Args:
        amount: Finite Decimal

    Returns:
        Tuple of (signed coefficient, exponent)
    """
    sign, digits, exponent = amount.as_tuple()
    coefficient = int(Decimal((0, digits, 0)))
    return (-coefficient if sign else coefficient), int(exponent)
