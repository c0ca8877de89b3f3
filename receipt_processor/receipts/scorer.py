"""Point scoring for accepted receipts.

The point total is the sum of seven independent rules. Every rule is always
evaluated and none of them raises: a field that does not parse simply
contributes zero to the rules that depend on it.

Rules:
1. One point per ASCII letter or digit in the retailer name.
2. 50 points if the total is a round dollar amount (ends in ".00").
3. 25 points if the total is a multiple of 0.25.
4. 5 points for every two items.
5. ceil(price * 0.2) for each item whose trimmed description length is a
   multiple of 3.
6. 6 points if the day of the purchase date is odd.
7. 10 points if the purchase time is from 14:00 up to but excluding 16:00.
"""

import logging
from dataclasses import dataclass

from receipt_processor.receipts.parsing import (
    MAX_ITEM_PRICE,
    parse_amount,
    parse_purchase_date,
    parse_purchase_time,
    split_amount,
)
from receipt_processor.receipts.schema import Item, Receipt

logger = logging.getLogger(__name__)

ROUND_DOLLAR_POINTS = 50
QUARTER_MULTIPLE_POINTS = 25
ITEM_PAIR_POINTS = 5
ODD_DAY_POINTS = 6
AFTERNOON_POINTS = 10

# price * 0.2 == price / 5, kept as an integer divisor for exact ceilings
DESCRIPTION_PRICE_DIVISOR = 5
AFTERNOON_START_HOUR = 14
AFTERNOON_END_HOUR = 16

# Literal "0" is worth both total rules even though it has no ".00" suffix
ZERO_TOTAL = "0"


@dataclass(frozen=True)
class ScoreBreakdown:
    """Points contributed by each rule."""

    retailer_name: int
    round_dollar_total: int
    quarter_multiple_total: int
    item_pairs: int
    item_descriptions: int
    odd_purchase_day: int
    afternoon_purchase: int

    @property
    def total(self) -> int:
        return (
            self.retailer_name
            + self.round_dollar_total
            + self.quarter_multiple_total
            + self.item_pairs
            + self.item_descriptions
            + self.odd_purchase_day
            + self.afternoon_purchase
        )


def retailer_name_points(retailer: str) -> int:
    """Rule 1: one point per ASCII alphanumeric character."""
    return sum(1 for char in retailer if char.isascii() and char.isalnum())


def round_dollar_points(total: str) -> int:
    """Rule 2: round dollar total, judged on the literal text.

    Totals shorter than three characters cannot end in ".00" and score
    nothing unless they are exactly "0".
    """
    if total == ZERO_TOTAL:
        return ROUND_DOLLAR_POINTS
    if len(total) >= 3 and total[-3:] == ".00":
        return ROUND_DOLLAR_POINTS
    return 0


def quarter_multiple_points(total: str) -> int:
    """Rule 3: total is a multiple of $0.25.

    Divisibility is tested on the exact amount in integer cents. Amounts with
    fractional cents are never a multiple.
    """
    if total == ZERO_TOTAL:
        return QUARTER_MULTIPLE_POINTS

    amount = parse_amount(total)
    if amount is None:
        return 0

    # cents == coefficient * 10 ** (exponent + 2)
    coefficient, exponent = split_amount(amount)
    scale = exponent + 2
    if coefficient == 0 or scale >= 2:
        return QUARTER_MULTIPLE_POINTS

    if scale >= 0:
        cents = coefficient * 10**scale
    else:
        # 10 ** -scale exceeds |coefficient|, so the cents can't be whole
        if -scale >= abs(coefficient).bit_length():
            return 0
        cents, remainder = divmod(coefficient, 10**-scale)
        if remainder:
            return 0

    return QUARTER_MULTIPLE_POINTS if cents % 25 == 0 else 0


def item_pair_points(item_count: int) -> int:
    """Rule 4: five points for every two items."""
    return item_count // 2 * ITEM_PAIR_POINTS


def item_description_points(item: Item) -> int:
    """Rule 5: ceil(price * 0.2) when the trimmed description length is a multiple of 3.

    The ceiling is taken on the exact product. Unparsable, negative or
    out-of-range prices contribute nothing.
    """
    if len(item.shortDescription.strip()) % 3 != 0:
        return 0

    price = parse_amount(item.price)
    if price is None or price < 0:
        return 0
    if price >= MAX_ITEM_PRICE:
        logger.debug(f"Item price out of range: {item.price!r}")
        return 0

    coefficient, exponent = split_amount(price)
    if coefficient == 0:
        return 0

    if exponent >= 0:
        numerator, denominator = coefficient * 10**exponent, DESCRIPTION_PRICE_DIVISOR
    elif -exponent >= coefficient.bit_length():
        # 0 < price < 1, so 0 < price / 5 < 1
        return 1
    else:
        numerator, denominator = coefficient, DESCRIPTION_PRICE_DIVISOR * 10**-exponent

    return -(-numerator // denominator)


def odd_day_points(purchase_date: str) -> int:
    """Rule 6: six points if the day of the month is odd."""
    parsed = parse_purchase_date(purchase_date)
    if parsed is None:
        return 0
    return ODD_DAY_POINTS if parsed.day % 2 == 1 else 0


def afternoon_points(purchase_time: str) -> int:
    """Rule 7: ten points for purchases from 14:00 up to but excluding 16:00."""
    parsed = parse_purchase_time(purchase_time)
    if parsed is None:
        return 0
    return AFTERNOON_POINTS if AFTERNOON_START_HOUR <= parsed.hour < AFTERNOON_END_HOUR else 0


def score_breakdown(receipt: Receipt) -> ScoreBreakdown:
    """Evaluate every rule against a receipt.

    Args:
        receipt: Receipt to score; it is never modified

    Returns:
        Per-rule contributions
    """
    return ScoreBreakdown(
        retailer_name=retailer_name_points(receipt.retailer),
        round_dollar_total=round_dollar_points(receipt.total),
        quarter_multiple_total=quarter_multiple_points(receipt.total),
        item_pairs=item_pair_points(len(receipt.items)),
        item_descriptions=sum(item_description_points(item) for item in receipt.items),
        odd_purchase_day=odd_day_points(receipt.purchaseDate),
        afternoon_purchase=afternoon_points(receipt.purchaseTime),
    )


def score_receipt(receipt: Receipt) -> int:
    """Compute the point total for a receipt.

    Args:
        receipt: Accepted receipt

    Returns:
        Non-negative integer point total
    """
    return score_breakdown(receipt).total
