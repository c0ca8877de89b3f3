"""Unit tests for receipt scoring.

Tests cover:
- Each of the seven rules in isolation, including boundaries
- Degenerate fields contributing zero instead of failing
- End-to-end totals for known receipts
"""

from typing import Any

import pytest

from receipt_processor.receipts.schema import Item, Receipt
from receipt_processor.receipts.scorer import (
    ScoreBreakdown,
    afternoon_points,
    item_description_points,
    item_pair_points,
    odd_day_points,
    quarter_multiple_points,
    retailer_name_points,
    round_dollar_points,
    score_breakdown,
    score_receipt,
)


def make_receipt(**overrides: Any) -> Receipt:
    """Build a receipt worth zero points, overriding selected fields."""
    fields: dict[str, Any] = {
        "retailer": "",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "10:00",
        "items": [],
        "total": "1.01",
    }
    fields.update(overrides)
    return Receipt(**fields)


# --- Rule 1: retailer name ---


@pytest.mark.parametrize(
    ("retailer", "expected"),
    [
        ("Target", 6),
        ("M&M Corner Market", 14),
        ("  7 Eleven  ", 7),
        ("Café", 3),
        ("", 0),
        ("&&& !!!", 0),
    ],
)
def test_retailer_name_points(retailer: str, expected: int) -> None:
    """Test one point per ASCII letter or digit."""
    assert retailer_name_points(retailer) == expected


def test_retailer_name_points_ignore_order() -> None:
    """Test that character order doesn't matter."""
    assert retailer_name_points("abc 123") == retailer_name_points("321 cba")


# --- Rule 2: round dollar total ---


@pytest.mark.parametrize("total", ["9.00", "100.00", "0.00", "0"])
def test_round_dollar_points_awarded(total: str) -> None:
    """Test 50 points for totals ending in .00 and for literal '0'."""
    assert round_dollar_points(total) == 50


@pytest.mark.parametrize("total", ["35.35", "9.0", "9", "10.10", "", "1", "00", ".0"])
def test_round_dollar_points_not_awarded(total: str) -> None:
    """Test no points otherwise, including totals too short to check."""
    assert round_dollar_points(total) == 0


# --- Rule 3: multiple of 0.25 ---


@pytest.mark.parametrize("total", ["10.25", "10.50", "10.75", "9.00", "0", "0.00", "-0.25"])
def test_quarter_multiple_points_awarded(total: str) -> None:
    """Test 25 points for totals that are a multiple of 0.25."""
    assert quarter_multiple_points(total) == 25


@pytest.mark.parametrize("total", ["10.30", "35.35", "10.255", "abc", "", "NaN"])
def test_quarter_multiple_points_not_awarded(total: str) -> None:
    """Test no points for other totals, fractional cents or unparsable text."""
    assert quarter_multiple_points(total) == 0


def test_quarter_multiple_uses_exact_cents() -> None:
    """Test amounts that float modulo gets wrong."""
    assert quarter_multiple_points("0.75") == 25
    assert quarter_multiple_points("1234567.75") == 25
    assert quarter_multiple_points("0.1") == 0


def test_quarter_multiple_beyond_default_decimal_precision() -> None:
    """Test that cents are tested exactly, not after rounding to 28 digits."""
    assert quarter_multiple_points("10.250000000000000000000000001") == 0
    assert quarter_multiple_points("10.250000000000000000000000000") == 25
    assert quarter_multiple_points("12345678901234567890123456789.75") == 25
    assert quarter_multiple_points("12345678901234567890123456789.70") == 0


def test_quarter_multiple_extreme_exponents() -> None:
    """Test that extreme exponents are judged exactly without raising."""
    assert quarter_multiple_points("1e999999999") == 25
    assert quarter_multiple_points("1e-999999999") == 0
    assert quarter_multiple_points("0e-999999999") == 25


# --- Rule 4: item pairs ---


@pytest.mark.parametrize(("count", "expected"), [(0, 0), (1, 0), (2, 5), (3, 5), (4, 10), (5, 10)])
def test_item_pair_points(count: int, expected: int) -> None:
    """Test five points for every two items."""
    assert item_pair_points(count) == expected


# --- Rule 5: item descriptions ---


def test_item_description_points_multiple_of_three() -> None:
    """Test ceil(price * 0.2) when the trimmed length is a multiple of 3."""
    assert item_description_points(Item(shortDescription="abc", price="10.00")) == 2
    assert item_description_points(Item(shortDescription="Emils Cheese Pizza", price="12.25")) == 3
    assert (
        item_description_points(
            Item(shortDescription="   Klarbrunn 12-PK 12 FL OZ  ", price="12.00")
        )
        == 3
    )


def test_item_description_points_not_multiple_of_three() -> None:
    """Test no points regardless of price when the length isn't a multiple of 3."""
    assert item_description_points(Item(shortDescription="abcd", price="10.00")) == 0
    assert item_description_points(Item(shortDescription="Mountain Dew 12PK", price="999")) == 0


def test_item_description_points_blank_description() -> None:
    """Test that a description that trims to nothing has length 0, a multiple of 3."""
    assert item_description_points(Item(shortDescription="   ", price="4.00")) == 1


def test_item_description_points_ceiling_on_exact_product() -> None:
    """Test that the ceiling is taken on the exact product."""
    assert item_description_points(Item(shortDescription="abc", price="5.00")) == 1
    assert item_description_points(Item(shortDescription="abc", price="5.01")) == 2
    assert item_description_points(Item(shortDescription="abc", price="0")) == 0


@pytest.mark.parametrize(
    "price", ["", "abc", "-5.00", "NaN", "1e999999999", "1e5000", "1000000000000", "0e999999"]
)
def test_item_description_points_degenerate_price(price: str) -> None:
    """Test that bad or out-of-range prices contribute zero instead of raising."""
    assert item_description_points(Item(shortDescription="abc", price=price)) == 0


def test_item_description_points_beyond_default_decimal_precision() -> None:
    """Test that the ceiling sees digits past Decimal's default 28."""
    item = Item(shortDescription="abc", price="10.0000000000000000000000000001")
    assert item_description_points(item) == 3

    item = Item(shortDescription="abc", price="10.0000000000000000000000000000")
    assert item_description_points(item) == 2


def test_item_description_points_small_and_large_prices() -> None:
    """Test prices at the edges of the accepted range."""
    assert item_description_points(Item(shortDescription="abc", price="0.01")) == 1
    assert item_description_points(Item(shortDescription="abc", price="1e-999999999")) == 1
    assert item_description_points(Item(shortDescription="abc", price="999999999999.99")) == (
        200000000000
    )


# --- Rule 6: odd day ---


def test_odd_day_points() -> None:
    """Test six points for odd days of the month."""
    assert odd_day_points("2024-01-15") == 6
    assert odd_day_points("2024-01-16") == 0
    assert odd_day_points("2022-01-31") == 6


def test_odd_day_points_unparsable_date() -> None:
    """Test that an unparsable date contributes zero."""
    assert odd_day_points("2024-01-1") == 0
    assert odd_day_points("") == 0


# --- Rule 7: afternoon purchase ---


@pytest.mark.parametrize(("purchase_time", "expected"), [
    ("14:00", 10),
    ("14:30", 10),
    ("15:59", 10),
    ("13:59", 0),
    ("16:00", 0),
    ("02:30", 0),
    ("", 0),
    ("14:99", 0),
])
def test_afternoon_points(purchase_time: str, expected: int) -> None:
    """Test ten points from 14:00 up to but excluding 16:00."""
    assert afternoon_points(purchase_time) == expected


# --- Whole receipts ---


def test_target_receipt_score() -> None:
    """Test the Target receipt scores the sum of each rule."""
    receipt = Receipt(
        retailer="Target",
        purchaseDate="2022-01-01",
        purchaseTime="13:01",
        items=[
            Item(shortDescription="Mountain Dew 12PK", price="6.49"),
            Item(shortDescription="Emils Cheese Pizza", price="12.25"),
            Item(shortDescription="Knorr Creamy Chicken", price="1.26"),
            Item(shortDescription="Doritos Nacho Cheese", price="3.35"),
            Item(shortDescription="   Klarbrunn 12-PK 12 FL OZ  ", price="12.00"),
        ],
        total="35.35",
    )

    breakdown = score_breakdown(receipt)

    assert breakdown == ScoreBreakdown(
        retailer_name=6,
        round_dollar_total=0,
        quarter_multiple_total=0,
        item_pairs=10,
        item_descriptions=6,
        odd_purchase_day=6,
        afternoon_purchase=0,
    )
    assert breakdown.total == 28
    assert score_receipt(receipt) == 28


def test_corner_market_receipt_score() -> None:
    """Test a receipt that hits the total and afternoon rules."""
    receipt = Receipt(
        retailer="M&M Corner Market",
        purchaseDate="2022-03-20",
        purchaseTime="14:33",
        items=[Item(shortDescription="Gatorade", price="2.25")] * 4,
        total="9.00",
    )

    assert score_receipt(receipt) == 109


def test_score_is_idempotent() -> None:
    """Test that scoring the same receipt twice gives the same result."""
    receipt = make_receipt(
        retailer="Walgreens",
        items=[Item(shortDescription="abc", price="3.33")],
        total="3.25",
    )

    assert score_receipt(receipt) == score_receipt(receipt)


def test_zero_point_receipt() -> None:
    """Test a receipt that matches no rule."""
    assert score_receipt(make_receipt()) == 0


def test_degenerate_receipt_does_not_raise() -> None:
    """Test scoring is total over receipts the validator would reject."""
    receipt = make_receipt(
        retailer="@@@",
        purchaseDate="garbage",
        purchaseTime="garbage",
        items=[Item(shortDescription="abc", price="garbage")],
        total="x",
    )

    assert score_receipt(receipt) == 0


def test_zero_total_scores_both_total_rules() -> None:
    """Test that a literal '0' total gets the round dollar and quarter points."""
    breakdown = score_breakdown(make_receipt(total="0"))

    assert breakdown.round_dollar_total == 50
    assert breakdown.quarter_multiple_total == 25
