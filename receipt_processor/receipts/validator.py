"""Receipt validation.

Decides whether a submitted receipt is well-formed before it is stored.
Checks run in a fixed order and stop at the first failure, so a rejection
always carries exactly one reason.
"""

import re
from enum import Enum

from pydantic import BaseModel, model_validator

from receipt_processor.receipts.parsing import (
    MAX_ITEM_PRICE,
    parse_amount,
    parse_purchase_date,
    parse_purchase_time,
)
from receipt_processor.receipts.schema import Receipt

RETAILER_PATTERN = re.compile(r"[A-Za-z0-9\s]+", re.ASCII)


class RejectionReason(str, Enum):
    """Why a receipt was rejected."""

    INVALID_RETAILER_NAME = "invalid-retailer-name"
    INVALID_PURCHASE_DATE = "invalid-purchase-date"
    INVALID_PURCHASE_TIME = "invalid-purchase-time"
    EMPTY_ITEM_DESCRIPTION = "empty-item-description"
    INVALID_ITEM_PRICE = "invalid-item-price"

    @property
    def message(self) -> str:
        """Human-readable message returned to API clients."""
        return REJECTION_MESSAGES[self]


REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.INVALID_RETAILER_NAME: "Invalid retailer name",
    RejectionReason.INVALID_PURCHASE_DATE: "Invalid purchase date",
    RejectionReason.INVALID_PURCHASE_TIME: "Invalid purchase time",
    RejectionReason.EMPTY_ITEM_DESCRIPTION: "Item description cannot be empty",
    RejectionReason.INVALID_ITEM_PRICE: "Invalid item price",
}


class ValidationResult(BaseModel):
    """Outcome of validating a receipt.

    Attributes:
        accepted: Whether the receipt may be stored
        reason: Rejection reason, None when accepted
        item_index: Index of the offending item for item-level rejections
    """

    accepted: bool
    reason: RejectionReason | None = None
    item_index: int | None = None

    @model_validator(mode="after")
    def check_reason_matches_outcome(self) -> "ValidationResult":
        """A rejection carries exactly one reason; an acceptance carries none."""
        if self.accepted and self.reason is not None:
            raise ValueError("accepted result cannot carry a rejection reason")
        if not self.accepted and self.reason is None:
            raise ValueError("rejected result must carry a rejection reason")
        return self

    @property
    def rejection(self) -> RejectionReason:
        """Reason of a rejected result.

        Raises:
            ValueError: If the result was accepted
        """
        if self.reason is None:
            raise ValueError("accepted result has no rejection reason")
        return self.reason

    @classmethod
    def accept(cls) -> "ValidationResult":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: RejectionReason, item_index: int | None = None) -> "ValidationResult":
        return cls(accepted=False, reason=reason, item_index=item_index)


def is_valid_retailer(retailer: str) -> bool:
    """Check that the retailer is non-empty letters, digits and whitespace."""
    return RETAILER_PATTERN.fullmatch(retailer) is not None


def is_valid_price(price: str) -> bool:
    """Check that a price is a finite decimal number in [0, MAX_ITEM_PRICE)."""
    amount = parse_amount(price)
    return amount is not None and 0 <= amount < MAX_ITEM_PRICE


def validate_receipt(receipt: Receipt) -> ValidationResult:
    """Validate a receipt.

    Checks, in order: retailer name, purchase date, purchase time, then each
    item's description and price. The total is not checked here; the scorer
    treats a malformed total as worth no points.

    Args:
        receipt: Candidate receipt

    Returns:
        ValidationResult, accepted or rejected with the first failing reason
    """
    if not is_valid_retailer(receipt.retailer):
        return ValidationResult.reject(RejectionReason.INVALID_RETAILER_NAME)

    if parse_purchase_date(receipt.purchaseDate) is None:
        return ValidationResult.reject(RejectionReason.INVALID_PURCHASE_DATE)

    if parse_purchase_time(receipt.purchaseTime) is None:
        return ValidationResult.reject(RejectionReason.INVALID_PURCHASE_TIME)

    for index, item in enumerate(receipt.items):
        if not item.shortDescription:
            return ValidationResult.reject(RejectionReason.EMPTY_ITEM_DESCRIPTION, index)
        if not is_valid_price(item.price):
            return ValidationResult.reject(RejectionReason.INVALID_ITEM_PRICE, index)

    return ValidationResult.accept()
