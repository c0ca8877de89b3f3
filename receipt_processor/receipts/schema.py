"""Receipt data models.

Field names follow the JSON payload accepted by the API (camelCase).
Amounts are kept as the exact text that was submitted so no binary
floating-point rounding happens before scoring.
"""

from pydantic import BaseModel, ConfigDict, Field


class Item(BaseModel):
    """One line on a receipt."""

    model_config = ConfigDict(frozen=True)

    shortDescription: str = Field("", description="Short product description")
    price: str = Field("", description="Price paid for the item, e.g. '6.49'")


class Receipt(BaseModel):
    """A purchase receipt submitted for scoring.

    Missing string fields default to an empty string and a missing item list
    to an empty tuple, so an incomplete payload is rejected by the validator
    with a specific reason instead of a schema error.
    """

    model_config = ConfigDict(frozen=True)

    retailer: str = Field("", description="Retailer or store name")
    purchaseDate: str = Field("", description="Purchase date, YYYY-MM-DD")
    purchaseTime: str = Field("", description="Purchase time, 24-hour HH:MM")
    items: tuple[Item, ...] = Field((), description="Items on the receipt")
    total: str = Field("", description="Total amount paid, e.g. '35.35'")


class ProcessResponse(BaseModel):
    """Response to a successfully processed receipt."""

    id: str


class PointsResponse(BaseModel):
    """Points awarded to a stored receipt."""

    points: int
