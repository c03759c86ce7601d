from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr


class OrderStatus(str, Enum):
    """Fulfillment stage of an order."""

    PENDING = "pending"
    PROCESSING = "processing"
    DELIVERING = "delivering"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Raw numeric cell as it comes out of the join: numbers, numeric strings, or junk.
# Strict so booleans are rejected instead of coerced to 1 and 0.
RawNumber = Optional[Union[StrictInt, StrictFloat, StrictStr]]


class ProductRef(BaseModel):
    """Product referenced by a line item, with its owning store."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(default=None, description="Product identifier")
    name: Optional[str] = Field(default=None, description="Product name")
    store_id: Optional[str] = Field(default=None, description="Identifier of the store selling the product")
    store_name: Optional[str] = Field(default=None, description="Name of the store selling the product")


class LineItem(BaseModel):
    """One line of an order. Numeric fields are kept raw and parsed by the reducer."""
    model_config = ConfigDict(frozen=True)

    quantity: RawNumber = Field(default=None, description="Units ordered")
    unit_price: RawNumber = Field(default=None, description="Price per unit at time of order")
    product: Optional[ProductRef] = Field(default=None, description="Referenced product, None if deleted")


class OrderRecord(BaseModel):
    """Order with its nested line items."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique order identifier")
    total_amount: Optional[float] = Field(default=None, description="Order total as charged")
    status: Optional[str] = Field(default=None, description="Order status, see OrderStatus")
    created_at: Optional[datetime] = Field(default=None, description="Order timestamp")
    items: List[LineItem] = Field(default_factory=list, description="Line items in input order")
