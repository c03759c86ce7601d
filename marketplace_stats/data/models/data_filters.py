from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class SnapshotFilters(BaseModel):
    """Filters for the order snapshot handed to the statistics reducer."""
    start_ts: Optional[datetime] = Field(default=None, description="Start timestamp for order date range")
    end_ts: Optional[datetime] = Field(default=None, description="End timestamp for order date range")
    store_id: Optional[str] = Field(default=None, description="Keep only orders with a line item from this store")
    limit: Optional[int] = Field(default=None, ge=0, description="Maximum number of orders, defaults to the configured snapshot limit")
    order_by: Literal["created_at_desc", "created_at_asc"] = Field(default="created_at_desc", description="Snapshot ordering")
