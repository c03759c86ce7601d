from __future__ import annotations

from datetime import datetime
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field


class _OutputModel(BaseModel):
    # Poisoned (NaN) revenues serialize as NaN, not null
    model_config = ConfigDict(ser_json_inf_nan="constants")


class Totals(_OutputModel):
    """Revenue and order count for one window."""
    revenue: float = Field(default=0.0, description="Sum of order total_amount")
    order_count: int = Field(default=0, description="Number of orders")


class StatusCounts(_OutputModel):
    """Order counts per known status."""
    pending: int = 0
    processing: int = 0
    delivering: int = 0
    completed: int = 0
    cancelled: int = 0

    def total(self) -> int:
        return self.pending + self.processing + self.delivering + self.completed + self.cancelled


class StoreAggregate(_OutputModel):
    """Line-item revenue and distinct order count for one store."""
    store_id: str = Field(description="Store identifier")
    store_name: str = Field(description="Store name from the first line item seen")
    revenue: float = Field(default=0.0, description="Sum of unit_price * quantity")
    order_count: int = Field(default=0, description="Distinct orders touching the store")


class ProductAggregate(_OutputModel):
    """Units and line-item revenue for one product."""
    product_id: str = Field(description="Product identifier")
    name: str = Field(description="Product name from the first line item seen")
    quantity_sold: Union[int, float] = Field(default=0, description="Sum of quantity")
    revenue: float = Field(default=0.0, description="Sum of unit_price * quantity")


class StatisticsSummary(_OutputModel):
    """Result of folding an order snapshot."""
    total: Totals = Field(default_factory=Totals)
    today: Totals = Field(default_factory=Totals)
    week: Totals = Field(default_factory=Totals)
    month: Totals = Field(default_factory=Totals)
    status_counts: StatusCounts = Field(default_factory=StatusCounts)
    top_stores: List[StoreAggregate] = Field(default_factory=list)
    top_products: List[ProductAggregate] = Field(default_factory=list)


class PlatformCounts(_OutputModel):
    """Platform-wide entity counts shown next to the order statistics."""
    total_users: int = 0
    total_stores: int = 0
    total_products: int = 0
    active_products: int = 0


class AdminStatistics(_OutputModel):
    """Everything the admin statistics view needs."""
    generated_at: datetime = Field(description="Clock value the windows were computed from")
    platform: PlatformCounts = Field(default_factory=PlatformCounts)
    summary: StatisticsSummary = Field(default_factory=StatisticsSummary)
