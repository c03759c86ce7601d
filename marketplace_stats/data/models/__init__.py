from .data_filters import SnapshotFilters

from .orders import (
    OrderStatus,
    ProductRef,
    LineItem,
    OrderRecord,
)
from .statistics import (
    Totals,
    StatusCounts,
    StoreAggregate,
    ProductAggregate,
    StatisticsSummary,
    PlatformCounts,
    AdminStatistics,
)

__all__ = [
    # Filter classes
    "SnapshotFilters",
    # Input models
    "OrderStatus",
    "ProductRef",
    "LineItem",
    "OrderRecord",
    # Output models
    "Totals",
    "StatusCounts",
    "StoreAggregate",
    "ProductAggregate",
    "StatisticsSummary",
    "PlatformCounts",
    "AdminStatistics",
]
