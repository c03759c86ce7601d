from __future__ import annotations

from typing import List, Protocol

from .models import (
    OrderRecord,
    PlatformCounts,
    SnapshotFilters,
)


# ---- Data access protocol ----

class DataAccess(Protocol):
    """
    Backend-agnostic contract for the statistics service.

    Implementations hand back fully materialized values: the reducer never
    goes back to the source while it folds a snapshot.
    """

    def get_order_snapshot(self, filters: SnapshotFilters) -> List[OrderRecord]:
        """Get the bounded order graph (orders, line items, products, stores)."""
        ...

    def get_platform_counts(self) -> PlatformCounts:
        """Get user, store, product and active product counts."""
        ...
