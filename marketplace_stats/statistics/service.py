from __future__ import annotations

import time
from datetime import datetime
from typing import Optional

from ..config import AppConfig, get_config
from ..data.interface import DataAccess
from ..data.models import AdminStatistics, SnapshotFilters
from ..logging import get_logger
from .reducer import StatisticsReducer


class StatisticsService:
    """Builds the admin statistics view from a DataAccess backend.

    The backend supplies the bounded order snapshot and the platform counts;
    the reducer does the folding. The wall clock is read at most once per call.
    """

    def __init__(self, data_access: DataAccess, config: Optional[AppConfig] = None) -> None:
        self.data_access = data_access
        self.config = config or get_config()
        self.logger = get_logger(__name__)
        self.reducer = StatisticsReducer(
            top_n=self.config.leaderboard_size,
            unknown_store_name=self.config.unknown_store_name,
            unknown_product_name=self.config.unknown_product_name,
            strict_numbers=self.config.strict_numbers,
        )

    def get_admin_statistics(
        self,
        now: Optional[datetime] = None,
        filters: Optional[SnapshotFilters] = None,
    ) -> AdminStatistics:
        """Fetch the snapshot, reduce it and attach platform counts.

        Args:
            now (datetime, optional): Clock value for the windows. Defaults to local now.
            filters (SnapshotFilters, optional): Snapshot filters. Defaults to the newest
                `order_snapshot_limit` orders.
        Returns:
            AdminStatistics: Platform counts plus the statistics summary.
        """
        if now is None:
            now = datetime.now()
        if filters is None:
            filters = SnapshotFilters(limit=self.config.order_snapshot_limit)

        t0 = time.perf_counter()
        orders = self.data_access.get_order_snapshot(filters)
        t_snapshot = (time.perf_counter() - t0) * 1000.0

        t0 = time.perf_counter()
        summary = self.reducer.reduce(orders, now)
        t_reduce = (time.perf_counter() - t0) * 1000.0

        t0 = time.perf_counter()
        platform = self.data_access.get_platform_counts()
        t_platform = (time.perf_counter() - t0) * 1000.0

        self.logger.debug(
            f"Loaded {len(orders)} orders in {t_snapshot:.2f} ms, reduced in {t_reduce:.2f} ms, "
            f"platform counts in {t_platform:.2f} ms"
        )
        self.logger.info(
            f"Statistics at {now.isoformat()}: {summary.total.order_count} orders, "
            f"revenue {summary.total.revenue:.2f}, {len(summary.top_stores)} stores ranked"
        )
        return AdminStatistics(generated_at=now, platform=platform, summary=summary)
