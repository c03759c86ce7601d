"""Command line report over a CSV order snapshot."""

from __future__ import annotations

import argparse
from datetime import datetime
from typing import List, Optional

from marketplace_stats.config import get_config
from marketplace_stats.data.models import SnapshotFilters
from marketplace_stats.data.util import get_data_access
from marketplace_stats.exceptions import MarketplaceStatsError
from marketplace_stats.logging import get_logger
from marketplace_stats.reporting.formatter import render_report
from marketplace_stats.statistics.service import StatisticsService


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    config = get_config()
    parser = argparse.ArgumentParser(description="Marketplace admin statistics report")
    parser.add_argument("--data-dir", type=str, default=config.data_dir, help="Directory with the CSV snapshot.")
    parser.add_argument("--now", type=datetime.fromisoformat, default=None, help="ISO timestamp the windows are computed from (defaults to now).")
    parser.add_argument("--limit", type=int, default=config.order_snapshot_limit, help="Newest orders to include.")
    parser.add_argument("--store-id", type=str, default=None, help="Only orders with a line item from this store.")
    parser.add_argument("--json", action="store_true", help="Print the statistics as JSON instead of text.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = get_config()
    logger = get_logger(__name__)

    try:
        data_access = get_data_access("csv", data_dir=args.data_dir)
        service = StatisticsService(data_access, config)
        stats = service.get_admin_statistics(
            now=args.now,
            filters=SnapshotFilters(limit=args.limit, store_id=args.store_id),
        )
    except MarketplaceStatsError as e:
        logger.error(f"Could not build statistics: {e}")
        return 1

    if args.json:
        print(stats.model_dump_json(indent=2))
    else:
        print(render_report(stats, suffix=config.currency_suffix))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
