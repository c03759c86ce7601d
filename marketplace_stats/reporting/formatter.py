"""Text rendering of admin statistics for the console."""

from __future__ import annotations

import math
from typing import List

from ..data.models import AdminStatistics, ProductAggregate, StoreAggregate, Totals

NBSP = "\u00a0"


def format_currency(amount: float, suffix: str = "so'm") -> str:
    """Whole units, thousands grouped with a non-breaking space, e.g. 1 234 567 so'm."""
    if math.isnan(amount):
        return f"NaN {suffix}"
    if math.isinf(amount):
        return f"{'-' if amount < 0 else ''}∞ {suffix}"
    # Round half up, like Math.round
    whole = math.floor(amount + 0.5)
    return f"{whole:,}".replace(",", NBSP) + f" {suffix}"


def _format_totals(label: str, totals: Totals, suffix: str) -> str:
    return f"{label}: {format_currency(totals.revenue, suffix)}, {totals.order_count} orders"


def _format_store_line(idx: int, store: StoreAggregate, suffix: str) -> str:
    return (
        f"{idx}. {store.store_name} ({store.store_id}) - "
        f"{format_currency(store.revenue, suffix)}, {store.order_count} orders"
    )


def _format_product_line(idx: int, product: ProductAggregate, suffix: str) -> str:
    return (
        f"{idx}. {product.name} ({product.product_id}) - "
        f"{format_currency(product.revenue, suffix)}, {product.quantity_sold} sold"
    )


def render_report(stats: AdminStatistics, suffix: str = "so'm") -> str:
    """
    Render an AdminStatistics value as a multi-line console report.

    Args:
        stats (AdminStatistics): Platform counts and statistics summary.
        suffix (str): Currency suffix for money values.
    Returns:
        str: Report text without a trailing newline.
    """
    summary = stats.summary
    platform = stats.platform
    status = summary.status_counts
    lines: List[str] = []

    lines.append(f"Generated at: {stats.generated_at.isoformat(timespec='seconds')}")
    lines.append(
        f"Platform: {platform.total_users} users, {platform.total_stores} stores, "
        f"{platform.total_products} products ({platform.active_products} active)"
    )
    lines.append(_format_totals("Total", summary.total, suffix))
    lines.append(_format_totals("Today", summary.today, suffix))
    lines.append(_format_totals("Last 7 days", summary.week, suffix))
    lines.append(_format_totals("Last month", summary.month, suffix))
    lines.append(
        f"Statuses: pending {status.pending}, processing {status.processing}, "
        f"delivering {status.delivering}, completed {status.completed}, "
        f"cancelled {status.cancelled}"
    )

    if summary.top_stores:
        lines.append("Top stores (by revenue):")
        for idx, store in enumerate(summary.top_stores, start=1):
            lines.append(_format_store_line(idx, store, suffix))
    else:
        lines.append("No store sales yet.")

    if summary.top_products:
        lines.append("Top products (by revenue):")
        for idx, product in enumerate(summary.top_products, start=1):
            lines.append(_format_product_line(idx, product, suffix))
    else:
        lines.append("No product sales yet.")

    return "\n".join(lines)
