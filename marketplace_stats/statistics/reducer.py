"""
Statistics roll-up for the admin console.

Folds a materialized order snapshot into overall and windowed totals, status
counts, and revenue leaderboards for stores and products. Pure: no I/O, no
shared state, nothing in the input is mutated.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from ..data.models import (
    OrderRecord,
    OrderStatus,
    ProductAggregate,
    StatisticsSummary,
    StatusCounts,
    StoreAggregate,
    Totals,
)
from ..exceptions import InvalidLineItemError
from .windows import align_to, compute_window_bounds

DEFAULT_TOP_N = 10
UNKNOWN_STORE_NAME = "Noma'lum do'kon"
UNKNOWN_PRODUCT_NAME = "Noma'lum mahsulot"

_KNOWN_STATUSES = {status.value for status in OrderStatus}


def parse_price(value: Any) -> float:
    """
    Float parsing that yields NaN instead of raising.

    The whole value must be numeric: "30abc" is NaN, not 30. Values arrive as
    complete CSV cells, so a numeric prefix followed by junk means the cell is
    corrupt, and reading only the prefix would report a plausible number for it.
    Booleans are NaN as well.
    """
    if isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def parse_quantity(value: Any) -> int | float:
    """Integer parsing (truncating toward zero) that yields NaN instead of raising."""
    number = parse_price(value)
    if not math.isfinite(number):
        return math.nan
    return math.trunc(number)


def _order_total(value: Optional[float]) -> float:
    # Missing and NaN totals count as zero.
    if value is None or math.isnan(value):
        return 0.0
    return float(value)


class StatisticsReducer:
    """
    Reduces order snapshots to a StatisticsSummary.

    Args:
        top_n (int): Length of both leaderboards.
        unknown_store_name (str): Name used when a store has none.
        unknown_product_name (str): Name used when a product has none.
        strict_numbers (bool): Raise InvalidLineItemError on a non-numeric
            quantity or unit price instead of letting NaN poison the sums.
    """

    def __init__(
        self,
        top_n: int = DEFAULT_TOP_N,
        unknown_store_name: str = UNKNOWN_STORE_NAME,
        unknown_product_name: str = UNKNOWN_PRODUCT_NAME,
        strict_numbers: bool = False,
    ) -> None:
        self.top_n = top_n
        self.unknown_store_name = unknown_store_name
        self.unknown_product_name = unknown_product_name
        self.strict_numbers = strict_numbers

    def reduce(self, orders: Sequence[OrderRecord], now: datetime) -> StatisticsSummary:
        bounds = compute_window_bounds(now)

        total = Totals()
        today = Totals()
        week = Totals()
        month = Totals()
        status_counts = StatusCounts()
        store_stats: Dict[str, Dict[str, Any]] = {}
        product_stats: Dict[str, Dict[str, Any]] = {}

        for order in orders:
            order_total = _order_total(order.total_amount)
            total.revenue += order_total
            total.order_count += 1

            created_at = align_to(order.created_at, now)
            if created_at is not None:
                for window, start in (
                    (today, bounds.day_start),
                    (week, bounds.week_start),
                    (month, bounds.month_start),
                ):
                    if created_at >= start:
                        window.revenue += order_total
                        window.order_count += 1

            if order.status in _KNOWN_STATUSES:
                setattr(status_counts, order.status, getattr(status_counts, order.status) + 1)

            stores_in_order: List[str] = []
            for item in order.items:
                product = item.product
                if product is None:
                    continue
                quantity, unit_price = self._line_numbers(order, item.quantity, item.unit_price)
                line_revenue = unit_price * quantity

                if product.store_id:
                    store_entry = store_stats.setdefault(
                        product.store_id,
                        {
                            "store_id": product.store_id,
                            "store_name": product.store_name or self.unknown_store_name,
                            "revenue": 0.0,
                            "order_count": 0,
                        },
                    )
                    store_entry["revenue"] += line_revenue
                    if product.store_id not in stores_in_order:
                        stores_in_order.append(product.store_id)

                if product.id:
                    product_entry = product_stats.setdefault(
                        product.id,
                        {
                            "product_id": product.id,
                            "name": product.name or self.unknown_product_name,
                            "quantity_sold": 0,
                            "revenue": 0.0,
                        },
                    )
                    product_entry["quantity_sold"] += quantity
                    product_entry["revenue"] += line_revenue

            for store_id in stores_in_order:
                store_stats[store_id]["order_count"] += 1

        return StatisticsSummary(
            total=total,
            today=today,
            week=week,
            month=month,
            status_counts=status_counts,
            top_stores=[StoreAggregate(**entry) for entry in self._top(store_stats)],
            top_products=[ProductAggregate(**entry) for entry in self._top(product_stats)],
        )

    def _line_numbers(self, order: OrderRecord, raw_quantity: Any, raw_price: Any):
        quantity = parse_quantity(raw_quantity)
        unit_price = parse_price(raw_price)
        if self.strict_numbers:
            if not math.isfinite(quantity):
                raise InvalidLineItemError(order.id, "quantity", raw_quantity)
            if not math.isfinite(unit_price):
                raise InvalidLineItemError(order.id, "unit_price", raw_price)
        return quantity, unit_price

    def _top(self, stats: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
        # sorted() is stable, so equal revenues keep first-seen order.
        return sorted(stats.values(), key=lambda entry: entry["revenue"], reverse=True)[: self.top_n]


def reduce_orders(
    orders: Sequence[OrderRecord],
    now: datetime,
    top_n: int = DEFAULT_TOP_N,
) -> StatisticsSummary:
    """Reduce with default names and lenient number parsing."""
    return StatisticsReducer(top_n=top_n).reduce(orders, now)
