from datetime import datetime

import pytest

from marketplace_stats.data.models import (
    AdminStatistics,
    PlatformCounts,
    ProductAggregate,
    StatisticsSummary,
    StatusCounts,
    StoreAggregate,
    Totals,
)
from marketplace_stats.reporting.formatter import format_currency, render_report

NBSP = "\u00a0"


@pytest.mark.parametrize(
    "amount, expected",
    [
        (0, "0 so'm"),
        (999.4, "999 so'm"),
        (1234567.4, f"1{NBSP}234{NBSP}567 so'm"),
        (0.5, "1 so'm"),
        (2.5, "3 so'm"),
        (-1500, f"-1{NBSP}500 so'm"),
        (float("nan"), "NaN so'm"),
    ],
)
def test_format_currency(amount, expected):
    assert format_currency(amount) == expected


def test_format_currency_suffix():
    assert format_currency(12000, suffix="UZS") == f"12{NBSP}000 UZS"


def test_render_report():
    stats = AdminStatistics(
        generated_at=datetime(2026, 10, 19, 12, 0),
        platform=PlatformCounts(total_users=10, total_stores=2, total_products=5, active_products=4),
        summary=StatisticsSummary(
            total=Totals(revenue=150, order_count=2),
            today=Totals(revenue=100, order_count=1),
            week=Totals(revenue=100, order_count=1),
            month=Totals(revenue=100, order_count=1),
            status_counts=StatusCounts(pending=1, completed=1),
            top_stores=[StoreAggregate(store_id="S1", store_name="Fresh", revenue=110, order_count=2)],
            top_products=[
                ProductAggregate(product_id="P1", name="Apple", quantity_sold=2, revenue=60),
                ProductAggregate(product_id="P2", name="Bread", quantity_sold=1, revenue=50),
            ],
        ),
    )
    report = render_report(stats)
    lines = report.splitlines()

    assert lines[0] == "Generated at: 2026-10-19T12:00:00"
    assert "10 users, 2 stores, 5 products (4 active)" in lines[1]
    assert "Total: 150 so'm, 2 orders" in report
    assert "pending 1, processing 0, delivering 0, completed 1, cancelled 0" in report
    assert "1. Fresh (S1) - 110 so'm, 2 orders" in report
    assert "2. Bread (P2) - 50 so'm, 1 sold" in report


def test_render_report_empty():
    report = render_report(AdminStatistics(generated_at=datetime(2026, 10, 19)))
    assert "No store sales yet." in report
    assert "No product sales yet." in report
    assert "Total: 0 so'm, 0 orders" in report
