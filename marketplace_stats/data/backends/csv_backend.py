from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ...config import get_config
from ...exceptions import SnapshotLoadError
from ..interface import DataAccess
from ..models import (
    LineItem,
    OrderRecord,
    PlatformCounts,
    ProductRef,
    SnapshotFilters,
)

REQUIRED_FILES = ["orders.csv", "order_items.csv", "products.csv", "stores.csv"]
TRUE_VALUES = {"true", "t", "1", "yes", "y"}


@dataclass
class _Tables:
    orders: pd.DataFrame
    order_items: pd.DataFrame
    products: pd.DataFrame
    stores: pd.DataFrame
    users: pd.DataFrame
    # Pre-joined line items with product and store columns; see _build_lines()
    lines: pd.DataFrame


def _clean(value: Any) -> Any:
    """Map pandas missing markers to None and timestamps to datetimes."""
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _parse_timestamps(raw: pd.Series) -> pd.Series:
    """Parse a timestamp column; offset-bearing values with differing offsets are normalized to UTC."""
    try:
        parsed = pd.to_datetime(raw, errors="coerce")
    except ValueError:
        # Mixed UTC offsets, e.g. a timestamptz export spanning zones
        return pd.to_datetime(raw, errors="coerce", utc=True)
    if not pd.api.types.is_datetime64_any_dtype(parsed):
        # Older pandas returns an object column of mixed-offset datetimes instead of raising
        return pd.to_datetime(raw, errors="coerce", utc=True)
    return parsed


def _align_bound(moment: datetime, column: pd.Series) -> pd.Timestamp:
    """
    Make a filter bound comparable with the created_at column.

    Naive bounds are read in the column's timezone; aware bounds compared with
    a naive column are converted to local time, like windows.align_to.
    """
    bound = pd.Timestamp(moment)
    column_tz = column.dt.tz
    if column_tz is not None and bound.tzinfo is None:
        return bound.tz_localize(column_tz)
    if column_tz is not None:
        return bound.tz_convert(column_tz)
    if bound.tzinfo is not None:
        return pd.Timestamp(moment.astimezone().replace(tzinfo=None))
    return bound


class CsvDataAccess(DataAccess):
    """
    CSV-backed implementation.
    - Loads CSVs from `data_dir` once at construction.
    - Every snapshot call performs a fresh filter/sort/limit pass over the loaded frames
      and materializes new OrderRecord values.
    - Quantity and price cells are passed through as read, so malformed values reach
      the reducer untouched.
    """

    def __init__(self, data_dir: str | Path = None) -> None:
        if data_dir is None:
            data_dir = get_config().data_dir

        self.data_dir = Path(data_dir)

        # If the path is relative, make it relative to the repository root
        if not self.data_dir.is_absolute():
            current = Path.cwd()
            repo_root = None

            for parent in [current] + list(current.parents):
                if (parent / "pyproject.toml").exists():
                    repo_root = parent
                    break

            self.data_dir = (repo_root or current) / self.data_dir

        self._tables = self._load_tables(self.data_dir)

    # ---------- loading / join helpers ----------

    @staticmethod
    def _load_tables(data_dir: Path) -> _Tables:
        if not data_dir.exists():
            raise SnapshotLoadError(
                "Data directory not found. Generate sample data with `marketplace-stats-seed` "
                "or set DATA_DIR to a directory holding the CSV snapshot",
                path=data_dir,
            )

        missing_files = [f for f in REQUIRED_FILES if not (data_dir / f).exists()]
        if missing_files:
            raise SnapshotLoadError(
                f"Required CSV files missing: {', '.join(missing_files)}; "
                f"expected files: {', '.join(REQUIRED_FILES)}",
                path=data_dir,
            )

        try:
            orders = pd.read_csv(data_dir / "orders.csv", dtype={"id": str, "status": str})
            order_items = pd.read_csv(data_dir / "order_items.csv", dtype=str)
            products = pd.read_csv(data_dir / "products.csv", dtype={"id": str, "name": str, "store_id": str, "is_active": str})
            stores = pd.read_csv(data_dir / "stores.csv", dtype={"id": str, "name": str})

            users = pd.DataFrame(columns=["id"])
            if (data_dir / "users.csv").exists():
                users = pd.read_csv(data_dir / "users.csv", dtype={"id": str})

            orders["created_at"] = _parse_timestamps(orders["created_at"])
            orders["total_amount"] = pd.to_numeric(orders["total_amount"], errors="coerce")
            products["is_active"] = products["is_active"].fillna("").str.strip().str.lower().isin(TRUE_VALUES)
        except Exception as e:
            raise SnapshotLoadError("Error reading CSV files", path=data_dir, original_error=e) from e

        lines = CsvDataAccess._build_lines(order_items, products, stores)

        return _Tables(
            orders=orders,
            order_items=order_items,
            products=products,
            stores=stores,
            users=users,
            lines=lines,
        )

    @staticmethod
    def _build_lines(
        order_items: pd.DataFrame,
        products: pd.DataFrame,
        stores: pd.DataFrame,
    ) -> pd.DataFrame:
        # Normalize names to avoid collisions
        products = products.rename(columns={"id": "product_id", "name": "product_name"})
        stores = stores.rename(columns={"id": "store_id", "name": "store_name"})

        df = (
            order_items.merge(
                products[["product_id", "product_name", "store_id"]],
                on="product_id",
                how="left",
                indicator="product_match",
            )
            .merge(stores[["store_id", "store_name"]], on="store_id", how="left")
            .copy()
        )
        # Items whose product row is gone (deleted products) carry no product reference
        df["product_found"] = df["product_match"] == "both"
        return df.drop(columns=["product_match"])

    # ---------- interface implementation ----------

    def get_order_snapshot(self, filters: SnapshotFilters) -> List[OrderRecord]:
        df = self._tables.orders

        if filters.start_ts:
            df = df[df["created_at"] >= _align_bound(filters.start_ts, df["created_at"])]
        if filters.end_ts:
            df = df[df["created_at"] <= _align_bound(filters.end_ts, df["created_at"])]
        if filters.store_id:
            lines = self._tables.lines
            touching = lines.loc[lines["store_id"] == filters.store_id, "order_id"]
            df = df[df["id"].isin(touching)]

        asc = (filters.order_by == "created_at_asc")
        df = df.sort_values("created_at", ascending=asc, kind="stable", na_position="last")

        limit = filters.limit if filters.limit is not None else get_config().order_snapshot_limit
        df = df.head(int(limit))

        lines = self._tables.lines
        lines = lines[lines["order_id"].isin(df["id"])]
        items_by_order: Dict[str, List[LineItem]] = {}
        for row in lines.itertuples(index=False):
            items_by_order.setdefault(row.order_id, []).append(self._line_item(row))

        return [
            OrderRecord(
                id=row.id,
                total_amount=_clean(row.total_amount),
                status=_clean(row.status),
                created_at=_clean(row.created_at),
                items=items_by_order.get(row.id, []),
            )
            for row in df.itertuples(index=False)
        ]

    @staticmethod
    def _line_item(row: Any) -> LineItem:
        product: Optional[ProductRef] = None
        if row.product_found:
            product = ProductRef(
                id=_clean(row.product_id),
                name=_clean(row.product_name),
                store_id=_clean(row.store_id),
                store_name=_clean(row.store_name),
            )
        return LineItem(
            quantity=_clean(row.quantity),
            unit_price=_clean(row.price),
            product=product,
        )

    def get_platform_counts(self) -> PlatformCounts:
        products = self._tables.products
        return PlatformCounts(
            total_users=int(len(self._tables.users)),
            total_stores=int(len(self._tables.stores)),
            total_products=int(len(products)),
            active_products=int(products["is_active"].sum()),
        )
