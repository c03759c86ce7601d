import math
from datetime import datetime, timedelta, timezone

import pytest

from marketplace_stats.config import set_config_for_test
from marketplace_stats.data.backends.csv_backend import CsvDataAccess
from marketplace_stats.data.models import SnapshotFilters
from marketplace_stats.data.util import get_data_access
from marketplace_stats.exceptions import SnapshotLoadError
from marketplace_stats.statistics.reducer import reduce_orders

CSV_FILES = {
    "stores.csv": """id,name
S1,Fresh
S2,Baraka
""",
    "products.csv": """id,name,store_id,is_active
P1,Apple,S1,true
P2,Bread,S1,false
P3,Milk,S2,True
P4,Orphan,S9,1
""",
    "users.csv": """id
U1
U2
U3
""",
    "orders.csv": """id,total_amount,status,created_at
O1,100,completed,2026-10-19T10:00:00
O2,50,pending,2026-09-09T09:00:00
O3,,shipped,2026-10-18T08:00:00
O4,75,cancelled,2026-10-17T12:00:00
""",
    "order_items.csv": """order_id,product_id,quantity,price
O1,P1,2,30
O2,P2,1,50
O3,P3,abc,10
O3,P404,1,5
O4,P4,3,25
O4,P1,1,30
""",
}


def write_snapshot(directory, skip=()):
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in CSV_FILES.items():
        if name not in skip:
            (directory / name).write_text(content, encoding="utf-8")
    return directory


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.delenv("ORDER_SNAPSHOT_LIMIT", raising=False)
    monkeypatch.delenv("DATA_DIR", raising=False)
    set_config_for_test()


@pytest.fixture
def data_access(tmp_path):
    return CsvDataAccess(data_dir=write_snapshot(tmp_path / "snapshot"))


def test_snapshot_is_newest_first(data_access):
    orders = data_access.get_order_snapshot(SnapshotFilters())
    assert [o.id for o in orders] == ["O1", "O3", "O4", "O2"]
    assert orders[0].created_at == datetime(2026, 10, 19, 10, 0)


def test_snapshot_limit_and_ordering(data_access):
    assert [o.id for o in data_access.get_order_snapshot(SnapshotFilters(limit=2))] == ["O1", "O3"]
    oldest = data_access.get_order_snapshot(SnapshotFilters(order_by="created_at_asc", limit=1))
    assert [o.id for o in oldest] == ["O2"]


def test_snapshot_limit_defaults_to_config(tmp_path):
    set_config_for_test(order_snapshot_limit=1)
    data_access = CsvDataAccess(data_dir=write_snapshot(tmp_path / "snapshot"))
    assert [o.id for o in data_access.get_order_snapshot(SnapshotFilters())] == ["O1"]


def test_raw_values_pass_through(data_access):
    orders = {o.id: o for o in data_access.get_order_snapshot(SnapshotFilters())}

    o3 = orders["O3"]
    assert o3.total_amount is None
    assert o3.status == "shipped"
    assert [i.quantity for i in o3.items] == ["abc", "1"]
    # P404 is not in products.csv
    assert o3.items[1].product is None

    o4 = orders["O4"]
    assert o4.total_amount == 75
    orphan = o4.items[0].product
    assert (orphan.id, orphan.name, orphan.store_id, orphan.store_name) == ("P4", "Orphan", "S9", None)
    assert o4.items[1].product.store_name == "Fresh"


def test_store_and_date_filters(data_access):
    by_store = data_access.get_order_snapshot(SnapshotFilters(store_id="S1"))
    assert [o.id for o in by_store] == ["O1", "O4", "O2"]
    # Every line item of a matching order is kept
    assert len(by_store[1].items) == 2

    recent = data_access.get_order_snapshot(SnapshotFilters(start_ts=datetime(2026, 10, 18)))
    assert [o.id for o in recent] == ["O1", "O3"]
    older = data_access.get_order_snapshot(SnapshotFilters(end_ts=datetime(2026, 10, 1)))
    assert [o.id for o in older] == ["O2"]


def test_each_call_builds_fresh_records(data_access):
    first = data_access.get_order_snapshot(SnapshotFilters())
    second = data_access.get_order_snapshot(SnapshotFilters())
    assert first == second
    assert first[0] is not second[0]


def test_platform_counts(data_access):
    counts = data_access.get_platform_counts()
    assert counts.total_users == 3
    assert counts.total_stores == 2
    assert counts.total_products == 4
    assert counts.active_products == 3


def test_users_file_is_optional(tmp_path):
    data_access = CsvDataAccess(data_dir=write_snapshot(tmp_path / "snapshot", skip={"users.csv"}))
    assert data_access.get_platform_counts().total_users == 0


def test_snapshot_reduces_end_to_end(data_access):
    orders = data_access.get_order_snapshot(SnapshotFilters())
    summary = reduce_orders(orders, datetime(2026, 10, 19, 12, 0))

    assert summary.total.revenue == 225
    assert summary.total.order_count == 4
    assert summary.status_counts.total() == 3
    assert summary.today.order_count == 1

    stores = {s.store_id: s for s in summary.top_stores}
    assert (stores["S1"].revenue, stores["S1"].order_count) == (140, 3)
    assert (stores["S9"].store_name, stores["S9"].revenue) == ("Noma'lum do'kon", 75)
    assert math.isnan(stores["S2"].revenue)


def test_missing_directory(tmp_path):
    with pytest.raises(SnapshotLoadError) as excinfo:
        CsvDataAccess(data_dir=tmp_path / "nope")
    assert excinfo.value.path == tmp_path / "nope"


def test_missing_required_file(tmp_path):
    with pytest.raises(SnapshotLoadError, match="order_items.csv"):
        CsvDataAccess(data_dir=write_snapshot(tmp_path / "snapshot", skip={"order_items.csv"}))


def test_relative_dir_resolves_against_project_root(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n", encoding="utf-8")
    write_snapshot(tmp_path / "snapshot")
    (tmp_path / "nested" / "deeper").mkdir(parents=True)
    monkeypatch.chdir(tmp_path / "nested" / "deeper")

    data_access = CsvDataAccess(data_dir="snapshot")
    assert data_access.data_dir == tmp_path / "snapshot"


def test_get_data_access(tmp_path):
    data_access = get_data_access("csv", data_dir=write_snapshot(tmp_path / "snapshot"))
    assert isinstance(data_access, CsvDataAccess)
    with pytest.raises(ValueError):
        get_data_access("warehouse")


MIXED_OFFSET_ORDERS = """id,total_amount,status,created_at
O1,100,completed,2026-10-19 10:00:00+00:00
O2,50,pending,2026-10-19 12:00:00+05:00
O3,75,cancelled,2026-10-01 08:00:00+00:00
"""


def test_mixed_utc_offsets_are_normalized(tmp_path):
    snapshot = write_snapshot(tmp_path / "snapshot")
    (snapshot / "orders.csv").write_text(MIXED_OFFSET_ORDERS, encoding="utf-8")
    data_access = CsvDataAccess(data_dir=snapshot)

    orders = data_access.get_order_snapshot(SnapshotFilters())
    assert [o.id for o in orders] == ["O1", "O2", "O3"]
    assert orders[1].created_at == datetime(2026, 10, 19, 7, 0, tzinfo=timezone.utc)


def test_bounds_align_with_offset_column(tmp_path):
    snapshot = write_snapshot(tmp_path / "snapshot")
    (snapshot / "orders.csv").write_text(MIXED_OFFSET_ORDERS, encoding="utf-8")
    data_access = CsvDataAccess(data_dir=snapshot)

    # Naive bounds are read in the column's zone (UTC)
    naive = data_access.get_order_snapshot(SnapshotFilters(start_ts=datetime(2026, 10, 19, 8)))
    assert [o.id for o in naive] == ["O1"]
    aware = data_access.get_order_snapshot(
        SnapshotFilters(start_ts=datetime(2026, 10, 19, 8, tzinfo=timezone(timedelta(hours=5))))
    )
    assert [o.id for o in aware] == ["O1", "O2"]
    before = data_access.get_order_snapshot(SnapshotFilters(end_ts=datetime(2026, 10, 2)))
    assert [o.id for o in before] == ["O3"]


def test_single_offset_column_with_naive_bound(tmp_path):
    snapshot = write_snapshot(tmp_path / "snapshot")
    (snapshot / "orders.csv").write_text(
        "id,total_amount,status,created_at\n"
        "O1,100,completed,2026-10-19 10:00:00+00:00\n"
        "O2,50,pending,2026-09-01 10:00:00+00:00\n",
        encoding="utf-8",
    )
    orders = CsvDataAccess(data_dir=snapshot).get_order_snapshot(SnapshotFilters(start_ts=datetime(2026, 10, 1)))
    assert [o.id for o in orders] == ["O1"]


def test_aware_bound_on_naive_column_uses_local_time(data_access):
    bound = datetime(2026, 10, 18, 0, 0, tzinfo=timezone.utc)
    local_bound = bound.astimezone().replace(tzinfo=None)
    everything = data_access.get_order_snapshot(SnapshotFilters())
    expected = [o.id for o in everything if o.created_at >= local_bound]

    orders = data_access.get_order_snapshot(SnapshotFilters(start_ts=bound))
    assert [o.id for o in orders] == expected


def test_unreadable_orders_raise_snapshot_error(tmp_path):
    snapshot = write_snapshot(tmp_path / "snapshot")
    (snapshot / "orders.csv").write_text("id,total_amount,status\nO1,100,completed\n", encoding="utf-8")
    with pytest.raises(SnapshotLoadError) as excinfo:
        CsvDataAccess(data_dir=snapshot)
    assert isinstance(excinfo.value.original_error, KeyError)
