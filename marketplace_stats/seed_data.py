#!/usr/bin/env python3
"""
seed_data.py

Generates fake marketplace data to CSVs under a local folder (default: sample_data),
in the layout CsvDataAccess reads.

Entities:
- stores, products, users, orders, order_items

Run:
  marketplace-stats-seed --orders 1500 --days 60
"""

from __future__ import annotations
import argparse
import csv
import os
import random
import sys
from datetime import datetime, timedelta
from math import sin, pi
from typing import Dict, List, Optional, Tuple

from marketplace_stats.config import get_config

# -----------------------------
# Config & helper structures
# -----------------------------

STORE_NAMES = [
    "Fresh", "Baraka Market", "Olma Bozor", "Navro'z", "Samarqand Non",
    "Tashkent Textile", "Silk Road Spices", "Chorsu Deli", "Yangi Hayot", "Bahor",
]

CATEGORIES = {
    "Produce": ["Apple", "Pomegranate", "Melon", "Grapes", "Tomato"],
    "Bakery": ["Bread", "Non", "Samsa", "Cake"],
    "Dairy": ["Milk", "Kefir", "Suzma", "Butter"],
    "Household": ["Soap", "Detergent", "Towel"],
    "Spices": ["Cumin", "Saffron", "Pepper", "Barberry"],
}

# Weighted to mirror a storefront where most orders have left the queue
STATUSES = ["pending", "processing", "delivering", "completed", "cancelled"]
STATUS_WEIGHTS = [0.12, 0.1, 0.08, 0.62, 0.08]


# -----------------------------
# Utility functions
# -----------------------------

def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)

def zipf_like_index(rnd: random.Random, n: int, s: float = 1.15) -> int:
    """
    Return an index [0, n-1] with a bias toward lower indices (popular items).
    s ~1.0-1.3 controls skew.
    """
    idx = int((rnd.random() ** (1.0 / (1.0 + s))) * n)
    if idx >= n:
        idx = n - 1
    return idx

def diurnal_weight(hour: int) -> float:
    """Evening-heavy ordering, ~0.4 at night to ~1.4 around 19:00."""
    return 0.9 + 0.5 * sin((hour - 13) / 24 * 2 * pi)

def price_round(p: float) -> float:
    # Prices are whole so'm amounts
    return float(max(round(p / 100) * 100, 100))


# -----------------------------
# Core generators
# -----------------------------

def gen_stores(n: int) -> List[Dict]:
    stores = []
    for i in range(1, n + 1):
        base = STORE_NAMES[(i - 1) % len(STORE_NAMES)]
        suffix = "" if i <= len(STORE_NAMES) else f" {(i - 1) // len(STORE_NAMES) + 1}"
        stores.append({"id": f"S{i:03d}", "name": f"{base}{suffix}"})
    return stores

def gen_products(rnd: random.Random, n: int, stores: List[Dict]) -> List[Dict]:
    products = []
    for i in range(1, n + 1):
        category = rnd.choice(list(CATEGORIES.keys()))
        item = rnd.choice(CATEGORIES[category])
        products.append({
            "id": f"P{i:04d}",
            "name": f"{item} {rnd.randint(10, 999)}",
            "store_id": rnd.choice(stores)["id"],
            "is_active": rnd.random() < 0.85,
            "base_price": price_round(rnd.uniform(2_000, 150_000)),
        })
    return products

def gen_users(n: int) -> List[Dict]:
    return [{"id": f"U{i:05d}"} for i in range(1, n + 1)]

def gen_orders_and_items(
    rnd: random.Random,
    products: List[Dict],
    n_orders: int,
    end_dt: datetime,
    days: int,
) -> Tuple[List[Dict], List[Dict]]:
    # Popularity index: pre-sort products by a stable random key to create consistent "top sellers"
    product_order = list(range(len(products)))
    rnd.shuffle(product_order)
    hour_weights = [diurnal_weight(h) for h in range(24)]

    orders: List[Dict] = []
    items: List[Dict] = []

    for n in range(1, n_orders + 1):
        order_id = f"O{n:06d}"
        day = rnd.randint(0, max(0, days - 1))
        hour = rnd.choices(range(24), weights=hour_weights)[0]
        created = (end_dt - timedelta(days=day)).replace(
            hour=hour, minute=rnd.randint(0, 59), second=rnd.randint(0, 59), microsecond=0
        )
        if created > end_dt:
            created -= timedelta(days=1)

        # basket size: 1-6, skew small
        basket_size = min(max(1, 1 + int(abs(rnd.gauss(0.5, 1.0)) * 2)), 6)
        order_total = 0.0
        for _ in range(basket_size):
            prod = products[product_order[zipf_like_index(rnd, len(products))]]
            qty = 1 if rnd.random() < 0.7 else rnd.randint(2, 5)
            unit_price = prod["base_price"]
            order_total += unit_price * qty
            items.append({
                "order_id": order_id,
                "product_id": prod["id"],
                "quantity": qty,
                "price": unit_price,
            })

        # delivery fee on some orders; totals need not match the line items
        if rnd.random() < 0.4:
            order_total += 10_000

        orders.append({
            "id": order_id,
            "total_amount": order_total,
            "status": rnd.choices(STATUSES, weights=STATUS_WEIGHTS)[0],
            "created_at": created.isoformat(timespec="seconds"),
        })

    return orders, items


# -----------------------------
# CSV writer
# -----------------------------

def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore")
        w.writeheader()
        for r in rows:
            w.writerow(r)


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Generate fake marketplace data to CSVs.")
    parser.add_argument("--stores", type=int, default=config.default_seed_stores)
    parser.add_argument("--products", type=int, default=config.default_seed_products)
    parser.add_argument("--users", type=int, default=config.default_seed_users)
    parser.add_argument("--orders", type=int, default=config.default_seed_orders)
    parser.add_argument("--days", type=int, default=config.default_seed_days, help="Number of days of order history.")
    parser.add_argument("--end", type=str, default=None, help="ISO timestamp of the newest order (defaults to now)")
    parser.add_argument("--output-dir", type=str, default=config.data_dir)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    if args.stores < 1 or args.products < 1:
        parser.error("--stores and --products must be at least 1")

    rnd = random.Random(args.seed)
    outdir = args.output_dir
    ensure_dir(outdir)

    # file paths
    files = {
        "stores": os.path.join(outdir, "stores.csv"),
        "products": os.path.join(outdir, "products.csv"),
        "users": os.path.join(outdir, "users.csv"),
        "orders": os.path.join(outdir, "orders.csv"),
        "order_items": os.path.join(outdir, "order_items.csv"),
    }
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    end_dt = datetime.fromisoformat(args.end) if args.end else datetime.now().replace(microsecond=0)

    stores = gen_stores(args.stores)
    products = gen_products(rnd, args.products, stores)
    users = gen_users(args.users)
    orders, items = gen_orders_and_items(rnd, products, args.orders, end_dt, args.days)

    # write CSVs
    write_csv(files["stores"], stores, ["id", "name"])
    write_csv(files["products"], products, ["id", "name", "store_id", "is_active"])
    write_csv(files["users"], users, ["id"])
    write_csv(files["orders"], orders, ["id", "total_amount", "status", "created_at"])
    write_csv(files["order_items"], items, ["order_id", "product_id", "quantity", "price"])

    # simple summary
    print(f"Generated data in {outdir}")
    print(f" stores: {len(stores)} | products: {len(products)} | users: {len(users)}")
    print(f" orders: {len(orders)} | order_items: {len(items)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
