"""
Data Verification Script

Cross-checks what a running API reports against itself:
    - every order total equals the sum of its lines
    - order numbers are unique
    - dashboard revenue equals the sum of non-cancelled order totals
Run from project root: python scripts/verify.py
"""

import argparse
import sys
from datetime import datetime
from decimal import Decimal
from typing import Any

import httpx

API_BASE_URL = "http://localhost:3000"
PAGE_SIZE = 100


def money(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


def fetch_all_orders(client: httpx.Client) -> list[dict[str, Any]]:
    """Walk every page of /api/orders."""
    orders: list[dict[str, Any]] = []
    page = 1
    while True:
        response = client.get("/api/orders", params={"page": page, "limit": PAGE_SIZE})
        response.raise_for_status()
        body = response.json()
        orders.extend(body["orders"])
        if page >= body["pagination"]["totalPages"]:
            return orders
        page += 1


def verify(base_url: str = API_BASE_URL) -> bool:
    """Print an integrity report; True when nothing is off."""
    print("=" * 60)
    print("🔍 DATA VERIFICATION REPORT")
    print("=" * 60)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"🎯 Target: {base_url}")
    print("=" * 60)

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        try:
            orders = fetch_all_orders(client)
            stats = client.get("/api/analytics/stats").json()
        except httpx.HTTPError as e:
            print(f"\n❌ Could not read from the API: {e}")
            return False

    ok = True

    print(f"\n📊 STATISTICS:")
    print(f"   Orders read: {len(orders)}")
    print(f"   Orders reported: {stats['totalOrders']}")
    if len(orders) != stats["totalOrders"]:
        print("⚠️ Order count does not match the dashboard")
        ok = False

    mismatched = [
        o for o in orders
        if money(o["total_amount"]) != sum(
            (money(line["price"]) * line["quantity"] for line in o["items"]), Decimal("0")
        )
    ]
    if mismatched:
        print(f"\n⚠️ {len(mismatched)} order(s) whose total differs from their lines:")
        for o in mismatched[:5]:
            print(f"   {o['order_number']}: {o['total_amount']}")
        ok = False
    else:
        print(f"✅ Every total matches its lines")

    numbers = [o["order_number"] for o in orders]
    duplicates = len(numbers) - len(set(numbers))
    if duplicates:
        print(f"\n⚠️ {duplicates} duplicate order numbers found!")
        ok = False
    else:
        print(f"✅ No duplicate order numbers")

    revenue = sum(
        (money(o["total_amount"]) for o in orders if o["status"] != "Cancelled"),
        Decimal("0"),
    )
    print(f"\n💰 REVENUE:")
    print(f"   Computed: ${revenue:.2f}")
    print(f"   Reported: ${money(stats['totalRevenue']):.2f}")
    if revenue != money(stats["totalRevenue"]):
        print("⚠️ Dashboard revenue differs from the order history")
        ok = False

    print("\n" + "=" * 60)
    print("✅ VERIFICATION COMPLETE" if ok else "❌ VERIFICATION FOUND PROBLEMS")
    print("=" * 60)

    return ok


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Data Verification Script")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    args = parser.parse_args()

    sys.exit(0 if verify(args.url) else 1)
