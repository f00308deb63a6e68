"""
Rush Hour Simulation Script

Fires many concurrent orders at a running API to check that every one of
them lands with a unique order number and a correct total.
Run from project root: python scripts/simulate.py
"""

import argparse
import asyncio
import random
import sys
import time
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:3000"
TOTAL_ORDERS = 50

CUSTOMER_NAMES = [
    "John Smith", "Emma Wilson", "Michael Brown", "Sarah Davis", "James Johnson",
    "Emily Taylor", "David Anderson", "Lisa Martinez", "Robert Garcia", "Jennifer Lee",
]


def generate_order_payload(menu: list[dict[str, Any]]) -> dict[str, Any]:
    """Random table order of 1-4 distinct menu items."""
    chosen = random.sample(menu, k=min(len(menu), random.randint(1, 4)))
    return {
        "customer_name": random.choice(CUSTOMER_NAMES),
        "table_number": random.randint(1, 20),
        "items": [
            {"menu_item_id": item["id"], "quantity": random.randint(1, 3)}
            for item in chosen
        ],
    }


def expected_total(payload: dict[str, Any], prices: dict[int, float]) -> float:
    return round(
        sum(prices[line["menu_item_id"]] * line["quantity"] for line in payload["items"]),
        2,
    )


async def send_order(
    client: httpx.AsyncClient,
    base_url: str,
    order_num: int,
    menu: list[dict[str, Any]],
) -> dict[str, Any]:
    """Place one order and time it."""
    payload = generate_order_payload(menu)
    prices = {item["id"]: item["price"] for item in menu}
    start_time = time.time()

    try:
        response = await client.post(f"{base_url}/api/orders", json=payload, timeout=30.0)
    except httpx.HTTPError as e:
        return {
            "order_num": order_num,
            "success": False,
            "error": str(e)[:100],
            "time": round(time.time() - start_time, 3),
        }

    elapsed = round(time.time() - start_time, 3)
    if response.status_code != 201:
        return {
            "order_num": order_num,
            "success": False,
            "error": response.text[:100],
            "time": elapsed,
        }

    data = response.json()
    return {
        "order_num": order_num,
        "success": True,
        "order_id": data["id"],
        "order_number": data["order_number"],
        "total": data["total_amount"],
        "total_ok": abs(data["total_amount"] - expected_total(payload, prices)) < 0.005,
        "time": elapsed,
    }


async def run_simulation(base_url: str = API_BASE_URL, num_orders: int = TOTAL_ORDERS) -> dict[str, Any]:
    """
    Run the rush hour simulation.

    Args:
        base_url: Root URL of a running API
        num_orders: Number of orders to fire concurrently
    """
    print("=" * 70)
    print("🔥 RUSH HOUR SIMULATION - HIGH CONCURRENCY TEST")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {base_url}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    async with httpx.AsyncClient() as client:
        response = await client.get(f"{base_url}/api/menu")
        response.raise_for_status()
        menu = response.json()
        if not menu:
            print("\n❌ The menu is empty. Seed it first: python scripts/seed.py")
            return {"total": num_orders, "successful": 0, "failed": num_orders, "results": []}

        start_time = time.time()
        tasks = [send_order(client, base_url, i + 1, menu) for i in range(num_orders)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]
    wrong_totals = [r for r in successful if not r["total_ok"]]
    numbers = [r["order_number"] for r in successful]
    duplicates = len(numbers) - len(set(numbers))

    print("\n" + "=" * 70)
    print("📊 SIMULATION RESULTS")
    print("=" * 70)

    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")
    print(f"🔢 Duplicate order numbers: {duplicates}")
    print(f"🧮 Totals not matching their lines: {len(wrong_totals)}")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        total_revenue = sum(r["total"] for r in successful)

        print(f"\n📈 Performance Metrics:")
        print(f"   Average Response: {avg_time}s")
        print(f"   Fastest: {min(r['time'] for r in successful)}s")
        print(f"   Slowest: {max(r['time'] for r in successful)}s")
        print(f"   💰 Total Revenue: ${total_revenue:.2f}")

    if failed:
        print(f"\n⚠️  Failed Order Details (showing first 5):")
        for f in failed[:5]:
            print(f"   Order #{f['order_num']}: {f.get('error', 'Unknown error')}")

    print("\n" + "=" * 70)
    print("🔍 NEXT STEP: python scripts/verify.py")
    print("=" * 70)

    return {
        "total": num_orders,
        "successful": len(successful),
        "failed": len(failed),
        "duplicates": duplicates,
        "total_time": total_time,
        "results": results,
    }


async def check_health(base_url: str) -> bool:
    """Make sure the API and its database answer before the rush."""
    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{base_url}/health")
        except httpx.HTTPError as e:
            print(f"❌ API unreachable: {e}")
            return False

    data = response.json()
    print(f"🩺 Status: {data.get('status')} (database: {data.get('database')})")
    return response.status_code == 200 and data.get("database") == "healthy"


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rush Hour Simulation Script")
    parser.add_argument("--url", default=API_BASE_URL, help="API base URL")
    parser.add_argument("--orders", type=int, default=TOTAL_ORDERS, help="Number of orders")
    args = parser.parse_args()

    if not asyncio.run(check_health(args.url)):
        print("\n❌ Pre-flight check failed. Start the API first: python -m restaurant_admin.main")
        sys.exit(1)

    summary = asyncio.run(run_simulation(base_url=args.url, num_orders=args.orders))
    sys.exit(0 if summary["failed"] == 0 and summary.get("duplicates", 0) == 0 else 1)
