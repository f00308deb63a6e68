"""
Seed Script

Wipes the database and loads a sample catalog plus a dozen random orders.
Run from project root: python scripts/seed.py

Orders go through the OrderEngine, so their totals and line prices follow
the same rules as orders placed over the API.
"""

import argparse
import asyncio
import os
import random
import sys
from decimal import Decimal

from sqlalchemy import delete

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from restaurant_admin.core.config import get_settings, setup_logging
from restaurant_admin.database import Database
from restaurant_admin.models import MenuItem, Order, OrderItem, OrderStatus
from restaurant_admin.services import CatalogStore, OrderEngine

IMAGE_BASE = "https://images.unsplash.com"

MENU_ITEMS = [
    # Appetizers
    {"name": "Crispy Spring Rolls", "description": "Golden fried spring rolls stuffed with vegetables", "category": "Appetizer", "price": "8.99", "ingredients": ["cabbage", "carrot", "glass noodles", "spring roll wrapper"], "preparation_time": 15, "image_url": f"{IMAGE_BASE}/photo-1544025162-d76694265947"},
    {"name": "Garlic Bread", "description": "Toasted bread with garlic butter and herbs", "category": "Appetizer", "price": "5.99", "ingredients": ["bread", "garlic", "butter", "parsley"], "preparation_time": 10, "image_url": f"{IMAGE_BASE}/photo-1619535860434-cf9b902a0a14"},
    {"name": "Chicken Wings", "description": "Crispy buffalo chicken wings with blue cheese dip", "category": "Appetizer", "price": "12.99", "ingredients": ["chicken wings", "buffalo sauce", "blue cheese"], "preparation_time": 20, "image_url": f"{IMAGE_BASE}/photo-1567620832903-9fc6debc209f"},
    {"name": "Onion Rings", "description": "Beer-battered crispy onion rings", "category": "Appetizer", "price": "6.99", "ingredients": ["onion", "flour", "beer", "breadcrumbs"], "preparation_time": 12, "image_url": f"{IMAGE_BASE}/photo-1639024471283-03518883512d"},
    # Main courses
    {"name": "Grilled Salmon", "description": "Atlantic salmon with lemon herb butter", "category": "Main Course", "price": "24.99", "ingredients": ["salmon", "lemon", "herbs", "butter", "asparagus"], "preparation_time": 25, "image_url": f"{IMAGE_BASE}/photo-1467003909585-2f8a72700288"},
    {"name": "Beef Steak", "description": "Prime ribeye steak cooked to perfection", "category": "Main Course", "price": "32.99", "ingredients": ["ribeye", "garlic", "rosemary", "butter"], "preparation_time": 30, "image_url": f"{IMAGE_BASE}/photo-1600891964092-4316c288032e"},
    {"name": "Margherita Pizza", "description": "Classic pizza with fresh mozzarella and basil", "category": "Main Course", "price": "16.99", "ingredients": ["pizza dough", "tomato sauce", "mozzarella", "basil"], "preparation_time": 20, "image_url": f"{IMAGE_BASE}/photo-1574071318508-1cdbab80d002"},
    {"name": "Chicken Alfredo Pasta", "description": "Creamy fettuccine with grilled chicken", "category": "Main Course", "price": "18.99", "ingredients": ["fettuccine", "chicken", "cream", "parmesan"], "preparation_time": 22, "image_url": f"{IMAGE_BASE}/photo-1645112411341-6c4fd023714a"},
    {"name": "Vegetable Stir Fry", "description": "Fresh vegetables in savory sauce with rice", "category": "Main Course", "price": "14.99", "ingredients": ["broccoli", "bell peppers", "mushrooms", "soy sauce", "rice"], "preparation_time": 18, "image_url": f"{IMAGE_BASE}/photo-1512621776951-a57141f2eefd"},
    {"name": "Fish and Chips", "description": "Beer-battered cod with crispy fries", "category": "Main Course", "price": "17.99", "ingredients": ["cod", "potatoes", "flour", "beer"], "preparation_time": 25, "image_url": f"{IMAGE_BASE}/photo-1579208030886-b937da0925dc"},
    # Desserts
    {"name": "Chocolate Lava Cake", "description": "Warm chocolate cake with molten center", "category": "Dessert", "price": "9.99", "ingredients": ["dark chocolate", "butter", "eggs", "sugar"], "preparation_time": 15, "image_url": f"{IMAGE_BASE}/photo-1624353365286-3f8d62daad51"},
    {"name": "Tiramisu", "description": "Classic Italian coffee-flavored dessert", "category": "Dessert", "price": "8.99", "ingredients": ["mascarpone", "espresso", "ladyfingers", "cocoa"], "preparation_time": 10, "image_url": f"{IMAGE_BASE}/photo-1571877227200-a0d98ea607e9"},
    {"name": "Cheesecake", "description": "New York style creamy cheesecake", "category": "Dessert", "price": "7.99", "ingredients": ["cream cheese", "graham crackers", "eggs", "vanilla"], "preparation_time": 10, "image_url": f"{IMAGE_BASE}/photo-1565958011703-44f9829ba187"},
    # Beverages
    {"name": "Fresh Lemonade", "description": "House-made lemonade with mint", "category": "Beverage", "price": "4.99", "ingredients": ["lemon", "sugar", "mint", "water"], "preparation_time": 5, "image_url": f"{IMAGE_BASE}/photo-1621263764928-df1444c5e859"},
    {"name": "Mango Smoothie", "description": "Creamy tropical mango smoothie", "category": "Beverage", "price": "6.99", "ingredients": ["mango", "yogurt", "honey", "ice"], "preparation_time": 5, "image_url": f"{IMAGE_BASE}/photo-1546173159-315724a31696"},
    {"name": "Espresso", "description": "Double shot Italian espresso", "category": "Beverage", "price": "3.99", "ingredients": ["espresso beans"], "preparation_time": 3, "image_url": f"{IMAGE_BASE}/photo-1510707577719-ae7c14805e3a"},
    {"name": "Iced Tea", "description": "Refreshing iced tea with lemon", "category": "Beverage", "price": "3.49", "ingredients": ["black tea", "lemon", "sugar", "ice"], "preparation_time": 5, "image_url": f"{IMAGE_BASE}/photo-1556679343-c7306c1976bc"},
]

CUSTOMER_NAMES = [
    "John Smith", "Emma Wilson", "Michael Brown", "Sarah Davis", "James Johnson",
    "Emily Taylor", "David Anderson", "Lisa Martinez", "Robert Garcia", "Jennifer Lee",
]

SAMPLE_ORDERS = 12


def random_lines(menu_item_ids: list[int]) -> list[dict]:
    """1-4 distinct menu items, 1-3 of each."""
    chosen = random.sample(menu_item_ids, k=random.randint(1, 4))
    return [{"menu_item_id": item_id, "quantity": random.randint(1, 3)} for item_id in chosen]


async def seed(database: Database, orders: int = SAMPLE_ORDERS) -> None:
    await database.init_db()

    async with database.session() as session:
        for model in (OrderItem, Order, MenuItem):
            await session.execute(delete(model))
        await session.commit()
        print("🧹 Cleared existing data")

        catalog = CatalogStore(session)
        menu_item_ids = []
        for fields in MENU_ITEMS:
            item = await catalog.create({**fields, "price": Decimal(fields["price"])})
            menu_item_ids.append(item.id)
        print(f"🍽️  Inserted {len(menu_item_ids)} menu items")

        engine = OrderEngine(session)
        for _ in range(orders):
            order = await engine.create({
                "customer_name": random.choice(CUSTOMER_NAMES),
                "table_number": random.randint(1, 20),
                "items": random_lines(menu_item_ids),
            })
            status = random.choice(list(OrderStatus))
            if status is not OrderStatus.PENDING:
                await engine.set_status(order.id, status)
        print(f"🧾 Inserted {orders} sample orders")

    print("✅ Database seeded successfully!")


async def main(orders: int) -> None:
    settings = get_settings()
    setup_logging(settings=settings)
    database = Database.from_settings(settings)
    try:
        await seed(database, orders)
    finally:
        await database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the restaurant database")
    parser.add_argument("--orders", type=int, default=SAMPLE_ORDERS, help="Number of sample orders")
    args = parser.parse_args()

    asyncio.run(main(args.orders))
