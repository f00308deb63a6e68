"""Unit tests for AnalyticsAggregator."""

from decimal import Decimal

import pytest

from restaurant_admin.models import MenuCategory
from restaurant_admin.services import AnalyticsAggregator


@pytest.fixture
def analytics(session) -> AnalyticsAggregator:
    return AnalyticsAggregator(session)


@pytest.mark.unit
class TestStats:
    """Test suite for dashboard counters."""

    async def test_empty_store_is_all_zeros(self, analytics: AnalyticsAggregator) -> None:
        stats = await analytics.stats()

        assert stats.totalItems == 0
        assert stats.availableItems == 0
        assert stats.totalOrders == 0
        assert stats.pendingOrders == 0
        assert stats.totalRevenue == Decimal("0.00")

    async def test_cancelled_orders_do_not_count_as_revenue(
        self,
        analytics: AnalyticsAggregator,
        orders,
        make_menu_item,
    ) -> None:
        burger = await make_menu_item(name="Burger", category="Main Course", price=Decimal("10.00"))
        fries = await make_menu_item(name="Fries", category="Appetizer", price=Decimal("5.00"))
        await orders.create({"items": [{"menu_item_id": burger.id}]})
        cancelled = await orders.create({"items": [{"menu_item_id": fries.id}]})
        await orders.set_status(cancelled.id, "Cancelled")

        stats = await analytics.stats()

        assert stats.totalOrders == 2
        assert stats.pendingOrders == 1
        assert stats.totalRevenue == Decimal("10.00")

    async def test_delivered_orders_still_count(
        self,
        analytics: AnalyticsAggregator,
        orders,
        make_menu_item,
    ) -> None:
        tea = await make_menu_item(price=Decimal("3.25"))
        first = await orders.create({"items": [{"menu_item_id": tea.id, "quantity": 2}]})
        await orders.create({"items": [{"menu_item_id": tea.id}]})
        await orders.set_status(first.id, "Delivered")

        stats = await analytics.stats()

        assert stats.pendingOrders == 1
        assert stats.totalRevenue == Decimal("9.75")

    async def test_available_items_follow_toggles(
        self,
        analytics: AnalyticsAggregator,
        catalog,
        make_menu_item,
    ) -> None:
        first = await make_menu_item(name="Soup")
        await make_menu_item(name="Salad")
        await make_menu_item(name="Bread", is_available=False)
        await catalog.toggle_availability(first.id)

        stats = await analytics.stats()

        assert stats.totalItems == 3
        assert stats.availableItems == 1


@pytest.mark.unit
class TestTopSellers:
    """Test suite for the best-seller ranking."""

    async def test_ranked_by_quantity(
        self,
        analytics: AnalyticsAggregator,
        orders,
        make_menu_item,
    ) -> None:
        tea = await make_menu_item(name="Tea", price=Decimal("2.00"))
        cake = await make_menu_item(name="Cake", category="Dessert", price=Decimal("6.50"))
        await orders.create({"items": [{"menu_item_id": tea.id, "quantity": 1}]})
        await orders.create({
            "items": [
                {"menu_item_id": cake.id, "quantity": 2},
                {"menu_item_id": cake.id, "quantity": 1},
            ],
        })

        sellers = await analytics.top_sellers()

        assert [s.name for s in sellers] == ["Cake", "Tea"]
        assert sellers[0].total_quantity == 3
        assert sellers[0].total_revenue == Decimal("19.50")
        assert sellers[0].category is MenuCategory.DESSERT
        assert sellers[0].price == Decimal("6.50")

    async def test_revenue_uses_price_at_order_time(
        self,
        analytics: AnalyticsAggregator,
        orders,
        catalog,
        make_menu_item,
    ) -> None:
        tea = await make_menu_item(name="Tea", price=Decimal("2.00"))
        tea_id = tea.id
        await orders.create({"items": [{"menu_item_id": tea_id, "quantity": 2}]})
        await catalog.update(tea_id, {"price": "3.00"})
        await orders.create({"items": [{"menu_item_id": tea_id, "quantity": 1}]})

        (seller,) = await analytics.top_sellers()

        assert seller.total_quantity == 3
        assert seller.total_revenue == Decimal("7.00")
        assert seller.price == Decimal("3.00")

    async def test_at_most_five_entries(
        self,
        analytics: AnalyticsAggregator,
        orders,
        make_menu_item,
    ) -> None:
        lines = []
        for n in range(7):
            item = await make_menu_item(name=f"Dish {n}", price=Decimal("4.00"))
            lines.append({"menu_item_id": item.id, "quantity": n + 1})
        await orders.create({"items": lines})

        sellers = await analytics.top_sellers()

        assert len(sellers) == 5
        assert [s.total_quantity for s in sellers] == [7, 6, 5, 4, 3]

    async def test_ties_are_ordered_by_menu_item_id(
        self,
        analytics: AnalyticsAggregator,
        orders,
        make_menu_item,
    ) -> None:
        first = await make_menu_item(name="Zucchini Fries")
        second = await make_menu_item(name="Apple Pie")
        await orders.create({
            "items": [
                {"menu_item_id": second.id, "quantity": 2},
                {"menu_item_id": first.id, "quantity": 2},
            ],
        })

        sellers = await analytics.top_sellers()

        assert [s.id for s in sellers] == [first.id, second.id]

    async def test_deleted_items_keep_their_sales(
        self,
        analytics: AnalyticsAggregator,
        orders,
        catalog,
        make_menu_item,
    ) -> None:
        tea = await make_menu_item(name="Tea", price=Decimal("2.00"))
        tea_id = tea.id
        await orders.create({"items": [{"menu_item_id": tea_id, "quantity": 4}]})
        await catalog.delete(tea_id)

        (seller,) = await analytics.top_sellers()

        assert seller.id == tea_id
        assert seller.name is None
        assert seller.category is None
        assert seller.price is None
        assert seller.total_quantity == 4
        assert seller.total_revenue == Decimal("8.00")

    async def test_no_orders(self, analytics: AnalyticsAggregator, make_menu_item) -> None:
        await make_menu_item()

        assert await analytics.top_sellers() == []
