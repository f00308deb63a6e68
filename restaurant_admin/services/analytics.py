"""
Analytics Aggregator

Read-only figures derived from the catalog and order history on every call.
Nothing here is cached or persisted.
"""

from sqlalchemy import func, select

from restaurant_admin.models import MenuItem, Order, OrderItem, OrderStatus, to_money
from restaurant_admin.schemas import DashboardStats, TopSeller
from restaurant_admin.services.base import SessionService

TOP_SELLERS_LIMIT = 5


class AnalyticsAggregator(SessionService):
    """Top sellers and dashboard totals."""

    async def top_sellers(self, limit: int = TOP_SELLERS_LIMIT) -> list[TopSeller]:
        """
        Best-selling menu items by quantity sold across all orders.

        Revenue uses each line's snapshot price. Catalog columns are None for
        items deleted since they were ordered. Equal quantities are ordered
        by menu item id.
        """
        total_quantity = func.sum(OrderItem.quantity).label("total_quantity")
        total_revenue = func.sum(OrderItem.quantity * OrderItem.price).label("total_revenue")

        stmt = (
            select(
                OrderItem.menu_item_id,
                MenuItem.name,
                MenuItem.category,
                MenuItem.price,
                MenuItem.image_url,
                total_quantity,
                total_revenue,
            )
            .outerjoin(MenuItem, MenuItem.id == OrderItem.menu_item_id)
            .group_by(
                OrderItem.menu_item_id,
                MenuItem.name,
                MenuItem.category,
                MenuItem.price,
                MenuItem.image_url,
            )
            .order_by(total_quantity.desc(), OrderItem.menu_item_id.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)

        return [
            TopSeller(
                id=row.menu_item_id,
                name=row.name,
                category=row.category,
                price=to_money(row.price) if row.price is not None else None,
                image_url=row.image_url,
                total_quantity=int(row.total_quantity or 0),
                total_revenue=to_money(row.total_revenue),
            )
            for row in result.all()
        ]

    async def stats(self) -> DashboardStats:
        """
        Dashboard counters, read in one statement so they describe the same
        moment. Revenue leaves out cancelled orders and is 0 when there is
        nothing to add up.
        """
        stmt = select(
            select(func.count(MenuItem.id)).scalar_subquery().label("total_items"),
            select(func.count(MenuItem.id))
            .where(MenuItem.is_available.is_(True))
            .scalar_subquery()
            .label("available_items"),
            select(func.count(Order.id)).scalar_subquery().label("total_orders"),
            select(func.count(Order.id))
            .where(Order.status == OrderStatus.PENDING)
            .scalar_subquery()
            .label("pending_orders"),
            select(func.coalesce(func.sum(Order.total_amount), 0))
            .where(Order.status != OrderStatus.CANCELLED)
            .scalar_subquery()
            .label("total_revenue"),
        )
        row = (await self.session.execute(stmt)).one()

        return DashboardStats(
            totalItems=row.total_items or 0,
            availableItems=row.available_items or 0,
            totalOrders=row.total_orders or 0,
            pendingOrders=row.pending_orders or 0,
            totalRevenue=to_money(row.total_revenue),
        )
