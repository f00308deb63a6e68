"""
                        Services Module

Business logic over one caller-owned AsyncSession per request.

Services:
    - catalog: menu item CRUD, search, availability
    - orders: atomic order creation, listing, status workflow
    - analytics: top sellers and dashboard totals
    - query_builder: optional filters, pagination and counts shared by reads
"""

from restaurant_admin.services.analytics import AnalyticsAggregator
from restaurant_admin.services.catalog import CatalogStore
from restaurant_admin.services.orders import OrderEngine, STATUS_TRANSITIONS
from restaurant_admin.services.query_builder import Pagination, QueryBuilder

__all__ = [
    "AnalyticsAggregator",
    "CatalogStore",
    "OrderEngine",
    "STATUS_TRANSITIONS",
    "Pagination",
    "QueryBuilder",
]
