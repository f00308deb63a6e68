"""
Query Builder

Turns a sparse set of optional read parameters into SQLAlchemy predicates,
a paged select and a matching count select.

Values are always attached as bound parameters; no caller-supplied value is
ever spliced into statement text.

Usage:
    builder = menu_item_query(MenuFilter(category="Dessert", max_price=10))
    items = await session.scalars(builder.select(MenuItem.created_at.desc()))

    builder = order_query(OrderStatus.PENDING)
    total = await session.scalar(builder.count())
    page = await session.scalars(builder.page(Pagination(2, 5), Order.created_at.desc()))
"""

import math
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import Select, and_, func, select, true
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.elements import ColumnElement

from restaurant_admin.core.exceptions import ValidationError
from restaurant_admin.models import MenuItem, Order, OrderStatus
from restaurant_admin.schemas import MenuFilter


@dataclass(frozen=True)
class Pagination:
    """1-based page window."""
    page: int = 1
    page_size: int = 10

    def __post_init__(self):
        if self.page < 1:
            raise ValidationError("page must be a positive integer")
        if self.page_size < 1:
            raise ValidationError("limit must be a positive integer")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.page_size)


class QueryBuilder:
    """
    Conjunction of optional predicates over one model.

    Each helper ignores a None value, so callers can pass every parameter
    they received without checking which ones were supplied.
    """

    def __init__(self, model: type):
        self.model = model
        self._predicates: list[ColumnElement[bool]] = []

    def where(self, predicate: ColumnElement[bool]) -> "QueryBuilder":
        self._predicates.append(predicate)
        return self

    def equals(self, column: InstrumentedAttribute, value: Any) -> "QueryBuilder":
        if value is None:
            return self
        return self.where(column == value)

    def at_least(self, column: InstrumentedAttribute, value: Any) -> "QueryBuilder":
        if value is None:
            return self
        return self.where(column >= value)

    def at_most(self, column: InstrumentedAttribute, value: Any) -> "QueryBuilder":
        if value is None:
            return self
        return self.where(column <= value)

    @property
    def predicates(self) -> tuple[ColumnElement[bool], ...]:
        return tuple(self._predicates)

    @property
    def predicate(self) -> ColumnElement[bool]:
        """All predicates ANDed together (TRUE when there are none)."""
        if not self._predicates:
            return true()
        return and_(*self._predicates)

    @property
    def parameters(self) -> list[Any]:
        """Bound values of the predicate, in the order they appear."""
        if not self._predicates:
            return []
        return list(self.predicate.compile().params.values())

    def _filtered(self, stmt: Select) -> Select:
        if self._predicates:
            stmt = stmt.where(*self._predicates)
        return stmt

    def select(self, *order_by: Any) -> Select:
        """Filtered, ordered select of the model."""
        return self._filtered(select(self.model)).order_by(*order_by)

    def page(self, pagination: Pagination, *order_by: Any) -> Select:
        """Filter, then order, then cut the page window."""
        return (
            self.select(*order_by)
            .offset(pagination.offset)
            .limit(pagination.page_size)
        )

    def count(self) -> Select:
        """Same predicates as select(), without ordering or window."""
        return self._filtered(select(func.count()).select_from(self.model))


def menu_item_query(filters: Optional[MenuFilter] = None) -> QueryBuilder:
    """Catalog listing predicates: category, availability, price range."""
    filters = filters or MenuFilter()
    return (
        QueryBuilder(MenuItem)
        .equals(MenuItem.category, filters.category)
        .equals(MenuItem.is_available, filters.availability)
        .at_least(MenuItem.price, filters.min_price)
        .at_most(MenuItem.price, filters.max_price)
    )


def order_query(status: Optional[OrderStatus] = None) -> QueryBuilder:
    """Order listing predicates: status."""
    return QueryBuilder(Order).equals(Order.status, status)
