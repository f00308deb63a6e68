"""Unit tests for the query builder."""

from decimal import Decimal

import pytest

from restaurant_admin.core.exceptions import ValidationError
from restaurant_admin.models import MenuCategory, MenuItem, Order, OrderStatus
from restaurant_admin.schemas import MenuFilter
from restaurant_admin.services.query_builder import (
    Pagination,
    QueryBuilder,
    menu_item_query,
    order_query,
)


@pytest.mark.unit
class TestQueryBuilder:
    """Test suite for predicate composition."""

    def test_no_filters_means_no_predicates(self) -> None:
        builder = menu_item_query(MenuFilter())

        assert builder.predicates == ()
        assert builder.parameters == []
        assert "WHERE" not in str(builder.select())

    def test_none_values_are_skipped(self) -> None:
        builder = (
            QueryBuilder(MenuItem)
            .equals(MenuItem.category, None)
            .at_least(MenuItem.price, None)
            .at_most(MenuItem.price, None)
        )

        assert builder.predicates == ()

    @pytest.mark.parametrize(
        "filters, expected_count",
        [
            ({"category": "Dessert"}, 1),
            ({"availability": False}, 1),
            ({"min_price": Decimal("5")}, 1),
            ({"max_price": Decimal("10")}, 1),
            ({"min_price": Decimal("5"), "max_price": Decimal("10")}, 2),
            (
                {
                    "category": "Beverage",
                    "availability": True,
                    "min_price": Decimal("1"),
                    "max_price": Decimal("4"),
                },
                4,
            ),
        ],
    )
    def test_each_present_key_adds_one_predicate(self, filters: dict, expected_count: int) -> None:
        builder = menu_item_query(MenuFilter(**filters))

        assert len(builder.predicates) == expected_count

    def test_values_are_bound_not_inlined(self) -> None:
        builder = menu_item_query(
            MenuFilter(category="Dessert", min_price=Decimal("7.25"), max_price=Decimal("19.75"))
        )
        sql = str(builder.select(MenuItem.created_at.desc()))

        assert "Dessert" not in sql
        assert "7.25" not in sql
        assert "19.75" not in sql
        assert builder.parameters == [MenuCategory.DESSERT, Decimal("7.25"), Decimal("19.75")]

    def test_hostile_value_never_reaches_sql_text(self) -> None:
        builder = QueryBuilder(Order).equals(Order.customer_name, "x'; DROP TABLE orders; --")

        assert "DROP TABLE" not in str(builder.select())
        assert builder.parameters == ["x'; DROP TABLE orders; --"]

    def test_count_mirrors_predicates_without_order_or_window(self) -> None:
        builder = order_query(OrderStatus.READY)
        count_sql = str(builder.count())

        assert "count(*)" in count_sql
        assert "WHERE orders.status = " in count_sql
        assert "ORDER BY" not in count_sql
        assert "LIMIT" not in count_sql
        assert "OFFSET" not in count_sql

    def test_page_orders_then_limits(self) -> None:
        builder = order_query(OrderStatus.PENDING)
        sql = str(builder.page(Pagination(3, 5), Order.created_at.desc()))

        assert sql.index("WHERE") < sql.index("ORDER BY") < sql.index("LIMIT")
        assert "OFFSET" in sql

    def test_order_query_without_status_is_unfiltered(self) -> None:
        assert order_query(None).predicates == ()


@pytest.mark.unit
class TestPagination:
    """Test suite for page arithmetic."""

    def test_defaults(self) -> None:
        pagination = Pagination()

        assert pagination.page == 1
        assert pagination.page_size == 10
        assert pagination.offset == 0

    def test_offset(self) -> None:
        assert Pagination(2, 5).offset == 5
        assert Pagination(4, 25).offset == 75

    @pytest.mark.parametrize(
        "total, page_size, expected",
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (12, 5, 3)],
    )
    def test_total_pages_rounds_up(self, total: int, page_size: int, expected: int) -> None:
        assert Pagination(1, page_size).total_pages(total) == expected

    @pytest.mark.parametrize("page, page_size", [(0, 10), (-1, 10), (1, 0), (1, -5)])
    def test_rejects_non_positive_values(self, page: int, page_size: int) -> None:
        with pytest.raises(ValidationError):
            Pagination(page, page_size)
