"""
Order Engine

Creates orders atomically with frozen line prices, lists and fetches them
with their lines, and moves them through the status workflow.

Status workflow:
    Pending, Preparing, Ready, Delivered, Cancelled. Every order starts as
    Pending. STATUS_TRANSITIONS currently allows any state to follow any
    other, terminal-looking ones included; restricting the kitchen flow is a
    matter of passing a narrower table, not of changing this module.

Order numbers:
    "ORD-<base36 millisecond timestamp>-<4 random base36 chars>". The unique
    index on orders.order_number is the final arbiter: on a collision the
    whole insert is rolled back and retried with a fresh number.
"""

import logging
import secrets
import time
from collections import defaultdict
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.core.exceptions import NotFoundError, PersistenceError, ValidationError
from restaurant_admin.models import MenuItem, Order, OrderItem, OrderStatus, to_money, utc_now
from restaurant_admin.schemas import (
    OrderCreate,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    PaginationMeta,
)
from restaurant_admin.services.base import SessionService
from restaurant_admin.services.query_builder import Pagination, order_query

logger = logging.getLogger(__name__)

BASE36_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
ORDER_NUMBER_RANDOM_LENGTH = 4

StatusTransitions = Mapping[OrderStatus, frozenset[OrderStatus]]

STATUS_TRANSITIONS: StatusTransitions = {
    status: frozenset(OrderStatus) for status in OrderStatus
}


def can_transition(
    current: OrderStatus,
    target: OrderStatus,
    transitions: StatusTransitions = STATUS_TRANSITIONS,
) -> bool:
    return target in transitions.get(current, frozenset())


def parse_status(value: Union[OrderStatus, str, None]) -> OrderStatus:
    """
    Resolve a status label.

    Raises:
        ValidationError: If the label is not one of the five statuses
    """
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        valid = [s.value for s in OrderStatus]
        raise ValidationError(f"Invalid status. Must be one of: {valid}")


def _base36(number: int) -> str:
    digits = []
    while True:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
        if number == 0:
            break
    return "".join(reversed(digits))


def generate_order_number() -> str:
    """Time-derived segment plus a random segment, e.g. ORD-MB2K9X1Q-7F3A."""
    timestamp = _base36(time.time_ns() // 1_000_000)
    random_part = "".join(
        secrets.choice(BASE36_ALPHABET) for _ in range(ORDER_NUMBER_RANDOM_LENGTH)
    )
    return f"ORD-{timestamp}-{random_part}"


def _is_order_number_collision(exc: IntegrityError) -> bool:
    return "order_number" in str(exc.orig)


class OrderEngine(SessionService):
    """
    Owns orders and order lines.

    Args:
        session: Session to read and write through
        max_attempts: Inserts tried before an order-number collision is fatal
        transitions: Allowed status moves (defaults to fully permissive)
        number_generator: Source of order numbers
    """

    def __init__(
        self,
        session: AsyncSession,
        max_attempts: int = 5,
        transitions: StatusTransitions = STATUS_TRANSITIONS,
        number_generator: Callable[[], str] = generate_order_number,
    ):
        super().__init__(session)
        self.max_attempts = max_attempts
        self.transitions = transitions
        self.number_generator = number_generator

    # =========================================================================
    # CREATE
    # =========================================================================

    async def create(self, request: Union[OrderCreate, Mapping[str, Any]]) -> OrderResponse:
        """
        Validate every line against the catalog and store the order.

        Either the order and all of its lines are committed, or nothing is.

        Raises:
            ValidationError: Empty order, bad quantity or unknown menu item
            PersistenceError: If the database rejects the insert
        """
        payload = self._coerce(OrderCreate, request)

        requested_ids = {line.menu_item_id for line in payload.items}
        result = await self.session.scalars(
            select(MenuItem).where(MenuItem.id.in_(requested_ids))
        )
        catalog = {item.id: item for item in result.all()}

        lines: list[tuple[int, int, Decimal]] = []
        for line in payload.items:
            menu_item = catalog.get(line.menu_item_id)
            if menu_item is None:
                raise ValidationError(f"Menu item with id {line.menu_item_id} not found")
            lines.append((menu_item.id, line.quantity, to_money(menu_item.price)))

        total = to_money(sum((price * quantity for _, quantity, price in lines), Decimal("0")))

        order_id = await self._insert(payload, lines, total)
        return await self.get(order_id)

    async def _insert(
        self,
        payload: OrderCreate,
        lines: list[tuple[int, int, Decimal]],
        total: Decimal,
    ) -> int:
        for attempt in range(1, self.max_attempts + 1):
            order_number = self.number_generator()
            order = Order(
                order_number=order_number,
                total_amount=total,
                status=OrderStatus.PENDING,
                customer_name=payload.customer_name,
                table_number=payload.table_number,
                items=[
                    OrderItem(menu_item_id=menu_item_id, quantity=quantity, price=price)
                    for menu_item_id, quantity, price in lines
                ],
            )
            self.session.add(order)

            try:
                await self.session.commit()
            except IntegrityError as exc:
                await self.session.rollback()
                if not _is_order_number_collision(exc):
                    raise PersistenceError(str(exc.orig)) from exc
                logger.warning(
                    f"Order number {order_number} already taken "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                continue
            except SQLAlchemyError as exc:
                await self.session.rollback()
                raise PersistenceError(str(getattr(exc, "orig", None) or exc)) from exc

            logger.info(
                f"Order {order_number} created: {len(lines)} line(s), total {total}"
            )
            return order.id

        raise PersistenceError(
            f"Could not allocate a unique order number after {self.max_attempts} attempts"
        )

    # =========================================================================
    # READ
    # =========================================================================

    async def get(self, order_id: int) -> OrderResponse:
        """
        Fetch one order with its lines.

        Raises:
            NotFoundError: If no order has this id
        """
        order = await self.session.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order not found")
        lines = await self._load_lines([order.id])
        return self._to_response(order, lines.get(order.id, []))

    async def list_orders(
        self,
        status: Union[OrderStatus, str, None] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> OrderListResponse:
        """
        One page of orders, newest first, each with its lines.

        Raises:
            ValidationError: Unknown status, or page/page_size below 1
        """
        status_filter = parse_status(status) if status is not None else None
        pagination = Pagination(page, page_size)
        builder = order_query(status_filter)

        total = await self.session.scalar(builder.count()) or 0
        result = await self.session.scalars(
            builder.page(pagination, Order.created_at.desc(), Order.id.desc())
        )
        orders = list(result.all())

        lines = await self._load_lines(order.id for order in orders)
        return OrderListResponse(
            orders=[self._to_response(order, lines.get(order.id, [])) for order in orders],
            pagination=PaginationMeta(
                page=pagination.page,
                limit=pagination.page_size,
                total=total,
                totalPages=pagination.total_pages(total),
            ),
        )

    async def _load_lines(self, order_ids: Iterable[int]) -> dict[int, list[OrderItemResponse]]:
        """Lines of the given orders joined to whatever the catalog holds now."""
        order_ids = list(order_ids)
        if not order_ids:
            return {}

        stmt = (
            select(
                OrderItem,
                MenuItem.name,
                MenuItem.category,
                MenuItem.image_url,
            )
            .outerjoin(MenuItem, MenuItem.id == OrderItem.menu_item_id)
            .where(OrderItem.order_id.in_(order_ids))
            .order_by(OrderItem.order_id, OrderItem.id)
        )
        result = await self.session.execute(stmt)

        lines: dict[int, list[OrderItemResponse]] = defaultdict(list)
        for line, name, category, image_url in result.all():
            lines[line.order_id].append(
                OrderItemResponse(
                    id=line.id,
                    order_id=line.order_id,
                    menu_item_id=line.menu_item_id,
                    quantity=line.quantity,
                    price=to_money(line.price),
                    menu_item_name=name,
                    category=category,
                    image_url=image_url,
                )
            )
        return lines

    @staticmethod
    def _to_response(order: Order, lines: list[OrderItemResponse]) -> OrderResponse:
        return OrderResponse(
            id=order.id,
            order_number=order.order_number,
            total_amount=to_money(order.total_amount),
            status=order.status,
            customer_name=order.customer_name,
            table_number=order.table_number,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=lines,
        )

    # =========================================================================
    # STATUS
    # =========================================================================

    async def set_status(
        self,
        order_id: int,
        new_status: Union[OrderStatus, str, None],
    ) -> OrderResponse:
        """
        Move an order to another status.

        Raises:
            ValidationError: Unknown label, or a move the transition table forbids
            NotFoundError: If no order has this id
        """
        target = parse_status(new_status)

        order = await self.session.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order not found")

        previous = order.status
        if not can_transition(previous, target, self.transitions):
            raise ValidationError(
                f"Cannot change order status from {previous.value} to {target.value}"
            )

        order.status = target
        order.updated_at = utc_now()
        await self._commit()

        logger.info(f"Order {order.order_number}: {previous.value} -> {target.value}")
        return await self.get(order_id)
