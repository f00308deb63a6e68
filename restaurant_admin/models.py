"""
SQLAlchemy Database Models

Three record sets:
- menu_items: the catalog
- orders: one row per customer order, total frozen at creation
- order_items: order lines, price snapshotted from the catalog

order_items.menu_item_id is deliberately not a foreign key: removing a menu
item must not touch order history, so old lines may point at nothing.
"""

import enum
import json
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Sequence

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from restaurant_admin.database import Base

CENT = Decimal("0.01")


class MenuCategory(str, enum.Enum):
    """Closed set of catalog sections."""
    APPETIZER = "Appetizer"
    MAIN_COURSE = "Main Course"
    DESSERT = "Dessert"
    BEVERAGE = "Beverage"


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "Pending"
    PREPARING = "Preparing"
    READY = "Ready"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


def _enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    return [member.value for member in enum_cls]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_money(value: Any) -> Decimal:
    """Quantize any numeric value to cents."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


# =============================================================================
# INGREDIENT LIST CODEC
# =============================================================================

def encode_ingredients(ingredients: Optional[Sequence[str]]) -> Optional[str]:
    """Encode an ingredient list for the scalar column. None stays None."""
    if ingredients is None:
        return None
    return json.dumps(list(ingredients), ensure_ascii=False)


def decode_ingredients(raw: Optional[str]) -> list[str]:
    """Inverse of encode_ingredients; a NULL column reads back as []."""
    if raw is None or raw == "":
        return []
    return list(json.loads(raw))


class IngredientList(TypeDecorator):
    """Ordered list of strings stored as JSON text."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return encode_ingredients(value)

    def process_result_value(self, value, dialect):
        return decode_ingredients(value)


# =============================================================================
# TABLES
# =============================================================================

class MenuItem(Base):
    """A sellable catalog entry."""
    __tablename__ = "menu_items"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_menu_items_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(
        Enum(
            MenuCategory,
            name="menu_category",
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
        index=True
    )
    price = Column(Numeric(10, 2), nullable=False)
    ingredients = Column(IngredientList, nullable=True)
    is_available = Column(Boolean, default=True, nullable=False)
    preparation_time = Column(Integer, nullable=True)  # minutes
    image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.name} - {self.category.value}>"


class Order(Base):
    """
    Customer order.

    total_amount is the sum of the line snapshots taken at creation and is
    never recomputed from the live catalog.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_number = Column(String(40), nullable=False, unique=True, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)
    status = Column(
        Enum(
            OrderStatus,
            name="order_status",
            values_callable=_enum_values,
            validate_strings=True,
        ),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True
    )
    customer_name = Column(String(100), nullable=True)
    table_number = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )

    def __repr__(self):
        return f"<Order {self.order_number} - {self.status.value} - {self.total_amount}>"


class OrderItem(Base):
    """One order line with its frozen unit price."""
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(
        Integer,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    menu_item_id = Column(Integer, nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2), nullable=False)

    order = relationship("Order", back_populates="items")

    def __repr__(self):
        return f"<OrderItem #{self.id} - item {self.menu_item_id} x{self.quantity} @ {self.price}>"
