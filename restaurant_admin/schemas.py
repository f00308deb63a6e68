"""
Pydantic Schemas for Request/Response Validation

Request schemas reject unknown fields so a typo in a body is reported
instead of silently ignored. Money is carried as Decimal and rendered as a
JSON number.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from restaurant_admin.models import MenuCategory, OrderStatus

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# =============================================================================
# MENU REQUEST SCHEMAS
# =============================================================================

class MenuItemCreate(BaseModel):
    """Request schema for adding a catalog entry."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=200, examples=["Iced Tea"])
    description: Optional[str] = Field(None, examples=["Refreshing iced tea with lemon"])
    category: MenuCategory = Field(..., examples=["Beverage"])
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2, examples=[3.49])
    ingredients: Optional[List[str]] = Field(None, examples=[["black tea", "lemon"]])
    is_available: bool = True
    preparation_time: Optional[int] = Field(None, ge=0, examples=[5])
    image_url: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be blank")
        return v


class MenuItemUpdate(BaseModel):
    """
    Partial update. Only the fields present in the body are applied.

    name, category, price, ingredients and is_available keep their stored
    value when sent as null; the remaining fields are cleared by null.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[MenuCategory] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    ingredients: Optional[List[str]] = None
    is_available: Optional[bool] = None
    preparation_time: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Name must not be blank")
        return v


class MenuFilter(BaseModel):
    """Optional catalog filters; every present key narrows the result."""
    model_config = ConfigDict(extra="forbid")

    category: Optional[MenuCategory] = None
    availability: Optional[bool] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None


# =============================================================================
# ORDER REQUEST SCHEMAS
# =============================================================================

class OrderLineCreate(BaseModel):
    """Single line in an order."""
    model_config = ConfigDict(extra="forbid")

    menu_item_id: int = Field(..., examples=[1])
    quantity: int = Field(default=1, ge=1, examples=[2])


class OrderCreate(BaseModel):
    """Request schema for creating a new order."""
    model_config = ConfigDict(extra="forbid")

    customer_name: Optional[str] = Field(None, max_length=100, examples=["John Smith"])
    table_number: Optional[int] = Field(None, ge=1, examples=[7])
    items: List[OrderLineCreate] = Field(..., min_length=1)


class StatusUpdate(BaseModel):
    """Body of a status change; the label is checked by the order engine."""
    model_config = ConfigDict(extra="forbid")

    status: str = Field(..., examples=["Preparing"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class MenuItemResponse(BaseModel):
    """Response schema for a single catalog entry."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str]
    category: MenuCategory
    price: Money
    ingredients: List[str]
    is_available: bool
    preparation_time: Optional[int]
    image_url: Optional[str]
    created_at: datetime
    updated_at: datetime


class OrderItemResponse(BaseModel):
    """
    An order line joined to the current catalog.

    price is the snapshot taken at creation; menu_item_name, category and
    image_url come from the live catalog and are None once the item is gone.
    """
    id: int
    order_id: int
    menu_item_id: int
    quantity: int
    price: Money
    menu_item_name: Optional[str] = None
    category: Optional[MenuCategory] = None
    image_url: Optional[str] = None


class OrderResponse(BaseModel):
    """Response schema for a single order with its lines."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    total_amount: Money
    status: OrderStatus
    customer_name: Optional[str]
    table_number: Optional[int]
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemResponse] = Field(default_factory=list)


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class OrderListResponse(BaseModel):
    """Response for listing multiple orders."""
    orders: List[OrderResponse]
    pagination: PaginationMeta


class TopSeller(BaseModel):
    """Aggregated sales for one referenced menu item."""
    id: int
    name: Optional[str]
    category: Optional[MenuCategory]
    price: Optional[Money]
    image_url: Optional[str]
    total_quantity: int
    total_revenue: Money


class DashboardStats(BaseModel):
    totalItems: int
    availableItems: int
    totalOrders: int
    pendingOrders: int
    totalRevenue: Money


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    timestamp: datetime
