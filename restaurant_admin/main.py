"""
FastAPI Application Entry Point

Restaurant Admin API - menu catalog, orders and analytics.

Endpoints:
    - GET/POST /api/menu, GET /api/menu/search
    - GET/PUT/DELETE /api/menu/{id}, PATCH /api/menu/{id}/availability
    - GET/POST /api/orders, GET /api/orders/{id}, PATCH /api/orders/{id}/status
    - GET /api/analytics/top-sellers, GET /api/analytics/stats
    - GET /health: System health check

Every failure answers {"error": message} with 400, 404 or 500.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant_admin.core.config import Settings, get_settings, setup_logging
from restaurant_admin.core.exceptions import (
    RestaurantAdminError,
    ValidationError,
    describe_errors,
)
from restaurant_admin.database import Database, get_db
from restaurant_admin.schemas import (
    DashboardStats,
    ErrorResponse,
    HealthResponse,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
    MessageResponse,
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    StatusUpdate,
    TopSeller,
)
from restaurant_admin.services import AnalyticsAggregator, CatalogStore, OrderEngine

logger = logging.getLogger(__name__)

ERROR_RESPONSES: dict[Union[int, str], dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_catalog(db: AsyncSession = Depends(get_db)) -> CatalogStore:
    return CatalogStore(db)


def get_order_engine(request: Request, db: AsyncSession = Depends(get_db)) -> OrderEngine:
    settings: Settings = request.app.state.settings
    return OrderEngine(db, max_attempts=settings.order_number_max_attempts)


def get_analytics(db: AsyncSession = Depends(get_db)) -> AnalyticsAggregator:
    return AnalyticsAggregator(db)


router = APIRouter()


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@router.get("/", tags=["Root"])
async def root(request: Request) -> dict[str, str]:
    """API root with navigation links."""
    settings: Settings = request.app.state.settings
    return {
        "message": f"{settings.app_name} is working",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(request: Request) -> HealthResponse:
    """Verify the database answers."""
    database: Database = request.app.state.database

    db_status = "healthy"
    try:
        await database.ping()
    except (SQLAlchemyError, OSError) as e:
        db_status = f"unhealthy: {str(e)}"
        logger.error(f"Database health check failed: {e}")

    return HealthResponse(
        status="operational" if db_status == "healthy" else "degraded",
        database=db_status,
        timestamp=datetime.now(timezone.utc),
    )


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@router.get(
    "/api/menu",
    response_model=list[MenuItemResponse],
    responses=ERROR_RESPONSES,
    tags=["Menu"],
    summary="List Menu Items",
)
async def list_menu_items(
    category: Optional[str] = Query(None),
    availability: Optional[bool] = Query(None),
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    catalog: CatalogStore = Depends(get_catalog),
) -> list[MenuItemResponse]:
    """Menu items matching every supplied filter, newest first."""
    items = await catalog.list_items({
        "category": category,
        "availability": availability,
        "min_price": min_price,
        "max_price": max_price,
    })
    return [MenuItemResponse.model_validate(item) for item in items]


@router.get(
    "/api/menu/search",
    response_model=list[MenuItemResponse],
    responses=ERROR_RESPONSES,
    tags=["Menu"],
    summary="Search Menu Items",
)
async def search_menu_items(
    q: str = Query(""),
    catalog: CatalogStore = Depends(get_catalog),
) -> list[MenuItemResponse]:
    """Case-insensitive match on name or ingredients, alphabetical."""
    items = await catalog.search(q)
    return [MenuItemResponse.model_validate(item) for item in items]


@router.get(
    "/api/menu/{item_id}",
    response_model=MenuItemResponse,
    responses=ERROR_RESPONSES,
    tags=["Menu"],
)
async def get_menu_item(
    item_id: int,
    catalog: CatalogStore = Depends(get_catalog),
) -> MenuItemResponse:
    """Get a specific menu item by ID."""
    return MenuItemResponse.model_validate(await catalog.get(item_id))


@router.post(
    "/api/menu",
    response_model=MenuItemResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    tags=["Menu"],
    summary="Create Menu Item",
)
async def create_menu_item(
    item_data: MenuItemCreate,
    catalog: CatalogStore = Depends(get_catalog),
) -> MenuItemResponse:
    logger.info(f"Creating menu item: {item_data.name}")
    return MenuItemResponse.model_validate(await catalog.create(item_data))


@router.put(
    "/api/menu/{item_id}",
    response_model=MenuItemResponse,
    responses=ERROR_RESPONSES,
    tags=["Menu"],
    summary="Update Menu Item",
)
async def update_menu_item(
    item_id: int,
    item_data: MenuItemUpdate,
    catalog: CatalogStore = Depends(get_catalog),
) -> MenuItemResponse:
    """Partial update; fields left out of the body keep their values."""
    return MenuItemResponse.model_validate(await catalog.update(item_id, item_data))


@router.delete(
    "/api/menu/{item_id}",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
    tags=["Menu"],
)
async def delete_menu_item(
    item_id: int,
    catalog: CatalogStore = Depends(get_catalog),
) -> MessageResponse:
    await catalog.delete(item_id)
    return MessageResponse(message="Menu item deleted successfully")


@router.patch(
    "/api/menu/{item_id}/availability",
    response_model=MenuItemResponse,
    responses=ERROR_RESPONSES,
    tags=["Menu"],
    summary="Toggle Availability",
)
async def toggle_menu_item_availability(
    item_id: int,
    catalog: CatalogStore = Depends(get_catalog),
) -> MenuItemResponse:
    return MenuItemResponse.model_validate(await catalog.toggle_availability(item_id))


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@router.get(
    "/api/orders",
    response_model=OrderListResponse,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
    summary="List Orders",
)
async def list_orders(
    request: Request,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    orders: OrderEngine = Depends(get_order_engine),
) -> OrderListResponse:
    """Retrieve paginated list of orders, newest first."""
    settings: Settings = request.app.state.settings
    page_size = limit if limit is not None else settings.default_page_size
    if page_size > settings.max_page_size:
        raise ValidationError(f"limit must not exceed {settings.max_page_size}")
    return await orders.list_orders(status=status, page=page, page_size=page_size)


@router.get(
    "/api/orders/{order_id}",
    response_model=OrderResponse,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
)
async def get_order(
    order_id: int,
    orders: OrderEngine = Depends(get_order_engine),
) -> OrderResponse:
    """Get a specific order with its lines."""
    return await orders.get(order_id)


@router.post(
    "/api/orders",
    response_model=OrderResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
    summary="Create Order",
)
async def create_order(
    order_data: OrderCreate,
    orders: OrderEngine = Depends(get_order_engine),
) -> OrderResponse:
    logger.info(f"Creating order with {len(order_data.items)} line(s)")
    return await orders.create(order_data)


@router.patch(
    "/api/orders/{order_id}/status",
    response_model=OrderResponse,
    responses=ERROR_RESPONSES,
    tags=["Orders"],
    summary="Update Order Status",
)
async def update_order_status(
    order_id: int,
    body: StatusUpdate,
    orders: OrderEngine = Depends(get_order_engine),
) -> OrderResponse:
    return await orders.set_status(order_id, body.status)


# =============================================================================
# ANALYTICS ENDPOINTS
# =============================================================================

@router.get(
    "/api/analytics/top-sellers",
    response_model=list[TopSeller],
    responses=ERROR_RESPONSES,
    tags=["Analytics"],
)
async def top_sellers(
    analytics: AnalyticsAggregator = Depends(get_analytics),
) -> list[TopSeller]:
    """Five best-selling items by quantity."""
    return await analytics.top_sellers()


@router.get(
    "/api/analytics/stats",
    response_model=DashboardStats,
    responses=ERROR_RESPONSES,
    tags=["Analytics"],
)
async def dashboard_stats(
    analytics: AnalyticsAggregator = Depends(get_analytics),
) -> DashboardStats:
    """Catalog and order counters plus revenue excluding cancelled orders."""
    return await analytics.stats()


# =============================================================================
# ERROR HANDLERS
# =============================================================================

async def restaurant_admin_error_handler(request: Request, exc: RestaurantAdminError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": describe_errors(exc.errors())})


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Database error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": str(getattr(exc, "orig", None) or exc)},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")
    settings: Settings = request.app.state.settings
    return JSONResponse(
        status_code=500,
        content={"error": str(exc) if settings.debug else "Internal Server Error"},
    )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    settings: Settings = app.state.settings

    logger.info("=" * 60)
    logger.info(f"Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    if app.state.database is None:
        app.state.database = Database.from_settings(settings)

    await app.state.database.init_db()
    logger.info("Application ready")

    yield  # Application runs

    logger.info("Shutting down...")
    await app.state.database.dispose()
    logger.info("Cleanup complete")


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Build the API around one storage context.

    Args:
        settings: Application settings (defaults to environment)
        database: Storage context; built from settings at startup when omitted
    """
    settings = settings or get_settings()
    setup_logging(settings=settings)

    app = FastAPI(
        title=settings.app_name,
        description="Menu catalog, order tracking and sales analytics for restaurant staff.",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    app.add_exception_handler(RestaurantAdminError, restaurant_admin_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "restaurant_admin.main:app",
        host=_settings.api_host,
        port=_settings.api_port,
        reload=_settings.debug,
    )
