"""Admin store orders router: orders, dashboard, stats, analytics."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.config import Settings, get_settings
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import Addon, Order, OrderStatus, can_transition
from services.store_service.schemas import (
    AddonResponse,
    CategoryRevenue,
    DashboardResponse,
    OrderResponse,
    OrderStatusUpdate,
    PaymentStatusUpdate,
    StoreStats,
    TopAddon,
)
from services.store_service.stats import (
    compute_store_stats,
    get_revenue_by_category,
    get_store_stats,
    get_top_addons,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(tags=["admin-store"])
logger = get_logger(__name__)

# Statuses that mean someone has started fulfilling the order
PROCESSED_STATUSES = {OrderStatus.PROCESSING, OrderStatus.COMPLETED}


async def _load_order(db: AsyncSession, order_id: uuid.UUID) -> Order:
    query = (
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.items))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    order = result.scalar_one_or_none()

    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


# ============================================================================
# DASHBOARD
# ============================================================================


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Everything the admin dashboard shows: add-ons, orders and stats."""
    addons_result = await db.execute(
        select(Addon)
        .options(selectinload(Addon.category))
        .order_by(Addon.created_at.desc())
    )
    addons = addons_result.scalars().all()

    orders_result = await db.execute(
        select(Order)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc())
    )
    orders = orders_result.scalars().all()

    return DashboardResponse(
        stats=compute_store_stats(addons, orders),
        addons=[AddonResponse.model_validate(a) for a in addons],
        orders=[OrderResponse.model_validate(o) for o in orders],
    )


@router.get("/stats", response_model=StoreStats)
async def get_stats(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Store-wide counts and total revenue."""
    return await get_store_stats(db)


# ============================================================================
# ORDERS
# ============================================================================


@router.get("/orders", response_model=list[OrderResponse])
async def list_all_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List all orders with their items, newest first."""
    query = select(Order).options(selectinload(Order.items))

    if status_filter:
        query = query.where(Order.order_status == status_filter)

    result = await db.execute(query.order_by(Order.created_at.desc()))
    return result.scalars().all()


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order_admin(
    order_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Get order detail (admin)."""
    return await _load_order(db, order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: uuid.UUID,
    status_update: OrderStatusUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings),
):
    """
    Set an order's status.

    Any status may follow any other unless ENFORCE_ORDER_STATUS_TRANSITIONS
    is enabled, in which case only the forward workflow is accepted.
    """
    order = await _load_order(db, order_id)

    old_status = order.order_status
    new_status = status_update.order_status

    if settings.ENFORCE_ORDER_STATUS_TRANSITIONS and not can_transition(
        old_status, new_status
    ):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot change order status from {old_status.value} to {new_status.value}",
        )

    order.order_status = new_status
    if new_status in PROCESSED_STATUSES and order.processed_at is None:
        order.processed_at = utc_now()

    await db.commit()
    logger.info(
        f"Order {order.order_number} status {old_status.value} -> {new_status.value} "
        f"by {current_user.user_id}"
    )
    return await _load_order(db, order_id)


@router.patch("/orders/{order_id}/payment", response_model=OrderResponse)
async def update_payment_status(
    order_id: uuid.UUID,
    payment_update: PaymentStatusUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Record a payment outcome and reference for an order."""
    order = await _load_order(db, order_id)

    order.payment_status = payment_update.payment_status
    if payment_update.payment_reference is not None:
        order.payment_reference = payment_update.payment_reference

    await db.commit()
    logger.info(
        f"Order {order.order_number} payment marked {payment_update.payment_status.value}"
    )
    return await _load_order(db, order_id)


# ============================================================================
# ANALYTICS
# ============================================================================


@router.get("/analytics/top-addons", response_model=list[TopAddon])
async def top_addons(
    limit: int = Query(5, ge=1, le=50),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Most downloaded add-ons."""
    return await get_top_addons(db, limit=limit)


@router.get("/analytics/revenue-by-category", response_model=list[CategoryRevenue])
async def revenue_by_category(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Order item revenue grouped by add-on category."""
    return await get_revenue_by_category(db)
