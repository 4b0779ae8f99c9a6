"""Dashboard aggregates computed over already-loaded rows or simple queries."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

from libs.common.currency import to_decimal
from services.store_service.models import Addon, Category, Order, OrderItem, OrderStatus
from services.store_service.schemas import CategoryRevenue, StoreStats
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

UNCATEGORIZED = "Uncategorized"


def compute_store_stats(addons: Iterable[Addon], orders: Iterable[Order]) -> StoreStats:
    """Counts and revenue the dashboard shows above its tables."""
    addons = list(addons)
    orders = list(orders)
    return StoreStats(
        total_addons=len(addons),
        published_addons=sum(1 for a in addons if a.is_published),
        total_orders=len(orders),
        total_revenue=to_decimal(
            sum((o.total_amount or Decimal("0") for o in orders), Decimal("0"))
        ),
        pending_orders=sum(1 for o in orders if o.order_status == OrderStatus.PENDING),
    )


async def get_store_stats(db: AsyncSession) -> StoreStats:
    addon_row = (
        await db.execute(
            select(
                func.count(Addon.id),
                func.count(Addon.id).filter(Addon.is_published.is_(True)),
            )
        )
    ).one()
    order_row = (
        await db.execute(
            select(
                func.count(Order.id),
                func.coalesce(func.sum(Order.total_amount), 0),
                func.count(Order.id).filter(Order.order_status == OrderStatus.PENDING),
            )
        )
    ).one()
    return StoreStats(
        total_addons=addon_row[0] or 0,
        published_addons=addon_row[1] or 0,
        total_orders=order_row[0] or 0,
        total_revenue=to_decimal(order_row[1]),
        pending_orders=order_row[2] or 0,
    )


async def get_top_addons(db: AsyncSession, limit: int = 5) -> list[Addon]:
    result = await db.execute(
        select(Addon)
        .order_by(Addon.download_count.desc(), Addon.name)
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_revenue_by_category(db: AsyncSession) -> list[CategoryRevenue]:
    """
    Sum order item totals per add-on category, highest revenue first.

    Items whose add-on is gone or has no category are grouped under
    ``Uncategorized``.
    """
    query = (
        select(
            Category.name,
            func.coalesce(func.sum(OrderItem.total_price), 0),
            func.coalesce(func.sum(OrderItem.quantity), 0),
        )
        .select_from(OrderItem)
        .outerjoin(Addon, OrderItem.addon_id == Addon.id)
        .outerjoin(Category, Addon.category_id == Category.id)
        .group_by(Category.name)
    )
    result = await db.execute(query)

    revenue: dict[str, Decimal] = defaultdict(Decimal)
    items_sold: dict[str, int] = defaultdict(int)
    for name, total, quantity in result.all():
        key = name or UNCATEGORIZED
        revenue[key] += to_decimal(total)
        items_sold[key] += int(quantity or 0)

    rows = [
        CategoryRevenue(category=key, revenue=revenue[key], items_sold=items_sold[key])
        for key in revenue
    ]
    rows.sort(key=lambda r: (-r.revenue, r.category))
    return rows
