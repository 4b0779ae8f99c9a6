"""Admin store catalog router: add-ons, categories, reviews."""

import uuid
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import Addon, Category, OrderItem, Review
from services.store_service.schemas import (
    AddonCreate,
    AddonResponse,
    AddonStatusFilter,
    AddonUpdate,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ReviewAdminResponse,
    ReviewUpdate,
)
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

router = APIRouter(tags=["admin-store"])


async def _load_addon(db: AsyncSession, addon_id: uuid.UUID) -> Addon:
    """Fetch an add-on with its category, or 404."""
    query = (
        select(Addon)
        .where(Addon.id == addon_id)
        .options(selectinload(Addon.category))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    addon = result.scalar_one_or_none()
    if not addon:
        raise HTTPException(status_code=404, detail="Add-on not found")
    return addon


async def _ensure_addon_slug_free(
    db: AsyncSession, slug: str, exclude_id: Optional[uuid.UUID] = None
) -> None:
    query = select(Addon.id).where(Addon.slug == slug)
    if exclude_id is not None:
        query = query.where(Addon.id != exclude_id)
    existing = await db.execute(query)
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=400, detail="Add-on with this slug already exists"
        )


# ============================================================================
# ADD-ONS
# ============================================================================


@router.get("/addons", response_model=list[AddonResponse])
async def list_all_addons(
    search: Optional[str] = None,
    status_filter: AddonStatusFilter = Query("all", alias="status"),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List all add-ons (including drafts), newest first."""
    query = select(Addon).options(selectinload(Addon.category))

    if status_filter == "published":
        query = query.where(Addon.is_published.is_(True))
    elif status_filter == "draft":
        query = query.where(Addon.is_published.is_(False))

    if search:
        search_term = f"%{search}%"
        query = query.where(
            or_(
                Addon.name.ilike(search_term),
                Addon.description.ilike(search_term),
                Addon.short_description.ilike(search_term),
            )
        )

    result = await db.execute(query.order_by(Addon.created_at.desc()))
    return result.scalars().all()


@router.post(
    "/addons", response_model=AddonResponse, status_code=status.HTTP_201_CREATED
)
async def create_addon(
    addon_in: AddonCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a new add-on."""
    await _ensure_addon_slug_free(db, addon_in.slug)

    addon = Addon(
        **addon_in.model_dump(),
        created_by=current_user.user_id,
        updated_by=current_user.user_id,
    )
    db.add(addon)
    await db.commit()

    logger.info(f"Add-on {addon.slug} created by {current_user.user_id}")
    return await _load_addon(db, addon.id)


@router.get("/addons/{addon_id}", response_model=AddonResponse)
async def get_addon_admin(
    addon_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Get add-on detail (admin view, includes drafts)."""
    return await _load_addon(db, addon_id)


@router.patch("/addons/{addon_id}", response_model=AddonResponse)
async def update_addon(
    addon_id: uuid.UUID,
    addon_in: AddonUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update an add-on. Fields sent overwrite the stored ones."""
    addon = await _load_addon(db, addon_id)

    update_data = addon_in.model_dump(exclude_unset=True)
    if update_data.get("slug") and update_data["slug"] != addon.slug:
        await _ensure_addon_slug_free(db, update_data["slug"], exclude_id=addon.id)

    for field, value in update_data.items():
        setattr(addon, field, value)
    addon.updated_by = current_user.user_id

    await db.commit()
    return await _load_addon(db, addon_id)


@router.post("/addons/{addon_id}/toggle-publish", response_model=AddonResponse)
async def toggle_addon_publish(
    addon_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Flip an add-on between published and draft."""
    addon = await _load_addon(db, addon_id)
    addon.is_published = not addon.is_published
    addon.updated_by = current_user.user_id
    await db.commit()

    logger.info(
        f"Add-on {addon.slug} {'published' if addon.is_published else 'unpublished'}"
    )
    return await _load_addon(db, addon_id)


@router.delete("/addons/{addon_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_addon(
    addon_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Delete an add-on and its reviews.

    Add-ons that appear on orders cannot be deleted; unpublish them instead.
    """
    addon = await _load_addon(db, addon_id)

    order_refs = await db.execute(
        select(func.count(OrderItem.id)).where(OrderItem.addon_id == addon_id)
    )
    if order_refs.scalar() or 0:
        raise HTTPException(
            status_code=409,
            detail="Add-on is referenced by existing orders",
        )

    await db.delete(addon)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=409,
            detail="Add-on is referenced by existing orders",
        )

    logger.info(f"Add-on {addon_id} deleted by {current_user.user_id}")
    return None


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/categories", response_model=list[CategoryResponse])
async def list_all_categories(
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List all categories (including inactive)."""
    query = select(Category).order_by(Category.display_order, Category.name)
    result = await db.execute(query)
    return result.scalars().all()


@router.post(
    "/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED
)
async def create_category(
    category_in: CategoryCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Create a new category."""
    # Check slug uniqueness
    existing = await db.execute(
        select(Category).where(Category.slug == category_in.slug)
    )
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=400, detail="Category with this slug already exists"
        )

    category = Category(**category_in.model_dump())
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: uuid.UUID,
    category_in: CategoryUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Update a category."""
    query = select(Category).where(Category.id == category_id)
    result = await db.execute(query)
    category = result.scalar_one_or_none()

    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    update_data = category_in.model_dump(exclude_unset=True)
    if update_data.get("slug") and update_data["slug"] != category.slug:
        existing = await db.execute(
            select(Category.id).where(Category.slug == update_data["slug"])
        )
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=400, detail="Category with this slug already exists"
            )

    for field, value in update_data.items():
        setattr(category, field, value)

    await db.commit()
    await db.refresh(category)
    return category


# ============================================================================
# REVIEWS
# ============================================================================


async def refresh_addon_rating(db: AsyncSession, addon_id: uuid.UUID) -> None:
    """Recompute an add-on's rating and review_count from published reviews."""
    result = await db.execute(
        select(func.count(Review.id), func.avg(Review.rating)).where(
            Review.addon_id == addon_id, Review.is_published.is_(True)
        )
    )
    count, average = result.one()

    addon = await db.get(Addon, addon_id)
    if addon is None:
        return
    addon.review_count = count or 0
    addon.rating = (
        Decimal(str(average)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        if average is not None
        else Decimal("0")
    )


@router.get("/reviews", response_model=list[ReviewAdminResponse])
async def list_all_reviews(
    addon_id: Optional[uuid.UUID] = None,
    published: Optional[bool] = None,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """List reviews (published and pending), newest first."""
    query = select(Review)
    if addon_id:
        query = query.where(Review.addon_id == addon_id)
    if published is not None:
        query = query.where(Review.is_published.is_(published))

    result = await db.execute(query.order_by(Review.created_at.desc()))
    return result.scalars().all()


@router.patch("/reviews/{review_id}", response_model=ReviewAdminResponse)
async def moderate_review(
    review_id: uuid.UUID,
    review_in: ReviewUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Publish, unpublish or verify a review."""
    query = select(Review).where(Review.id == review_id)
    result = await db.execute(query)
    review = result.scalar_one_or_none()

    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    update_data = review_in.model_dump(exclude_unset=True, exclude_none=True)
    publish_changed = (
        "is_published" in update_data
        and update_data["is_published"] != review.is_published
    )
    for field, value in update_data.items():
        setattr(review, field, value)

    if publish_changed:
        await db.flush()
        await refresh_addon_rating(db, review.addon_id)

    await db.commit()
    await db.refresh(review)
    return review
