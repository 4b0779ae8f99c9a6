"""Storefront router: categories, published add-ons, reviews."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import get_caller
from libs.auth.models import Caller
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.store_service.models import Addon, Category, Review
from services.store_service.policies import (
    visible_addons,
    visible_categories,
    visible_reviews,
)
from services.store_service.schemas import (
    AddonResponse,
    CategoryResponse,
    ReviewCreate,
    ReviewResponse,
)
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)

router = APIRouter(tags=["store"])


async def _get_visible_addon(db: AsyncSession, slug: str, caller: Caller) -> Addon:
    query = visible_addons(
        select(Addon).where(Addon.slug == slug).options(selectinload(Addon.category)),
        caller,
    )
    result = await db.execute(query)
    addon = result.scalar_one_or_none()
    if not addon:
        raise HTTPException(status_code=404, detail="Add-on not found")
    return addon


# ============================================================================
# CATALOG - CATEGORIES
# ============================================================================


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    """List categories (active only, unless the caller is an admin)."""
    query = visible_categories(
        select(Category).order_by(Category.display_order, Category.name), caller
    )
    result = await db.execute(query)
    return result.scalars().all()


# ============================================================================
# CATALOG - ADD-ONS
# ============================================================================


@router.get("/addons", response_model=list[AddonResponse])
async def list_addons(
    category: Optional[str] = Query(None, description="Category slug"),
    featured: Optional[bool] = None,
    popular: Optional[bool] = None,
    search: Optional[str] = None,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    """List add-ons. Anonymous and regular users only see published ones."""
    query = select(Addon).options(selectinload(Addon.category))

    if category:
        query = query.join(Category, Addon.category_id == Category.id).where(
            Category.slug == category
        )
    if featured is not None:
        query = query.where(Addon.is_featured.is_(featured))
    if popular is not None:
        query = query.where(Addon.is_popular.is_(popular))
    if search:
        search_term = f"%{search}%"
        query = query.where(
            or_(
                Addon.name.ilike(search_term),
                Addon.short_description.ilike(search_term),
                Addon.description.ilike(search_term),
            )
        )

    query = visible_addons(query, caller).order_by(
        Addon.is_featured.desc(), Addon.created_at.desc()
    )
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/addons/{slug}", response_model=AddonResponse)
async def get_addon(
    slug: str,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    """Get a single add-on by slug."""
    return await _get_visible_addon(db, slug, caller)


# ============================================================================
# CATALOG - REVIEWS
# ============================================================================


@router.get("/addons/{slug}/reviews", response_model=list[ReviewResponse])
async def list_addon_reviews(
    slug: str,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    """List published reviews for an add-on, newest first."""
    addon = await _get_visible_addon(db, slug, caller)
    query = visible_reviews(
        select(Review)
        .where(Review.addon_id == addon.id)
        .order_by(Review.created_at.desc()),
        caller,
    )
    result = await db.execute(query)
    return result.scalars().all()


@router.post(
    "/addons/{slug}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_review(
    slug: str,
    review_in: ReviewCreate,
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Submit a review. Reviews are held unpublished until an admin approves them.
    """
    addon = await _get_visible_addon(db, slug, caller)

    review = Review(
        addon_id=addon.id,
        customer_email=str(review_in.customer_email),
        customer_name=review_in.customer_name,
        rating=review_in.rating,
        review_text=review_in.review_text,
        is_verified=False,
        is_published=False,
    )
    db.add(review)
    await db.commit()
    await db.refresh(review)

    logger.info(f"Review {review.id} submitted for add-on {addon.slug}")
    return review
