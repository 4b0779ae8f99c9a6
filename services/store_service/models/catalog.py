"""Store catalog models: categories, add-ons, reviews."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, JSONType, UUIDType
from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer
from sqlalchemy import Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

DEFAULT_COMPATIBILITY = {"saas": True, "standalone": True}

# ============================================================================
# CATALOG MODELS
# ============================================================================


class Category(Base):
    """Add-on categories (e.g., 'SaaS Add-ons', 'Integrations')."""

    __tablename__ = "store_categories"

    id: Mapped[uuid.UUID] = mapped_column(UUIDType, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )
    display_order: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    # Relationships
    addons = relationship("Addon", back_populates="category")

    def __repr__(self):
        return f"<Category {self.name}>"


class Addon(Base):
    """Purchasable add-ons (e.g., 'QR Code Attendance')."""

    __tablename__ = "store_addons"

    id: Mapped[uuid.UUID] = mapped_column(UUIDType, primary_key=True, default=uuid.uuid4)
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType, ForeignKey("store_categories.id"), nullable=True
    )

    # Basic info
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Pricing
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    original_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2), nullable=True
    )  # "was" price for sales display
    currency: Mapped[str] = mapped_column(String(3), default="KES", server_default="KES")

    # Content
    features: Mapped[list] = mapped_column(JSONType, default=list)
    images: Mapped[list] = mapped_column(JSONType, default=list)

    # Flags
    is_published: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    is_featured: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    is_popular: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    # Technical details
    version: Mapped[str] = mapped_column(
        String(50), default="1.0.0", server_default="1.0.0"
    )
    compatibility: Mapped[dict] = mapped_column(
        JSONType, default=lambda: dict(DEFAULT_COMPATIBILITY)
    )  # {"saas": bool, "standalone": bool}
    requirements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    installation_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    support_level: Mapped[str] = mapped_column(
        String(50), default="standard", server_default="standard"
    )

    # Aggregates
    download_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    rating: Mapped[Decimal] = mapped_column(
        Numeric(3, 2), default=Decimal("0"), server_default="0"
    )
    review_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        Index("idx_store_addons_category_id", "category_id"),
        Index("idx_store_addons_published", "is_published"),
        Index("idx_store_addons_featured", "is_featured"),
    )

    # Relationships
    category = relationship("Category", back_populates="addons")
    reviews = relationship(
        "Review",
        back_populates="addon",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Addon {self.slug}>"


class Review(Base):
    """Customer reviews of an add-on. Hidden until an admin publishes them."""

    __tablename__ = "store_reviews"

    id: Mapped[uuid.UUID] = mapped_column(UUIDType, primary_key=True, default=uuid.uuid4)
    addon_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType, ForeignKey("store_addons.id", ondelete="CASCADE"), nullable=False
    )
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    review_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_verified: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    is_published: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="store_reviews_rating_range"),
        Index("idx_store_reviews_addon_id", "addon_id"),
    )

    # Relationships
    addon = relationship("Addon", back_populates="reviews")

    def __repr__(self):
        return f"<Review {self.addon_id} rating={self.rating}>"
