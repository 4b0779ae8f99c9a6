"""Pydantic schemas for store service."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)
from services.store_service.models import OrderStatus, PaymentStatus

# ============================================================================
# CATEGORY SCHEMAS
# ============================================================================


class CategoryBase(BaseModel):
    name: str = Field(..., max_length=100)
    slug: str = Field(..., max_length=100)
    description: Optional[str] = None
    is_active: bool = True
    display_order: int = 0


class CategoryCreate(CategoryBase):
    pass


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class CategoryResponse(CategoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class CategorySummary(BaseModel):
    """Category name and slug as embedded in add-on listings."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    slug: str


# ============================================================================
# ADD-ON SCHEMAS
# ============================================================================


class AddonBase(BaseModel):
    name: str = Field(..., max_length=255)
    slug: str = Field(..., max_length=255)
    category_id: Optional[uuid.UUID] = None
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    price: Decimal = Field(Decimal("0"), ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    currency: str = Field("KES", min_length=3, max_length=3)
    features: list[str] = Field(default_factory=list)
    images: list[Any] = Field(default_factory=list)
    is_published: bool = False
    is_featured: bool = False
    is_popular: bool = False
    version: str = Field("1.0.0", max_length=50)
    compatibility: dict[str, bool] = Field(
        default_factory=lambda: {"saas": True, "standalone": True}
    )
    requirements: Optional[str] = None
    installation_notes: Optional[str] = None
    support_level: str = Field("standard", max_length=50)


class AddonCreate(AddonBase):
    pass


class AddonUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    category_id: Optional[uuid.UUID] = None
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    price: Optional[Decimal] = Field(None, ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    features: Optional[list[str]] = None
    images: Optional[list[Any]] = None
    is_published: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_popular: Optional[bool] = None
    version: Optional[str] = Field(None, max_length=50)
    compatibility: Optional[dict[str, bool]] = None
    requirements: Optional[str] = None
    installation_notes: Optional[str] = None
    support_level: Optional[str] = Field(None, max_length=50)


class AddonResponse(AddonBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    download_count: int
    rating: Decimal
    review_count: int
    category: Optional[CategorySummary] = None
    created_at: datetime
    updated_at: datetime


# ============================================================================
# REVIEW SCHEMAS
# ============================================================================


class ReviewCreate(BaseModel):
    customer_email: EmailStr
    customer_name: str = Field(..., min_length=1, max_length=255)
    rating: int = Field(..., ge=1, le=5)
    review_text: Optional[str] = None


class ReviewUpdate(BaseModel):
    """Moderate a review (admin)."""

    is_published: Optional[bool] = None
    is_verified: Optional[bool] = None


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    addon_id: uuid.UUID
    customer_name: str
    rating: int
    review_text: Optional[str]
    is_verified: bool
    is_published: bool
    created_at: datetime


class ReviewAdminResponse(ReviewResponse):
    customer_email: str


# ============================================================================
# ORDER INTAKE SCHEMAS
# ============================================================================


class OrderIntakeItem(BaseModel):
    """One line of an order as the storefront submits it."""

    addon_id: Optional[uuid.UUID] = None
    addon_name: str = Field(..., min_length=1, max_length=255)
    addon_description: Optional[str] = None
    addon_version: Optional[str] = Field(None, max_length=50)
    quantity: int = Field(1, ge=1)
    unit_price: Decimal = Field(..., ge=0)
    total_price: Optional[Decimal] = Field(None, ge=0)

    @model_validator(mode="after")
    def default_total_price(self) -> "OrderIntakeItem":
        if self.total_price is None:
            self.total_price = self.unit_price * self.quantity
        return self


class OrderIntakeRequest(BaseModel):
    """
    Order payload posted by the storefront.

    Customer name, email and items are checked explicitly by the intake
    handler so that a missing field yields the generic 400, not a schema error.
    """

    customer_name: Optional[str] = Field(None, max_length=255)
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = Field(None, max_length=50)
    institution_name: Optional[str] = Field(None, max_length=255)
    billing_address: Optional[dict[str, Any]] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    items: Optional[list[OrderIntakeItem]] = None
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")

    @field_validator("customer_name", "customer_email", mode="before")
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class OrderIntakeResponse(BaseModel):
    success: bool = True
    order_id: uuid.UUID
    order_number: str
    message: str = "Order created successfully"
    email_sent: bool


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    addon_id: Optional[uuid.UUID]
    addon_name: str
    addon_description: Optional[str]
    addon_version: Optional[str]
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    license_key: Optional[str]
    download_url: Optional[str]


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    order_status: OrderStatus
    payment_status: PaymentStatus

    customer_email: str
    customer_name: str
    customer_phone: Optional[str]
    institution_name: Optional[str]
    billing_address: Optional[dict]

    payment_method: Optional[str]
    payment_reference: Optional[str]

    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    currency: str

    notes: Optional[str]
    processed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    items: list[OrderItemResponse] = []


class OrderStatusUpdate(BaseModel):
    """Update order status (admin)."""

    order_status: OrderStatus


class PaymentStatusUpdate(BaseModel):
    """Record a payment outcome (admin)."""

    payment_status: PaymentStatus
    payment_reference: Optional[str] = Field(None, max_length=100)


# ============================================================================
# DASHBOARD SCHEMAS
# ============================================================================


AddonStatusFilter = Literal["all", "published", "draft"]


class StoreStats(BaseModel):
    total_addons: int = 0
    published_addons: int = 0
    total_orders: int = 0
    total_revenue: Decimal = Decimal("0")
    pending_orders: int = 0


class DashboardResponse(BaseModel):
    """Everything the admin dashboard loads on mount."""

    stats: StoreStats
    addons: list[AddonResponse]
    orders: list[OrderResponse]


class TopAddon(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    download_count: int


class CategoryRevenue(BaseModel):
    category: str
    revenue: Decimal
    items_sold: int
