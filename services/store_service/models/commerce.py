"""Store commerce models: orders and order items."""

import random
import string
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import epoch_millis, utc_now
from libs.db.base import Base, JSONType, UUIDType
from services.store_service.models.enums import OrderStatus, PaymentStatus, enum_values
from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

ORDER_NUMBER_PREFIX = "ORD"
ORDER_NUMBER_SUFFIX_ALPHABET = string.ascii_uppercase + string.digits

# ============================================================================
# ORDER MODELS
# ============================================================================


class Order(Base):
    """Orders placed through the storefront."""

    __tablename__ = "store_orders"

    id: Mapped[uuid.UUID] = mapped_column(UUIDType, primary_key=True, default=uuid.uuid4)
    order_number: Mapped[str] = mapped_column(String(40), unique=True, nullable=False)

    # Customer
    customer_email: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    institution_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    billing_address: Mapped[Optional[dict]] = mapped_column(
        JSONType, nullable=True
    )  # {"street": "...", "city": "...", "country": "..."}

    # Status (CHECK-constrained text columns, any value can follow any other)
    order_status: Mapped[OrderStatus] = mapped_column(
        SAEnum(
            OrderStatus,
            values_callable=enum_values,
            name="store_order_status",
            native_enum=False,
            create_constraint=True,
            length=20,
        ),
        default=OrderStatus.PENDING,
        server_default="pending",
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(
            PaymentStatus,
            values_callable=enum_values,
            name="store_payment_status",
            native_enum=False,
            create_constraint=True,
            length=20,
        ),
        default=PaymentStatus.PENDING,
        server_default="pending",
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Pricing (client-supplied totals, stored as sent)
    subtotal: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    tax_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0"), server_default="0"
    )
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), default=Decimal("0"), server_default="0"
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    currency: Mapped[str] = mapped_column(String(3), default="KES", server_default="KES")

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    processed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        Index("idx_store_orders_status", "order_status"),
        Index("idx_store_orders_email", "customer_email"),
        Index("idx_store_orders_created_at", "created_at"),
    )

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @staticmethod
    def generate_order_number() -> str:
        """Generate an order number like ORD-1752051930123-K3Z9Q.

        Uniqueness is probabilistic; the unique constraint is the backstop.
        """
        random_part = "".join(random.choices(ORDER_NUMBER_SUFFIX_ALPHABET, k=5))
        return f"{ORDER_NUMBER_PREFIX}-{epoch_millis()}-{random_part}"

    def __repr__(self):
        return f"<Order {self.order_number}>"


class OrderItem(Base):
    """Order line items (snapshot of the add-on at purchase time)."""

    __tablename__ = "store_order_items"

    id: Mapped[uuid.UUID] = mapped_column(UUIDType, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUIDType, ForeignKey("store_orders.id", ondelete="CASCADE"), nullable=False
    )
    addon_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUIDType, ForeignKey("store_addons.id"), nullable=True
    )

    # Snapshot at order time (add-ons may change)
    addon_name: Mapped[str] = mapped_column(String(255), nullable=False)
    addon_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    addon_version: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Filled in by fulfilment
    license_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    download_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="store_order_items_positive_quantity"),
        Index("idx_store_order_items_order_id", "order_id"),
    )

    # Relationships
    order = relationship("Order", back_populates="items")
    addon = relationship("Addon")

    def __repr__(self):
        return f"<OrderItem {self.addon_name} qty={self.quantity}>"
