"""
Model factories for creating valid test data.

Every factory produces a valid, insertable SQLAlchemy model instance.
Override any field via kwargs.

Usage:
    addon = AddonFactory.create(is_published=True)
    db_session.add(addon)
    await db_session.commit()
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _uuid() -> uuid.UUID:
    return uuid.uuid4()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _unique_email() -> str:
    return f"test-{uuid.uuid4().hex[:8]}@test.com"


def _unique_slug(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class SuperAdminFactory:
    @staticmethod
    def create(**overrides):
        from libs.auth.admins import SuperAdminRef

        defaults = {
            "id": _uuid(),
            "email": _unique_email(),
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return SuperAdminRef(**defaults)


# ---------------------------------------------------------------------------
# Store Catalog
# ---------------------------------------------------------------------------


class CategoryFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Category

        slug = overrides.pop("slug", None) or _unique_slug("category")
        defaults = {
            "id": _uuid(),
            "name": f"Category {slug}",
            "slug": slug,
            "description": "Test category",
            "is_active": True,
            "display_order": 0,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Category(**defaults)


class AddonFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import Addon

        slug = overrides.pop("slug", None) or _unique_slug("addon")
        defaults = {
            "id": _uuid(),
            "name": f"Add-on {slug}",
            "slug": slug,
            "short_description": "A test add-on",
            "description": "Longer description of the test add-on",
            "price": Decimal("2999.00"),
            "currency": "KES",
            "features": ["Feature one", "Feature two"],
            "images": [],
            "is_published": True,
            "is_featured": False,
            "is_popular": False,
            "version": "1.0.0",
            "compatibility": {"saas": True, "standalone": True},
            "support_level": "standard",
            "download_count": 0,
            "rating": Decimal("0"),
            "review_count": 0,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Addon(**defaults)


class ReviewFactory:
    @staticmethod
    def create(addon_id: uuid.UUID, **overrides):
        from services.store_service.models import Review

        defaults = {
            "id": _uuid(),
            "addon_id": addon_id,
            "customer_email": _unique_email(),
            "customer_name": "Test Reviewer",
            "rating": 5,
            "review_text": "Works well for our school.",
            "is_verified": False,
            "is_published": False,
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Review(**defaults)


# ---------------------------------------------------------------------------
# Store Orders
# ---------------------------------------------------------------------------


class OrderFactory:
    @staticmethod
    def create(**overrides):
        from services.store_service.models import (
            Order,
            OrderStatus,
            PaymentStatus,
        )

        defaults = {
            "id": _uuid(),
            "order_number": Order.generate_order_number(),
            "customer_email": _unique_email(),
            "customer_name": "Jane Principal",
            "institution_name": "Demo Academy",
            "order_status": OrderStatus.PENDING,
            "payment_status": PaymentStatus.PENDING,
            "subtotal": Decimal("2999.00"),
            "tax_amount": Decimal("0"),
            "discount_amount": Decimal("0"),
            "total_amount": Decimal("2999.00"),
            "currency": "KES",
            "created_at": _now(),
            "updated_at": _now(),
        }
        defaults.update(overrides)
        return Order(**defaults)


class OrderItemFactory:
    @staticmethod
    def create(order_id: uuid.UUID, **overrides):
        from services.store_service.models import OrderItem

        defaults = {
            "id": _uuid(),
            "order_id": order_id,
            "addon_id": None,
            "addon_name": "Test Add-on",
            "quantity": 1,
            "unit_price": Decimal("2999.00"),
            "total_price": Decimal("2999.00"),
            "created_at": _now(),
        }
        defaults.update(overrides)
        return OrderItem(**defaults)
