"""Seed script for the default store catalog.

Creates the five default categories and the six sample add-ons. Rows are
matched by slug, so running it again only fills in what is missing.

Usage:
    python -m services.store_service.seed_store_data
"""

import asyncio
from decimal import Decimal

from libs.db.config import AsyncSessionLocal
from services.store_service.models import Addon, Category
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

SAAS_ONLY = {"saas": True, "standalone": False}
STANDALONE_ONLY = {"saas": False, "standalone": True}

DEFAULT_CATEGORIES = [
    {
        "name": "SaaS Add-ons",
        "slug": "saas-addons",
        "description": "Add-ons for the SaaS version of Acadeemia",
        "display_order": 1,
    },
    {
        "name": "Standalone Add-ons",
        "slug": "standalone-addons",
        "description": "Add-ons for the Standalone version of Acadeemia",
        "display_order": 2,
    },
    {
        "name": "Premium Features",
        "slug": "premium-features",
        "description": "Premium features and enhancements",
        "display_order": 3,
    },
    {
        "name": "Integrations",
        "slug": "integrations",
        "description": "Third-party integrations and connectors",
        "display_order": 4,
    },
    {
        "name": "Templates",
        "slug": "templates",
        "description": "Templates and themes",
        "display_order": 5,
    },
]

SAMPLE_ADDONS = [
    {
        "name": "QR Code Attendance",
        "slug": "qr-code-attendance-saas",
        "category": "saas-addons",
        "description": "Advanced attendance tracking using QR codes for quick and accurate recording. Students and staff can check in/out by scanning QR codes with their mobile devices.",
        "short_description": "QR code-based attendance tracking system",
        "price": Decimal("3999.00"),
        "features": [
            "QR code generation for each user",
            "Mobile app scanning capability",
            "Real-time attendance updates",
            "Attendance reports and analytics",
            "Integration with existing attendance system",
        ],
        "is_popular": True,
        "compatibility": SAAS_ONLY,
    },
    {
        "name": "Two-Factor Authentication",
        "slug": "two-factor-auth-saas",
        "category": "saas-addons",
        "description": "Enhanced security with two-factor authentication for user accounts. Protect sensitive data with SMS and app-based verification.",
        "short_description": "Enhanced security with 2FA",
        "price": Decimal("2999.00"),
        "features": [
            "SMS-based verification",
            "App-based authentication (Google Authenticator)",
            "Backup codes for account recovery",
            "Admin controls for 2FA enforcement",
            "Security audit logs",
        ],
        "is_popular": True,
        "compatibility": SAAS_ONLY,
    },
    {
        "name": "Android App",
        "slug": "android-app-standalone",
        "category": "standalone-addons",
        "description": "Mobile access through dedicated Android application. Native mobile experience for students, teachers, and parents with offline synchronization.",
        "short_description": "Native Android mobile application",
        "price": Decimal("3999.00"),
        "features": [
            "Native Android application",
            "Offline data synchronization",
            "Push notifications",
            "Mobile-optimized interface",
            "App store deployment assistance",
        ],
        "is_popular": True,
        "compatibility": STANDALONE_ONLY,
    },
    {
        "name": "Biometrics Entry",
        "slug": "biometrics-entry-standalone",
        "category": "standalone-addons",
        "description": "Biometric authentication for secure access control. Fingerprint and facial recognition support for enhanced security.",
        "short_description": "Biometric authentication system",
        "price": Decimal("1999.00"),
        "features": [
            "Fingerprint recognition",
            "Facial recognition (optional)",
            "Access control integration",
            "Attendance via biometrics",
            "Security audit trails",
        ],
        "is_popular": False,
        "compatibility": STANDALONE_ONLY,
    },
    {
        "name": "Multi Branch Management",
        "slug": "multi-branch-standalone",
        "category": "standalone-addons",
        "description": "Manage multiple branches or campuses from a single system. Centralized management with branch-specific controls and reporting.",
        "short_description": "Multi-campus management system",
        "price": Decimal("2999.00"),
        "features": [
            "Multiple campus management",
            "Branch-specific user roles",
            "Centralized reporting",
            "Inter-branch data sharing",
            "Branch performance analytics",
        ],
        "is_popular": True,
        "compatibility": STANDALONE_ONLY,
    },
    {
        "name": "Zoom Live Classes",
        "slug": "zoom-live-classes-standalone",
        "category": "standalone-addons",
        "description": "Integrate Zoom for seamless virtual classroom experiences. Professional video conferencing for education with automated scheduling.",
        "short_description": "Zoom integration for virtual classes",
        "price": Decimal("1999.00"),
        "features": [
            "Zoom integration",
            "Automated meeting scheduling",
            "Recording capabilities",
            "Breakout room support",
            "Attendance tracking",
        ],
        "is_popular": True,
        "compatibility": STANDALONE_ONLY,
    },
]


async def seed_store_data(db: AsyncSession) -> tuple[int, int]:
    """Insert missing default categories and sample add-ons.

    Returns the number of categories and add-ons created.
    """
    result = await db.execute(select(Category))
    categories = {c.slug: c for c in result.scalars().all()}

    created_categories = 0
    for data in DEFAULT_CATEGORIES:
        if data["slug"] in categories:
            continue
        category = Category(**data)
        db.add(category)
        categories[data["slug"]] = category
        created_categories += 1
    await db.flush()

    result = await db.execute(select(Addon.slug))
    existing_addons = set(result.scalars().all())

    created_addons = 0
    for data in SAMPLE_ADDONS:
        if data["slug"] in existing_addons:
            continue
        fields = {k: v for k, v in data.items() if k != "category"}
        db.add(
            Addon(
                **fields,
                category_id=categories[data["category"]].id,
                is_published=True,
            )
        )
        created_addons += 1

    await db.commit()
    return created_categories, created_addons


async def main():
    async with AsyncSessionLocal() as db:
        print("Seeding store data...")
        categories, addons = await seed_store_data(db)
        print(f"Created {categories} categories and {addons} add-ons.")


if __name__ == "__main__":
    asyncio.run(main())
