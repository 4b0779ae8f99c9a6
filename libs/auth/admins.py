"""Reference model for the shared ``super_admins`` table.

The table is owned by the platform, not by any one service. Services only
read ``id`` (the Supabase auth user id) to decide who is an administrator.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from libs.common.datetime_utils import utc_now
from libs.db.base import Base, UUIDType


class SuperAdminRef(Base):
    """Reference to the shared super_admins table without cross-service imports."""

    __tablename__ = "super_admins"
    __table_args__ = {"extend_existing": True, "info": {"skip_autogenerate": True}}

    id: Mapped[uuid.UUID] = mapped_column(UUIDType, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    def __repr__(self):
        return f"<SuperAdminRef {self.email}>"


async def is_listed_admin(db: AsyncSession, auth_user_id: Optional[str]) -> bool:
    """True when ``auth_user_id`` has a row in super_admins."""
    if not auth_user_id:
        return False
    try:
        admin_id = uuid.UUID(auth_user_id)
    except ValueError:
        return False
    result = await db.execute(select(SuperAdminRef.id).where(SuperAdminRef.id == admin_id))
    return result.first() is not None
