from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.admins import is_listed_admin
from libs.auth.models import AuthUser, Caller
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.db.session import get_async_db

logger = get_logger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> AuthUser:
    """
    Decode a Supabase access token (HS256) into an AuthUser.

    Raises JWTError or ValidationError when the token is unusable. Only
    service-role keys may omit ``sub``.
    """
    settings = get_settings()
    payload = jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=["HS256"],
        # Supabase tokens vary in aud (authenticated, anon, service_role)
        options={"verify_aud": False},
    )
    user = AuthUser(**payload)
    if user.user_id is None and not user.is_service_role:
        raise JWTError("Token has no subject")
    return user


async def get_current_user(
    token: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> AuthUser:
    """
    Validate Supabase JWT and return the authenticated user.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        return decode_access_token(token.credentials)
    except (JWTError, ValidationError):
        raise credentials_exception


async def get_optional_user(
    token: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(optional_security)
    ],
) -> Optional[AuthUser]:
    """
    Like get_current_user, but anonymous storefront requests are allowed.

    An anon-key bearer (or any token that does not decode) is treated as
    anonymous rather than rejected.
    """
    if token is None:
        return None
    try:
        return decode_access_token(token.credentials)
    except (JWTError, ValidationError):
        return None


async def is_super_admin(db: AsyncSession, user: AuthUser) -> bool:
    """
    Mirror of the RLS predicate ``auth.uid() IN (SELECT id FROM super_admins)``.

    The service role bypasses RLS in Supabase, so it counts as an admin here too.
    """
    if user.is_service_role:
        return True
    try:
        return await is_listed_admin(db, user.user_id)
    except SQLAlchemyError as e:
        logger.error(f"Super admin lookup failed for {user.user_id}: {e}")
        await db.rollback()
        return False


async def get_caller(
    user: Annotated[Optional[AuthUser], Depends(get_optional_user)],
    db: Annotated[AsyncSession, Depends(get_async_db)],
) -> Caller:
    """Resolve the request's caller for the storefront access policies."""
    if user is None:
        return Caller()
    return Caller(user=user, is_admin=await is_super_admin(db, user))


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_async_db)],
) -> AuthUser:
    """
    Ensure the user is a store administrator (a row in super_admins).
    """
    if not await is_super_admin(db, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user
