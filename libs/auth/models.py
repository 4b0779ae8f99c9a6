from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthUser(BaseModel):
    """
    Represents an authenticated user from a Supabase access token.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Supabase service-role keys carry no subject
    user_id: Optional[str] = Field(None, alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"

    @property
    def is_service_role(self) -> bool:
        return self.role == "service_role"


class Caller(BaseModel):
    """
    Who is making a request, as the access policies see it.

    ``user`` is None for anonymous storefront visitors. ``is_admin`` is true
    when the user is listed in ``super_admins`` or carries the service role.
    """

    user: Optional[AuthUser] = None
    is_admin: bool = False

    @property
    def is_anonymous(self) -> bool:
        return self.user is None
