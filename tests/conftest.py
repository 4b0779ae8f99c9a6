import uuid
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

from libs.auth.dependencies import get_caller, require_admin
from libs.auth.models import AuthUser, Caller
from libs.common.config import get_settings
from services.store_service.app.main import app
from tests.factories import SuperAdminFactory


@pytest.fixture
def make_token() -> Callable[..., str]:
    """
    Build a Supabase-style HS256 access token signed with the configured secret.
    """

    def _make(sub: str, role: str = "authenticated", email: str = "user@test.com") -> str:
        claims = {"sub": sub, "role": role, "email": email, "aud": "authenticated"}
        return jwt.encode(claims, get_settings().SUPABASE_JWT_SECRET, algorithm="HS256")

    return _make


@pytest_asyncio.fixture
async def admin_headers(db_session, make_token) -> dict:
    """Authorization headers for a user listed in super_admins."""
    admin = SuperAdminFactory.create()
    db_session.add(admin)
    await db_session.commit()
    return {"Authorization": f"Bearer {make_token(str(admin.id), email=admin.email)}"}


@pytest.fixture
def user_headers(make_token) -> dict:
    """Authorization headers for a signed-in user who is not an admin."""
    return {"Authorization": f"Bearer {make_token(str(uuid.uuid4()))}"}


@pytest.fixture
def admin_user() -> AuthUser:
    return AuthUser(user_id=str(uuid.uuid4()), email="admin@acadeemia.com")


@pytest_asyncio.fixture
async def admin_client(client, admin_user) -> AsyncGenerator[AsyncClient, None]:
    """
    Client whose requests all run as a super admin, via dependency overrides.
    """
    app.dependency_overrides[require_admin] = lambda: admin_user
    app.dependency_overrides[get_caller] = lambda: Caller(
        user=admin_user, is_admin=True
    )
    yield client


@pytest_asyncio.fixture
async def error_client(client) -> AsyncGenerator[AsyncClient, None]:
    """
    Client that returns the 500 response for unhandled errors instead of
    re-raising them, with the same dependency overrides as ``client``.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
