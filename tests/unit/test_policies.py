"""Unit tests for the storefront access predicates."""

from libs.auth.models import AuthUser, Caller
from services.store_service.models import Addon, Category, Review
from services.store_service.policies import (
    visible_addons,
    visible_categories,
    visible_reviews,
)
from sqlalchemy import select

ADMIN = Caller(user=AuthUser(user_id="admin-id"), is_admin=True)
ANONYMOUS = Caller()
SIGNED_IN = Caller(user=AuthUser(user_id="user-id"))


def _where(query) -> str:
    return str(query.whereclause) if query.whereclause is not None else ""


def test_anonymous_filters():
    assert "is_published" in _where(visible_addons(select(Addon), ANONYMOUS))
    assert "is_active" in _where(visible_categories(select(Category), ANONYMOUS))
    assert "is_published" in _where(visible_reviews(select(Review), ANONYMOUS))


def test_signed_in_user_gets_same_filters_as_anonymous():
    assert _where(visible_addons(select(Addon), SIGNED_IN)) == _where(
        visible_addons(select(Addon), ANONYMOUS)
    )


def test_admin_sees_everything():
    query = select(Addon)
    assert visible_addons(query, ADMIN) is query
    assert visible_categories(select(Category), ADMIN).whereclause is None
    assert visible_reviews(select(Review), ADMIN).whereclause is None


def test_caller_anonymity():
    assert ANONYMOUS.is_anonymous
    assert not SIGNED_IN.is_anonymous
    assert not SIGNED_IN.is_admin
