"""Access predicates for store tables.

These mirror the row-level-security policies created by the store
migration, so queries issued through the API see the same rows a direct
Supabase client would:

==================  ==============================  ===========
table               anon / authenticated            super admin
==================  ==============================  ===========
store_categories    SELECT where is_active          ALL
store_addons        SELECT where is_published       ALL
store_orders        INSERT                          ALL
store_order_items   INSERT                          ALL
store_reviews       SELECT where is_published;      ALL
                    INSERT
==================  ==============================  ===========
"""

from libs.auth.models import Caller
from services.store_service.models import Addon, Category, Review
from sqlalchemy import Select


def visible_categories(query: Select, caller: Caller) -> Select:
    if caller.is_admin:
        return query
    return query.where(Category.is_active.is_(True))


def visible_addons(query: Select, caller: Caller) -> Select:
    if caller.is_admin:
        return query
    return query.where(Addon.is_published.is_(True))


def visible_reviews(query: Select, caller: Caller) -> Select:
    if caller.is_admin:
        return query
    return query.where(Review.is_published.is_(True))
