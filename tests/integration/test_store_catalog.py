"""Integration tests for the public storefront catalog."""

import pytest
from services.store_service.models import Review
from sqlalchemy import select
from tests.factories import AddonFactory, CategoryFactory, ReviewFactory

# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_anonymous_sees_only_published_addons(client, db_session, admin_headers):
    published = AddonFactory.create(is_published=True)
    draft = AddonFactory.create(is_published=False)
    db_session.add_all([published, draft])
    await db_session.commit()

    response = await client.get("/store/addons")
    assert response.status_code == 200
    assert {a["slug"] for a in response.json()} == {published.slug}

    # Super admins see drafts too, as the RLS policies allow
    response = await client.get("/store/addons", headers=admin_headers)
    assert {a["slug"] for a in response.json()} == {published.slug, draft.slug}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_signed_in_user_sees_only_published_addons(client, db_session, user_headers):
    db_session.add_all(
        [AddonFactory.create(is_published=True), AddonFactory.create(is_published=False)]
    )
    await db_session.commit()

    response = await client.get("/store/addons", headers=user_headers)

    assert response.status_code == 200
    assert len(response.json()) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_anonymous_sees_only_active_categories(client, db_session, admin_headers):
    db_session.add_all(
        [
            CategoryFactory.create(slug="saas-addons", display_order=1),
            CategoryFactory.create(slug="templates", display_order=5),
            CategoryFactory.create(slug="retired", is_active=False),
        ]
    )
    await db_session.commit()

    response = await client.get("/store/categories")
    assert response.status_code == 200
    assert [c["slug"] for c in response.json()] == ["saas-addons", "templates"]

    response = await client.get("/store/categories", headers=admin_headers)
    assert len(response.json()) == 3


@pytest.mark.asyncio
@pytest.mark.integration
async def test_draft_addon_detail_is_hidden(client, db_session, admin_headers):
    draft = AddonFactory.create(is_published=False)
    db_session.add(draft)
    await db_session.commit()

    response = await client.get(f"/store/addons/{draft.slug}")
    assert response.status_code == 404

    response = await client.get(f"/store/addons/{draft.slug}", headers=admin_headers)
    assert response.status_code == 200


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_filter_addons_by_category(client, db_session):
    saas = CategoryFactory.create(slug="saas-addons")
    standalone = CategoryFactory.create(slug="standalone-addons")
    db_session.add_all([saas, standalone])
    await db_session.flush()
    in_saas = AddonFactory.create(category_id=saas.id)
    db_session.add_all([in_saas, AddonFactory.create(category_id=standalone.id)])
    await db_session.commit()

    response = await client.get("/store/addons", params={"category": "saas-addons"})

    assert response.status_code == 200
    data = response.json()
    assert [a["slug"] for a in data] == [in_saas.slug]
    assert data[0]["category"] == {"name": saas.name, "slug": "saas-addons"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_filter_featured_and_popular(client, db_session):
    featured = AddonFactory.create(is_featured=True)
    popular = AddonFactory.create(is_popular=True)
    db_session.add_all([featured, popular, AddonFactory.create()])
    await db_session.commit()

    response = await client.get("/store/addons", params={"featured": "true"})
    assert [a["slug"] for a in response.json()] == [featured.slug]

    response = await client.get("/store/addons", params={"popular": "true"})
    assert [a["slug"] for a in response.json()] == [popular.slug]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_search_addons(client, db_session):
    zoom = AddonFactory.create(name="Zoom Live Classes")
    db_session.add_all([zoom, AddonFactory.create(name="Biometrics Entry")])
    await db_session.commit()

    response = await client.get("/store/addons", params={"search": "zoom"})

    assert response.status_code == 200
    assert [a["slug"] for a in response.json()] == [zoom.slug]


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_submit_review_is_held_for_moderation(client, db_session):
    addon = AddonFactory.create()
    db_session.add(addon)
    await db_session.commit()

    response = await client.post(
        f"/store/addons/{addon.slug}/reviews",
        json={
            "customer_email": "teacher@demoacademy.com",
            "customer_name": "Mr. Otieno",
            "rating": 4,
            "review_text": "Attendance is much faster now.",
        },
    )

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["is_published"] is False
    assert data["is_verified"] is False
    assert "customer_email" not in data

    result = await db_session.execute(select(Review).where(Review.addon_id == addon.id))
    assert result.scalar_one().rating == 4


@pytest.mark.asyncio
@pytest.mark.integration
async def test_review_rating_out_of_range(client, db_session):
    addon = AddonFactory.create()
    db_session.add(addon)
    await db_session.commit()

    response = await client.post(
        f"/store/addons/{addon.slug}/reviews",
        json={"customer_email": "a@demoacademy.com", "customer_name": "A", "rating": 6},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_reviews_shows_only_published(client, db_session):
    addon = AddonFactory.create()
    db_session.add(addon)
    await db_session.flush()
    shown = ReviewFactory.create(addon.id, is_published=True)
    db_session.add_all([shown, ReviewFactory.create(addon.id, is_published=False)])
    await db_session.commit()

    response = await client.get(f"/store/addons/{addon.slug}/reviews")

    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [str(shown.id)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["service"] == "store"
    assert "x-request-id" in response.headers
