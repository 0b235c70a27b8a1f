"""Works API tests — catalogue reads, role gate on create, ownership on edit."""

import uuid

import pytest
from sqlalchemy import select

from publisher.db.models import UserRole, Work


def _work_body(**overrides) -> dict:
    return {
        "title": "The Lighthouse Keeper",
        "description": "A quiet novel about a loud sea.",
        "originalLanguage": "en",
        "contentType": "text",
        "genre": "fiction",
        "tags": ["sea", "family"],
        "price": 9.99,
        **overrides,
    }


async def _create_work(client, author, **overrides) -> dict:
    r = await client.post("/api/works", json=_work_body(**overrides), headers=author["headers"])
    assert r.status_code == 201, r.text
    return r.json()["work"]


async def _publish(client, author, work_id: str) -> dict:
    r = await client.put(
        f"/api/works/{work_id}", json={"status": "published"}, headers=author["headers"]
    )
    assert r.status_code == 200, r.text
    return r.json()["work"]


# ═══════════════════════════════════════════════════════════
# Create (author role gate)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_author_creates_draft(client, register):
    author = await register("author")
    r = await client.post("/api/works", json=_work_body(), headers=author["headers"])
    assert r.status_code == 201
    data = r.json()
    assert data["message"] == "Work created successfully"
    work = data["work"]
    assert work["authorId"] == author["id"]
    assert work["status"] == "draft"
    assert work["publishedAt"] is None
    assert work["price"] == 9.99
    assert work["tags"] == ["sea", "family"]
    assert work["viewCount"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["translator", "editor"])
async def test_non_author_cannot_create(client, register, role):
    other = await register(role)
    r = await client.post("/api/works", json=_work_body(), headers=other["headers"])
    assert r.status_code == 403
    assert r.json()["error"] == "Forbidden"


@pytest.mark.asyncio
async def test_create_requires_token(client):
    r = await client.post("/api/works", json=_work_body())
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_create_validates_body(client, register):
    author = await register("author")
    r = await client.post(
        "/api/works",
        json=_work_body(contentType="podcast", price=-1),
        headers=author["headers"],
    )
    assert r.status_code == 400
    fields = {e["field"] for e in r.json()["errors"]}
    assert {"contentType", "price"} <= fields


# ═══════════════════════════════════════════════════════════
# Update (ownership)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_owner_updates_work(client, register):
    author = await register("author")
    work = await _create_work(client, author)

    r = await client.put(
        f"/api/works/{work['id']}",
        json={"title": "The Lighthouse Keeper, Revised", "price": 4.5},
        headers=author["headers"],
    )
    assert r.status_code == 200
    updated = r.json()["work"]
    assert updated["title"] == "The Lighthouse Keeper, Revised"
    assert updated["price"] == 4.5
    assert updated["genre"] == "fiction"  # untouched


@pytest.mark.asyncio
async def test_publish_sets_published_at_once(client, register):
    author = await register("author")
    work = await _create_work(client, author)

    published = await _publish(client, author, work["id"])
    assert published["status"] == "published"
    assert published["publishedAt"] is not None

    r = await client.put(
        f"/api/works/{work['id']}", json={"genre": "drama"}, headers=author["headers"]
    )
    assert r.json()["work"]["publishedAt"] == published["publishedAt"]


@pytest.mark.asyncio
async def test_other_author_cannot_update(client, register):
    owner = await register("author")
    intruder = await register("author")
    work = await _create_work(client, owner)

    r = await client.put(
        f"/api/works/{work['id']}", json={"title": "Mine now"}, headers=intruder["headers"]
    )
    assert r.status_code == 403
    assert r.json()["message"] == "Not authorized to edit this work"


@pytest.mark.asyncio
async def test_admin_role_does_not_override_ownership(client, register, db):
    owner = await register("author")
    work = await _create_work(client, owner)

    admin = await register("editor")
    db.add(UserRole(user_id=uuid.UUID(admin["id"]), role_type="admin"))
    await db.commit()
    r = await client.post(
        "/api/auth/login",
        json={"email": admin["email"], "password": admin["password"], "role": "admin"},
    )
    headers = {"Authorization": f"Bearer {r.json()['token']}"}

    r = await client.put(
        f"/api/works/{work['id']}", json={"title": "Moderated"}, headers=headers
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_update_unknown_work(client, register):
    author = await register("author")
    r = await client.put(
        f"/api/works/{uuid.uuid4()}", json={"title": "Ghost"}, headers=author["headers"]
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Work not found"


@pytest.mark.asyncio
async def test_update_cannot_set_suspended(client, register):
    author = await register("author")
    work = await _create_work(client, author)
    r = await client.put(
        f"/api/works/{work['id']}", json={"status": "suspended"}, headers=author["headers"]
    )
    assert r.status_code == 400


# ═══════════════════════════════════════════════════════════
# Public catalogue
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_shows_only_published(client, register):
    author = await register("author", penName="Quill")
    draft = await _create_work(client, author, title="Draft")
    live = await _create_work(client, author, title="Live")
    await _publish(client, author, live["id"])

    r = await client.get("/api/works")
    assert r.status_code == 200
    data = r.json()
    ids = [w["id"] for w in data["works"]]
    assert live["id"] in ids
    assert draft["id"] not in ids
    assert data["page"] == 1
    assert data["limit"] == 20
    assert data["total"] == len(data["works"])
    assert data["works"][0]["authorName"] == "Quill"


@pytest.mark.asyncio
async def test_list_filters(client, register):
    author = await register("author")
    fantasy = await _create_work(client, author, genre="fantasy", originalLanguage="fr")
    other = await _create_work(client, author, genre="fiction", originalLanguage="en")
    await _publish(client, author, fantasy["id"])
    await _publish(client, author, other["id"])

    by_genre = (await client.get("/api/works", params={"genre": "fantasy"})).json()
    assert [w["id"] for w in by_genre["works"]] == [fantasy["id"]]

    by_language = (await client.get("/api/works", params={"language": "en"})).json()
    assert [w["id"] for w in by_language["works"]] == [other["id"]]


@pytest.mark.asyncio
async def test_list_paginates(client, register):
    author = await register("author")
    for i in range(3):
        work = await _create_work(client, author, title=f"Book {i}")
        await _publish(client, author, work["id"])

    first = (await client.get("/api/works", params={"limit": 2})).json()
    second = (await client.get("/api/works", params={"limit": 2, "page": 2})).json()
    assert len(first["works"]) == 2
    assert len(second["works"]) == 1
    assert second["page"] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"limit": 0}, {"limit": 101}, {"page": 0}])
async def test_list_rejects_bad_paging(client, params):
    r = await client.get("/api/works", params=params)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_detail_counts_views(client, register, db):
    author = await register("author")
    work = await _create_work(client, author)
    await _publish(client, author, work["id"])

    r1 = await client.get(f"/api/works/{work['id']}")
    r2 = await client.get(f"/api/works/{work['id']}")
    assert r1.status_code == r2.status_code == 200
    assert r2.json()["work"]["viewCount"] == r1.json()["work"]["viewCount"] + 1

    stored = (await db.execute(select(Work.view_count).where(Work.id == uuid.UUID(work["id"])))).scalar_one()
    assert stored == 2


@pytest.mark.asyncio
async def test_detail_hides_drafts(client, register):
    author = await register("author")
    work = await _create_work(client, author)
    r = await client.get(f"/api/works/{work['id']}")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_detail_with_malformed_id(client):
    r = await client.get("/api/works/not-a-uuid")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_my_works_include_drafts(client, register):
    author = await register("author")
    other = await register("author")
    mine = await _create_work(client, author)
    await _create_work(client, other)

    r = await client.get("/api/works/my/all", headers=author["headers"])
    assert r.status_code == 200
    assert [w["id"] for w in r.json()["works"]] == [mine["id"]]
