import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

API = "/api/v1"


@pytest.fixture
def headers(actor):
    return {"X-User-Id": str(actor.user_id)}


async def test_genre_lifecycle(async_client: AsyncClient, headers):
    """Tạo, đọc, đổi tên, liệt kê rồi xóa một genre."""
    response = await async_client.post(
        f"{API}/genres", json={"name": "Martial Arts"}, headers=headers
    )
    assert response.status_code == 201, response.text
    genre = response.json()
    assert genre["slug"] == "martial-arts"
    assert genre["series_count"] == 0

    response = await async_client.get(f"{API}/genres/{genre['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Martial Arts"

    response = await async_client.patch(
        f"{API}/genres/{genre['id']}", json={"name": "Wuxia"}, headers=headers
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "wuxia"

    response = await async_client.get(f"{API}/genres", params={"search": "wux"})
    assert response.status_code == 200
    body = response.json()
    assert [g["name"] for g in body["items"]] == ["Wuxia"]
    assert body["pagination"]["total"] == 1

    response = await async_client.delete(
        f"{API}/genres/{genre['id']}", headers=headers
    )
    assert response.status_code == 204

    response = await async_client.get(f"{API}/genres/{genre['id']}")
    assert response.status_code == 404


async def test_duplicate_name_conflict(async_client: AsyncClient, headers, creators):
    response = await async_client.post(
        f"{API}/creators", json={"name": "AKIRA"}, headers=headers
    )

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == "duplicate_name"
    assert body["field"] == "name"


async def test_invalid_genre_name(async_client: AsyncClient, headers):
    response = await async_client.post(
        f"{API}/genres", json={"name": "Bad!"}, headers=headers
    )

    assert response.status_code == 422


async def test_writes_require_actor(async_client: AsyncClient, characters):
    create = await async_client.post(f"{API}/characters", json={"name": "Villain"})
    delete = await async_client.delete(f"{API}/characters/{characters[0].id}")

    assert create.status_code == 422
    assert delete.status_code == 422


async def test_character_update_and_empty_patch(
    async_client: AsyncClient, headers, characters
):
    url = f"{API}/characters/{characters[0].id}"

    response = await async_client.patch(
        url,
        json={"image_url": "https://example.com/hero.png", "description": "Lead"},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Hero"
    assert body["image_url"] == "https://example.com/hero.png"

    response = await async_client.patch(url, json={}, headers=headers)
    assert response.status_code == 400
    assert response.json()["code"] == "no_fields_provided"


async def test_unknown_and_invalid_taxonomy_ids(async_client: AsyncClient, headers):
    missing = await async_client.delete(
        f"{API}/creators/{uuid.uuid4()}", headers=headers
    )
    invalid = await async_client.get(f"{API}/characters/not-a-uuid")

    assert missing.status_code == 404
    assert invalid.status_code == 400
    assert invalid.json()["field"] == "character_id"
