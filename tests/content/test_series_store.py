import uuid

import pytest
from catalog.common.utils.date_utils import ensure_utc
from catalog.core.constants import CreatorRole, OwnershipType, SeriesStatus
from catalog.core.exceptions import (
    AssociationNotFoundException,
    ErrorKind,
    InvalidIdentifierException,
    NoFieldsProvidedException,
    NotFoundException,
)
from catalog.content.models import Chapter, Series, SeriesGenre, Volume
from catalog.content.schemas.chapter import ChapterCreate
from catalog.content.schemas.series import CreatorAssignment, SeriesCreate, SeriesUpdate
from catalog.content.schemas.volume import VolumeCreate

from conftest import fetch_all

pytestmark = pytest.mark.asyncio


async def test_create_series_defaults(store, actor):
    """Series mới ở trạng thái DRAFT, slug sinh từ title, actor là owner."""
    series = await store.create_series(SeriesCreate(title="My First Series!"), actor)

    assert series.status == SeriesStatus.DRAFT.value
    assert series.slug == "my-first-series"
    assert series.primary_owner_id == actor.user_id
    assert series.original_creator_id == actor.user_id
    assert series.is_deleted is False
    assert series.published_at is None


async def test_create_tenant_series_is_owned_by_tenant(store, tenant_actor):
    series = await store.create_series(
        SeriesCreate(title="Studio Work", ownership_type=OwnershipType.TENANT),
        tenant_actor,
    )

    assert series.primary_owner_id == tenant_actor.tenant_id
    assert series.original_creator_id == tenant_actor.user_id


async def test_create_tenant_series_without_tenant_fails(store, session_factory, actor):
    """Sở hữu TENANT mà không có tenant_id thì bị từ chối, không ghi gì."""
    with pytest.raises(InvalidIdentifierException) as exc_info:
        await store.create_series(
            SeriesCreate(title="Orphan Studio", ownership_type=OwnershipType.TENANT),
            actor,
        )

    assert exc_info.value.kind == ErrorKind.INVALID_IDENTIFIER
    assert exc_info.value.field == "tenant_id"
    assert await fetch_all(session_factory, Series) == []


async def test_create_series_with_associations(
    store, query_service, actor, genres, creators, characters
):
    series = await store.create_series(
        SeriesCreate(
            title="Linked",
            genre_ids=[genres[0].id, genres[1].id, genres[0].id],
            creators=[
                CreatorAssignment(creator_id=creators[0].id),
                CreatorAssignment(
                    creator_id=creators[0].id, role=CreatorRole.ILLUSTRATOR
                ),
            ],
            character_ids=[characters[0].id],
        ),
        actor,
    )

    detail = await query_service.get_full_detail(series.id)

    assert {g.id for g in detail.genres} == {genres[0].id, genres[1].id}
    assert len(detail.genres) == 2
    assert {(c.id, c.role) for c in detail.creators} == {
        (creators[0].id, CreatorRole.AUTHOR),
        (creators[0].id, CreatorRole.ILLUSTRATOR),
    }
    assert [c.id for c in detail.characters] == [characters[0].id]


async def test_create_series_with_unknown_genre_fails(
    store, session_factory, actor, genres
):
    missing = uuid.uuid4()

    with pytest.raises(AssociationNotFoundException) as exc_info:
        await store.create_series(
            SeriesCreate(title="Broken", genre_ids=[genres[0].id, missing]), actor
        )

    assert exc_info.value.kind == ErrorKind.ASSOCIATION_NOT_FOUND
    assert exc_info.value.entity_type == "genre"
    assert exc_info.value.params["missing_ids"] == [str(missing)]
    assert await fetch_all(session_factory, Series) == []


async def test_create_series_with_unknown_creator_fails(store, actor):
    with pytest.raises(AssociationNotFoundException) as exc_info:
        await store.create_series(
            SeriesCreate(
                title="Broken",
                creators=[CreatorAssignment(creator_id=uuid.uuid4())],
            ),
            actor,
        )

    assert exc_info.value.entity_type == "creator"


async def test_get_series_invalid_and_missing(store):
    with pytest.raises(InvalidIdentifierException):
        await store.get_series("not-a-uuid")

    with pytest.raises(NotFoundException):
        await store.get_series(uuid.uuid4())


async def test_update_series_partial(store, series):
    before = await store.get_series(series.id)

    updated = await store.update_series(
        series.id, SeriesUpdate(title="A New Dawn", status=SeriesStatus.ONGOING)
    )

    assert updated.title == "A New Dawn"
    assert updated.slug == "a-new-dawn"
    assert updated.status == SeriesStatus.ONGOING.value
    # Trường vắng mặt giữ nguyên
    assert updated.summary == before.summary
    assert updated.is_public is False
    assert ensure_utc(updated.updated_at) > ensure_utc(before.updated_at)


async def test_update_series_sets_explicit_null(store, actor):
    series = await store.create_series(
        SeriesCreate(title="Covered", cover_image="https://cdn/x.png"), actor
    )

    updated = await store.update_series(series.id, SeriesUpdate(cover_image=None))

    assert updated.cover_image is None
    assert updated.title == "Covered"


async def test_update_series_without_fields(store, series):
    before = await store.get_series(series.id)

    with pytest.raises(NoFieldsProvidedException):
        await store.update_series(series.id, SeriesUpdate())

    after = await store.get_series(series.id)
    assert after.updated_at == before.updated_at


async def test_update_series_missing(store):
    with pytest.raises(NotFoundException):
        await store.update_series(uuid.uuid4(), SeriesUpdate(title="Ghost"))


async def test_make_series_public_sets_published_at(store, series):
    updated = await store.update_series(series.id, SeriesUpdate(is_public=True))
    first_published = updated.published_at

    assert updated.is_public is True
    assert first_published is not None

    again = await store.update_series(series.id, SeriesUpdate(is_public=True))
    assert again.published_at == first_published


async def test_replace_genres_only(
    store, query_service, session_factory, actor, genres, characters
):
    series = await store.create_series(
        SeriesCreate(
            title="Swap",
            genre_ids=[genres[0].id],
            character_ids=[characters[0].id],
        ),
        actor,
    )
    before = await store.get_series(series.id)

    updated = await store.update_series(
        series.id, SeriesUpdate(genre_ids=[genres[1].id])
    )

    detail = await query_service.get_full_detail(series.id)
    assert [g.id for g in detail.genres] == [genres[1].id]
    # Loại liên kết vắng mặt không bị động tới
    assert [c.id for c in detail.characters] == [characters[0].id]
    assert ensure_utc(updated.updated_at) > ensure_utc(before.updated_at)


async def test_replace_with_unknown_genre_rolls_back(
    store, query_service, actor, genres
):
    series = await store.create_series(
        SeriesCreate(title="Keep", genre_ids=[genres[0].id]), actor
    )

    with pytest.raises(AssociationNotFoundException):
        await store.update_series(
            series.id, SeriesUpdate(title="Changed", genre_ids=[uuid.uuid4()])
        )

    detail = await query_service.get_full_detail(series.id)
    assert detail.title == "Keep"
    assert [g.id for g in detail.genres] == [genres[0].id]


async def test_clear_genres_with_empty_list(store, session_factory, actor, genres):
    series = await store.create_series(
        SeriesCreate(title="Clear", genre_ids=[genres[0].id]), actor
    )

    await store.update_series(series.id, SeriesUpdate(genre_ids=[]))

    assert await fetch_all(session_factory, SeriesGenre) == []


async def test_delete_series_cascades(store, session_factory, actor):
    series = await store.create_series(SeriesCreate(title="Doomed"), actor)
    volume = await store.create_volume(series.id, VolumeCreate(volume_number=1))
    for n in (1, 2):
        await store.create_chapter(volume.id, ChapterCreate(chapter_number=n))

    await store.delete_series(series.id, actor)

    with pytest.raises(NotFoundException):
        await store.get_series(series.id)
    with pytest.raises(NotFoundException):
        await store.get_volume(volume.id)

    rows = (
        await fetch_all(session_factory, Series)
        + await fetch_all(session_factory, Volume)
        + await fetch_all(session_factory, Chapter)
    )
    assert len(rows) == 4
    assert all(row.is_deleted for row in rows)
    assert all(row.deleted_by == actor.user_id for row in rows)
    assert len({row.deleted_at for row in rows}) == 1


async def test_delete_series_twice(store, series, actor):
    await store.delete_series(series.id, actor)

    with pytest.raises(NotFoundException):
        await store.delete_series(series.id, actor)


async def test_deleted_series_rejects_new_volumes(store, series, actor):
    await store.delete_series(series.id, actor)

    with pytest.raises(NotFoundException):
        await store.create_volume(series.id, VolumeCreate(volume_number=1))
