import uuid
from datetime import timedelta

import pytest

from catalog.common.utils.date_utils import now
from catalog.core.constants import OwnershipType, SeriesStatus, SortOrder
from catalog.content.schemas.chapter import ChapterCreate
from catalog.content.schemas.listing import SeriesListParams
from catalog.content.schemas.series import CreatorAssignment, SeriesCreate, SeriesUpdate
from catalog.content.schemas.volume import VolumeCreate

pytestmark = pytest.mark.asyncio


async def _create_many(store, actor, count):
    return [
        await store.create_series(SeriesCreate(title=f"Series {i:02d}"), actor)
        for i in range(count)
    ]


async def test_list_pagination_metadata(store, query_service, actor):
    await _create_many(store, actor, 25)

    page = await query_service.list_series(SeriesListParams(page=2, page_size=10))

    assert len(page.items) == 10
    assert page.pagination.total == 25
    assert page.pagination.total_pages == 3
    assert page.pagination.has_next is True
    assert page.pagination.has_previous is True


async def test_list_out_of_range_values_are_clamped(store, query_service, actor):
    await _create_many(store, actor, 3)

    page = await query_service.list_series(SeriesListParams(page=0, page_size=1000))

    assert page.pagination.page == 1
    assert page.pagination.page_size == 100
    assert len(page.items) == 3


async def test_list_empty(query_service):
    page = await query_service.list_series(SeriesListParams())

    assert page.items == []
    assert page.pagination.total == 0
    assert page.pagination.total_pages == 0


async def test_deleted_series_are_hidden(store, query_service, actor):
    kept, dropped = await _create_many(store, actor, 2)
    await store.delete_series(dropped.id, actor)

    page = await query_service.list_series(SeriesListParams())

    assert [s.id for s in page.items] == [kept.id]


async def test_filter_by_status_and_flags(store, query_service, actor):
    a, b, c = await _create_many(store, actor, 3)
    await store.update_series(a.id, SeriesUpdate(status=SeriesStatus.ONGOING))
    await store.update_series(b.id, SeriesUpdate(is_public=True))

    ongoing = await query_service.list_series(
        SeriesListParams(status=SeriesStatus.ONGOING)
    )
    public = await query_service.list_series(SeriesListParams(is_public=True))
    draft_public = await query_service.list_series(
        SeriesListParams(status=SeriesStatus.DRAFT, is_public=True)
    )

    assert [s.id for s in ongoing.items] == [a.id]
    assert [s.id for s in public.items] == [b.id]
    assert [s.id for s in draft_public.items] == [b.id]


async def test_search_matches_title_and_summary(store, query_service, actor):
    dragon = await store.create_series(SeriesCreate(title="Dragon Keeper"), actor)
    tale = await store.create_series(
        SeriesCreate(title="Sea Tale", summary={"en": "A tale about a DRAGON"}), actor
    )
    await store.create_series(SeriesCreate(title="Quiet Town"), actor)

    page = await query_service.list_series(SeriesListParams(search="dragon"))

    assert {s.id for s in page.items} == {dragon.id, tale.id}


async def test_search_escapes_wildcards(store, query_service, actor):
    await store.create_series(SeriesCreate(title="Plain"), actor)
    percent = await store.create_series(SeriesCreate(title="100% Love"), actor)

    page = await query_service.list_series(SeriesListParams(search="%"))

    assert [s.id for s in page.items] == [percent.id]


async def test_filter_by_genre_counts_each_series_once(
    store, query_service, actor, genres
):
    both = await store.create_series(
        SeriesCreate(title="Both", genre_ids=[g.id for g in genres]), actor
    )
    await store.create_series(SeriesCreate(title="None"), actor)

    page = await query_service.list_series(
        SeriesListParams(genre_ids=[g.id for g in genres])
    )

    assert [s.id for s in page.items] == [both.id]
    assert page.pagination.total == 1


async def test_filter_by_creator_and_owner(
    store, query_service, actor, tenant_actor, creators
):
    drawn = await store.create_series(
        SeriesCreate(
            title="Drawn", creators=[CreatorAssignment(creator_id=creators[1].id)]
        ),
        actor,
    )
    studio = await store.create_series(
        SeriesCreate(title="Studio", ownership_type=OwnershipType.TENANT),
        tenant_actor,
    )

    by_creator = await query_service.list_series(
        SeriesListParams(creator_id=creators[1].id)
    )
    by_owner = await query_service.list_series(
        SeriesListParams(primary_owner_id=tenant_actor.tenant_id)
    )
    by_type = await query_service.list_series(
        SeriesListParams(ownership_type=OwnershipType.TENANT)
    )
    nobody = await query_service.list_series(
        SeriesListParams(original_creator_id=uuid.uuid4())
    )

    assert [s.id for s in by_creator.items] == [drawn.id]
    assert [s.id for s in by_owner.items] == [studio.id]
    assert [s.id for s in by_type.items] == [studio.id]
    assert nobody.items == []


async def test_created_range_filter(store, query_service, actor):
    await _create_many(store, actor, 2)

    future = await query_service.list_series(
        SeriesListParams(created_after=now() + timedelta(days=1))
    )
    past = await query_service.list_series(
        SeriesListParams(created_before=now() + timedelta(days=1))
    )

    assert future.items == []
    assert past.pagination.total == 2


async def test_sort_by_title(store, query_service, actor):
    for title in ("Beta", "Alpha", "Gamma"):
        await store.create_series(SeriesCreate(title=title), actor)

    asc = await query_service.list_series(
        SeriesListParams(sort_by="title", sort_order=SortOrder.ASC)
    )
    desc = await query_service.list_series(
        SeriesListParams(sort_by="title", sort_order=SortOrder.DESC)
    )

    assert [s.title for s in asc.items] == ["Alpha", "Beta", "Gamma"]
    assert [s.title for s in desc.items] == ["Gamma", "Beta", "Alpha"]


async def test_latest_chapter_update_is_reported(store, query_service, actor):
    with_chapter = await store.create_series(SeriesCreate(title="Active"), actor)
    await store.create_series(SeriesCreate(title="Idle"), actor)
    volume = await store.create_volume(with_chapter.id, VolumeCreate(volume_number=1))
    await store.create_chapter(volume.id, ChapterCreate(chapter_number=1))

    page = await query_service.list_series(
        SeriesListParams(
            latest_chapter_updated_after=now() - timedelta(days=1),
        )
    )

    assert [s.id for s in page.items] == [with_chapter.id]
    assert page.items[0].latest_chapter_updated_at is not None
    assert page.items[0].total_chapters == 1
