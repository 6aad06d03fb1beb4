import pytest

from catalog.core.constants import ContentNodeType
from catalog.core.exceptions import (
    ErrorKind,
    HasPurchasesException,
    InternalException,
)
from catalog.content.models import Chapter, Series, Volume
from catalog.content.schemas.series import SeriesCreate
from catalog.content.services import content_store
from catalog.content.services.purchase_guard import PurchaseGuard

from conftest import add_purchase, add_rental, fail_commits, fetch_all

pytestmark = pytest.mark.asyncio


async def test_series_with_purchased_chapter_cannot_be_deleted(
    store, session_factory, series, chapters, actor
):
    """Giao dịch trên chương chặn xóa cả series; không dòng nào bị thay đổi."""
    await add_purchase(session_factory, "CHAPTER", chapters[2].id)

    with pytest.raises(HasPurchasesException) as exc_info:
        await store.delete_series(series.id, actor)

    assert exc_info.value.kind == ErrorKind.HAS_PURCHASES
    assert exc_info.value.entity_type == "series"
    for model in (Series, Volume, Chapter):
        rows = await fetch_all(session_factory, model)
        assert rows
        assert not any(row.is_deleted for row in rows)


async def test_rented_volume_cannot_be_deleted(
    store, session_factory, volume, chapters, actor
):
    await add_rental(session_factory, "VOLUME", volume.id)

    with pytest.raises(HasPurchasesException):
        await store.delete_volume(volume.id, actor)

    assert (await store.get_volume(volume.id)).chapter_count == 3


async def test_purchased_chapter_cannot_be_deleted(
    store, session_factory, chapters, actor
):
    await add_purchase(session_factory, "CHAPTER", chapters[0].id)

    with pytest.raises(HasPurchasesException):
        await store.delete_chapter(chapters[0].id, actor)

    # Chương khác không có giao dịch vẫn xóa được
    await store.delete_chapter(chapters[1].id, actor)


async def test_records_on_deleted_descendants_still_block(
    store, session_factory, series, chapters, actor
):
    await store.delete_chapter(chapters[0].id, actor)
    await add_purchase(session_factory, "CHAPTER", chapters[0].id)

    with pytest.raises(HasPurchasesException):
        await store.delete_series(series.id, actor)


async def test_guard_ignores_other_series(store, session_factory, actor, series):
    other = await store.create_series(SeriesCreate(title="Other"), actor)
    await add_purchase(session_factory, "SERIES", other.id)

    async with session_factory() as session:
        guard = PurchaseGuard(session)
        assert await guard.has_commercial_records(ContentNodeType.SERIES, other.id)
        assert not await guard.has_commercial_records(
            ContentNodeType.SERIES, series.id
        )

    await store.delete_series(series.id, actor)


async def test_item_type_must_match(store, session_factory, volume, chapters, actor):
    """Một dòng VOLUME trùng id với chương không được tính cho chương đó."""
    await add_purchase(session_factory, "VOLUME", chapters[0].id)

    await store.delete_chapter(chapters[0].id, actor)


async def test_delete_runs_under_configured_isolation(
    store, series, actor, test_settings, monkeypatch
):
    """Kiểm tra giao dịch và thao tác xóa chạy trong cùng transaction SERIALIZABLE."""
    seen = []
    original_transaction = content_store.transaction

    def recording_transaction(session_factory, **options):
        seen.append(options)
        return original_transaction(session_factory, **options)

    monkeypatch.setattr(content_store, "transaction", recording_transaction)

    await store.delete_series(series.id, actor)

    assert test_settings.DELETE_ISOLATION_LEVEL == "SERIALIZABLE"
    assert seen == [
        {
            "isolation_level": test_settings.DELETE_ISOLATION_LEVEL,
            "retry_on_conflict": True,
        }
    ]


async def test_delete_retries_after_serialization_conflict(
    store, session_factory, series, chapters, actor, monkeypatch
):
    commits = fail_commits(monkeypatch, times=1, sqlstate="40001")

    await store.delete_series(series.id, actor)

    assert commits["count"] == 2
    monkeypatch.undo()
    for model in (Series, Volume, Chapter):
        assert all(row.is_deleted for row in await fetch_all(session_factory, model))


async def test_delete_gives_up_after_retry_attempts(
    store, session_factory, series, chapters, actor, test_settings, monkeypatch
):
    attempts = test_settings.SERIALIZATION_RETRY_ATTEMPTS
    commits = fail_commits(monkeypatch, times=attempts, sqlstate="40P01")

    with pytest.raises(InternalException) as exc_info:
        await store.delete_series(series.id, actor)

    assert exc_info.value.kind == ErrorKind.INTERNAL
    assert commits["count"] == attempts
    monkeypatch.undo()
    for model in (Series, Volume, Chapter):
        assert not any(
            row.is_deleted for row in await fetch_all(session_factory, model)
        )
