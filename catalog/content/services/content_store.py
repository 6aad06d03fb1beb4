"""
Content Hierarchy Store: tạo, đọc, cập nhật và xóa mềm theo tầng cho
series, volume và chapter.

Mỗi thao tác ghi là một transaction: commit khi thành công, rollback khi có
bất kỳ lỗi nào.
"""

from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog.common.db.update_builder import UpdateBuilder
from catalog.common.utils.content_metrics import calculate_content_metrics
from catalog.common.utils.date_utils import now
from catalog.common.utils.identifiers import Identifier, parse_identifier
from catalog.common.utils.pagination import Page, PaginationParams, paginate
from catalog.common.utils.slug import generate_slug
from catalog.core.config import Settings, get_settings
from catalog.core.constants import ContentNodeType, OwnershipType, SeriesStatus
from catalog.core.db import is_serialization_failure, read_only, transaction
from catalog.core.exceptions import (
    DuplicateSequenceNumberException,
    InternalException,
    InvalidIdentifierException,
    NotFoundException,
)
from catalog.content.models import Chapter, Series, Volume
from catalog.content.repositories.chapter_repo import ChapterRepository
from catalog.content.repositories.series_repo import SeriesRepository
from catalog.content.repositories.volume_repo import VolumeRepository
from catalog.content.schemas.chapter import (
    ChapterCreate,
    ChapterResponse,
    ChapterUpdate,
)
from catalog.content.schemas.common import ActorContext
from catalog.content.schemas.series import (
    ASSOCIATION_FIELDS,
    SeriesCreate,
    SeriesUpdate,
)
from catalog.content.schemas.volume import VolumeCreate, VolumeResponse, VolumeUpdate
from catalog.content.services import publishing
from catalog.content.services.association_manager import AssociationManager
from catalog.content.services.purchase_guard import PurchaseGuard
from catalog.logging import get_logger, log_repository_operation

logger = get_logger(__name__)

T = TypeVar("T")


class ContentHierarchyStore:
    """
    Args:
        session_factory: Factory tạo session cho write path
        settings: Cấu hình (mặc định lấy từ get_settings())
    """

    def __init__(
        self, session_factory: async_sessionmaker, settings: Optional[Settings] = None
    ):
        self.session_factory = session_factory
        self.settings = settings or get_settings()

    async def _guarded_delete(
        self, operation: Callable[[AsyncSession], Awaitable[T]]
    ) -> T:
        """
        Chạy thao tác xóa dưới isolation level cấu hình, retry khi xung đột
        serialization để lần kiểm tra giao dịch mua/thuê luôn có hiệu lực.
        """
        attempts = self.settings.SERIALIZATION_RETRY_ATTEMPTS
        for attempt in range(1, attempts + 1):
            try:
                async with transaction(
                    self.session_factory,
                    isolation_level=self.settings.DELETE_ISOLATION_LEVEL,
                    retry_on_conflict=True,
                ) as db:
                    return await operation(db)
            except DBAPIError as e:
                if not is_serialization_failure(e) or attempt == attempts:
                    raise InternalException(
                        detail="Delete aborted by a concurrent transaction"
                    ) from e
                logger.warning(
                    f"Serialization conflict on delete, retrying ({attempt}/{attempts})"
                )

    @staticmethod
    async def _series_id_of_volume(db: AsyncSession, volume_id) -> Any:
        volume = await db.get(Volume, volume_id)
        return volume.series_id

    @log_repository_operation("create", "series")
    async def create_series(self, request: SeriesCreate, actor: ActorContext) -> Series:
        """
        Tạo series ở trạng thái DRAFT cùng các liên kết genre/creator/character.

        Raises:
            AssociationNotFoundException: Nếu có ID liên kết không tồn tại
            InvalidIdentifierException: Nếu sở hữu TENANT nhưng thiếu tenant_id
        """
        if request.ownership_type == OwnershipType.TENANT:
            if actor.tenant_id is None:
                raise InvalidIdentifierException(
                    None,
                    field="tenant_id",
                    detail="Tenant ownership requires a tenant id",
                )
            primary_owner_id = actor.tenant_id
        else:
            primary_owner_id = actor.user_id

        async with transaction(self.session_factory) as db:
            associations = AssociationManager(db)
            validated = await associations.validate(
                genre_ids=request.genre_ids,
                creators=request.creators,
                character_ids=request.character_ids,
            )

            created_at = now()
            data = request.model_dump(exclude=set(ASSOCIATION_FIELDS))
            data.update(
                slug=generate_slug(request.title),
                status=SeriesStatus.DRAFT,
                primary_owner_id=primary_owner_id,
                original_creator_id=actor.user_id,
                published_at=created_at if request.is_public else None,
                created_at=created_at,
                updated_at=created_at,
            )
            series = await SeriesRepository(db).insert(data)
            await associations.link(series.id, validated)
            return series

    @log_repository_operation("read", "series")
    async def get_series(self, series_id: Identifier) -> Series:
        series_id = parse_identifier(series_id, "series_id")
        async with read_only(self.session_factory) as db:
            series = await SeriesRepository(db).get(series_id)
            if not series:
                raise NotFoundException("series", series_id)
            return series

    @log_repository_operation("update", "series")
    async def update_series(
        self, series_id: Identifier, request: SeriesUpdate
    ) -> Series:
        """
        Cập nhật một phần series; các loại liên kết có mặt được thay thế toàn bộ.

        Raises:
            NoFieldsProvidedException: Nếu request không có trường nào
            NotFoundException: Nếu series không tồn tại hoặc đã bị xóa
        """
        series_id = parse_identifier(series_id, "series_id")
        present = request.present_fields()

        builder = UpdateBuilder(Series, "series").set_present(
            request, exclude=ASSOCIATION_FIELDS
        )
        if "title" in present:
            builder.set("slug", generate_slug(request.title))
        if request.is_public:
            builder.set("published_at", func.coalesce(Series.published_at, now()))
        associations_present = bool(present & ASSOCIATION_FIELDS)
        if not associations_present:
            builder.ensure_changes(series_id)

        async with transaction(self.session_factory) as db:
            repo = SeriesRepository(db)
            if not await repo.get(series_id, for_update=True):
                raise NotFoundException("series", series_id)

            # Request chỉ thay liên kết vẫn cập nhật updated_at của series
            await repo.apply_update(
                builder, series_id, require_changes=not associations_present
            )

            await AssociationManager(db).replace(
                series_id,
                genre_ids=request.genre_ids if "genre_ids" in present else None,
                creators=request.creators if "creators" in present else None,
                character_ids=(
                    request.character_ids if "character_ids" in present else None
                ),
            )
            return await repo.reload(series_id)

    @log_repository_operation("delete", "series")
    async def delete_series(
        self, series_id: Identifier, actor: Optional[ActorContext] = None
    ) -> None:
        """
        Xóa mềm series, mọi volume và chapter của nó trong một transaction.

        Raises:
            NotFoundException: Nếu series không tồn tại hoặc đã bị xóa
            HasPurchasesException: Nếu series hoặc hậu duệ có giao dịch mua/thuê
        """
        series_id = parse_identifier(series_id, "series_id")
        actor_id = actor.user_id if actor else None

        async def operation(db: AsyncSession) -> None:
            repo = SeriesRepository(db)
            if not await repo.get(series_id, for_update=True):
                raise NotFoundException("series", series_id)
            await PurchaseGuard(db).ensure_deletable(ContentNodeType.SERIES, series_id)
            await repo.soft_delete_cascade(series_id, actor_id)

        await self._guarded_delete(operation)

    @log_repository_operation("create", "volume")
    async def create_volume(
        self, series_id: Identifier, request: VolumeCreate
    ) -> Volume:
        series_id = parse_identifier(series_id, "series_id")
        async with transaction(self.session_factory) as db:
            series_repo = SeriesRepository(db)
            volume_repo = VolumeRepository(db)

            # Khóa series để tuần tự hóa các lần tạo volume đồng thời
            if not await series_repo.get(series_id, for_update=True):
                raise NotFoundException("series", series_id)
            if await volume_repo.number_taken(series_id, request.volume_number):
                raise DuplicateSequenceNumberException(
                    "volume", series_id, request.volume_number, "volume_number"
                )

            created_at = now()
            volume = await volume_repo.insert(
                {
                    **request.model_dump(),
                    "series_id": series_id,
                    "chapter_count": 0,
                    "created_at": created_at,
                    "updated_at": created_at,
                }
            )
            await series_repo.refresh_aggregates(series_id)
            return volume

    @log_repository_operation("read", "volume")
    async def get_volume(self, volume_id: Identifier) -> Volume:
        volume_id = parse_identifier(volume_id, "volume_id")
        async with read_only(self.session_factory) as db:
            volume = await VolumeRepository(db).get(volume_id)
            if not volume:
                raise NotFoundException("volume", volume_id)
            return volume

    async def list_volumes(
        self,
        series_id: Identifier,
        page: Optional[int] = 1,
        page_size: Optional[int] = None,
        include_chapters: bool = False,
    ) -> Page[VolumeResponse]:
        """
        Danh sách volume còn sống theo số volume. Với include_chapters, mỗi volume
        kèm danh sách chương (không có content), nạp bằng một truy vấn chung.
        """
        series_id = parse_identifier(series_id, "series_id")
        pagination = PaginationParams(page, page_size)
        async with read_only(self.session_factory) as db:
            if not await SeriesRepository(db).get(series_id):
                raise NotFoundException("series", series_id)
            volumes, total = await VolumeRepository(db).list_by_series(
                series_id, pagination.offset, pagination.limit
            )
            chapters = {}
            if include_chapters:
                chapters = await ChapterRepository(db).summaries_for_volumes(
                    [v.id for v in volumes]
                )

        items = []
        for volume in volumes:
            item = VolumeResponse.model_validate(volume)
            if include_chapters:
                item.chapters = [
                    ChapterResponse.model_validate(row) for row in chapters[volume.id]
                ]
            items.append(item)
        return paginate(items, total, pagination)

    @log_repository_operation("update", "volume")
    async def update_volume(
        self, volume_id: Identifier, request: VolumeUpdate
    ) -> Volume:
        volume_id = parse_identifier(volume_id, "volume_id")
        builder = UpdateBuilder(Volume, "volume").set_present(request)
        builder.ensure_changes(volume_id)

        async with transaction(self.session_factory) as db:
            repo = VolumeRepository(db)
            current = await repo.get(volume_id, for_update=True)
            if not current:
                raise NotFoundException("volume", volume_id)

            number = request.volume_number
            if (
                "volume_number" in request.present_fields()
                and number != current.volume_number
                and await repo.number_taken(
                    current.series_id, number, exclude_id=volume_id
                )
            ):
                raise DuplicateSequenceNumberException(
                    "volume", current.series_id, number, "volume_number"
                )

            await repo.apply_update(builder, volume_id)
            return await repo.reload(volume_id)

    @log_repository_operation("delete", "volume")
    async def delete_volume(
        self, volume_id: Identifier, actor: Optional[ActorContext] = None
    ) -> None:
        volume_id = parse_identifier(volume_id, "volume_id")
        actor_id = actor.user_id if actor else None

        async def operation(db: AsyncSession) -> None:
            repo = VolumeRepository(db)
            volume = await repo.get(volume_id, for_update=True)
            if not volume:
                raise NotFoundException("volume", volume_id)
            await PurchaseGuard(db).ensure_deletable(ContentNodeType.VOLUME, volume_id)
            # Volume đã bị xóa nên không cần tính lại chapter_count của nó
            await repo.soft_delete_cascade(volume_id, actor_id)
            await SeriesRepository(db).refresh_aggregates(volume.series_id)

        await self._guarded_delete(operation)

    @log_repository_operation("create", "chapter")
    async def create_chapter(
        self, volume_id: Identifier, request: ChapterCreate
    ) -> Chapter:
        """
        Tạo chapter (version = 1) và tính lại chapter_count của volume.

        Raises:
            NotFoundException: Nếu volume không tồn tại hoặc đã bị xóa
            DuplicateSequenceNumberException: Nếu số chương đã được dùng
        """
        volume_id = parse_identifier(volume_id, "volume_id")
        async with transaction(self.session_factory) as db:
            volume_repo = VolumeRepository(db)
            chapter_repo = ChapterRepository(db)

            volume = await volume_repo.get(volume_id, for_update=True)
            if not volume:
                raise NotFoundException("volume", volume_id)
            if await chapter_repo.number_taken(volume_id, request.chapter_number):
                raise DuplicateSequenceNumberException(
                    "chapter", volume_id, request.chapter_number, "chapter_number"
                )

            metrics = calculate_content_metrics(request.content)
            created_at = now()
            chapter = await chapter_repo.insert(
                {
                    **request.model_dump(),
                    "volume_id": volume_id,
                    "published_at": publishing.initial_published_at(
                        request.is_draft, request.is_public, request.published_at
                    ),
                    "version": 1,
                    "word_count": metrics.word_count,
                    "character_count": metrics.character_count,
                    "reading_time_minutes": metrics.reading_time_minutes,
                    "created_at": created_at,
                    "updated_at": created_at,
                }
            )
            await volume_repo.refresh_chapter_count(volume_id)
            await SeriesRepository(db).refresh_aggregates(volume.series_id)
            return chapter

    @log_repository_operation("read", "chapter")
    async def get_chapter(
        self, chapter_id: Identifier, include_content: bool = True
    ) -> ChapterResponse:
        chapter_id = parse_identifier(chapter_id, "chapter_id")
        async with read_only(self.session_factory) as db:
            repo = ChapterRepository(db)
            if include_content:
                chapter = await repo.get(chapter_id)
            else:
                chapter = await repo.get_summary(chapter_id)
            if not chapter:
                raise NotFoundException("chapter", chapter_id)
            return ChapterResponse.model_validate(chapter)

    async def list_chapters(
        self,
        volume_id: Identifier,
        page: Optional[int] = 1,
        page_size: Optional[int] = None,
        include_content: bool = False,
    ) -> Page[ChapterResponse]:
        volume_id = parse_identifier(volume_id, "volume_id")
        pagination = PaginationParams(page, page_size)
        async with read_only(self.session_factory) as db:
            if not await VolumeRepository(db).get(volume_id):
                raise NotFoundException("volume", volume_id)
            rows, total = await ChapterRepository(db).list_by_volume(
                volume_id, pagination.offset, pagination.limit, include_content
            )
        items = [ChapterResponse.model_validate(row) for row in rows]
        return paginate(items, total, pagination)

    @log_repository_operation("update", "chapter")
    async def update_chapter(
        self, chapter_id: Identifier, request: ChapterUpdate
    ) -> Chapter:
        """
        Cập nhật một phần chapter.

        Khi content có mặt (kể cả null), metrics được tính lại và version tăng đúng 1.

        Raises:
            NoFieldsProvidedException: Nếu request không có trường nào
            NotFoundException: Nếu chapter không tồn tại hoặc đã bị xóa
            DuplicateSequenceNumberException: Nếu đổi sang số chương đã được dùng
        """
        chapter_id = parse_identifier(chapter_id, "chapter_id")
        present = request.present_fields()
        builder = UpdateBuilder(Chapter, "chapter").set_present(request)
        builder.ensure_changes(chapter_id)

        content_changed = "content" in present
        if content_changed:
            metrics = calculate_content_metrics(request.content)
            builder.set("word_count", metrics.word_count)
            builder.set("character_count", metrics.character_count)
            builder.set("reading_time_minutes", metrics.reading_time_minutes)
            builder.set("version", Chapter.next_version())

        async with transaction(self.session_factory) as db:
            repo = ChapterRepository(db)
            current = await repo.get(chapter_id, for_update=True)
            if not current:
                raise NotFoundException("chapter", chapter_id)

            number = request.chapter_number
            if (
                "chapter_number" in present
                and number != current.chapter_number
                and await repo.number_taken(
                    current.volume_id, number, exclude_id=chapter_id
                )
            ):
                raise DuplicateSequenceNumberException(
                    "chapter", current.volume_id, number, "chapter_number"
                )

            await repo.apply_update(builder, chapter_id)
            if content_changed:
                series_id = await self._series_id_of_volume(db, current.volume_id)
                await SeriesRepository(db).refresh_aggregates(series_id)
            return await repo.reload(chapter_id)

    async def _transition(self, chapter_id, assignments) -> Chapter:
        builder = UpdateBuilder(Chapter, "chapter")
        for column, value in assignments:
            builder.set(column, value)

        async with transaction(self.session_factory) as db:
            repo = ChapterRepository(db)
            if not await repo.get(chapter_id, for_update=True):
                raise NotFoundException("chapter", chapter_id)
            await repo.apply_update(builder, chapter_id)
            return await repo.reload(chapter_id)

    @log_repository_operation("publish", "chapter")
    async def publish_chapter(
        self, chapter_id: Identifier, at: Optional[datetime] = None
    ) -> Chapter:
        """
        Công khai chapter: is_public=true, is_draft=false,
        published_at = at hoặc thời điểm hiện tại.

        Không thay đổi version.
        """
        chapter_id = parse_identifier(chapter_id, "chapter_id")
        return await self._transition(chapter_id, publishing.publish_assignments(at))

    @log_repository_operation("unpublish", "chapter")
    async def unpublish_chapter(self, chapter_id: Identifier) -> Chapter:
        chapter_id = parse_identifier(chapter_id, "chapter_id")
        return await self._transition(chapter_id, publishing.unpublish_assignments())

    @log_repository_operation("delete", "chapter")
    async def delete_chapter(
        self, chapter_id: Identifier, actor: Optional[ActorContext] = None
    ) -> None:
        chapter_id = parse_identifier(chapter_id, "chapter_id")
        actor_id = actor.user_id if actor else None

        async def operation(db: AsyncSession) -> None:
            repo = ChapterRepository(db)
            chapter = await repo.get(chapter_id, for_update=True)
            if not chapter:
                raise NotFoundException("chapter", chapter_id)
            await PurchaseGuard(db).ensure_deletable(
                ContentNodeType.CHAPTER, chapter_id
            )
            await repo.soft_delete(chapter_id, actor_id)

            volume_repo = VolumeRepository(db)
            await volume_repo.refresh_chapter_count(chapter.volume_id)
            series_id = await self._series_id_of_volume(db, chapter.volume_id)
            await SeriesRepository(db).refresh_aggregates(series_id)

        await self._guarded_delete(operation)
