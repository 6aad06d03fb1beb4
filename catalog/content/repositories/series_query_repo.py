from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.common.utils.pagination import PaginationParams
from catalog.content.models import (
    Chapter,
    Character,
    Creator,
    Genre,
    Series,
    SeriesCharacter,
    SeriesCreator,
    SeriesGenre,
    Volume,
)
from catalog.content.repositories.series_filters import SeriesFilterBuilder
from catalog.content.schemas.detail import (
    CharacterRef,
    CreatorRef,
    GenreRef,
    SeriesFullDetail,
    SeriesStats,
)
from catalog.content.schemas.listing import SeriesListParams, SeriesSummary


class SeriesQueryRepository:
    """
    Truy vấn phía đọc (read side) của catalog. Không bao giờ ghi dữ liệu.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_series(
        self, params: SeriesListParams, pagination: PaginationParams
    ) -> Tuple[List[SeriesSummary], int]:
        """
        Lấy một trang series theo bộ lọc cùng tổng số series khớp điều kiện.

        Args:
            params: Bộ lọc và sắp xếp
            pagination: Trang đã chuẩn hóa

        Returns:
            (danh sách SeriesSummary, tổng số)
        """
        builder = SeriesFilterBuilder(params)
        total = await self.db.scalar(builder.count_query()) or 0
        if total == 0:
            return [], 0

        result = await self.db.execute(builder.data_query(pagination))
        items = []
        for series, latest_updated in result.all():
            summary = SeriesSummary.model_validate(series)
            summary.latest_chapter_updated_at = latest_updated
            items.append(summary)
        return items, total

    async def fetch_full_detail(
        self, series_id: UUID, include_stats: bool = False
    ) -> Optional[SeriesFullDetail]:
        """
        Đọc series cùng genres, creators (kèm vai trò), characters và các bộ đếm
        trong một câu truy vấn duy nhất.

        Các bảng liên kết được LEFT JOIN nên số dòng trả về là tích của ba tập;
        kết quả được gom lại và loại trùng ở đây.
        """
        live_volumes = and_(Volume.series_id == Series.id, Volume.live())

        def live_chapters(column):
            # Subquery tương quan với Series của câu truy vấn ngoài
            return (
                select(column)
                .select_from(Chapter)
                .join(Volume, Chapter.volume_id == Volume.id)
                .where(live_volumes, Chapter.live())
            )

        columns = [
            Series,
            select(func.count(Volume.id))
            .where(live_volumes)
            .scalar_subquery()
            .label("volume_count"),
            live_chapters(func.count(Chapter.id))
            .scalar_subquery()
            .label("chapter_count"),
            live_chapters(func.max(Chapter.updated_at))
            .scalar_subquery()
            .label("latest_chapter_updated_at"),
        ]
        if include_stats:
            columns += [
                live_chapters(func.coalesce(func.sum(Chapter.word_count), 0))
                .scalar_subquery()
                .label("total_words"),
                live_chapters(func.count(Chapter.id))
                .where(
                    Chapter.is_draft.is_(False),
                    Chapter.is_public.is_(True),
                    Chapter.published_at.isnot(None),
                )
                .scalar_subquery()
                .label("published_chapter_count"),
            ]
        columns += [
            Genre.id.label("genre_id"),
            Genre.name.label("genre_name"),
            Creator.id.label("creator_id"),
            Creator.name.label("creator_name"),
            SeriesCreator.role.label("creator_role"),
            Character.id.label("character_id"),
            Character.name.label("character_name"),
        ]

        query = (
            select(*columns)
            .select_from(Series)
            .outerjoin(SeriesGenre, SeriesGenre.series_id == Series.id)
            .outerjoin(Genre, Genre.id == SeriesGenre.genre_id)
            .outerjoin(SeriesCreator, SeriesCreator.series_id == Series.id)
            .outerjoin(Creator, Creator.id == SeriesCreator.creator_id)
            .outerjoin(SeriesCharacter, SeriesCharacter.series_id == Series.id)
            .outerjoin(Character, Character.id == SeriesCharacter.character_id)
            .where(Series.id == series_id, Series.live())
        )
        rows = (await self.db.execute(query)).all()
        if not rows:
            return None

        first = rows[0]
        genres: Dict[UUID, GenreRef] = {}
        creators: Dict[Tuple[UUID, str], CreatorRef] = {}
        characters: Dict[UUID, CharacterRef] = {}
        for row in rows:
            if row.genre_id is not None:
                genres.setdefault(
                    row.genre_id, GenreRef(id=row.genre_id, name=row.genre_name)
                )
            if row.creator_id is not None:
                creators.setdefault(
                    (row.creator_id, row.creator_role),
                    CreatorRef(
                        id=row.creator_id, name=row.creator_name, role=row.creator_role
                    ),
                )
            if row.character_id is not None:
                characters.setdefault(
                    row.character_id,
                    CharacterRef(id=row.character_id, name=row.character_name),
                )

        series = first.Series
        detail = SeriesFullDetail.model_validate(series)
        detail.genres = sorted(genres.values(), key=lambda g: (g.name, str(g.id)))
        detail.creators = sorted(
            creators.values(), key=lambda c: (c.role.value, c.name, str(c.id))
        )
        detail.characters = sorted(
            characters.values(), key=lambda c: (c.name, str(c.id))
        )
        detail.volume_count = first.volume_count or 0
        detail.chapter_count = first.chapter_count or 0
        detail.latest_chapter_updated_at = first.latest_chapter_updated_at
        if include_stats:
            detail.stats = SeriesStats(
                published_chapter_count=first.published_chapter_count or 0,
                total_words=first.total_words or 0,
                view_count=series.view_count,
                like_count=series.like_count,
                bookmark_count=series.bookmark_count,
                comment_count=series.comment_count,
                rating_average=series.rating_average,
                rating_count=series.rating_count,
            )
        return detail
