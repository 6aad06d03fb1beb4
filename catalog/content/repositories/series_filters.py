"""
Bộ lọc / phân trang cho danh sách series.

Một danh sách điều kiện duy nhất được dùng chung cho truy vấn dữ liệu (có
order/limit/offset) và truy vấn đếm (không có order/limit/offset).
"""

from typing import List

from sqlalchemy import Select, String, cast, distinct, func, or_, select

from catalog.common.utils.pagination import PaginationParams
from catalog.common.utils.text import like_pattern
from catalog.core.constants import SortOrder
from catalog.content.models import Chapter, Series, SeriesCreator, SeriesGenre, Volume
from catalog.content.schemas.listing import SeriesListParams


def latest_chapter_subquery():
    """Thời điểm cập nhật chapter còn sống gần nhất của mỗi series."""
    return (
        select(
            Volume.series_id.label("series_id"),
            func.max(Chapter.updated_at).label("latest_chapter_updated_at"),
        )
        .join(Chapter, Chapter.volume_id == Volume.id)
        .where(Volume.live(), Chapter.live())
        .group_by(Volume.series_id)
        .subquery("latest_chapter")
    )


class SeriesFilterBuilder:
    def __init__(self, params: SeriesListParams):
        self.params = params
        self.latest = latest_chapter_subquery()

    @property
    def latest_updated(self):
        return self.latest.c.latest_chapter_updated_at

    def predicates(self) -> List:
        p = self.params
        filters = [Series.live()]

        equals = (
            (Series.status, p.status),
            (Series.age_rating, p.age_rating),
            (Series.is_mature_content, p.is_mature_content),
            (Series.is_public, p.is_public),
            (Series.is_featured, p.is_featured),
            (Series.is_completed, p.is_completed),
            (Series.is_premium, p.is_premium),
            (Series.ownership_type, p.ownership_type),
            (Series.primary_owner_id, p.primary_owner_id),
            (Series.original_creator_id, p.original_creator_id),
        )
        for column, value in equals:
            if value is not None:
                filters.append(column == getattr(value, "value", value))

        if p.search and p.search.strip():
            pattern = like_pattern(p.search.strip())
            filters.append(
                or_(
                    Series.title.ilike(pattern, escape="\\"),
                    cast(Series.summary, String).ilike(pattern, escape="\\"),
                )
            )

        if p.genre_ids:
            filters.append(
                select(SeriesGenre.series_id)
                .where(
                    SeriesGenre.series_id == Series.id,
                    SeriesGenre.genre_id.in_(p.genre_ids),
                )
                .exists()
            )

        if p.creator_id is not None:
            filters.append(
                select(SeriesCreator.series_id)
                .where(
                    SeriesCreator.series_id == Series.id,
                    SeriesCreator.creator_id == p.creator_id,
                )
                .exists()
            )

        ranges = (
            (Series.created_at, p.created_after, p.created_before),
            (Series.published_at, p.published_after, p.published_before),
            (
                self.latest_updated,
                p.latest_chapter_updated_after,
                p.latest_chapter_updated_before,
            ),
            (Series.view_count, p.min_view_count, p.max_view_count),
        )
        for column, lower, upper in ranges:
            if lower is not None:
                filters.append(column >= lower)
            if upper is not None:
                filters.append(column <= upper)

        return filters

    def sort_clauses(self) -> List:
        # sort_by đã bị giới hạn bởi allow-list trong SeriesListParams
        columns = {
            "title": Series.title,
            "created_at": Series.created_at,
            "updated_at": Series.updated_at,
            "published_at": Series.published_at,
            "view_count": Series.view_count,
            "rating_average": Series.rating_average,
            "latest_chapter_updated_at": self.latest_updated,
        }
        column = columns[self.params.sort_by]
        if self.params.sort_order == SortOrder.ASC:
            return [column.asc(), Series.id.asc()]
        return [column.desc(), Series.id.desc()]

    def _from(self, query: Select) -> Select:
        return query.select_from(Series).outerjoin(
            self.latest, self.latest.c.series_id == Series.id
        )

    def data_query(self, pagination: PaginationParams) -> Select:
        return (
            self._from(select(Series, self.latest_updated))
            .where(*self.predicates())
            .order_by(*self.sort_clauses())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )

    def count_query(self) -> Select:
        count = select(func.count(distinct(Series.id)))
        return self._from(count).where(*self.predicates())
