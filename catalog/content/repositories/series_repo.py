from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update

from catalog.common.utils.date_utils import now
from catalog.content.models import Chapter, Series, Volume
from catalog.content.repositories.base import SoftDeleteRepository


class SeriesRepository(SoftDeleteRepository):
    model = Series

    async def soft_delete_cascade(
        self, series_id: UUID, actor_id: Optional[UUID]
    ) -> None:
        """
        Xóa mềm series cùng toàn bộ volume và chapter còn sống của nó.

        Tất cả các dòng nhận cùng một deleted_at.
        """
        values = Series.soft_delete_values(actor_id, now())
        volume_ids = select(Volume.id).where(Volume.series_id == series_id)

        await self.db.execute(
            update(Chapter)
            .where(Chapter.volume_id.in_(volume_ids), Chapter.live())
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            update(Volume)
            .where(Volume.series_id == series_id, Volume.live())
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            update(Series)
            .where(Series.id == series_id, Series.live())
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    async def refresh_aggregates(self, series_id: UUID) -> None:
        """Tính lại total_volumes, total_chapters, word_count từ các dòng còn sống."""
        live_volumes = select(func.count(Volume.id)).where(
            Volume.series_id == series_id, Volume.live()
        )
        live_chapters = (
            select(Chapter)
            .join(Volume, Chapter.volume_id == Volume.id)
            .where(Volume.series_id == series_id, Volume.live(), Chapter.live())
            .subquery()
        )
        await self.db.execute(
            update(Series)
            .where(Series.id == series_id)
            .values(
                total_volumes=live_volumes.scalar_subquery(),
                total_chapters=select(func.count(live_chapters.c.id)).scalar_subquery(),
                word_count=select(
                    func.coalesce(func.sum(live_chapters.c.word_count), 0)
                ).scalar_subquery(),
            )
            .execution_options(synchronize_session=False)
        )
