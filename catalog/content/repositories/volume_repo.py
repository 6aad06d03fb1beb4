from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from catalog.common.db.update_builder import UpdateBuilder
from catalog.common.utils.date_utils import now
from catalog.core.exceptions import DuplicateSequenceNumberException
from catalog.content.models import Chapter, Volume
from catalog.content.repositories.base import SoftDeleteRepository


class VolumeRepository(SoftDeleteRepository):
    model = Volume

    async def number_taken(
        self, series_id: UUID, volume_number: int, exclude_id: Optional[UUID] = None
    ) -> bool:
        """Kiểm tra số volume đã được dùng bởi một volume còn sống của series chưa."""
        query = select(Volume.id).where(
            Volume.series_id == series_id,
            Volume.volume_number == volume_number,
            Volume.live(),
        )
        if exclude_id is not None:
            query = query.where(Volume.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def insert(self, data: Dict[str, Any]) -> Volume:
        try:
            return await super().insert(data)
        except IntegrityError as e:
            raise DuplicateSequenceNumberException(
                "volume", data["series_id"], data["volume_number"], "volume_number"
            ) from e

    async def apply_update(self, builder: UpdateBuilder, entity_id: UUID) -> bool:
        try:
            return await super().apply_update(builder, entity_id)
        except IntegrityError as e:
            number = dict(builder.assignments).get("volume_number")
            raise DuplicateSequenceNumberException(
                "volume", entity_id, number, "volume_number"
            ) from e

    async def refresh_chapter_count(self, volume_id: UUID) -> None:
        """Gán chapter_count bằng số chapter còn sống (đếm lại, không cộng dồn)."""
        live_count = select(func.count(Chapter.id)).where(
            Chapter.volume_id == volume_id, Chapter.live()
        )
        await self.db.execute(
            update(Volume)
            .where(Volume.id == volume_id)
            .values(chapter_count=live_count.scalar_subquery())
            .execution_options(synchronize_session=False)
        )

    async def soft_delete_cascade(
        self, volume_id: UUID, actor_id: Optional[UUID]
    ) -> None:
        values = Volume.soft_delete_values(actor_id, now())
        await self.db.execute(
            update(Chapter)
            .where(Chapter.volume_id == volume_id, Chapter.live())
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            update(Volume)
            .where(Volume.id == volume_id, Volume.live())
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    async def list_by_series(
        self, series_id: UUID, offset: int, limit: int
    ) -> Tuple[List[Volume], int]:
        conditions = (Volume.series_id == series_id, Volume.live())
        total = await self.db.scalar(select(func.count(Volume.id)).where(*conditions))
        result = await self.db.execute(
            select(Volume)
            .where(*conditions)
            .order_by(Volume.volume_number.asc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0
