from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from catalog.common.db.update_builder import UpdateBuilder
from catalog.common.utils.date_utils import now
from catalog.core.exceptions import DuplicateSequenceNumberException
from catalog.content.models import Chapter
from catalog.content.repositories.base import SoftDeleteRepository

# Các cột trả về khi không cần nội dung chương
SUMMARY_COLUMNS = [column for column in Chapter.__table__.c if column.key != "content"]


class ChapterRepository(SoftDeleteRepository):
    model = Chapter

    async def number_taken(
        self, volume_id: UUID, chapter_number: int, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = select(Chapter.id).where(
            Chapter.volume_id == volume_id,
            Chapter.chapter_number == chapter_number,
            Chapter.live(),
        )
        if exclude_id is not None:
            query = query.where(Chapter.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def insert(self, data: Dict[str, Any]) -> Chapter:
        try:
            return await super().insert(data)
        except IntegrityError as e:
            raise DuplicateSequenceNumberException(
                "chapter", data["volume_id"], data["chapter_number"], "chapter_number"
            ) from e

    async def apply_update(self, builder: UpdateBuilder, entity_id: UUID) -> bool:
        try:
            return await super().apply_update(builder, entity_id)
        except IntegrityError as e:
            number = dict(builder.assignments).get("chapter_number")
            raise DuplicateSequenceNumberException(
                "chapter", entity_id, number, "chapter_number"
            ) from e

    async def soft_delete(self, chapter_id: UUID, actor_id: Optional[UUID]) -> None:
        await self.db.execute(
            update(Chapter)
            .where(Chapter.id == chapter_id, Chapter.live())
            .values(**Chapter.soft_delete_values(actor_id, now()))
            .execution_options(synchronize_session=False)
        )

    async def get_summary(self, chapter_id: UUID) -> Optional[Dict[str, Any]]:
        """Lấy chương còn sống nhưng không tải content document."""
        result = await self.db.execute(
            select(*SUMMARY_COLUMNS).where(Chapter.id == chapter_id, Chapter.live())
        )
        row = result.mappings().first()
        return dict(row) if row else None

    async def list_by_volume(
        self, volume_id: UUID, offset: int, limit: int, include_content: bool = False
    ) -> Tuple[List[Dict[str, Any]], int]:
        """
        Danh sách chương còn sống của volume, sắp theo số chương.

        Returns:
            (các dòng dạng mapping, tổng số chương)
        """
        conditions = (Chapter.volume_id == volume_id, Chapter.live())
        total = await self.db.scalar(select(func.count(Chapter.id)).where(*conditions))
        columns = list(Chapter.__table__.c) if include_content else SUMMARY_COLUMNS
        result = await self.db.execute(
            select(*columns)
            .where(*conditions)
            .order_by(Chapter.chapter_number.asc())
            .offset(offset)
            .limit(limit)
        )
        return [dict(row) for row in result.mappings().all()], total or 0

    async def summaries_for_volumes(
        self, volume_ids: List[UUID]
    ) -> Dict[UUID, List[Dict[str, Any]]]:
        """Chương còn sống (không kèm content) của nhiều volume trong một truy vấn."""
        grouped: Dict[UUID, List[Dict[str, Any]]] = {vid: [] for vid in volume_ids}
        if not volume_ids:
            return grouped
        result = await self.db.execute(
            select(*SUMMARY_COLUMNS)
            .where(Chapter.volume_id.in_(volume_ids), Chapter.live())
            .order_by(Chapter.volume_id, Chapter.chapter_number.asc())
        )
        for row in result.mappings().all():
            grouped[row["volume_id"]].append(dict(row))
        return grouped
