from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.common.db.update_builder import UpdateBuilder


def column_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Chuyển các giá trị Enum về giá trị nguyên thủy trước khi ghi DB."""
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in data.items()
    }


class SoftDeleteRepository:
    """
    Repository cơ sở cho các model có xóa mềm.

    Mọi truy vấn đọc mặc định chỉ thấy các bản ghi chưa bị xóa.
    """

    model = None

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, entity_id: UUID, for_update: bool = False) -> Optional[Any]:
        """
        Lấy bản ghi còn sống theo ID.

        Args:
            entity_id: ID của bản ghi
            for_update: Khóa dòng (SELECT ... FOR UPDATE) đến hết transaction

        Returns:
            Bản ghi hoặc None nếu không tồn tại / đã bị xóa
        """
        query = select(self.model).where(
            self.model.id == entity_id, self.model.live()
        )
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalars().first()

    async def insert(self, data: Dict[str, Any]):
        entity = self.model(**column_values(data))
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def apply_update(
        self, builder: UpdateBuilder, entity_id: UUID, require_changes: bool = True
    ) -> bool:
        """Thực thi UPDATE một phần; trả về False nếu không có dòng nào khớp."""
        result = await self.db.execute(
            builder.build(
                self.model.id == entity_id,
                self.model.live(),
                entity_id=entity_id,
                require_changes=require_changes,
            )
        )
        return result.rowcount > 0

    async def reload(self, entity_id: UUID):
        return await self.db.get(self.model, entity_id, populate_existing=True)

