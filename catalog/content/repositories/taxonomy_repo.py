from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, distinct, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.common.db.update_builder import UpdateBuilder
from catalog.common.utils.text import like_pattern
from catalog.core.exceptions import DuplicateNameException
from catalog.content.models import (
    Character,
    Creator,
    Genre,
    Series,
    SeriesCharacter,
    SeriesCreator,
    SeriesGenre,
)


class TaxonomyRepository:
    """
    Repository chung cho genre, creator và character.

    Các bản ghi này không có xóa mềm; xóa là xóa hẳn cùng các liên kết với series.
    """

    model = None
    link_model = None
    link_column = None
    entity_type = None

    def __init__(self, db: AsyncSession):
        self.db = db

    def series_count(self):
        """Số series còn sống đang gắn với bản ghi (subquery tương quan)."""
        link_column = getattr(self.link_model, self.link_column)
        return (
            select(func.count(distinct(self.link_model.series_id)))
            .join(Series, Series.id == self.link_model.series_id)
            .where(link_column == self.model.id, Series.live())
            .correlate(self.model)
            .scalar_subquery()
        )

    async def get(
        self, entity_id: UUID, for_update: bool = False
    ) -> Optional[Any]:
        query = select(self.model).where(self.model.id == entity_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        return result.scalars().first()

    async def get_with_count(self, entity_id: UUID) -> Optional[Tuple[Any, int]]:
        result = await self.db.execute(
            select(self.model, self.series_count()).where(self.model.id == entity_id)
        )
        row = result.first()
        return (row[0], row[1] or 0) if row else None

    async def name_taken(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        """So khớp tên không phân biệt hoa thường."""
        query = select(self.model.id).where(
            func.lower(self.model.name) == name.lower()
        )
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def insert(self, data: Dict[str, Any]):
        entity = self.model(**data)
        self.db.add(entity)
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise DuplicateNameException(self.entity_type, data["name"]) from e
        await self.db.refresh(entity)
        return entity

    async def apply_update(self, builder: UpdateBuilder, entity_id: UUID) -> None:
        try:
            await self.db.execute(
                builder.build(self.model.id == entity_id, entity_id=entity_id)
            )
        except IntegrityError as e:
            name = dict(builder.assignments).get("name")
            raise DuplicateNameException(self.entity_type, name) from e

    async def reload(self, entity_id: UUID):
        return await self.db.get(self.model, entity_id, populate_existing=True)

    async def delete(self, entity_id: UUID) -> None:
        """Gỡ mọi liên kết series rồi xóa bản ghi."""
        link_column = getattr(self.link_model, self.link_column)
        await self.db.execute(delete(self.link_model).where(link_column == entity_id))
        await self.db.execute(delete(self.model).where(self.model.id == entity_id))

    async def list(
        self, offset: int, limit: int, search: Optional[str] = None
    ) -> Tuple[List[Tuple[Any, int]], int]:
        """
        Danh sách sắp theo tên, có tìm kiếm theo tên.

        Returns:
            ([(bản ghi, số series)], tổng số)
        """
        conditions = []
        if search:
            pattern = like_pattern(search.strip())
            conditions.append(self.model.name.ilike(pattern, escape="\\"))
        total = await self.db.scalar(
            select(func.count(self.model.id)).where(*conditions)
        )
        result = await self.db.execute(
            select(self.model, self.series_count())
            .where(*conditions)
            .order_by(self.model.name.asc(), self.model.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return [(row[0], row[1] or 0) for row in result.all()], total or 0


class GenreRepository(TaxonomyRepository):
    model = Genre
    link_model = SeriesGenre
    link_column = "genre_id"
    entity_type = "genre"


class CreatorRepository(TaxonomyRepository):
    model = Creator
    link_model = SeriesCreator
    link_column = "creator_id"
    entity_type = "creator"


class CharacterRepository(TaxonomyRepository):
    model = Character
    link_model = SeriesCharacter
    link_column = "character_id"
    entity_type = "character"
