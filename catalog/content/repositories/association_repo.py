from typing import Iterable, List, Set, Tuple
from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.content.models import SeriesCharacter, SeriesCreator, SeriesGenre


class AssociationRepository:
    """Truy cập các bảng liên kết series-genre, series-creator, series-character."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def existing_ids(self, model, ids: Iterable[UUID]) -> Set[UUID]:
        """Trả về tập các ID thực sự tồn tại trong bảng của ``model`` (một truy vấn)."""
        wanted = list(ids)
        if not wanted:
            return set()
        result = await self.db.execute(select(model.id).where(model.id.in_(wanted)))
        return set(result.scalars().all())

    async def clear(self, link_model, series_id: UUID) -> None:
        await self.db.execute(
            delete(link_model).where(link_model.series_id == series_id)
        )

    async def add_genres(self, series_id: UUID, genre_ids: List[UUID]) -> None:
        if genre_ids:
            await self.db.execute(
                insert(SeriesGenre),
                [{"series_id": series_id, "genre_id": gid} for gid in genre_ids],
            )

    async def add_creators(
        self, series_id: UUID, creators: List[Tuple[UUID, str]]
    ) -> None:
        if creators:
            await self.db.execute(
                insert(SeriesCreator),
                [
                    {"series_id": series_id, "creator_id": cid, "role": role}
                    for cid, role in creators
                ],
            )

    async def add_characters(self, series_id: UUID, character_ids: List[UUID]) -> None:
        if character_ids:
            await self.db.execute(
                insert(SeriesCharacter),
                [
                    {"series_id": series_id, "character_id": cid}
                    for cid in character_ids
                ],
            )
