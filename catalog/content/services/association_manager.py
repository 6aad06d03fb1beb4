from typing import List, NamedTuple, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.exceptions import AssociationNotFoundException
from catalog.content.models import (
    Character,
    Creator,
    Genre,
    SeriesCharacter,
    SeriesCreator,
    SeriesGenre,
)
from catalog.content.repositories.association_repo import AssociationRepository
from catalog.content.schemas.series import CreatorAssignment


class ValidatedAssociations(NamedTuple):
    """Các liên kết đã loại trùng và kiểm tra tồn tại; None nghĩa là không đổi."""

    genre_ids: Optional[List[UUID]] = None
    creators: Optional[List[Tuple[UUID, str]]] = None
    character_ids: Optional[List[UUID]] = None


def _unique(values) -> list:
    return list(dict.fromkeys(values))


class AssociationManager:
    """
    Kiểm tra và gắn series với genres, creators (kèm vai trò) và characters.
    """

    def __init__(self, db: AsyncSession):
        self.repo = AssociationRepository(db)

    async def _ensure_exist(
        self, model, association_type: str, ids: List[UUID]
    ) -> None:
        # Một truy vấn cho mỗi loại liên kết
        found = await self.repo.existing_ids(model, ids)
        if len(found) != len(ids):
            raise AssociationNotFoundException(association_type, set(ids) - found)

    async def validate_genres(self, genre_ids: Sequence[UUID]) -> List[UUID]:
        ids = _unique(genre_ids)
        await self._ensure_exist(Genre, "genre", ids)
        return ids

    async def validate_creators(
        self, creators: Sequence[CreatorAssignment]
    ) -> List[Tuple[UUID, str]]:
        pairs = _unique((c.creator_id, c.role.value) for c in creators)
        await self._ensure_exist(Creator, "creator", _unique(cid for cid, _ in pairs))
        return pairs

    async def validate_characters(self, character_ids: Sequence[UUID]) -> List[UUID]:
        ids = _unique(character_ids)
        await self._ensure_exist(Character, "character", ids)
        return ids

    async def validate(
        self,
        genre_ids: Optional[Sequence[UUID]] = None,
        creators: Optional[Sequence[CreatorAssignment]] = None,
        character_ids: Optional[Sequence[UUID]] = None,
    ) -> ValidatedAssociations:
        """
        Kiểm tra toàn bộ các ID được tham chiếu.

        Raises:
            AssociationNotFoundException: Nếu có ID không tồn tại, kèm tên loại liên kết
        """
        return ValidatedAssociations(
            genre_ids=(
                None if genre_ids is None else await self.validate_genres(genre_ids)
            ),
            creators=(
                None if creators is None else await self.validate_creators(creators)
            ),
            character_ids=(
                None
                if character_ids is None
                else await self.validate_characters(character_ids)
            ),
        )

    async def link(self, series_id: UUID, associations: ValidatedAssociations) -> None:
        """Chèn các liên kết đã kiểm tra (nửa "insert" khi tạo series)."""
        if associations.genre_ids is not None:
            await self.repo.add_genres(series_id, associations.genre_ids)
        if associations.creators is not None:
            await self.repo.add_creators(series_id, associations.creators)
        if associations.character_ids is not None:
            await self.repo.add_characters(series_id, associations.character_ids)

    async def replace(
        self,
        series_id: UUID,
        genre_ids: Optional[Sequence[UUID]] = None,
        creators: Optional[Sequence[CreatorAssignment]] = None,
        character_ids: Optional[Sequence[UUID]] = None,
    ) -> None:
        """
        Thay thế toàn bộ (không diff) từng loại liên kết được truyền vào.

        Loại liên kết là None được giữ nguyên. Phải chạy trong cùng transaction với
        thao tác cập nhật series để lỗi kiểm tra hủy mọi thay đổi.
        """
        if genre_ids is not None:
            await self.repo.clear(SeriesGenre, series_id)
            await self.repo.add_genres(series_id, await self.validate_genres(genre_ids))
        if creators is not None:
            await self.repo.clear(SeriesCreator, series_id)
            await self.repo.add_creators(
                series_id, await self.validate_creators(creators)
            )
        if character_ids is not None:
            await self.repo.clear(SeriesCharacter, series_id)
            await self.repo.add_characters(
                series_id, await self.validate_characters(character_ids)
            )
