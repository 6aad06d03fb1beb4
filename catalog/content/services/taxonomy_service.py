"""
Quản lý genre, creator và character: những bản ghi mà series tham chiếu qua
các bảng liên kết.
"""

from typing import Optional, Type

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import async_sessionmaker

from catalog.common.db.update_builder import UpdateBuilder
from catalog.common.utils.date_utils import now
from catalog.common.utils.identifiers import Identifier, parse_identifier
from catalog.common.utils.pagination import Page, PaginationParams, paginate
from catalog.common.utils.slug import generate_slug
from catalog.core.db import read_only, transaction
from catalog.core.exceptions import DuplicateNameException, NotFoundException
from catalog.content.repositories.taxonomy_repo import (
    CharacterRepository,
    CreatorRepository,
    GenreRepository,
    TaxonomyRepository,
)
from catalog.content.schemas.common import PartialUpdate
from catalog.content.schemas.taxonomy import (
    CharacterResponse,
    CreatorResponse,
    GenreResponse,
)
from catalog.logging import get_logger, log_repository_operation

logger = get_logger(__name__)


class TaxonomyService:
    """
    CRUD cho một loại taxonomy.

    Tên là duy nhất không phân biệt hoa thường; xóa một bản ghi đồng thời gỡ nó
    khỏi mọi series đang gắn.
    """

    repository_class: Type[TaxonomyRepository] = None
    response_model: Type[BaseModel] = None

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    @property
    def entity_type(self) -> str:
        return self.repository_class.entity_type

    def _extra_values(self, name: Optional[str]) -> dict:
        """Các cột suy ra từ tên (ví dụ slug của genre)."""
        return {}

    def _to_response(self, entity, series_count: int = 0) -> BaseModel:
        response = self.response_model.model_validate(entity)
        response.series_count = series_count
        return response

    @log_repository_operation("create", "taxonomy")
    async def create(self, request: BaseModel) -> BaseModel:
        """
        Raises:
            DuplicateNameException: Nếu tên đã tồn tại
        """
        async with transaction(self.session_factory) as db:
            repo = self.repository_class(db)
            if await repo.name_taken(request.name):
                raise DuplicateNameException(self.entity_type, request.name)
            created_at = now()
            entity = await repo.insert(
                {
                    **request.model_dump(),
                    **self._extra_values(request.name),
                    "created_at": created_at,
                    "updated_at": created_at,
                }
            )
        logger.info(f"Created {self.entity_type} {entity.id}")
        return self._to_response(entity)

    @log_repository_operation("read", "taxonomy")
    async def get(self, entity_id: Identifier) -> BaseModel:
        entity_id = parse_identifier(entity_id, f"{self.entity_type}_id")
        async with read_only(self.session_factory) as db:
            found = await self.repository_class(db).get_with_count(entity_id)
        if not found:
            raise NotFoundException(self.entity_type, entity_id)
        return self._to_response(*found)

    async def list(
        self,
        page: Optional[int] = 1,
        page_size: Optional[int] = None,
        search: Optional[str] = None,
    ) -> Page:
        pagination = PaginationParams(page, page_size)
        async with read_only(self.session_factory) as db:
            rows, total = await self.repository_class(db).list(
                pagination.offset, pagination.limit, search
            )
        items = [self._to_response(entity, count) for entity, count in rows]
        return paginate(items, total, pagination)

    @log_repository_operation("update", "taxonomy")
    async def update(
        self, entity_id: Identifier, request: PartialUpdate
    ) -> BaseModel:
        """
        Raises:
            NoFieldsProvidedException: Nếu request không có trường nào
            NotFoundException: Nếu bản ghi không tồn tại
            DuplicateNameException: Nếu tên mới trùng với bản ghi khác
        """
        entity_id = parse_identifier(entity_id, f"{self.entity_type}_id")
        builder = UpdateBuilder(self.repository_class.model, self.entity_type)
        builder.set_present(request)
        builder.ensure_changes(entity_id)
        if "name" in request.model_fields_set:
            for column, value in self._extra_values(request.name).items():
                builder.set(column, value)

        async with transaction(self.session_factory) as db:
            repo = self.repository_class(db)
            if not await repo.get(entity_id, for_update=True):
                raise NotFoundException(self.entity_type, entity_id)
            if "name" in request.model_fields_set and await repo.name_taken(
                request.name, exclude_id=entity_id
            ):
                raise DuplicateNameException(self.entity_type, request.name)
            await repo.apply_update(builder, entity_id)
            entity = await repo.reload(entity_id)
            found = await repo.get_with_count(entity_id)
        return self._to_response(entity, found[1])

    @log_repository_operation("delete", "taxonomy")
    async def delete(self, entity_id: Identifier) -> None:
        entity_id = parse_identifier(entity_id, f"{self.entity_type}_id")
        async with transaction(self.session_factory) as db:
            repo = self.repository_class(db)
            if not await repo.get(entity_id, for_update=True):
                raise NotFoundException(self.entity_type, entity_id)
            await repo.delete(entity_id)
        logger.info(f"Deleted {self.entity_type} {entity_id}")


class GenreService(TaxonomyService):
    repository_class = GenreRepository
    response_model = GenreResponse

    def _extra_values(self, name: Optional[str]) -> dict:
        return {"slug": generate_slug(name, max_length=120)}


class CreatorService(TaxonomyService):
    repository_class = CreatorRepository
    response_model = CreatorResponse


class CharacterService(TaxonomyService):
    repository_class = CharacterRepository
    response_model = CharacterResponse
