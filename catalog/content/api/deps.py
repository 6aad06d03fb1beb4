from typing import Optional

from fastapi import Header

from catalog.common.utils.identifiers import parse_identifier
from catalog.core.db import get_read_session_factory, get_session_factory
from catalog.content.clients.identity import get_identity_lookup
from catalog.content.schemas.common import ActorContext
from catalog.content.services.content_store import ContentHierarchyStore
from catalog.content.services.series_query_service import SeriesQueryService
from catalog.content.services.taxonomy_service import (
    CharacterService,
    CreatorService,
    GenreService,
)


def get_content_store() -> ContentHierarchyStore:
    return ContentHierarchyStore(get_session_factory())


def get_genre_service() -> GenreService:
    return GenreService(get_session_factory())


def get_creator_service() -> CreatorService:
    return CreatorService(get_session_factory())


def get_character_service() -> CharacterService:
    return CharacterService(get_session_factory())


def get_query_service() -> SeriesQueryService:
    return SeriesQueryService(get_read_session_factory(), get_identity_lookup())


async def get_actor(
    x_user_id: str = Header(..., description="ID người dùng thực hiện thao tác"),
    x_tenant_id: Optional[str] = Header(None, description="ID tenant (nếu có)"),
) -> ActorContext:
    """
    Lấy actor từ header X-User-Id / X-Tenant-Id.

    Raises:
        InvalidIdentifierException: Nếu header không phải UUID hợp lệ
    """
    return ActorContext(
        user_id=parse_identifier(x_user_id, "X-User-Id"),
        tenant_id=(
            parse_identifier(x_tenant_id, "X-Tenant-Id") if x_tenant_id else None
        ),
    )
