from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from catalog.common.utils.pagination import Page
from catalog.content.api.deps import get_actor, get_character_service
from catalog.content.schemas.common import ActorContext
from catalog.content.schemas.taxonomy import (
    CharacterCreate,
    CharacterResponse,
    CharacterUpdate,
)
from catalog.content.services.taxonomy_service import CharacterService

router = APIRouter()


@router.get("", response_model=Page[CharacterResponse])
async def list_characters(
    page: int = Query(1, description="Số trang"),
    page_size: Optional[int] = Query(None, description="Số lượng mỗi trang"),
    search: Optional[str] = Query(None, description="Tìm theo tên"),
    service: CharacterService = Depends(get_character_service),
):
    return await service.list(page=page, page_size=page_size, search=search)


@router.post(
    "", response_model=CharacterResponse, status_code=status.HTTP_201_CREATED
)
async def create_character(
    payload: CharacterCreate,
    actor: ActorContext = Depends(get_actor),
    service: CharacterService = Depends(get_character_service),
):
    return await service.create(payload)


@router.get("/{character_id}", response_model=CharacterResponse)
async def get_character(
    character_id: str,
    service: CharacterService = Depends(get_character_service),
):
    return await service.get(character_id)


@router.patch("/{character_id}", response_model=CharacterResponse)
async def update_character(
    character_id: str,
    payload: CharacterUpdate,
    actor: ActorContext = Depends(get_actor),
    service: CharacterService = Depends(get_character_service),
):
    return await service.update(character_id, payload)


@router.delete("/{character_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_character(
    character_id: str,
    actor: ActorContext = Depends(get_actor),
    service: CharacterService = Depends(get_character_service),
):
    """
    Xóa hẳn nhân vật và gỡ khỏi các series đang gắn.
    """
    await service.delete(character_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
