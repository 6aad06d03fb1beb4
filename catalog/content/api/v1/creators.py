from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from catalog.common.utils.pagination import Page
from catalog.content.api.deps import get_actor, get_creator_service
from catalog.content.schemas.common import ActorContext
from catalog.content.schemas.taxonomy import (
    CreatorCreate,
    CreatorResponse,
    CreatorUpdate,
)
from catalog.content.services.taxonomy_service import CreatorService

router = APIRouter()


@router.get("", response_model=Page[CreatorResponse])
async def list_creators(
    page: int = Query(1, description="Số trang"),
    page_size: Optional[int] = Query(None, description="Số lượng mỗi trang"),
    search: Optional[str] = Query(None, description="Tìm theo tên"),
    service: CreatorService = Depends(get_creator_service),
):
    return await service.list(page=page, page_size=page_size, search=search)


@router.post("", response_model=CreatorResponse, status_code=status.HTTP_201_CREATED)
async def create_creator(
    payload: CreatorCreate,
    actor: ActorContext = Depends(get_actor),
    service: CreatorService = Depends(get_creator_service),
):
    return await service.create(payload)


@router.get("/{creator_id}", response_model=CreatorResponse)
async def get_creator(
    creator_id: str,
    service: CreatorService = Depends(get_creator_service),
):
    return await service.get(creator_id)


@router.patch("/{creator_id}", response_model=CreatorResponse)
async def update_creator(
    creator_id: str,
    payload: CreatorUpdate,
    actor: ActorContext = Depends(get_actor),
    service: CreatorService = Depends(get_creator_service),
):
    return await service.update(creator_id, payload)


@router.delete("/{creator_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_creator(
    creator_id: str,
    actor: ActorContext = Depends(get_actor),
    service: CreatorService = Depends(get_creator_service),
):
    await service.delete(creator_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
