from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from catalog.common.utils.pagination import Page
from catalog.content.api.deps import get_actor, get_genre_service
from catalog.content.schemas.common import ActorContext
from catalog.content.schemas.taxonomy import GenreCreate, GenreResponse, GenreUpdate
from catalog.content.services.taxonomy_service import GenreService

router = APIRouter()


@router.get("", response_model=Page[GenreResponse])
async def list_genres(
    page: int = Query(1, description="Số trang"),
    page_size: Optional[int] = Query(None, description="Số lượng mỗi trang"),
    search: Optional[str] = Query(None, description="Tìm theo tên"),
    service: GenreService = Depends(get_genre_service),
):
    return await service.list(page=page, page_size=page_size, search=search)


@router.post("", response_model=GenreResponse, status_code=status.HTTP_201_CREATED)
async def create_genre(
    payload: GenreCreate,
    actor: ActorContext = Depends(get_actor),
    service: GenreService = Depends(get_genre_service),
):
    """
    Tạo genre mới; slug được sinh từ tên.
    """
    return await service.create(payload)


@router.get("/{genre_id}", response_model=GenreResponse)
async def get_genre(
    genre_id: str,
    service: GenreService = Depends(get_genre_service),
):
    return await service.get(genre_id)


@router.patch("/{genre_id}", response_model=GenreResponse)
async def update_genre(
    genre_id: str,
    payload: GenreUpdate,
    actor: ActorContext = Depends(get_actor),
    service: GenreService = Depends(get_genre_service),
):
    return await service.update(genre_id, payload)


@router.delete("/{genre_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_genre(
    genre_id: str,
    actor: ActorContext = Depends(get_actor),
    service: GenreService = Depends(get_genre_service),
):
    """
    Xóa hẳn genre và gỡ nó khỏi các series đang gắn.
    """
    await service.delete(genre_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
