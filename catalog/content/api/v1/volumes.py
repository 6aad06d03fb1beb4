from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from catalog.common.utils.pagination import Page
from catalog.content.api.deps import get_actor, get_content_store
from catalog.content.schemas.chapter import ChapterCreate, ChapterResponse
from catalog.content.schemas.common import ActorContext
from catalog.content.schemas.volume import VolumeResponse, VolumeUpdate
from catalog.content.services.content_store import ContentHierarchyStore

router = APIRouter()


@router.get("/{volume_id}", response_model=VolumeResponse)
async def get_volume(
    volume_id: str,
    store: ContentHierarchyStore = Depends(get_content_store),
):
    return await store.get_volume(volume_id)


@router.patch("/{volume_id}", response_model=VolumeResponse)
async def update_volume(
    volume_id: str,
    payload: VolumeUpdate,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    return await store.update_volume(volume_id, payload)


@router.delete("/{volume_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_volume(
    volume_id: str,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    """
    Xóa mềm volume và các chapter của nó; bị chặn nếu có giao dịch mua/thuê.
    """
    await store.delete_volume(volume_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{volume_id}/chapters",
    response_model=ChapterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_chapter(
    volume_id: str,
    payload: ChapterCreate,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    return await store.create_chapter(volume_id, payload)


@router.get("/{volume_id}/chapters", response_model=Page[ChapterResponse])
async def list_chapters(
    volume_id: str,
    page: int = Query(1, description="Số trang"),
    page_size: Optional[int] = Query(None, description="Số lượng mỗi trang"),
    include_content: bool = Query(False, description="Kèm nội dung chương"),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    return await store.list_chapters(
        volume_id, page=page, page_size=page_size, include_content=include_content
    )
