from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from catalog.content.api.deps import get_actor, get_content_store
from catalog.content.schemas.chapter import (
    ChapterPublish,
    ChapterResponse,
    ChapterUpdate,
)
from catalog.content.schemas.common import ActorContext
from catalog.content.services.content_store import ContentHierarchyStore

router = APIRouter()


@router.get("/{chapter_id}", response_model=ChapterResponse)
async def get_chapter(
    chapter_id: str,
    include_content: bool = Query(True, description="Kèm nội dung chương"),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    return await store.get_chapter(chapter_id, include_content=include_content)


@router.patch("/{chapter_id}", response_model=ChapterResponse)
async def update_chapter(
    chapter_id: str,
    payload: ChapterUpdate,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    """
    Cập nhật một phần chapter. Gửi content sẽ tính lại metrics và tăng version.
    """
    return await store.update_chapter(chapter_id, payload)


@router.delete("/{chapter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_chapter(
    chapter_id: str,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    await store.delete_chapter(chapter_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{chapter_id}/publish", response_model=ChapterResponse)
async def publish_chapter(
    chapter_id: str,
    payload: Optional[ChapterPublish] = Body(None),
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    published_at = payload.published_at if payload else None
    return await store.publish_chapter(chapter_id, at=published_at)


@router.post("/{chapter_id}/unpublish", response_model=ChapterResponse)
async def unpublish_chapter(
    chapter_id: str,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    return await store.unpublish_chapter(chapter_id)
