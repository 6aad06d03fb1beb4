from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from catalog.common.utils.pagination import Page
from catalog.content.api.deps import get_actor, get_content_store, get_query_service
from catalog.content.schemas.common import ActorContext
from catalog.content.schemas.detail import SeriesFullDetail
from catalog.content.schemas.listing import SeriesListParams, SeriesSummary
from catalog.content.schemas.series import SeriesCreate, SeriesResponse, SeriesUpdate
from catalog.content.schemas.volume import VolumeCreate, VolumeResponse
from catalog.content.services.content_store import ContentHierarchyStore
from catalog.content.services.series_query_service import SeriesQueryService

router = APIRouter()


@router.post("", response_model=SeriesResponse, status_code=status.HTTP_201_CREATED)
async def create_series(
    payload: SeriesCreate,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    """
    Tạo series mới ở trạng thái DRAFT.
    """
    return await store.create_series(payload, actor)


@router.get("", response_model=Page[SeriesSummary])
async def list_series(
    params: Annotated[SeriesListParams, Query()],
    service: SeriesQueryService = Depends(get_query_service),
):
    """
    Liệt kê series theo bộ lọc, sắp xếp và phân trang.
    """
    return await service.list_series(params)


@router.get("/{series_id}", response_model=SeriesFullDetail)
async def get_series_detail(
    series_id: str,
    include_stats: bool = Query(False, description="Kèm thống kê nội dung"),
    service: SeriesQueryService = Depends(get_query_service),
):
    return await service.get_full_detail(series_id, include_stats=include_stats)


@router.patch("/{series_id}", response_model=SeriesResponse)
async def update_series(
    series_id: str,
    payload: SeriesUpdate,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    """
    Cập nhật một phần series. Chỉ các trường được gửi mới bị thay đổi.
    """
    return await store.update_series(series_id, payload)


@router.delete("/{series_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_series(
    series_id: str,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    """
    Xóa mềm series cùng toàn bộ volume và chapter của nó.
    """
    await store.delete_series(series_id, actor)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{series_id}/volumes",
    response_model=VolumeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_volume(
    series_id: str,
    payload: VolumeCreate,
    actor: ActorContext = Depends(get_actor),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    return await store.create_volume(series_id, payload)


@router.get("/{series_id}/volumes", response_model=Page[VolumeResponse])
async def list_volumes(
    series_id: str,
    page: int = Query(1, description="Số trang"),
    page_size: Optional[int] = Query(None, description="Số lượng mỗi trang"),
    include_chapters: bool = Query(False, description="Kèm danh sách chương"),
    store: ContentHierarchyStore = Depends(get_content_store),
):
    return await store.list_volumes(
        series_id,
        page=page,
        page_size=page_size,
        include_chapters=include_chapters,
    )
