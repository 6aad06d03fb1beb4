from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from catalog.core.constants import (
    SERIES_SORT_FIELDS,
    AgeRating,
    OwnershipType,
    SeriesStatus,
    SortOrder,
)

SeriesSortField = Literal[SERIES_SORT_FIELDS]


class SeriesListParams(BaseModel):
    """
    Tham số liệt kê series: phân trang, sắp xếp và bộ lọc tùy chọn.

    Mọi bộ lọc đều tùy chọn; bộ lọc ``None`` không sinh điều kiện nào.
    """

    model_config = ConfigDict(extra="forbid")

    page: int = 1
    page_size: Optional[int] = None
    sort_by: SeriesSortField = "created_at"
    sort_order: SortOrder = SortOrder.DESC

    status: Optional[SeriesStatus] = None
    age_rating: Optional[AgeRating] = None
    is_mature_content: Optional[bool] = None
    is_public: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_completed: Optional[bool] = None
    is_premium: Optional[bool] = None
    ownership_type: Optional[OwnershipType] = None
    primary_owner_id: Optional[UUID] = None
    original_creator_id: Optional[UUID] = None
    creator_id: Optional[UUID] = None
    search: Optional[str] = Field(None, max_length=200)
    genre_ids: Optional[List[UUID]] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None
    published_after: Optional[datetime] = None
    published_before: Optional[datetime] = None
    latest_chapter_updated_after: Optional[datetime] = None
    latest_chapter_updated_before: Optional[datetime] = None
    min_view_count: Optional[int] = Field(None, ge=0)
    max_view_count: Optional[int] = Field(None, ge=0)


class SeriesSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    cover_image: Optional[str] = None
    summary: Dict[str, Any] = Field(default_factory=dict)
    status: SeriesStatus
    age_rating: Optional[AgeRating] = None
    is_mature_content: bool
    is_public: bool
    is_featured: bool
    is_completed: bool
    is_premium: bool
    ownership_type: OwnershipType
    primary_owner_id: Optional[UUID] = None
    original_creator_id: Optional[UUID] = None
    view_count: int = 0
    rating_average: float = 0.0
    total_volumes: int = 0
    total_chapters: int = 0
    published_at: Optional[datetime] = None
    latest_chapter_updated_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
