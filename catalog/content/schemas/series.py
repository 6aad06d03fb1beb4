from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from catalog.core.constants import (
    AccessLevel,
    AgeRating,
    CreatorRole,
    OwnershipType,
    SeriesStatus,
)
from catalog.content.schemas.common import PartialUpdate

ASSOCIATION_FIELDS = frozenset({"genre_ids", "creators", "character_ids"})


class CreatorAssignment(BaseModel):
    creator_id: UUID
    role: CreatorRole = CreatorRole.AUTHOR


class SeriesCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    summary: Dict[str, Any] = Field(
        default_factory=dict, description="Tóm tắt theo ngôn ngữ, ví dụ {'en': '...'}"
    )
    cover_image: Optional[str] = Field(None, max_length=500)
    age_rating: Optional[AgeRating] = None
    is_mature_content: bool = False
    content_warnings: List[str] = Field(default_factory=list)
    is_public: bool = False
    is_featured: bool = False
    is_completed: bool = False
    meta_keywords: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_premium: bool = False
    purchase_price_coins: Optional[int] = Field(None, ge=0)
    rental_price_coins: Optional[int] = Field(None, ge=0)
    rental_duration_days: Optional[int] = Field(None, ge=1)
    ownership_type: OwnershipType = OwnershipType.PERSONAL
    access_level: AccessLevel = AccessLevel.PUBLIC
    genre_ids: List[UUID] = Field(default_factory=list)
    creators: List[CreatorAssignment] = Field(default_factory=list)
    character_ids: List[UUID] = Field(default_factory=list)


class SeriesUpdate(PartialUpdate):
    NON_NULLABLE = frozenset(
        {
            "title",
            "summary",
            "status",
            "is_mature_content",
            "content_warnings",
            "is_public",
            "is_featured",
            "is_completed",
            "meta_keywords",
            "tags",
            "is_premium",
            "access_level",
            "genre_ids",
            "creators",
            "character_ids",
        }
    )

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    summary: Optional[Dict[str, Any]] = None
    cover_image: Optional[str] = Field(None, max_length=500)
    status: Optional[SeriesStatus] = None
    age_rating: Optional[AgeRating] = None
    is_mature_content: Optional[bool] = None
    content_warnings: Optional[List[str]] = None
    is_public: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_completed: Optional[bool] = None
    meta_keywords: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    is_premium: Optional[bool] = None
    purchase_price_coins: Optional[int] = Field(None, ge=0)
    rental_price_coins: Optional[int] = Field(None, ge=0)
    rental_duration_days: Optional[int] = Field(None, ge=1)
    access_level: Optional[AccessLevel] = None
    genre_ids: Optional[List[UUID]] = None
    creators: Optional[List[CreatorAssignment]] = None
    character_ids: Optional[List[UUID]] = None


class SeriesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    cover_image: Optional[str] = None
    summary: Dict[str, Any] = Field(default_factory=dict)
    status: SeriesStatus
    age_rating: Optional[AgeRating] = None
    is_mature_content: bool
    content_warnings: List[str] = Field(default_factory=list)
    is_public: bool
    is_featured: bool
    is_completed: bool
    published_at: Optional[datetime] = None
    meta_keywords: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    is_premium: bool
    purchase_price_coins: Optional[int] = None
    rental_price_coins: Optional[int] = None
    rental_duration_days: Optional[int] = None
    ownership_type: OwnershipType
    primary_owner_id: Optional[UUID] = None
    original_creator_id: Optional[UUID] = None
    access_level: AccessLevel
    view_count: int = 0
    like_count: int = 0
    bookmark_count: int = 0
    comment_count: int = 0
    rating_average: float = 0.0
    rating_count: int = 0
    total_volumes: int = 0
    total_chapters: int = 0
    word_count: int = 0
    created_at: datetime
    updated_at: datetime
