from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from catalog.content.schemas.common import PartialUpdate


class ChapterCreate(BaseModel):
    chapter_number: int = Field(..., ge=0, description="Số thứ tự chương trong volume")
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[Any] = Field(None, description="Content document (JSON)")
    is_draft: bool = True
    is_public: bool = False
    published_at: Optional[datetime] = None
    scheduled_publish_at: Optional[datetime] = None
    content_warnings: List[str] = Field(default_factory=list)
    has_mature_content: bool = False
    price_coins: Optional[int] = Field(None, ge=0)


class ChapterUpdate(PartialUpdate):
    """
    Cập nhật chương. Trạng thái công khai chỉ thay đổi qua publish/unpublish.
    """

    NON_NULLABLE = frozenset(
        {"chapter_number", "content_warnings", "has_mature_content", "is_draft"}
    )

    chapter_number: Optional[int] = Field(None, ge=0)
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[Any] = None
    content_warnings: Optional[List[str]] = None
    has_mature_content: Optional[bool] = None
    price_coins: Optional[int] = Field(None, ge=0)
    is_draft: Optional[bool] = None
    scheduled_publish_at: Optional[datetime] = None


class ChapterPublish(BaseModel):
    published_at: Optional[datetime] = None


class ChapterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    volume_id: UUID
    chapter_number: int
    title: Optional[str] = None
    content: Optional[Any] = None
    is_draft: bool
    is_public: bool
    published_at: Optional[datetime] = None
    scheduled_publish_at: Optional[datetime] = None
    version: int
    word_count: int
    character_count: int
    reading_time_minutes: int
    content_warnings: List[str] = Field(default_factory=list)
    has_mature_content: bool
    price_coins: Optional[int] = None
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    created_at: datetime
    updated_at: datetime
