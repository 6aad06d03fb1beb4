from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from catalog.content.schemas.chapter import ChapterResponse
from catalog.content.schemas.common import PartialUpdate


class VolumeCreate(BaseModel):
    volume_number: int = Field(..., ge=0, description="Số thứ tự volume trong series")
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    cover_image: Optional[str] = Field(None, max_length=500)
    is_available: bool = True
    price_coins: Optional[int] = Field(None, ge=0)
    rental_price_coins: Optional[int] = Field(None, ge=0)
    rental_duration_days: Optional[int] = Field(None, ge=1)


class VolumeUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"volume_number", "is_available"})

    volume_number: Optional[int] = Field(None, ge=0)
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    cover_image: Optional[str] = Field(None, max_length=500)
    is_available: Optional[bool] = None
    price_coins: Optional[int] = Field(None, ge=0)
    rental_price_coins: Optional[int] = Field(None, ge=0)
    rental_duration_days: Optional[int] = Field(None, ge=1)


class VolumeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    series_id: UUID
    volume_number: int
    title: Optional[str] = None
    description: Optional[str] = None
    cover_image: Optional[str] = None
    is_available: bool
    price_coins: Optional[int] = None
    rental_price_coins: Optional[int] = None
    rental_duration_days: Optional[int] = None
    chapter_count: int
    created_at: datetime
    updated_at: datetime
    # Chỉ có khi liệt kê với include_chapters (không kèm content)
    chapters: Optional[List[ChapterResponse]] = None
