from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from catalog.core.constants import CreatorRole, OwnerKind
from catalog.content.schemas.series import SeriesResponse


class GenreRef(BaseModel):
    id: UUID
    name: str


class CreatorRef(BaseModel):
    id: UUID
    name: str
    role: CreatorRole


class CharacterRef(BaseModel):
    id: UUID
    name: str


class OwnerRef(BaseModel):
    """Identifier của owner/creator kèm loại (cá nhân hoặc tổ chức)."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    kind: OwnerKind


class OwnerSummary(BaseModel):
    id: UUID
    display_name: str
    kind: Optional[OwnerKind] = None


class SeriesStats(BaseModel):
    published_chapter_count: int = 0
    total_words: int = 0
    view_count: int = 0
    like_count: int = 0
    bookmark_count: int = 0
    comment_count: int = 0
    rating_average: float = 0.0
    rating_count: int = 0


class SeriesFullDetail(SeriesResponse):
    genres: List[GenreRef] = Field(default_factory=list)
    creators: List[CreatorRef] = Field(default_factory=list)
    characters: List[CharacterRef] = Field(default_factory=list)
    volume_count: int = 0
    chapter_count: int = 0
    latest_chapter_updated_at: Optional[datetime] = None
    primary_owner: Optional[OwnerSummary] = None
    original_creator: Optional[OwnerSummary] = None
    stats: Optional[SeriesStats] = None
