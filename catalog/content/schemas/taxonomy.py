"""
Schemas cho genre, creator và character.
"""

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from catalog.content.schemas.common import PartialUpdate

# Chữ, số, khoảng trắng và - _ & /
GENRE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9 _&/\-]+$")
IMAGE_URL_PATTERN = r"^https?://\S+$"


def _clean_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    return value


def _clean_genre_name(value: Optional[str]) -> Optional[str]:
    value = _clean_name(value)
    if value is None:
        return value
    if len(value) < 2:
        raise ValueError("Genre name must be at least 2 characters long")
    if not GENRE_NAME_PATTERN.match(value):
        raise ValueError("Genre name contains invalid characters")
    return value


class GenreCreate(BaseModel):
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value):
        return _clean_genre_name(value)


class GenreUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"name"})

    name: Optional[str] = Field(None, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value):
        return _clean_genre_name(value)


class GenreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: Optional[str] = None
    series_count: int = 0
    created_at: datetime
    updated_at: datetime


class CreatorCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value):
        return _clean_name(value)


class CreatorUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"name"})

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value):
        return _clean_name(value)


class CreatorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    series_count: int = 0
    created_at: datetime
    updated_at: datetime


class CharacterCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(
        None, max_length=1000, pattern=IMAGE_URL_PATTERN
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value):
        return _clean_name(value)


class CharacterUpdate(PartialUpdate):
    NON_NULLABLE = frozenset({"name"})

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    image_url: Optional[str] = Field(
        None, max_length=1000, pattern=IMAGE_URL_PATTERN
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value):
        return _clean_name(value)


class CharacterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    series_count: int = 0
    created_at: datetime
    updated_at: datetime
