import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
)

from catalog.core.constants import AccessLevel, OwnershipType, SeriesStatus
from catalog.core.db import Base, JSONDocument
from catalog.core.model_mixins import SoftDeleteMixin, TimestampMixin


class Series(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "series"
    __table_args__ = (
        Index("idx_series_status", "status"),
        Index("idx_series_primary_owner", "ownership_type", "primary_owner_id"),
        Index("idx_series_created_at", "created_at"),
        CheckConstraint(
            "NOT is_deleted OR deleted_at IS NOT NULL", name="ck_series_deleted_at"
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, index=True)
    cover_image = Column(String(500), nullable=True)
    # Tóm tắt đa ngôn ngữ, ví dụ {"en": "...", "vi": "..."}
    summary = Column(JSONDocument, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default=SeriesStatus.DRAFT.value)
    age_rating = Column(String(10), nullable=True)
    is_mature_content = Column(Boolean, nullable=False, default=False)
    content_warnings = Column(JSONDocument, nullable=False, default=list)

    # Visibility
    is_public = Column(Boolean, nullable=False, default=False)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_completed = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)

    # SEO
    meta_keywords = Column(JSONDocument, nullable=False, default=list)
    tags = Column(JSONDocument, nullable=False, default=list)

    # Monetization
    is_premium = Column(Boolean, nullable=False, default=False)
    purchase_price_coins = Column(Integer, nullable=True)
    rental_price_coins = Column(Integer, nullable=True)
    rental_duration_days = Column(Integer, nullable=True)

    # Ownership
    ownership_type = Column(
        String(20), nullable=False, default=OwnershipType.PERSONAL.value
    )
    primary_owner_id = Column(Uuid, nullable=True)
    original_creator_id = Column(Uuid, nullable=True)
    access_level = Column(String(20), nullable=False, default=AccessLevel.PUBLIC.value)

    # Aggregate counters
    view_count = Column(Integer, nullable=False, default=0)
    like_count = Column(Integer, nullable=False, default=0)
    bookmark_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
    rating_average = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)
    total_volumes = Column(Integer, nullable=False, default=0)
    total_chapters = Column(Integer, nullable=False, default=0)
    word_count = Column(Integer, nullable=False, default=0)


class SeriesGenre(Base):
    __tablename__ = "series_genres"

    series_id = Column(
        Uuid, ForeignKey("series.id", ondelete="CASCADE"), primary_key=True
    )
    genre_id = Column(Uuid, ForeignKey("genres.id"), primary_key=True, index=True)


class SeriesCreator(Base):
    __tablename__ = "series_creators"

    series_id = Column(
        Uuid, ForeignKey("series.id", ondelete="CASCADE"), primary_key=True
    )
    creator_id = Column(Uuid, ForeignKey("creators.id"), primary_key=True, index=True)
    role = Column(String(20), primary_key=True, comment="AUTHOR, ILLUSTRATOR, ...")


class SeriesCharacter(Base):
    __tablename__ = "series_characters"

    series_id = Column(
        Uuid, ForeignKey("series.id", ondelete="CASCADE"), primary_key=True
    )
    character_id = Column(
        Uuid, ForeignKey("characters.id"), primary_key=True, index=True
    )
