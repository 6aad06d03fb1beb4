import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Uuid,
    text,
)

from catalog.core.db import Base, JSONDocument
from catalog.core.model_mixins import SoftDeleteMixin, TimestampMixin, VersioningMixin


class Chapter(Base, TimestampMixin, SoftDeleteMixin, VersioningMixin):
    __tablename__ = "chapters"
    __table_args__ = (
        Index(
            "uq_chapters_volume_number_live",
            "volume_id",
            "chapter_number",
            unique=True,
            postgresql_where=text("NOT is_deleted"),
            sqlite_where=text("NOT is_deleted"),
        ),
        Index("idx_chapters_published", "is_public", "is_draft", "published_at"),
        CheckConstraint(
            "NOT is_deleted OR deleted_at IS NOT NULL", name="ck_chapters_deleted_at"
        ),
        CheckConstraint("version >= 1", name="ck_chapters_version"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    volume_id = Column(
        Uuid, ForeignKey("volumes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    chapter_number = Column(Integer, nullable=False, comment="Số thứ tự chương")
    title = Column(String(255), nullable=True)
    content = Column(JSONDocument, nullable=True)

    # Publishing
    is_draft = Column(Boolean, nullable=False, default=True)
    is_public = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    scheduled_publish_at = Column(DateTime(timezone=True), nullable=True)

    # Derived metrics
    word_count = Column(Integer, nullable=False, default=0)
    character_count = Column(Integer, nullable=False, default=0)
    reading_time_minutes = Column(Integer, nullable=False, default=0)

    content_warnings = Column(JSONDocument, nullable=False, default=list)
    has_mature_content = Column(Boolean, nullable=False, default=False)
    price_coins = Column(Integer, nullable=True)

    # Engagement
    view_count = Column(Integer, nullable=False, default=0)
    like_count = Column(Integer, nullable=False, default=0)
    comment_count = Column(Integer, nullable=False, default=0)
