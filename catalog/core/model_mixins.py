"""
Model mixins for SQLAlchemy models.

This module contains reusable mixins that can be applied to ORM models.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import Boolean, Column, DateTime, Integer, Uuid

from catalog.common.utils.date_utils import now


class TimestampMixin:
    """Mixin for timestamp functionality."""

    created_at = Column(DateTime(timezone=True), default=now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now, nullable=False)


class SoftDeleteMixin:
    """
    Mixin for soft delete functionality.

    ``is_deleted = true`` luôn đi kèm ``deleted_at`` khác null; các model dùng mixin
    này khai báo thêm CheckConstraint tương ứng.
    """

    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(Uuid, nullable=True)

    @classmethod
    def live(cls):
        """Predicate lọc các bản ghi chưa bị xóa mềm."""
        return cls.is_deleted.is_(False)

    @staticmethod
    def soft_delete_values(
        actor_id: Optional[UUID], at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Giá trị gán cho một câu lệnh UPDATE đánh dấu xóa mềm."""
        deleted_at = at or now()
        return {
            "is_deleted": True,
            "deleted_at": deleted_at,
            "deleted_by": actor_id,
            "updated_at": deleted_at,
        }


class VersioningMixin:
    """Append-only version counter, bumped once per content-affecting update."""

    version = Column(Integer, default=1, nullable=False)

    @classmethod
    def next_version(cls):
        return cls.version + 1
