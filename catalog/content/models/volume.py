import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    text,
)

from catalog.core.db import Base
from catalog.core.model_mixins import SoftDeleteMixin, TimestampMixin


class Volume(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "volumes"
    __table_args__ = (
        # Số volume chỉ cần duy nhất trong các volume chưa bị xóa của cùng series
        Index(
            "uq_volumes_series_number_live",
            "series_id",
            "volume_number",
            unique=True,
            postgresql_where=text("NOT is_deleted"),
            sqlite_where=text("NOT is_deleted"),
        ),
        CheckConstraint(
            "NOT is_deleted OR deleted_at IS NOT NULL", name="ck_volumes_deleted_at"
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    series_id = Column(
        Uuid, ForeignKey("series.id", ondelete="CASCADE"), nullable=False, index=True
    )
    volume_number = Column(Integer, nullable=False, comment="Số thứ tự volume")
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    cover_image = Column(String(500), nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    price_coins = Column(Integer, nullable=True)
    rental_price_coins = Column(Integer, nullable=True)
    rental_duration_days = Column(Integer, nullable=True)
    chapter_count = Column(Integer, nullable=False, default=0)
