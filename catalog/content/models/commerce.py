"""
Sổ giao dịch mua/thuê nội dung.

Các bảng này thuộc hệ thống thanh toán; catalog chỉ đọc để chặn thao tác xóa.
"""

import uuid

from sqlalchemy import Column, DateTime, Index, String, Uuid

from catalog.core.db import Base
from catalog.common.utils.date_utils import now


class ContentPurchase(Base):
    __tablename__ = "content_purchases"
    __table_args__ = (Index("idx_content_purchases_item", "item_type", "item_id"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    item_type = Column(String(20), nullable=False, comment="SERIES, VOLUME, CHAPTER")
    item_id = Column(Uuid, nullable=False)
    purchased_at = Column(DateTime(timezone=True), nullable=False, default=now)


class ContentRental(Base):
    __tablename__ = "content_rentals"
    __table_args__ = (Index("idx_content_rentals_item", "item_type", "item_id"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    item_type = Column(String(20), nullable=False, comment="SERIES, VOLUME, CHAPTER")
    item_id = Column(Uuid, nullable=False)
    rented_at = Column(DateTime(timezone=True), nullable=False, default=now)
    expires_at = Column(DateTime(timezone=True), nullable=True)
