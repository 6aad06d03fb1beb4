"""
Utilities for pagination.
"""

import math
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from catalog.core.config import get_settings

T = TypeVar("T")


class PaginationParams:
    """
    Tham số phân trang đã được chuẩn hóa.

    Giá trị ngoài phạm vi được kẹp lại thay vì báo lỗi: page < 1 thành 1,
    page_size < 1 thành giá trị mặc định, page_size vượt giới hạn thành giới hạn.
    """

    def __init__(self, page: Optional[int] = 1, page_size: Optional[int] = None):
        settings = get_settings()
        self.page = page if page and page > 0 else 1
        if not page_size or page_size < 1:
            page_size = settings.DEFAULT_PAGE_SIZE
        self.page_size = min(page_size, settings.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        """Số lượng items bỏ qua."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    def __repr__(self) -> str:
        return f"PaginationParams(page={self.page}, page_size={self.page_size})"


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> "PaginationMeta":
        """
        Tính metadata phân trang.

        Args:
            page: Số trang hiện tại
            page_size: Số lượng items trên mỗi trang
            total: Tổng số items khớp điều kiện lọc

        Returns:
            PaginationMeta
        """
        total_pages = math.ceil(total / page_size) if page_size > 0 else 0
        return cls(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


class Page(BaseModel, Generic[T]):
    """Một trang kết quả: danh sách items và metadata phân trang."""

    items: List[T]
    pagination: PaginationMeta


def paginate(items: List[T], total: int, params: PaginationParams) -> Page[T]:
    return Page(
        items=items,
        pagination=PaginationMeta.build(params.page, params.page_size, total),
    )
