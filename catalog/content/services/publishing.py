"""
Publishing state machine của chapter.

Trạng thái được suy ra từ các cột is_draft, is_public, published_at và
scheduled_publish_at; chuyển trạng thái được biểu diễn bằng danh sách phép gán
để store áp dụng qua UpdateBuilder.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional, Tuple

from catalog.common.utils.date_utils import ensure_utc, now


class ChapterState(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLIC = "public"
    UNPUBLISHED = "unpublished"


def is_published(
    is_draft: bool, is_public: bool, published_at: Optional[datetime]
) -> bool:
    return not is_draft and is_public and published_at is not None


def derive_state(chapter, at: Optional[datetime] = None) -> ChapterState:
    """
    Suy ra trạng thái hiện tại của chapter.

    ``scheduled_publish_at`` chỉ mang tính tham khảo: không có tiến trình nào tự
    động chuyển Scheduled sang Public.
    """
    if chapter.is_draft:
        return ChapterState.DRAFT
    if is_published(chapter.is_draft, chapter.is_public, chapter.published_at):
        return ChapterState.PUBLIC
    scheduled = chapter.scheduled_publish_at
    if not chapter.is_public and scheduled is not None:
        if ensure_utc(scheduled) > ensure_utc(at or now()):
            return ChapterState.SCHEDULED
    return ChapterState.UNPUBLISHED


def initial_published_at(
    is_draft: bool, is_public: bool, requested: Optional[datetime] = None
) -> Optional[datetime]:
    """
    published_at khi tạo chapter: chỉ có giá trị nếu chapter vừa không phải bản
    nháp vừa công khai, mặc định là thời điểm hiện tại.
    """
    if is_draft or not is_public:
        return None
    return requested or now()


def publish_assignments(at: Optional[datetime] = None) -> List[Tuple[str, Any]]:
    """Chuyển sang Public; publish lại chỉ ghi đè published_at."""
    return [
        ("is_public", True),
        ("is_draft", False),
        ("published_at", at or now()),
    ]


def unpublish_assignments() -> List[Tuple[str, Any]]:
    """Chuyển sang Unpublished; giữ nguyên is_draft."""
    return [
        ("is_public", False),
        ("published_at", None),
    ]
