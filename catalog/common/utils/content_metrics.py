"""
Derived metrics of a chapter content document.
"""

import json
import math
from typing import Any, NamedTuple

from catalog.core.constants import READING_WORDS_PER_MINUTE


class ContentMetrics(NamedTuple):
    word_count: int
    character_count: int
    reading_time_minutes: int


EMPTY_METRICS = ContentMetrics(0, 0, 0)


def serialize_content(content: Any) -> str:
    """Dạng serialize gọn (compact JSON, giữ nguyên Unicode) của content document."""
    return json.dumps(content, ensure_ascii=False, separators=(",", ":"))


def reading_time_minutes(word_count: int) -> int:
    if word_count <= 0:
        return 0
    return math.ceil(word_count / READING_WORDS_PER_MINUTE)


def calculate_content_metrics(content: Any) -> ContentMetrics:
    """
    Tính word count, character count và thời gian đọc ước tính.

    Đếm trên chuỗi JSON đã serialize chứ không duyệt từng block nội dung: số ký tự
    là số code point Unicode, số từ là số token phân tách bởi khoảng trắng.

    Args:
        content: Content document (None nếu không có)

    Returns:
        ContentMetrics
    """
    if content is None:
        return EMPTY_METRICS

    serialized = serialize_content(content)
    word_count = len(serialized.split())
    return ContentMetrics(
        word_count=word_count,
        character_count=len(serialized),
        reading_time_minutes=reading_time_minutes(word_count),
    )
