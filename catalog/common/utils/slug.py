"""
Slug generation utilities.
"""

from slugify import slugify

from catalog.core.constants import SLUG_MAX_LENGTH


def generate_slug(text: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """
    Tạo slug từ text input.

    Chữ thường ASCII, các đoạn ký tự không phải chữ/số được thay bằng một dấu gạch
    ngang, không có gạch ngang ở đầu hoặc cuối.

    Args:
        text: Văn bản đầu vào để tạo slug
        max_length: Độ dài tối đa của slug

    Returns:
        Chuỗi slug (lowercase, hyphenated)
    """
    return slugify(text or "", max_length=max_length, word_boundary=False)
