import logging
import re
from typing import List, Optional


class SensitiveDataFilter(logging.Filter):
    """
    Filter để che giấu thông tin nhạy cảm trong log messages.

    Các giá trị dạng ``password=...``, ``token: ...`` hoặc ``"secret": "..."`` được
    thay bằng chuỗi thay thế.
    """

    def __init__(
        self,
        name: str = "",
        sensitive_fields: Optional[List[str]] = None,
        replacement: str = "***REDACTED***",
    ):
        super().__init__(name)
        self.sensitive_fields = sensitive_fields or [
            "password", "secret", "token", "api_key", "authorization",
        ]
        self.replacement = replacement
        fields = "|".join(re.escape(field) for field in self.sensitive_fields)
        self._pattern = re.compile(
            rf"""(["']?(?:{fields})["']?\s*[=:]\s*)(["'][^"']*["']|[^\s,;]+)""",
            re.IGNORECASE,
        )

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "original_msg"):
            record.original_msg = record.msg
        if isinstance(record.msg, str):
            record.msg = self._pattern.sub(
                lambda m: f"{m.group(1)}{self.replacement}", record.msg
            )
        return True
