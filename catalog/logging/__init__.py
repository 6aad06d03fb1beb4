"""
Module logging của catalog.

- Formatters: định dạng log (JSON, màu sắc)
- Filters: che giấu thông tin nhạy cảm
- Setup: logger factory và cấu hình root logger
- Integration: decorator log cho các thao tác của store
"""

from catalog.logging.setup import get_logger, setup_logging
from catalog.logging.formatters import JSONFormatter, ColorizedFormatter
from catalog.logging.filters import SensitiveDataFilter
from catalog.logging.integration import log_repository_operation

__all__ = [
    "get_logger",
    "setup_logging",
    "JSONFormatter",
    "ColorizedFormatter",
    "SensitiveDataFilter",
    "log_repository_operation",
]
