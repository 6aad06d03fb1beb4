import logging
import sys
from typing import Any, Dict, Optional, Union

from catalog.core.config import get_settings
from catalog.logging.formatters import ColorizedFormatter, JSONFormatter
from catalog.logging.filters import SensitiveDataFilter

__all__ = ["get_logger", "setup_logging"]


def _build_formatter() -> logging.Formatter:
    if get_settings().LOG_FORMAT == "json":
        return JSONFormatter()
    return ColorizedFormatter()


def _build_console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())
    handler.addFilter(SensitiveDataFilter())
    return handler


def get_logger(
    name: str, extra: Optional[Dict[str, Any]] = None
) -> Union[logging.Logger, logging.LoggerAdapter]:
    """
    Lấy logger với cấu hình thích hợp.

    Args:
        name: Tên logger
        extra: Thông tin bổ sung cho tất cả log message

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    # Logger (hoặc root) đã có handler thì không gắn thêm
    if not logger.hasHandlers():
        level = get_settings().LOG_LEVEL.upper()
        logger.setLevel(getattr(logging, level, logging.INFO))
        logger.addHandler(_build_console_handler())

    if extra:
        return logging.LoggerAdapter(logger, extra)
    return logger


def setup_logging() -> None:
    """Thiết lập root logger cho ứng dụng."""
    settings = get_settings()
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Xóa handler cũ nếu có
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = _build_console_handler()
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    # SQL echo do DB_ECHO điều khiển, không theo LOG_LEVEL
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )
