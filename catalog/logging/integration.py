"""
Module tích hợp logging với tầng store/service.
"""

import functools
from typing import Optional
from uuid import UUID

from catalog.core.exceptions import CatalogException
from catalog.logging.setup import get_logger


def log_repository_operation(operation: str, resource_type: str):
    """
    Decorator để log các operation của store.

    Args:
        operation: Loại operation (create, read, update, delete, publish, ...)
        resource_type: Loại tài nguyên (series, volume, chapter, taxonomy)

    Returns:
        Decorator function
    """

    def decorator(func):
        logger = get_logger(f"{func.__module__}")

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            func_name = func.__qualname__
            target = _target_id(args, kwargs)
            extra = {
                "operation": operation,
                "resource_type": resource_type,
                "function": func_name,
            }
            if target is not None:
                extra["resource_id"] = target

            logger.debug(f"Store {operation} on {resource_type} started", extra=extra)
            try:
                result = await func(*args, **kwargs)
            except CatalogException as e:
                logger.warning(
                    f"Store {operation} on {resource_type} rejected: {e.detail}",
                    extra={**extra, "error_kind": e.kind.value},
                )
                raise
            except Exception as e:
                logger.error(
                    f"Store {operation} on {resource_type} failed: {str(e)}",
                    extra={**extra, "error_type": type(e).__name__},
                    exc_info=True,
                )
                raise

            result_id = getattr(result, "id", None)
            if result_id is not None:
                extra["resource_id"] = str(result_id)
            logger.info(f"Store {operation} on {resource_type} succeeded", extra=extra)
            return result

        return wrapper

    return decorator


def _target_id(args, kwargs) -> Optional[str]:
    # args[0] là self; id của node đích luôn là tham số đầu tiên
    for key in ("series_id", "volume_id", "chapter_id", "entity_id"):
        if key in kwargs:
            return str(kwargs[key])
    if len(args) > 1 and isinstance(args[1], (str, UUID)):
        return str(args[1])
    return None
