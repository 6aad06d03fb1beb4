from typing import Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog.core.config import get_settings
from catalog.core.exceptions import CatalogException, ErrorKind
from catalog.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_SEQUENCE_NUMBER: status.HTTP_409_CONFLICT,
    ErrorKind.HAS_PURCHASES: status.HTTP_409_CONFLICT,
    ErrorKind.ASSOCIATION_NOT_FOUND: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorKind.NO_FIELDS_PROVIDED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_IDENTIFIER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_NAME: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def catalog_exception_handler(
    request: Request, exc: CatalogException
) -> JSONResponse:
    """
    Chuyển CatalogException thành response JSON; status code tra theo kind.
    """
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    log_data = {
        "path": request.url.path,
        "method": request.method,
        "error_kind": exc.kind.value,
    }
    if status_code >= 500:
        logger.error(f"Catalog error: {exc.detail}", extra=log_data)
    else:
        logger.info(f"HTTP {status_code}: {exc.detail}", extra=log_data)

    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Xử lý lỗi validation với chi tiết về các trường bị lỗi.
    """
    errors = [
        {
            "field": ".".join(str(loc) for loc in error.get("loc", ())) or None,
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    log_data = {
        "path": request.url.path,
        "method": request.method,
        "validation_errors": errors,
    }
    settings = get_settings()
    if settings.DEBUG or settings.APP_ENV != "production":
        log_data["query_params"] = dict(request.query_params)
    logger.info(f"Validation error on {request.url.path}", extra=log_data)

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "code": "validation_error",
            "errors": errors,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogException, catalog_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
