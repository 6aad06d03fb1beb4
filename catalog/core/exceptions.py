"""
Error kinds and exception hierarchy of the catalog core.

Callers branch on ``CatalogException.kind``; message text is for humans only.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE_SEQUENCE_NUMBER = "duplicate_sequence_number"
    ASSOCIATION_NOT_FOUND = "association_not_found"
    HAS_PURCHASES = "has_purchases"
    NO_FIELDS_PROVIDED = "no_fields_provided"
    INVALID_IDENTIFIER = "invalid_identifier"
    DUPLICATE_NAME = "duplicate_name"
    INTERNAL = "internal"


class CatalogException(Exception):
    """
    Base exception cho mọi lỗi nghiệp vụ của catalog.

    Args:
        detail: Thông điệp mô tả lỗi
        entity_type: Loại thực thể liên quan (series, volume, chapter, genre, ...)
        entity_id: ID của thực thể liên quan
        field: Trường gây lỗi (nếu có)
        params: Dữ liệu bổ sung để caller hiển thị thông điệp
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_detail: str = "Catalog error"

    def __init__(
        self,
        detail: Optional[str] = None,
        entity_type: Optional[str] = None,
        entity_id: Any = None,
        field: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
    ):
        self.detail = detail or self.default_detail
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.field = field
        self.params = params or {}
        super().__init__(self.detail)

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"detail": self.detail, "code": self.code}
        if self.entity_type:
            data["entity_type"] = self.entity_type
        if self.entity_id is not None:
            data["entity_id"] = str(self.entity_id)
        if self.field:
            data["field"] = self.field
        if self.params:
            data["params"] = self.params
        return data

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"entity_type={self.entity_type!r}, entity_id={self.entity_id!r})"
        )


class NotFoundException(CatalogException):
    """Entity không tồn tại hoặc đã bị xóa mềm."""

    kind = ErrorKind.NOT_FOUND
    default_detail = "Resource not found"

    def __init__(self, entity_type: str, entity_id: Any, detail: Optional[str] = None):
        super().__init__(
            detail=detail or f"{entity_type.capitalize()} {entity_id} not found",
            entity_type=entity_type,
            entity_id=entity_id,
        )


class DuplicateSequenceNumberException(CatalogException):
    """Số thứ tự volume/chapter bị trùng trong cùng parent."""

    kind = ErrorKind.DUPLICATE_SEQUENCE_NUMBER
    default_detail = "Sequence number already in use"

    def __init__(
        self, entity_type: str, parent_id: Any, number: Optional[int], field: str
    ):
        super().__init__(
            detail=f"{entity_type.capitalize()} number {number} already exists",
            entity_type=entity_type,
            entity_id=parent_id,
            field=field,
            params={"number": number},
        )


class AssociationNotFoundException(CatalogException):
    kind = ErrorKind.ASSOCIATION_NOT_FOUND
    default_detail = "Referenced association does not exist"

    def __init__(self, association_type: str, missing_ids):
        missing = sorted(str(i) for i in missing_ids)
        super().__init__(
            detail=f"One or more {association_type} not found",
            entity_type=association_type,
            field=f"{association_type}_ids",
            params={"missing_ids": missing},
        )


class HasPurchasesException(CatalogException):
    """Không thể xóa nội dung đã có giao dịch mua hoặc thuê."""

    kind = ErrorKind.HAS_PURCHASES
    default_detail = "Content has purchase or rental records"

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            detail=(
                f"Cannot delete {entity_type} {entity_id}: "
                "purchase or rental records exist"
            ),
            entity_type=entity_type,
            entity_id=entity_id,
        )


class NoFieldsProvidedException(CatalogException):
    kind = ErrorKind.NO_FIELDS_PROVIDED
    default_detail = "No fields provided for update"

    def __init__(self, entity_type: Optional[str] = None, entity_id: Any = None):
        super().__init__(entity_type=entity_type, entity_id=entity_id)


class InvalidIdentifierException(CatalogException):
    kind = ErrorKind.INVALID_IDENTIFIER
    default_detail = "Invalid identifier"

    def __init__(self, value: Any, field: str = "id", detail: Optional[str] = None):
        super().__init__(
            detail=detail or f"Invalid identifier for {field}: {value!r}",
            entity_id=value,
            field=field,
        )


class DuplicateNameException(CatalogException):
    """Tên genre/creator/character đã tồn tại (không phân biệt hoa thường)."""

    kind = ErrorKind.DUPLICATE_NAME
    default_detail = "Name already in use"

    def __init__(self, entity_type: str, name: str):
        super().__init__(
            detail=f"{entity_type.capitalize()} with name '{name}' already exists",
            entity_type=entity_type,
            field="name",
            params={"name": name},
        )


class InternalException(CatalogException):
    """Lỗi lưu trữ không mong đợi."""

    kind = ErrorKind.INTERNAL
    default_detail = "Internal storage error"
