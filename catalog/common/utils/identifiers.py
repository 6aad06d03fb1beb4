from typing import Union
from uuid import UUID

from catalog.core.exceptions import InvalidIdentifierException

Identifier = Union[str, UUID]


def parse_identifier(value: Identifier, field: str = "id") -> UUID:
    """
    Chuẩn hóa một identifier về UUID.

    Raises:
        InvalidIdentifierException: Nếu giá trị không phải UUID hợp lệ
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdentifierException(value, field=field)
    try:
        return UUID(value.strip())
    except ValueError:
        raise InvalidIdentifierException(value, field=field)

