"""
Dynamic partial-update builder.

Một request cập nhật có thể chỉ mang một phần các trường. Builder gom các cặp
(column, value) của những trường *có mặt* trong request rồi sinh một câu lệnh
UPDATE tham số hóa, thứ tự SET ổn định theo thứ tự khai báo trường.
"""

from enum import Enum
from typing import Any, Iterable, List, Tuple

from pydantic import BaseModel
from sqlalchemy import Update, update

from catalog.common.utils.date_utils import now
from catalog.core.exceptions import NoFieldsProvidedException


class UpdateBuilder:
    """
    Args:
        model: ORM model cần cập nhật
        entity_type: Tên thực thể dùng trong thông báo lỗi
    """

    def __init__(self, model, entity_type: str):
        self.model = model
        self.entity_type = entity_type
        self._assignments: List[Tuple[str, Any]] = []

    def set(self, column: str, value: Any) -> "UpdateBuilder":
        """Thêm một phép gán; gán lại cùng cột thì giữ vị trí cũ."""
        if isinstance(value, Enum):
            value = value.value
        for index, (existing, _) in enumerate(self._assignments):
            if existing == column:
                self._assignments[index] = (column, value)
                return self
        self._assignments.append((column, value))
        return self

    def set_present(
        self, request: BaseModel, exclude: Iterable[str] = ()
    ) -> "UpdateBuilder":
        """
        Thêm các trường có mặt trong request (kể cả khi giá trị là null).

        Trường vắng mặt (không được gửi) bị bỏ qua; thứ tự theo khai báo của schema.
        """
        excluded = set(exclude)
        present = request.model_fields_set
        for name in type(request).model_fields:
            if name in present and name not in excluded:
                self.set(name, getattr(request, name))
        return self

    @property
    def assignments(self) -> List[Tuple[str, Any]]:
        return list(self._assignments)

    @property
    def columns(self) -> List[str]:
        return [column for column, _ in self._assignments]

    @property
    def has_changes(self) -> bool:
        return bool(self._assignments)

    def ensure_changes(self, entity_id: Any = None) -> None:
        if not self.has_changes:
            raise NoFieldsProvidedException(self.entity_type, entity_id)

    def build(
        self, *where, entity_id: Any = None, require_changes: bool = True
    ) -> Update:
        """
        Sinh câu lệnh UPDATE, luôn kèm ``updated_at`` ở cuối.

        Args:
            where: Điều kiện WHERE
            entity_id: ID dùng trong thông báo lỗi
            require_changes: False cho phép câu lệnh chỉ chạm ``updated_at``

        Raises:
            NoFieldsProvidedException: Nếu không có trường nào để gán
        """
        if require_changes:
            self.ensure_changes(entity_id)
        pairs = [
            (getattr(self.model, column), value)
            for column, value in self._assignments
        ]
        pairs.append((self.model.updated_at, now()))
        return (
            update(self.model)
            .where(*where)
            .ordered_values(*pairs)
            .execution_options(synchronize_session=False)
        )
