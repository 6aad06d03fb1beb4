from typing import ClassVar, FrozenSet, Optional, Set
from uuid import UUID

from pydantic import BaseModel, ConfigDict, model_validator


class ActorContext(BaseModel):
    """Người dùng (và tenant, nếu có) thực hiện thao tác."""

    user_id: UUID
    tenant_id: Optional[UUID] = None


class PartialUpdate(BaseModel):
    """
    Base cho các request cập nhật một phần.

    Trường không được gửi là "vắng mặt" (không nằm trong ``model_fields_set``);
    trường gửi với giá trị null là "có mặt". Các trường trong ``NON_NULLABLE``
    không chấp nhận null tường minh.
    """

    model_config = ConfigDict(extra="forbid")

    NON_NULLABLE: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = sorted(
            name
            for name in self.model_fields_set
            if name in self.NON_NULLABLE and getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self

    def present_fields(self) -> Set[str]:
        return set(self.model_fields_set)
