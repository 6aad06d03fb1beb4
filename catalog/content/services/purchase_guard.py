from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.constants import ContentNodeType
from catalog.core.exceptions import HasPurchasesException
from catalog.content.repositories.commercial_repo import CommercialRecordRepository


class PurchaseGuard:
    """
    Chặn thao tác xóa nội dung đã có giao dịch mua hoặc thuê.

    Phải được gọi với cùng session (transaction) của thao tác xóa.
    """

    def __init__(self, db: AsyncSession):
        self.records = CommercialRecordRepository(db)

    async def has_commercial_records(
        self, node_type: ContentNodeType, node_id: UUID
    ) -> bool:
        return await self.records.has_records(node_type, node_id)

    async def ensure_deletable(self, node_type: ContentNodeType, node_id: UUID) -> None:
        """
        Raises:
            HasPurchasesException: Nếu node hoặc hậu duệ của nó có bản ghi mua/thuê
        """
        if await self.has_commercial_records(node_type, node_id):
            raise HasPurchasesException(node_type.value.lower(), node_id)
