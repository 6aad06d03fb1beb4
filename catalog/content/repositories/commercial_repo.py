from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.core.constants import ContentNodeType
from catalog.content.models import Chapter, ContentPurchase, ContentRental, Volume


class CommercialRecordRepository:
    """
    Đọc sổ giao dịch mua/thuê (chỉ đọc, không bao giờ ghi).
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _covered_items(ledger, node_type: ContentNodeType, node_id: UUID):
        """
        Điều kiện khớp các bản ghi sổ trỏ tới node hoặc bất kỳ hậu duệ nào của nó.

        Hậu duệ tính cả các volume/chapter đã bị xóa mềm trước đó.
        """
        direct = and_(ledger.item_type == node_type.value, ledger.item_id == node_id)

        if node_type == ContentNodeType.CHAPTER:
            return direct

        if node_type == ContentNodeType.VOLUME:
            chapter_ids = select(Chapter.id).where(Chapter.volume_id == node_id)
            return or_(
                direct,
                and_(
                    ledger.item_type == ContentNodeType.CHAPTER.value,
                    ledger.item_id.in_(chapter_ids),
                ),
            )

        volume_ids = select(Volume.id).where(Volume.series_id == node_id)
        chapter_ids = (
            select(Chapter.id)
            .join(Volume, Chapter.volume_id == Volume.id)
            .where(Volume.series_id == node_id)
        )
        return or_(
            direct,
            and_(
                ledger.item_type == ContentNodeType.VOLUME.value,
                ledger.item_id.in_(volume_ids),
            ),
            and_(
                ledger.item_type == ContentNodeType.CHAPTER.value,
                ledger.item_id.in_(chapter_ids),
            ),
        )

    async def has_records(self, node_type: ContentNodeType, node_id: UUID) -> bool:
        """Một truy vấn duy nhất trên cả hai bảng purchases và rentals."""
        purchases = (
            select(ContentPurchase.id)
            .where(self._covered_items(ContentPurchase, node_type, node_id))
            .exists()
        )
        rentals = (
            select(ContentRental.id)
            .where(self._covered_items(ContentRental, node_type, node_id))
            .exists()
        )
        result = await self.db.execute(select(or_(purchases, rentals)))
        return bool(result.scalar())
