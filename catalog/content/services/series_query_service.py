"""
Query Aggregator: phía đọc (CQRS) của catalog.

Chạy trên read session factory (có thể là replica), độc lập với write path.
"""

from typing import Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker

from catalog.common.utils.identifiers import Identifier, parse_identifier
from catalog.common.utils.pagination import Page, PaginationParams, paginate
from catalog.core.constants import OwnerKind, OwnershipType
from catalog.core.db import read_only
from catalog.core.exceptions import NotFoundException
from catalog.content.clients.identity import IdentityLookup, IdentityLookupError
from catalog.content.repositories.series_query_repo import SeriesQueryRepository
from catalog.content.schemas.detail import OwnerRef, OwnerSummary, SeriesFullDetail
from catalog.content.schemas.listing import SeriesListParams, SeriesSummary
from catalog.logging import get_logger

logger = get_logger(__name__)


class SeriesQueryService:
    """
    Args:
        session_factory: Factory tạo session cho read path
        identity_lookup: Collaborator tra cứu thông tin owner/creator (tùy chọn)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        identity_lookup: Optional[IdentityLookup] = None,
    ):
        self.session_factory = session_factory
        self.identity_lookup = identity_lookup

    async def list_series(self, params: SeriesListParams) -> Page[SeriesSummary]:
        """
        Liệt kê series theo bộ lọc, kèm metadata phân trang.
        """
        pagination = PaginationParams(params.page, params.page_size)
        async with read_only(self.session_factory) as db:
            items, total = await SeriesQueryRepository(db).list_series(
                params, pagination
            )
        return paginate(items, total, pagination)

    async def get_full_detail(
        self, series_id: Identifier, include_stats: bool = False
    ) -> SeriesFullDetail:
        """
        Đọc chi tiết đầy đủ của series trong một truy vấn, sau đó bổ sung thông tin
        hiển thị của owner/creator qua identity lookup.

        Raises:
            NotFoundException: Nếu series không tồn tại hoặc đã bị xóa
        """
        series_id = parse_identifier(series_id, "series_id")
        async with read_only(self.session_factory) as db:
            detail = await SeriesQueryRepository(db).fetch_full_detail(
                series_id, include_stats=include_stats
            )
        if detail is None:
            raise NotFoundException("series", series_id)

        if self.identity_lookup is not None:
            await self._attach_owner_summaries(detail)
        return detail

    @staticmethod
    def owner_refs(detail: SeriesFullDetail) -> Dict[str, OwnerRef]:
        refs = {}
        if detail.primary_owner_id is not None:
            kind = (
                OwnerKind.ORGANIZATION
                if detail.ownership_type == OwnershipType.TENANT
                else OwnerKind.INDIVIDUAL
            )
            refs["primary_owner"] = OwnerRef(id=detail.primary_owner_id, kind=kind)
        if detail.original_creator_id is not None:
            refs["original_creator"] = OwnerRef(
                id=detail.original_creator_id, kind=OwnerKind.INDIVIDUAL
            )
        return refs

    async def _attach_owner_summaries(self, detail: SeriesFullDetail) -> None:
        refs = self.owner_refs(detail)
        if not refs:
            return
        try:
            found: Dict[UUID, OwnerSummary] = await self.identity_lookup.lookup(
                set(refs.values())
            )
        except IdentityLookupError as e:
            # Thiếu thông tin hiển thị không làm hỏng cả lần đọc
            logger.warning(
                f"Owner enrichment unavailable for series {detail.id}: {str(e)}"
            )
            return

        for attr, ref in refs.items():
            setattr(detail, attr, found.get(ref.id))
