"""
Batch identity-lookup collaborator.

Cho một tập owner/creator ID (mỗi ID gắn loại cá nhân hoặc tổ chức), trả về
map ID -> thông tin hiển thị ngắn gọn. ID không biết chỉ đơn giản vắng mặt.
"""

from functools import lru_cache
from typing import Dict, Iterable, Optional, Protocol
from uuid import UUID

import httpx
from pydantic import ValidationError

from catalog.core.config import get_settings
from catalog.core.constants import OwnerKind
from catalog.content.schemas.detail import OwnerRef, OwnerSummary
from catalog.logging import get_logger

logger = get_logger(__name__)


class IdentityLookupError(Exception):
    """Không thể gọi dịch vụ identity."""


class IdentityLookup(Protocol):
    async def lookup(self, refs: Iterable[OwnerRef]) -> Dict[UUID, OwnerSummary]:
        ...


class HttpIdentityLookup:
    """
    Gọi dịch vụ identity qua HTTP.

    ``POST {base_url}/v1/identities/batch`` với body
    ``{"individual_ids": [...], "organization_ids": [...]}``; response
    ``{"items": [{"id": ..., "display_name": ..., "kind": ...}]}``.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 2.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def lookup(self, refs: Iterable[OwnerRef]) -> Dict[UUID, OwnerSummary]:
        refs = set(refs)
        if not refs:
            return {}

        payload = {
            "individual_ids": sorted(
                str(r.id) for r in refs if r.kind == OwnerKind.INDIVIDUAL
            ),
            "organization_ids": sorted(
                str(r.id) for r in refs if r.kind == OwnerKind.ORGANIZATION
            ),
        }
        try:
            response = await self._client.post(
                f"{self.base_url}/v1/identities/batch", json=payload
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise IdentityLookupError(f"Identity lookup failed: {str(e)}") from e

        items = (body.get("items") or []) if isinstance(body, dict) else None
        if not isinstance(items, list):
            raise IdentityLookupError(
                f"Unexpected identity response shape: {type(body).__name__}"
            )

        wanted = {r.id for r in refs}
        summaries: Dict[UUID, OwnerSummary] = {}
        for item in items:
            try:
                summary = OwnerSummary.model_validate(item)
            except ValidationError:
                logger.warning(f"Skipping malformed identity entry: {item!r}")
                continue
            if summary.id in wanted:
                summaries[summary.id] = summary
        return summaries

    async def aclose(self) -> None:
        await self._client.aclose()


@lru_cache()
def get_identity_lookup() -> Optional[HttpIdentityLookup]:
    """Client dùng chung; None khi chưa cấu hình IDENTITY_SERVICE_URL."""
    settings = get_settings()
    if not settings.IDENTITY_SERVICE_URL:
        return None
    return HttpIdentityLookup(
        settings.IDENTITY_SERVICE_URL, timeout=settings.IDENTITY_SERVICE_TIMEOUT
    )
