"""Office catalogue endpoints (read side only, for selectors)."""

from __future__ import annotations

import time
from typing import Optional

from ..config import settings
from ..schemas.routes import OfficeOption, OfficeRecord, normalize_list
from .api import ApiClient, decode_payload

BASE = "/catalog/offices/"


def _parse_page(data) -> tuple[list[OfficeRecord], int]:
    items, total = normalize_list(data)
    return [OfficeRecord.model_validate(item) for item in items], total


class OfficesClient:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def list_offices(
        self,
        *,
        q: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        active: Optional[bool] = None,
        code: Optional[str] = None,
        ordering: Optional[str] = None,
    ) -> tuple[list[OfficeRecord], int]:
        query: dict[str, str] = {}
        if q:
            query["search"] = q
        if page:
            query["page"] = str(page)
        if page_size:
            query["page_size"] = str(page_size)
        if active is not None:
            query["active"] = "true" if active else "false"
        if code:
            query["code__icontains"] = code
        if ordering:
            query["ordering"] = ordering
        query["_"] = str(int(time.time() * 1000))

        return decode_payload(_parse_page, self.api.get(BASE, params=query))

    def list_active_offices_lite(self) -> list[OfficeOption]:
        """Just enough to fill a select: id and ``"<code> — <name>"``."""
        offices, _ = self.list_offices(active=True, ordering="code", page_size=settings.lite_page_size)
        return [OfficeOption(id=office.id, label=f"{office.code} — {office.name}") for office in offices]
