"""Route catalogue endpoints."""

from __future__ import annotations

import logging
import time
from typing import Any, Sequence

from ..config import settings
from ..schemas.routes import (
    Id,
    ListRoutesParams,
    ReorderStopsBody,
    RouteListResult,
    RouteOption,
    RoutePatchBody,
    RouteRecord,
    RouteWriteBody,
    normalize_list,
)
from .api import ApiClient, decode_payload

logger = logging.getLogger(__name__)

BASE = "/catalog/routes/"


def build_list_query(params: ListRoutesParams) -> dict[str, Any]:
    query: dict[str, Any] = {}
    if params.q:
        query["search"] = params.q
    if params.page:
        query["page"] = params.page
    if params.page_size:
        query["page_size"] = params.page_size
    if params.ordering:
        query["ordering"] = params.ordering
    if params.active is not None:
        query["active"] = "true" if params.active else "false"
    if params.origin is not None:
        query["origin"] = str(params.origin)
    if params.destination is not None:
        query["destination"] = str(params.destination)
    if params.name:
        query["name__icontains"] = params.name
    # cache-bust
    query["_"] = str(int(time.time() * 1000))
    return query


def _parse_page(data: Any) -> RouteListResult:
    items, total = normalize_list(data)
    return RouteListResult(items=[RouteRecord.model_validate(item) for item in items], total=total)


class RoutesClient:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

    def list_routes(self, params: ListRoutesParams | None = None) -> RouteListResult:
        query = build_list_query(params or ListRoutesParams())
        return decode_payload(_parse_page, self.api.get(BASE, params=query))

    def get_route(self, route_id: Id) -> RouteRecord:
        return decode_payload(RouteRecord.model_validate, self.api.get(f"{BASE}{route_id}/"))

    def create_route(self, body: RouteWriteBody) -> RouteRecord:
        # the backend validates order 0..N, first=origin, last=destination, no repeats
        data = self.api.post(BASE, body.model_dump())
        return decode_payload(RouteRecord.model_validate, data)

    def update_route(
        self,
        route_id: Id,
        body: RouteWriteBody | RoutePatchBody,
        *,
        partial: bool = False,
    ) -> RouteRecord:
        if partial:
            data = self.api.patch(f"{BASE}{route_id}/", body.model_dump(exclude_none=True))
        else:
            data = self.api.put(f"{BASE}{route_id}/", body.model_dump())
        return decode_payload(RouteRecord.model_validate, data)

    def delete_route(self, route_id: Id) -> None:
        self.api.delete(f"{BASE}{route_id}/")
        logger.info(f"Deleted route {route_id}")

    def reorder_stops(self, route_id: Id, stop_ids: Sequence[Id]) -> RouteRecord:
        """Send the full new stop ordering; the server returns the recomputed route."""
        body = ReorderStopsBody(stop_ids=list(stop_ids))
        data = self.api.patch(f"{BASE}{route_id}/reorder-stops/", body.model_dump())
        return decode_payload(RouteRecord.model_validate, data)

    def list_active_routes_lite(self) -> list[RouteOption]:
        result = self.list_routes(
            ListRoutesParams(active=True, ordering="name", page_size=settings.lite_page_size)
        )
        return [
            RouteOption(
                id=route.id,
                label=f"{route.name} — {len(route.stops)} stops",
                origin_code=route.origin_code,
                destination_code=route.destination_code,
            )
            for route in result.items
        ]
