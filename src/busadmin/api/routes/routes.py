"""Route catalogue endpoints backed by the REST backend."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...clients.api import ApiError
from ...clients.offices import OfficesClient
from ...clients.routes import RoutesClient
from ...schemas.drafts import QuickReorderRequest, RouteDraftModel
from ...schemas.routes import (
    ListRoutesParams,
    OfficeOption,
    RouteListResult,
    RouteOption,
    RouteRecord,
)
from ...services.routes import draft_from_record, draft_to_body
from ...services.routes import sequence
from ..dependencies import backend_http_error, get_offices_client, get_routes_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["routes"])


@router.get("/routes", response_model=RouteListResult, status_code=status.HTTP_200_OK)
def list_routes(
    q: str | None = Query(default=None, description="Search by name, origin or destination"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=200),
    active: bool | None = Query(default=None),
    client: RoutesClient = Depends(get_routes_client),
) -> RouteListResult:
    try:
        return client.list_routes(
            ListRoutesParams(q=q, page=page, page_size=page_size, active=active, ordering="name")
        )
    except ApiError as exc:
        raise backend_http_error(exc) from exc


@router.get("/routes/options", response_model=List[RouteOption], status_code=status.HTTP_200_OK)
def route_options(client: RoutesClient = Depends(get_routes_client)) -> List[RouteOption]:
    try:
        return client.list_active_routes_lite()
    except ApiError as exc:
        raise backend_http_error(exc) from exc


@router.get("/offices/options", response_model=List[OfficeOption], status_code=status.HTTP_200_OK)
def office_options(client: OfficesClient = Depends(get_offices_client)) -> List[OfficeOption]:
    try:
        return client.list_active_offices_lite()
    except ApiError as exc:
        raise backend_http_error(exc) from exc


@router.get("/routes/{route_id}/draft", response_model=RouteDraftModel, status_code=status.HTTP_200_OK)
def route_draft(route_id: str, client: RoutesClient = Depends(get_routes_client)) -> RouteDraftModel:
    """Load a saved route as an editable, normalized draft."""
    try:
        record = client.get_route(route_id)
    except ApiError as exc:
        raise backend_http_error(exc) from exc
    return RouteDraftModel.from_domain(sequence.ensure_endpoints(draft_from_record(record)))


@router.post("/routes/save", response_model=RouteRecord, status_code=status.HTTP_200_OK)
def save_route(payload: RouteDraftModel, client: RoutesClient = Depends(get_routes_client)) -> RouteRecord:
    """Create the route, or replace it entirely when the draft has an id."""
    draft = payload.to_domain()
    problem = sequence.validation_error(draft)
    if problem:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=problem)

    snapshot = sequence.ensure_endpoints(draft)
    body = draft_to_body(snapshot)
    try:
        if snapshot.id is not None:
            return client.update_route(snapshot.id, body)
        return client.create_route(body)
    except ApiError as exc:
        logger.warning(f"Saving route {snapshot.name!r} failed ({exc.status}): {exc}")
        raise backend_http_error(exc) from exc


@router.post("/routes/{route_id}/reorder", response_model=RouteRecord, status_code=status.HTTP_200_OK)
def quick_reorder(
    route_id: str,
    payload: QuickReorderRequest,
    client: RoutesClient = Depends(get_routes_client),
) -> RouteRecord:
    try:
        route = client.get_route(route_id)
    except ApiError as exc:
        raise backend_http_error(exc) from exc

    stop_ids = sequence.reorder_stop_ids(route.stops, payload.index, payload.direction)
    if stop_ids is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Origin and destination stops cannot be moved.",
        )
    try:
        return client.reorder_stops(route.id, stop_ids)
    except ApiError as exc:
        raise backend_http_error(exc) from exc


@router.delete("/routes/{route_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_route(route_id: str, client: RoutesClient = Depends(get_routes_client)) -> Response:
    try:
        client.delete_route(route_id)
    except ApiError as exc:
        raise backend_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
