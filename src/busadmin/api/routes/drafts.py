"""Stateless route draft editing endpoints.

Each endpoint takes the current draft and returns the normalized result, so a
browser form can keep its state locally and still share one set of rules.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List

from fastapi import APIRouter, status

from ...models.domain import RouteDraft
from ...schemas.drafts import (
    AvailableOfficesRequest,
    InsertStopRequest,
    MoveStopRequest,
    RemoveStopRequest,
    RouteDraftModel,
    SetOffsetRequest,
    ValidationResponse,
)
from ...schemas.routes import OfficeOption
from ...services.routes import sequence

router = APIRouter(prefix="/drafts", tags=["drafts"])


def _with_stops(draft: RouteDraft, stops: tuple) -> RouteDraftModel:
    """Keep origin/destination in line with the edited endpoints."""
    if not stops:
        return RouteDraftModel.from_domain(replace(draft, stops=stops))
    return RouteDraftModel.from_domain(
        replace(draft, stops=stops, origin=stops[0].office, destination=stops[-1].office)
    )


@router.post("/normalize", response_model=RouteDraftModel, status_code=status.HTTP_200_OK)
def normalize(payload: RouteDraftModel) -> RouteDraftModel:
    return RouteDraftModel.from_domain(sequence.ensure_endpoints(payload.to_domain()))


@router.post("/stops/insert", response_model=RouteDraftModel, status_code=status.HTTP_200_OK)
def insert_stop(payload: InsertStopRequest) -> RouteDraftModel:
    draft = sequence.ensure_endpoints(payload.draft.to_domain())
    return _with_stops(draft, sequence.insert_intermediate(draft.stops, payload.office))


@router.post("/stops/move", response_model=RouteDraftModel, status_code=status.HTTP_200_OK)
def move_stop(payload: MoveStopRequest) -> RouteDraftModel:
    draft = sequence.ensure_endpoints(payload.draft.to_domain())
    return _with_stops(draft, sequence.move(draft.stops, payload.index, payload.direction))


@router.post("/stops/remove", response_model=RouteDraftModel, status_code=status.HTTP_200_OK)
def remove_stop(payload: RemoveStopRequest) -> RouteDraftModel:
    draft = sequence.ensure_endpoints(payload.draft.to_domain())
    return _with_stops(draft, sequence.remove_at(draft.stops, payload.index))


@router.post("/stops/offset", response_model=RouteDraftModel, status_code=status.HTTP_200_OK)
def set_stop_offset(payload: SetOffsetRequest) -> RouteDraftModel:
    draft = sequence.ensure_endpoints(payload.draft.to_domain())
    return _with_stops(draft, sequence.set_offset(draft.stops, payload.index, payload.value))


@router.post("/available-offices", response_model=List[OfficeOption], status_code=status.HTTP_200_OK)
def available_offices(payload: AvailableOfficesRequest) -> List[OfficeOption]:
    draft = sequence.ensure_endpoints(payload.draft.to_domain())
    return sequence.available_offices(draft, payload.offices, payload.exclude_index)


@router.post("/validate", response_model=ValidationResponse, status_code=status.HTTP_200_OK)
def validate(payload: RouteDraftModel) -> ValidationResponse:
    draft = payload.to_domain()
    problem = sequence.validation_error(draft)
    return ValidationResponse(
        can_persist=problem is None,
        error=problem,
        draft=RouteDraftModel.from_domain(sequence.ensure_endpoints(draft)),
    )
