"""Route catalogue request/response schemas.

Field names mirror the backend serializers (``RouteSerializer`` and
``RouteStopSerializer``), so these models validate payloads as they travel.
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field

Id = Union[int, str]


class RouteStopRecord(BaseModel):
    id: Optional[Id] = None
    office: Id
    office_code: Optional[str] = None
    office_name: Optional[str] = None
    order: int = Field(..., ge=0, description="0 = origin, last = destination")
    scheduled_offset_min: Optional[int] = Field(
        default=None, ge=0, description="Minutes from the scheduled departure."
    )


class RouteRecord(BaseModel):
    id: Id
    name: str
    origin: Id
    origin_code: Optional[str] = None
    destination: Id
    destination_code: Optional[str] = None
    active: bool = True
    created_at: Optional[str] = None
    stops: List[RouteStopRecord] = Field(default_factory=list)

    def ordered_stops(self) -> list[RouteStopRecord]:
        return sorted(self.stops, key=lambda stop: stop.order)


class RouteStopPayload(BaseModel):
    office: Id
    order: int = Field(..., ge=0)
    scheduled_offset_min: Optional[int] = Field(default=None, ge=0)


class RouteWriteBody(BaseModel):
    """Full route body for create and full update (replacement semantics)."""

    name: str
    origin: Id
    destination: Id
    active: bool = True
    stops: List[RouteStopPayload]


class RoutePatchBody(BaseModel):
    name: Optional[str] = None
    origin: Optional[Id] = None
    destination: Optional[Id] = None
    active: Optional[bool] = None
    stops: Optional[List[RouteStopPayload]] = None


class ReorderStopsBody(BaseModel):
    stop_ids: List[Id] = Field(..., min_length=1)


class ListRoutesParams(BaseModel):
    q: Optional[str] = Field(default=None, description="Free text search (name, origin, destination).")
    page: Optional[int] = Field(default=None, ge=1)
    page_size: Optional[int] = Field(default=None, ge=1)
    ordering: Optional[str] = Field(default=None, description='e.g. "name" or "-created_at".')
    active: Optional[bool] = None
    origin: Optional[Id] = None
    destination: Optional[Id] = None
    name: Optional[str] = Field(default=None, description="Case-insensitive name filter.")


class RouteListResult(BaseModel):
    items: List[RouteRecord]
    total: int


class RouteOption(BaseModel):
    id: Id
    label: str
    origin_code: Optional[str] = None
    destination_code: Optional[str] = None


class OfficeRecord(BaseModel):
    id: Id
    code: str
    name: str
    department: Optional[str] = None
    province: Optional[str] = None
    municipality: Optional[str] = None
    locality: Optional[str] = None
    address: Optional[str] = None
    location_url: Optional[str] = None
    phone: Optional[str] = None
    active: bool = True


class OfficeOption(BaseModel):
    id: Id
    label: str


def normalize_list(data: Any) -> tuple[list[Any], int]:
    """Turn a paginated page (``{count, results}``) or a bare array into ``(items, total)``."""
    if data is None:
        return [], 0
    if isinstance(data, list):
        return data, len(data)
    if isinstance(data, dict):
        items = data.get("results") or []
        return list(items), int(data.get("count") or 0)
    raise ValueError(f"Unexpected list payload of type {type(data).__name__}.")
