"""Draft editing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from ..models.domain import RouteDraft, Stop
from .routes import Id, OfficeOption


class StopModel(BaseModel):
    id: Optional[Id] = None
    office: Id
    office_name: Optional[str] = None
    order: int = Field(0, ge=0)
    scheduled_offset_min: Optional[int] = Field(default=None, ge=0)

    def to_domain(self) -> Stop:
        return Stop(
            id=self.id,
            office=self.office,
            office_name=self.office_name,
            order=self.order,
            scheduled_offset_min=self.scheduled_offset_min,
        )

    @classmethod
    def from_domain(cls, stop: Stop) -> "StopModel":
        return cls(
            id=stop.id,
            office=stop.office,
            office_name=stop.office_name,
            order=stop.order,
            scheduled_offset_min=stop.scheduled_offset_min,
        )


class RouteDraftModel(BaseModel):
    id: Optional[Id] = None
    name: str = ""
    origin: Optional[Id] = None
    destination: Optional[Id] = None
    active: bool = True
    stops: List[StopModel] = Field(default_factory=list)

    def to_domain(self) -> RouteDraft:
        return RouteDraft(
            id=self.id,
            name=self.name,
            origin=self.origin,
            destination=self.destination,
            active=self.active,
            stops=tuple(stop.to_domain() for stop in self.stops),
        )

    @classmethod
    def from_domain(cls, draft: RouteDraft) -> "RouteDraftModel":
        return cls(
            id=draft.id,
            name=draft.name,
            origin=draft.origin if draft.origin != "" else None,
            destination=draft.destination if draft.destination != "" else None,
            active=draft.active,
            stops=[StopModel.from_domain(stop) for stop in draft.stops],
        )


class InsertStopRequest(BaseModel):
    draft: RouteDraftModel
    office: Id


class MoveStopRequest(BaseModel):
    draft: RouteDraftModel
    index: int
    direction: Literal[-1, 1]


class RemoveStopRequest(BaseModel):
    draft: RouteDraftModel
    index: int


class SetOffsetRequest(BaseModel):
    draft: RouteDraftModel
    index: int
    value: Union[int, float, str, None] = Field(
        default=None, description="Raw input; empty means no offset."
    )


class AvailableOfficesRequest(BaseModel):
    draft: RouteDraftModel
    offices: List[OfficeOption]
    exclude_index: Optional[int] = None


class ValidationResponse(BaseModel):
    can_persist: bool
    error: Optional[str] = None
    draft: RouteDraftModel


class QuickReorderRequest(BaseModel):
    index: int = Field(..., description="Position of the stop in the order-sorted list.")
    direction: Literal[-1, 1]
