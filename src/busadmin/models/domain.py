"""Domain models for route drafts and their stops."""

from dataclasses import dataclass
from typing import Optional, Union

OfficeId = Union[int, str]


@dataclass(frozen=True, slots=True)
class Stop:
    """One waypoint of a route: an office, its position and its schedule offset."""

    office: OfficeId
    order: int
    scheduled_offset_min: Optional[int] = None
    id: Optional[OfficeId] = None
    office_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class RouteDraft:
    """Editable snapshot of a route.

    ``origin`` and ``destination`` are ``None`` (or an empty string coming from
    a form) while not selected yet. ``stops`` is a tuple so drafts stay hashable.
    """

    name: str = ""
    origin: Optional[OfficeId] = None
    destination: Optional[OfficeId] = None
    active: bool = True
    stops: tuple[Stop, ...] = ()
    id: Optional[OfficeId] = None


@dataclass(frozen=True, slots=True)
class PreviewStop:
    label: str
    offset: Optional[int]
    order: int
