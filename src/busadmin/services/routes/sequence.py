"""Ordered route-stop sequence operations.

A route's stops form a sequence whose first element is the origin and whose
last element is the destination. Every operation below is a pure function
over immutable ``Stop`` tuples and keeps these rules:

* ``order`` equals the position in the sequence;
* the origin's offset is always 0;
* offsets never decrease along the sequence (a lower value is clamped up to
  its predecessor);
* an office appears at most once;
* the origin and destination cannot be moved or removed.

Requests that would break a rule are ignored and the input is returned
unchanged; callers disable the triggering control instead of handling errors.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from functools import lru_cache
from typing import Any, Iterable, Optional, Sequence, TypeVar

from ...models.domain import OfficeId, RouteDraft, Stop

logger = logging.getLogger(__name__)

Stops = tuple[Stop, ...]
T = TypeVar("T")


def office_key(office_id: Any) -> str:
    """Ids may arrive as ints or strings; compare them by their string form."""
    return str(office_id)


def is_selected(office_id: Any) -> bool:
    return office_id is not None and office_id != ""


def reindex(stops: Iterable[Stop]) -> Stops:
    return tuple(stop if stop.order == idx else replace(stop, order=idx) for idx, stop in enumerate(stops))


def normalize_offsets(stops: Iterable[Stop]) -> Stops:
    """Force the origin to 0 and make offsets non-decreasing from left to right."""
    items = list(stops)
    if not items:
        return ()
    result = [replace(items[0], scheduled_offset_min=0)]
    previous = 0
    for stop in items[1:]:
        current = stop.scheduled_offset_min if stop.scheduled_offset_min is not None else previous
        previous = max(previous, current)
        result.append(replace(stop, scheduled_offset_min=previous))
    return tuple(result)


def _with_office(stop: Stop, office_id: OfficeId) -> Stop:
    if office_key(stop.office) == office_key(office_id):
        return stop
    return replace(stop, office=office_id, office_name=None)


@lru_cache(maxsize=256)
def ensure_endpoints(draft: RouteDraft) -> RouteDraft:
    """Return ``draft`` with stops whose first/last entries match origin/destination.

    Builds ``[origin, destination]`` when there are no stops yet, drops
    intermediate stops that repeat an endpoint and renumbers ``order``.
    Offsets other than the origin's are left as they are. Idempotent.
    """
    origin = draft.origin if is_selected(draft.origin) else None
    destination = draft.destination if is_selected(draft.destination) else None
    stops = list(draft.stops)

    if not stops:
        if origin is not None and destination is not None and office_key(origin) != office_key(destination):
            stops = [
                Stop(office=origin, order=0, scheduled_offset_min=0),
                Stop(office=destination, order=1, scheduled_offset_min=None),
            ]
        elif origin is not None:
            stops = [Stop(office=origin, order=0, scheduled_offset_min=0)]

    if origin is not None:
        stops[0] = replace(_with_office(stops[0], origin), scheduled_offset_min=0)

    if destination is not None:
        if len(stops) >= 2:
            stops[-1] = _with_office(stops[-1], destination)
        elif stops and office_key(stops[-1].office) != office_key(destination):
            stops.append(
                Stop(
                    office=destination,
                    order=len(stops),
                    scheduled_offset_min=stops[-1].scheduled_offset_min,
                )
            )

    if len(stops) >= 2:
        endpoints = {office_key(value) for value in (origin, destination) if value is not None}
        last = len(stops) - 1
        stops = [
            stop
            for idx, stop in enumerate(stops)
            if idx in (0, last) or office_key(stop.office) not in endpoints
        ]

    return replace(draft, stops=reindex(stops))


def insert_intermediate(stops: Sequence[Stop], office_id: OfficeId) -> Stops:
    """Insert ``office_id`` right before the destination with no offset."""
    if len(stops) < 2:
        logger.debug("Cannot insert %s: origin and destination are not set yet", office_id)
        return tuple(stops)
    if any(office_key(stop.office) == office_key(office_id) for stop in stops):
        logger.debug("Cannot insert %s: office already in the route", office_id)
        return tuple(stops)
    items = list(stops)
    insert_at = len(items) - 1
    items.insert(insert_at, Stop(office=office_id, order=insert_at, scheduled_offset_min=None))
    return reindex(items)


def move(stops: Sequence[Stop], index: int, direction: int) -> Stops:
    """Swap an intermediate stop with its neighbour (``direction`` is -1 or +1)."""
    if direction not in (-1, 1):
        return tuple(stops)
    target = index + direction
    last = len(stops) - 1
    if not (0 < index < last and 0 < target < last):
        return tuple(stops)
    items = list(stops)
    items[index], items[target] = items[target], items[index]
    return normalize_offsets(reindex(items))


def remove_at(stops: Sequence[Stop], index: int) -> Stops:
    """Remove an intermediate stop; the origin and destination are protected."""
    if not 0 < index < len(stops) - 1:
        return tuple(stops)
    items = [stop for idx, stop in enumerate(stops) if idx != index]
    return normalize_offsets(reindex(items))


def sanitize_offset(raw: Any) -> Optional[int]:
    """Parse user input into a non-negative whole number of minutes.

    Empty input means "no offset" (``None``); anything that is not a finite
    number becomes 0.
    """
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(value):
        return 0
    return max(0, math.floor(value))


def set_offset(stops: Sequence[Stop], index: int, raw: Any) -> Stops:
    """Write the offset at ``index``, clamped up to its predecessor's offset."""
    if not 0 <= index < len(stops):
        return tuple(stops)
    value = sanitize_offset(raw)
    items = list(stops)
    if index > 0:
        previous = items[index - 1].scheduled_offset_min or 0
        if value is None or value < previous:
            value = previous
    items[index] = replace(items[index], scheduled_offset_min=value)
    return normalize_offsets(reindex(items))


def available_offices(draft: RouteDraft, offices: Iterable[T], exclude_index: Optional[int] = None) -> list[T]:
    """Offices that can still be added: not an endpoint and not already a stop.

    ``exclude_index`` lets the stop at that position keep its own office in the
    choices while it is being edited. ``offices`` are objects with an ``id``.
    """
    used = {office_key(stop.office) for idx, stop in enumerate(draft.stops) if idx != exclude_index}
    for endpoint in (draft.origin, draft.destination):
        if is_selected(endpoint):
            used.add(office_key(endpoint))
    return [office for office in offices if office_key(getattr(office, "id")) not in used]


def validation_error(draft: RouteDraft) -> Optional[str]:
    """Return the message for the first rule that blocks saving, if any."""
    if not draft.name or not draft.name.strip():
        return "Route name is required."
    if not is_selected(draft.origin) or not is_selected(draft.destination):
        return "Select both an origin and a destination."
    if office_key(draft.origin) == office_key(draft.destination):
        return "Origin and destination must be different."
    if len(ensure_endpoints(draft).stops) < 2:
        return "A route needs at least two stops (origin and destination)."
    return None


def can_persist(draft: RouteDraft) -> bool:
    return validation_error(draft) is None


def build_stops_sequence(
    office_ids: Sequence[OfficeId],
    offsets: Optional[Sequence[Optional[int]]] = None,
) -> Stops:
    """Build a fresh stop sequence from office ids listed origin first.

    Offsets default to ``[0, None, None, ...]`` and are ignored unless there is
    exactly one per office.
    """
    if not office_ids or len(office_ids) < 2:
        raise ValueError("At least two offices (origin and destination) are required.")
    seen: set[str] = set()
    for office_id in office_ids:
        key = office_key(office_id)
        if key in seen:
            raise ValueError(f"Office {office_id} appears more than once in the route.")
        seen.add(key)

    if offsets is None or len(offsets) != len(office_ids):
        offsets = [0 if idx == 0 else None for idx in range(len(office_ids))]
    return tuple(
        Stop(office=office_id, order=idx, scheduled_offset_min=offsets[idx])
        for idx, office_id in enumerate(office_ids)
    )


def reorder_stop_ids(stops: Sequence[Any], index: int, direction: int) -> Optional[list]:
    """Compute the full stop id ordering for a quick reorder of a persisted route.

    ``stops`` are persisted stop records (with ``id`` and ``order``); ``index``
    is a position in the ``order``-sorted list. Returns ``None`` when the move
    would touch the origin or destination slot. Offsets are left to the server.
    """
    ordered = sorted(stops, key=lambda stop: stop.order)
    last = len(ordered) - 1
    if direction not in (-1, 1) or not 0 < index < last:
        return None
    new_index = index + direction
    if not 0 < new_index < last:
        return None
    item = ordered.pop(index)
    ordered.insert(new_index, item)
    return [stop.id for stop in ordered]
