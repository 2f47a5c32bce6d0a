"""Conversions between backend route records and editable drafts."""

from __future__ import annotations

from ...models.domain import RouteDraft, Stop
from ...schemas.routes import RouteRecord, RouteStopPayload, RouteWriteBody


def draft_from_record(record: RouteRecord) -> RouteDraft:
    """Load a persisted route for editing, stops sorted by ``order``."""
    return RouteDraft(
        id=record.id,
        name=record.name,
        origin=record.origin,
        destination=record.destination,
        active=record.active,
        stops=tuple(
            Stop(
                id=stop.id,
                office=stop.office,
                office_name=stop.office_name or stop.office_code,
                order=stop.order,
                scheduled_offset_min=stop.scheduled_offset_min,
            )
            for stop in record.ordered_stops()
        ),
    )


def draft_to_body(draft: RouteDraft) -> RouteWriteBody:
    """Full-replacement body for create/update. ``draft`` must already be normalized."""
    return RouteWriteBody(
        name=draft.name.strip(),
        origin=draft.origin,
        destination=draft.destination,
        active=draft.active,
        stops=[
            RouteStopPayload(
                office=stop.office,
                order=stop.order,
                scheduled_offset_min=stop.scheduled_offset_min,
            )
            for stop in draft.stops
        ],
    )
