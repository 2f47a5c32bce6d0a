"""Create/edit session for a single route."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterable, Optional, Sequence

from ...clients.api import ApiError
from ...clients.routes import RoutesClient
from ...models.domain import OfficeId, PreviewStop, RouteDraft, Stop
from ...schemas.routes import OfficeOption, RouteRecord
from ..notifier import Notifier, error_message
from . import sequence
from .mapping import draft_from_record, draft_to_body

logger = logging.getLogger(__name__)


class RouteEditor:
    """Holds one route draft and applies stop edits to it.

    The normalized snapshot (endpoints synchronized, duplicates stripped,
    ``order`` renumbered) is recomputed when the draft changes and read from
    :attr:`snapshot` everywhere else. Edits that the sequence rules reject
    leave the draft untouched.
    """

    def __init__(
        self,
        notifier: Notifier,
        offices: Iterable[OfficeOption] = (),
        draft: RouteDraft | None = None,
    ) -> None:
        self.notifier = notifier
        self.offices: list[OfficeOption] = list(offices)
        self._draft = RouteDraft()
        self._snapshot = self._draft
        self._commit(draft or RouteDraft())

    @classmethod
    def for_create(cls, notifier: Notifier, offices: Iterable[OfficeOption] = ()) -> "RouteEditor":
        return cls(notifier, offices)

    @classmethod
    def for_edit(
        cls,
        record: RouteRecord,
        notifier: Notifier,
        offices: Iterable[OfficeOption] = (),
    ) -> "RouteEditor":
        return cls(notifier, offices, draft=draft_from_record(record))

    # ----- state -----

    @property
    def draft(self) -> RouteDraft:
        return self._draft

    @property
    def snapshot(self) -> RouteDraft:
        return self._snapshot

    @property
    def is_new(self) -> bool:
        return self._draft.id is None

    def _commit(self, draft: RouteDraft) -> None:
        self._draft = draft
        self._snapshot = sequence.ensure_endpoints(draft)

    def _commit_stops(self, stops: Sequence[Stop]) -> None:
        """Store edited stops and keep origin/destination in line with the endpoints."""
        base = self._snapshot
        stops = sequence.reindex(stops)
        self._commit(
            replace(
                base,
                stops=stops,
                origin=stops[0].office if stops else base.origin,
                destination=stops[-1].office if stops else base.destination,
            )
        )

    # ----- form fields -----

    def set_name(self, name: str) -> None:
        self._commit(replace(self._draft, name=name))

    def set_active(self, active: bool) -> None:
        self._commit(replace(self._draft, active=active))

    def set_origin(self, office_id: Optional[OfficeId]) -> None:
        self._commit(replace(self._draft, origin=office_id))

    def set_destination(self, office_id: Optional[OfficeId]) -> None:
        self._commit(replace(self._draft, destination=office_id))

    # ----- stop edits -----

    def available_offices(self, exclude_index: Optional[int] = None) -> list[OfficeOption]:
        return sequence.available_offices(self._snapshot, self.offices, exclude_index)

    @property
    def can_add_intermediate(self) -> bool:
        snap = self._snapshot
        return (
            sequence.is_selected(snap.origin)
            and sequence.is_selected(snap.destination)
            and bool(self.available_offices())
        )

    def add_intermediate_stop(self, office_id: Optional[OfficeId] = None) -> bool:
        """Insert a stop before the destination. Defaults to the first free office."""
        snap = self._snapshot
        if office_id is None:
            choices = self.available_offices()
            if not choices:
                self.notifier.info("No more offices available to add as a stop.")
                return False
            office_id = choices[0].id

        stops = sequence.insert_intermediate(snap.stops, office_id)
        if stops == snap.stops:
            self.notifier.warn(f"Office {self.office_label(office_id)} cannot be added to this route.")
            return False
        self._commit_stops(stops)
        return True

    def move_stop(self, index: int, direction: int) -> bool:
        return self._apply(sequence.move(self._snapshot.stops, index, direction))

    def remove_stop(self, index: int) -> bool:
        return self._apply(sequence.remove_at(self._snapshot.stops, index))

    def set_stop_offset(self, index: int, raw: Any) -> bool:
        return self._apply(sequence.set_offset(self._snapshot.stops, index, raw))

    def _apply(self, stops: tuple[Stop, ...]) -> bool:
        if stops == self._snapshot.stops:
            return False
        self._commit_stops(stops)
        return True

    # ----- read side -----

    def office_label(self, office_id: OfficeId) -> str:
        key = sequence.office_key(office_id)
        for option in self.offices:
            if sequence.office_key(option.id) == key:
                return option.label
        return key

    def preview(self) -> list[PreviewStop]:
        return [
            PreviewStop(
                label=stop.office_name or self.office_label(stop.office),
                offset=stop.scheduled_offset_min,
                order=stop.order,
            )
            for stop in sorted(self._snapshot.stops, key=lambda stop: stop.order)
        ]

    @property
    def validation_error(self) -> Optional[str]:
        return sequence.validation_error(self._snapshot)

    @property
    def can_save(self) -> bool:
        return self.validation_error is None

    # ----- persistence -----

    def submit(self, client: RoutesClient) -> Optional[RouteRecord]:
        """Create or fully replace the route on the backend.

        Returns the saved record, or ``None`` when validation or the backend
        call failed; the draft is kept as is in both cases so it can be fixed
        and resubmitted.
        """
        problem = self.validation_error
        if problem:
            self.notifier.error(problem)
            return None

        snapshot = self._snapshot
        body = draft_to_body(snapshot)
        try:
            if snapshot.id is not None:
                saved = self.notifier.promise(
                    lambda: client.update_route(snapshot.id, body),
                    loading="Updating route…",
                    success="Route updated",
                    error=lambda exc: error_message(exc, "Failed to update route"),
                )
            else:
                saved = self.notifier.promise(
                    lambda: client.create_route(body),
                    loading="Creating route…",
                    success="Route created",
                    error=lambda exc: error_message(exc, "Failed to create route"),
                )
        except ApiError as exc:
            logger.warning(f"Saving route {snapshot.name!r} failed ({exc.status}): {exc}")
            return None
        return saved
