"""Paginated route list with search, saving, deletion and quick reorder."""

from __future__ import annotations

import logging
import math
import threading
from typing import Optional

from ...clients.api import ApiError
from ...clients.routes import RoutesClient
from ...config import settings
from ...schemas.routes import Id, ListRoutesParams, RouteListResult, RouteRecord
from ..notifier import Notifier, error_message
from ..sequencing import Debouncer, RequestSequencer
from .editor import RouteEditor
from .sequence import reorder_stop_ids

logger = logging.getLogger(__name__)


class RouteListController:
    """State behind the routes screen.

    Only the most recently issued list request may update ``items``; older
    responses (successful or not) are dropped when they arrive.
    """

    def __init__(
        self,
        client: RoutesClient,
        notifier: Notifier,
        *,
        page_size: int | None = None,
        debounce_seconds: float | None = None,
    ) -> None:
        self.client = client
        self.notifier = notifier
        self.page_size = page_size or settings.routes_page_size
        self.query = ""
        self.page = 1
        self.items: list[RouteRecord] = []
        self.total = 0
        self.loading = False
        self.error: Optional[str] = None
        self._state_lock = threading.RLock()
        self._sequencer = RequestSequencer(self._state_lock)
        self._search = Debouncer(
            self._apply_search,
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds,
        )

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.page_size))

    # ----- loading -----

    def fetch(self) -> bool:
        """Load the current page. Returns ``False`` if the response was stale or failed."""
        return self._load(*self._begin())

    def _begin(self, *, query: Optional[str] = None, page: Optional[int] = None) -> tuple[int, ListRoutesParams]:
        # query/page updates and the token they are fetched under are taken together
        with self._state_lock:
            if query is not None:
                self.query = query
            if page is not None:
                self.page = page
            token = self._sequencer.issue()
            params = ListRoutesParams(
                q=self.query or None,
                page=self.page,
                page_size=self.page_size,
                ordering="name",
            )
            self.loading = True
        return token, params

    def _load(self, token: int, params: ListRoutesParams) -> bool:
        try:
            result = self.client.list_routes(params)
        except ApiError as exc:
            message = error_message(exc, "Failed to load routes")
            if not self._sequencer.apply_if_current(token, lambda: self._set_failure(message)):
                logger.debug(f"Ignoring failure of superseded list request #{token}")
                return False
            self.notifier.error(message)
            return False
        except Exception:
            self._sequencer.apply_if_current(token, self._set_idle)
            raise

        if not self._sequencer.apply_if_current(token, lambda: self._set_page(result)):
            logger.debug(f"Discarding stale list response #{token}")
            return False
        return True

    def _set_page(self, result: RouteListResult) -> None:
        self.items = list(result.items)
        self.total = result.total
        self.error = None
        self.loading = False

    def _set_failure(self, message: str) -> None:
        self.error = message
        self.loading = False

    def _set_idle(self) -> None:
        self.loading = False

    def search(self, text: str) -> None:
        self._search.submit(text)

    def flush_search(self) -> bool:
        return self._search.flush()

    def _apply_search(self, text: str) -> None:
        # runs on the debounce timer thread
        self._load(*self._begin(query=text.strip(), page=1))

    def go_to_page(self, page: int) -> bool:
        with self._state_lock:
            page = min(max(1, page), self.total_pages)
            if page == self.page:
                return False
        return self._load(*self._begin(page=page))

    def close(self) -> None:
        self._search.cancel()

    # ----- local updates -----

    def replace_item(self, updated: RouteRecord) -> None:
        with self._state_lock:
            self.items = [updated if route.id == updated.id else route for route in self.items]

    def add_item(self, created: RouteRecord) -> None:
        with self._state_lock:
            self.items = [created, *self.items]
            self.total += 1

    def remove_item(self, route_id: Id) -> None:
        with self._state_lock:
            self.items = [route for route in self.items if route.id != route_id]
            self.total = max(0, self.total - 1)

    # ----- actions -----

    def save(self, editor: RouteEditor) -> Optional[RouteRecord]:
        is_new = editor.is_new
        saved = editor.submit(self.client)
        if saved is None:
            return None
        if is_new:
            self.add_item(saved)
        else:
            self.replace_item(saved)
        self.fetch()
        return saved

    def delete(self, route_id: Id) -> bool:
        try:
            self.notifier.promise(
                lambda: self.client.delete_route(route_id),
                loading="Deleting…",
                success="Route deleted",
                error=lambda exc: error_message(exc, "Failed to delete route"),
            )
        except ApiError:
            return False
        self.remove_item(route_id)
        self.fetch()
        return True

    def quick_reorder(self, route: RouteRecord, index: int, direction: int) -> Optional[RouteRecord]:
        """Move an intermediate stop of a saved route one slot up or down on the server.

        The whole new id ordering is sent; the server recomputes order and
        offsets and its answer replaces the row. On failure the row is left
        exactly as it was.
        """
        stop_ids = reorder_stop_ids(route.stops, index, direction)
        if stop_ids is None:
            return None
        try:
            updated = self.notifier.promise(
                lambda: self.client.reorder_stops(route.id, stop_ids),
                loading="Reordering stops…",
                success="Stops reordered",
                error=lambda exc: error_message(exc, "Could not reorder stops"),
            )
        except ApiError as exc:
            logger.warning(f"Reorder of route {route.id} failed ({exc.status}): {exc}")
            return None
        self.replace_item(updated)
        return updated
