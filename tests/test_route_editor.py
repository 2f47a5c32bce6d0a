from conftest import make_route

from src.busadmin.clients.api import ApiError
from src.busadmin.schemas.routes import RouteRecord, RouteStopRecord
from src.busadmin.services.routes.editor import RouteEditor


class FakeRoutesClient:
    def __init__(self, fail: Exception | None = None) -> None:
        self.fail = fail
        self.created = []
        self.updated = []

    def _record(self, route_id, body) -> RouteRecord:
        return RouteRecord(
            id=route_id,
            name=body.name,
            origin=body.origin,
            destination=body.destination,
            active=body.active,
            stops=[
                RouteStopRecord(
                    id=route_id * 100 + stop.order,
                    office=stop.office,
                    order=stop.order,
                    scheduled_offset_min=stop.scheduled_offset_min,
                )
                for stop in body.stops
            ],
        )

    def create_route(self, body):
        if self.fail:
            raise self.fail
        self.created.append(body)
        return self._record(99, body)

    def update_route(self, route_id, body, *, partial=False):
        if self.fail:
            raise self.fail
        self.updated.append((route_id, body))
        return self._record(route_id, body)


def _offices_of(editor: RouteEditor) -> list:
    return [stop.office for stop in editor.snapshot.stops]


def _new_route(notifier, offices) -> RouteEditor:
    editor = RouteEditor.for_create(notifier, offices)
    editor.set_name("LPZ-SCZ")
    editor.set_origin(1)
    editor.set_destination(4)
    return editor


def test_create_flow_synthesizes_endpoints(notifier, offices):
    editor = _new_route(notifier, offices)

    assert _offices_of(editor) == [1, 4]
    assert [s.scheduled_offset_min for s in editor.snapshot.stops] == [0, None]
    assert editor.can_save
    assert editor.is_new


def test_add_intermediate_stop_uses_first_available_office(notifier, offices):
    editor = _new_route(notifier, offices)

    assert editor.add_intermediate_stop()
    assert editor.add_intermediate_stop()

    assert _offices_of(editor) == [1, 2, 3, 4]
    assert not editor.can_add_intermediate
    assert editor.add_intermediate_stop() is False
    assert notifier.of_kind("info") == ["No more offices available to add as a stop."]


def test_add_intermediate_stop_rejects_duplicate_office(notifier, offices):
    editor = _new_route(notifier, offices)

    assert editor.add_intermediate_stop(4) is False

    assert _offices_of(editor) == [1, 4]
    assert notifier.of_kind("warn") == ["Office SCZ — Santa Cruz cannot be added to this route."]


def test_add_intermediate_stop_needs_endpoints(notifier, offices):
    editor = RouteEditor.for_create(notifier, offices)
    editor.set_origin(1)

    assert not editor.can_add_intermediate
    assert editor.add_intermediate_stop(2) is False
    assert _offices_of(editor) == [1]


def test_move_and_remove_keep_endpoints_in_sync(notifier, offices):
    editor = _new_route(notifier, offices)
    editor.add_intermediate_stop(2)
    editor.add_intermediate_stop(3)

    assert editor.move_stop(1, 1)
    assert _offices_of(editor) == [1, 3, 2, 4]

    assert editor.remove_stop(0) is False
    assert editor.move_stop(2, 1) is False
    assert editor.remove_stop(2)

    assert _offices_of(editor) == [1, 3, 4]
    assert [s.order for s in editor.snapshot.stops] == [0, 1, 2]
    assert editor.draft.origin == 1
    assert editor.draft.destination == 4


def test_set_stop_offset_clamps_to_previous_stop(notifier, offices):
    editor = RouteEditor.for_edit(make_route(offices=(1, 2, 3, 4)), notifier, offices)

    assert editor.set_stop_offset(3, "10")

    assert [s.scheduled_offset_min for s in editor.snapshot.stops] == [0, 30, 60, 60]


def test_for_edit_sorts_stops_by_order(notifier, offices):
    record = make_route(offices=(1, 2, 4))
    record = record.model_copy(update={"stops": list(reversed(record.stops))})

    editor = RouteEditor.for_edit(record, notifier, offices)

    assert _offices_of(editor) == [1, 2, 4]
    assert not editor.is_new


def test_changing_origin_replaces_first_stop_and_drops_duplicate(notifier, offices):
    editor = RouteEditor.for_edit(make_route(offices=(1, 2, 4)), notifier, offices)

    editor.set_origin(2)

    assert _offices_of(editor) == [2, 4]
    assert editor.snapshot.stops[0].scheduled_offset_min == 0


def test_available_offices_for_editor(notifier, offices):
    editor = RouteEditor.for_edit(make_route(offices=(1, 2, 4)), notifier, offices)

    assert [o.id for o in editor.available_offices()] == [3]
    assert [o.id for o in editor.available_offices(exclude_index=1)] == [2, 3]


def test_preview_uses_office_labels(notifier, offices):
    editor = RouteEditor.for_edit(make_route(offices=(1, 2, 4)), notifier, offices)

    preview = editor.preview()

    assert [p.label for p in preview] == ["LPZ — La Paz", "ORU — Oruro", "SCZ — Santa Cruz"]
    assert [p.offset for p in preview] == [0, 30, 60]
    assert editor.office_label(77) == "77"


def test_submit_blocks_invalid_draft(notifier, offices):
    client = FakeRoutesClient()
    editor = RouteEditor.for_create(notifier, offices)
    editor.set_origin(1)
    editor.set_destination(4)

    assert editor.submit(client) is None

    assert client.created == []
    assert notifier.of_kind("error") == ["Route name is required."]


def test_submit_creates_new_route(notifier, offices):
    client = FakeRoutesClient()
    editor = _new_route(notifier, offices)
    editor.add_intermediate_stop(2)
    editor.set_stop_offset(2, "95")

    saved = editor.submit(client)

    assert saved is not None and saved.id == 99
    body = client.created[0]
    assert body.name == "LPZ-SCZ"
    assert [(s.office, s.order, s.scheduled_offset_min) for s in body.stops] == [
        (1, 0, 0),
        (2, 1, 0),
        (4, 2, 95),
    ]
    assert notifier.of_kind("success") == ["Route created"]


def test_submit_updates_existing_route(notifier, offices):
    client = FakeRoutesClient()
    editor = RouteEditor.for_edit(make_route(route_id=10), notifier, offices)
    editor.set_name("LPZ-SCZ express")

    saved = editor.submit(client)

    assert saved is not None
    route_id, body = client.updated[0]
    assert route_id == 10
    assert body.name == "LPZ-SCZ express"
    assert notifier.of_kind("success") == ["Route updated"]


def test_submit_failure_keeps_draft(notifier, offices):
    client = FakeRoutesClient(fail=ApiError("Office 4 is inactive", status=400))
    editor = _new_route(notifier, offices)
    before = editor.draft

    assert editor.submit(client) is None

    assert editor.draft == before
    assert notifier.of_kind("error") == ["Office 4 is inactive"]
