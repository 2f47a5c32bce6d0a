from typing import Callable

import pytest

from src.busadmin.schemas.routes import OfficeOption, RouteRecord, RouteStopRecord


class RecordingNotifier:
    """Collects every message instead of showing it."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def promise(self, action: Callable, *, loading: str, success: str, error) -> object:
        self.messages.append(("loading", loading))
        try:
            result = action()
        except Exception as exc:
            self.error(error(exc) if callable(error) else error)
            raise
        self.messages.append(("success", success))
        return result

    def of_kind(self, kind: str) -> list[str]:
        return [message for level, message in self.messages if level == kind]


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def offices() -> list[OfficeOption]:
    return [
        OfficeOption(id=1, label="LPZ — La Paz"),
        OfficeOption(id=2, label="ORU — Oruro"),
        OfficeOption(id=3, label="CBB — Cochabamba"),
        OfficeOption(id=4, label="SCZ — Santa Cruz"),
    ]


def make_route(route_id: int = 10, offices=(1, 2, 4), name: str = "LPZ-SCZ") -> RouteRecord:
    return RouteRecord(
        id=route_id,
        name=name,
        origin=offices[0],
        destination=offices[-1],
        active=True,
        stops=[
            RouteStopRecord(
                id=route_id * 100 + idx,
                office=office,
                order=idx,
                scheduled_offset_min=idx * 30,
            )
            for idx, office in enumerate(offices)
        ],
    )
