"""User-facing notifications.

Editors and controllers receive a notifier instead of talking to a global
toast bus, so each surface (HTTP API, tests, a future UI) decides how
messages are shown.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")
ErrorMessage = Union[str, Callable[[Exception], str]]


class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def promise(
        self,
        action: Callable[[], T],
        *,
        loading: str,
        success: str,
        error: ErrorMessage,
    ) -> T: ...


def error_message(exc: Exception, fallback: str = "Unexpected error") -> str:
    return str(exc) or fallback


class LoggingNotifier:
    """Notifier that writes every message to the application log."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def info(self, message: str) -> None:
        self.log.info(message)

    def warn(self, message: str) -> None:
        self.log.warning(message)

    def error(self, message: str) -> None:
        self.log.error(message)

    def promise(
        self,
        action: Callable[[], T],
        *,
        loading: str,
        success: str,
        error: ErrorMessage,
    ) -> T:
        """Run ``action`` reporting progress; failures are reported and re-raised."""
        self.log.debug(loading)
        try:
            result = action()
        except Exception as exc:
            self.error(error(exc) if callable(error) else error)
            raise
        self.info(success)
        return result
