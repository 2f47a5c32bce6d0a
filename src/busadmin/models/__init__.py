"""Domain models."""

from .domain import OfficeId, PreviewStop, RouteDraft, Stop

__all__ = ["OfficeId", "PreviewStop", "RouteDraft", "Stop"]
