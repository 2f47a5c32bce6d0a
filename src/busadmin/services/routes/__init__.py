"""Route stop sequencing, editing and listing."""

from .editor import RouteEditor
from .listing import RouteListController
from .mapping import draft_from_record, draft_to_body

__all__ = ["RouteEditor", "RouteListController", "draft_from_record", "draft_to_body"]
