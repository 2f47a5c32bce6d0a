"""Backend REST clients."""

from .api import ApiClient, ApiError
from .offices import OfficesClient
from .routes import RoutesClient

__all__ = ["ApiClient", "ApiError", "OfficesClient", "RoutesClient"]
