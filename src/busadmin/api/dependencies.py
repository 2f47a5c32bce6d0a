"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, status

from ..clients.api import ApiClient, ApiError
from ..clients.offices import OfficesClient
from ..clients.routes import RoutesClient


@lru_cache()
def get_api_client() -> ApiClient:
    """Cached backend client; raises 503 when no backend URL is configured."""
    try:
        return ApiClient()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


def get_routes_client(api: ApiClient = Depends(get_api_client)) -> RoutesClient:
    return RoutesClient(api)


def get_offices_client(api: ApiClient = Depends(get_api_client)) -> OfficesClient:
    return OfficesClient(api)


def backend_http_error(exc: ApiError) -> HTTPException:
    """Pass backend client errors (4xx) through; everything else is a bad gateway."""
    code = exc.status if 400 <= exc.status < 500 else status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail=str(exc))
