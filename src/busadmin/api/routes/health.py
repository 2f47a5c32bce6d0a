"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/backend", status_code=status.HTTP_200_OK)
def health_backend() -> dict:
    """Check that the catalogue backend is configured and answering."""
    if not settings.backend_base_url:
        return {
            "service": "backend",
            "configured": False,
            "healthy": False,
            "message": "Backend not configured. Set BUSADMIN_BACKEND_BASE_URL.",
        }
    from ..dependencies import get_api_client
    from ...clients.api import check_health

    try:
        healthy = check_health(get_api_client())
        return {"service": "backend", "configured": True, "healthy": healthy}
    except Exception as e:
        return {"service": "backend", "configured": True, "healthy": False, "error": str(e)}
