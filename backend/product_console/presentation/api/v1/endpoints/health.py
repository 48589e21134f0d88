"""Health check endpoint — no remote calls, always available."""

from fastapi import APIRouter, Depends

from product_console.application.services import EditSessionRegistry
from product_console.config import get_settings
from product_console.infrastructure.dependencies import get_session_registry

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    registry: EditSessionRegistry = Depends(get_session_registry),
) -> dict:
    """Returns the current application health status."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "active_sessions": len(registry),
    }
