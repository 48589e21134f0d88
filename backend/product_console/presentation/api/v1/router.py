"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from product_console.presentation.api.v1.endpoints.health import router as health_router
from product_console.presentation.api.v1.endpoints.product_sessions import router as product_sessions_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(product_sessions_router)
