from fastapi import APIRouter

from backend.app.api.v1.endpoints.health import router as health_router
from backend.app.api.v1.endpoints.categories import router as categories_router
from backend.app.api.v1.endpoints.medications import router as medications_router
from backend.app.api.v1.endpoints.suppliers import router as suppliers_router
from backend.app.api.v1.endpoints.reprovisioning import router as reprovisioning_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(categories_router, tags=["categories"])
router.include_router(medications_router, tags=["medications"])
router.include_router(suppliers_router, tags=["suppliers"])
router.include_router(reprovisioning_router, tags=["reprovisioning"])
