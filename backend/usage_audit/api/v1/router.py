"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from .audit import router as audit_router
from .health import router as health_router

router = APIRouter(prefix="/api/v1")

router.include_router(health_router)
router.include_router(audit_router)
