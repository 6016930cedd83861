"""API v1 routes."""

from fastapi import APIRouter

from vulnreport.api.v1 import health, reports

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
