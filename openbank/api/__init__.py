"""HTTP API for the open banking mock service."""
from fastapi import APIRouter

from openbank.api.routes import data_router, link_router, webhook_router

router = APIRouter()
router.include_router(link_router)
router.include_router(data_router)
router.include_router(webhook_router)

__all__ = ["router"]
