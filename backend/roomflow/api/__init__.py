"""API routers."""

from fastapi import APIRouter

from roomflow.api.v1 import api_router as api_v1_router
from roomflow.core.config import get_settings

settings = get_settings()

api_router = APIRouter()
api_router.include_router(api_v1_router, prefix=settings.api_v1_prefix)
