from fastapi import APIRouter

from signed_assets.api.routes.health import router as health_router
from signed_assets.api.routes.rewrite import router as rewrite_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(rewrite_router)
