from fastapi import APIRouter

from illustration_ai.api.routes import health, illustrations
from illustration_ai.config import settings

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(illustrations.router, prefix=settings.api_prefix, tags=["Illustrations"])
