"""API routers for the backend service."""

from fastapi import APIRouter

from .routes import health_router
from .v1 import chat

api_router = APIRouter()
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])

__all__ = ["api_router"]
