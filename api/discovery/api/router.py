"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import discover

api_router = APIRouter()
api_router.include_router(discover.router, prefix="/discover", tags=["discover"])
