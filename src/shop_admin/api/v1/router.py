"""Primary API router definition."""

from fastapi import APIRouter

from . import admin_orders

api_router = APIRouter()

api_router.include_router(admin_orders.router)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}
