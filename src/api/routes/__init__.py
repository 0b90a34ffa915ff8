from fastapi import FastAPI
from src.core.config import get_settings

from . import admin, health, instructors, reviews


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    prefix = get_settings().api_prefix
    app.include_router(health.router)
    app.include_router(admin.router, prefix=prefix)
    app.include_router(instructors.router, prefix=prefix)
    app.include_router(reviews.router, prefix=prefix)
