"""
FastAPI dependencies for dependency injection.

The application factory builds the store, generator and aggregator once and
keeps them on app.state; these providers hand them to routes. Nothing here is
a module-level singleton, so every app (and every test) gets its own state.
"""

from fastapi import Depends, Request

from quicklink_app.config import Settings
from quicklink_app.services.url_service import URLService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_base_url(request: Request, settings: Settings = Depends(get_settings)) -> str:
    """Configured public base URL, or the one the request came in on"""
    return (settings.base_url or str(request.base_url)).rstrip("/")


def get_url_service(request: Request) -> URLService:
    """
    Get URLService with all dependencies injected.
    
    Controller depends on service, service depends on the in-memory
    infrastructure (store, generator, aggregator).
    """
    state = request.app.state
    return URLService(
        store=state.store,
        generator=state.generator,
        aggregator=state.aggregator,
        settings=state.settings,
    )
