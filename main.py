from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from quicklink_app.analytics.aggregator import AnalyticsAggregator
from quicklink_app.api import redirect, stats, urls
from quicklink_app.api.errors import register_exception_handlers
from quicklink_app.api.middleware import RequestContextMiddleware
from quicklink_app.cache.factory import CacheBackend, CacheFactory
from quicklink_app.cache.strategies import Clock
from quicklink_app.config import Settings, settings as default_settings
from quicklink_app.hit_processor.expiry_sweeper import ExpirySweeper
from quicklink_app.logging_config import setup_logging
from quicklink_app.services.short_code_generator import ShortCodeGenerator
from quicklink_app.services.url_service import format_uptime
from quicklink_app.storage.strategies import InMemoryRecordStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the expiry sweeper after the store exists, stop it before teardown"""
    logger = app.state.logger
    logger.info(f"Starting {app.state.settings.app_name}...")
    
    app.state.sweeper.start()
    
    yield
    
    logger.info("Shutting down...")
    await app.state.sweeper.stop()
    logger.info("Service stopped")


def create_app(settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> FastAPI:
    """
    Build the application with its own store, generator and sweeper.
    
    Args:
        settings: Settings to use (module defaults when omitted)
        clock: Time source shared by store and cache (UTC now by default)
    """
    if settings is None:
        settings = default_settings
    logger = setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        json_format=settings.log_json,
    )
    
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A URL shortener service with click analytics, built with FastAPI",
        debug=settings.debug,
        lifespan=lifespan,
    )
    
    cache = CacheFactory.create(
        CacheBackend(settings.cache_backend),
        capacity=settings.cache_capacity,
        clock=clock,
    )
    store = InMemoryRecordStore(
        cache=cache,
        hot_threshold=settings.cache_hot_threshold,
        max_events=settings.analytics_max_events,
        clock=clock,
    )
    
    app.state.settings = settings
    app.state.logger = logger
    app.state.store = store
    app.state.generator = ShortCodeGenerator()
    app.state.aggregator = AnalyticsAggregator()
    app.state.sweeper = ExpirySweeper(store, interval_seconds=settings.sweep_interval_seconds)
    app.state.started_at = datetime.now(timezone.utc)
    
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app, settings)
    
    @app.get("/")
    def read_root():
        """Root endpoint with API information"""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
            "redoc": "/redoc"
        }
    
    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint"""
        uptime = (datetime.now(timezone.utc) - request.app.state.started_at).total_seconds()
        return {
            "status": "healthy",
            "service": settings.app_name,
            "environment": settings.environment,
            "uptime": format_uptime(uptime),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    
    ######## Include routers (redirect last: it matches any single path segment)
    app.include_router(urls.router, prefix="/api")
    app.include_router(stats.router, prefix="/api")
    app.include_router(redirect.router)
    
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
