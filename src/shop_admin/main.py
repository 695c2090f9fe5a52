"""FastAPI application entrypoint for the shop admin service."""

import logging

from fastapi import FastAPI

from .api.v1.router import api_router
from .core.config import get_settings
from .core.logging import configure_logging
from .core.migrations import upgrade_database
from .services.view_events import RecentInvalidations, ViewInvalidationNotifier

logger = logging.getLogger(__name__)


def register_migrations(app: FastAPI) -> None:
    """Upgrade the schema once before the first request is served."""

    @app.on_event("startup")
    def apply_migrations() -> None:
        settings = get_settings()
        if settings.run_migrations_on_startup:
            upgrade_database(settings.database_url)
        else:
            logger.info("startup migrations disabled")


def create_app() -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Shop Admin API", version="0.1.0")
    app.state.view_notifier = ViewInvalidationNotifier()
    app.state.recent_invalidations = RecentInvalidations(maxlen=settings.invalidation_history_size)
    app.state.view_notifier.subscribe(app.state.recent_invalidations)

    app.include_router(api_router, prefix="/api/v1")
    register_migrations(app)
    return app


app = create_app()
