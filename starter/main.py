"""FastAPI application set up by `starter install`."""

import logging

from fastapi import FastAPI

from starter.config import get_settings
from starter.middleware import InstallGuardMiddleware
from starter.routers import status

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    if not settings.is_installed:
        logger.warning("APP_KEY is empty; run `starter install` before serving requests")

    app = FastAPI(title=settings.app_name, debug=settings.app_debug)
    # Resolve settings per request so a reload after install takes effect
    app.add_middleware(InstallGuardMiddleware, get_settings_fn=get_settings)
    app.include_router(status.router)
    return app


app = create_app()
