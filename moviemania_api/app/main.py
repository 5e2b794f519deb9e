"""
Main entrypoint for the MovieMania API.

This module assembles the FastAPI application, sets up logging, CORS
and the storage error handler, and includes the routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn moviemania_api.app.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api.router import router
from .core.config import settings
from .core.db import init_db
from .core.errors import StoreError, request_validation_exception_handler, storage_exception_handler
from .core.logging_config import setup_logging
from .core.security import ensure_secret_key
from .services.admin_service import AdminService


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that the secret warning below is visible.
    setup_logging(settings.log_level, settings.log_file or None)
    ensure_secret_key()

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StoreError, storage_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.include_router(router)

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()
        created = await AdminService.ensure_owner(
            settings.bootstrap_owner_username, settings.bootstrap_owner_password
        )
        if created:
            logger.info("Created bootstrap owner %s", settings.bootstrap_owner_username)
        logger.info("Using %s storage backend", settings.storage_backend)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
