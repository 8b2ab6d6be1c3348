"""
Main entrypoint for the Member Registry API.

This module assembles the FastAPI application: it configures logging,
wires the services to a ``Settings`` instance, registers the error
handler and includes the versioned routers.  ``create_app`` builds the
app, which is then instantiated at module import time as ``app`` so it
can be served directly, e.g.::

    uvicorn member_registry_api.app.main:app --reload

Database migrations and the default administrator bootstrap run in
the lifespan handler, so importing this module never touches the
database.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings
from .core.db import init_db
from .core.exceptions import MemberRegistryError
from .core.logging_config import setup_logging
from .services import ServiceContainer
from .services.auth_service import HumanVerifier

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, verifier: Optional[HumanVerifier] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Read from the environment when omitted.
    verifier : Optional[HumanVerifier]
        Replacement for the reCAPTCHA client, used by tests.

    Returns
    -------
    FastAPI
        A configured application instance.
    """
    settings = settings or Settings.from_env()
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    services = ServiceContainer.build(settings, verifier)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Creates the database file if needed and applies pending migrations.
        init_db(settings.database_url)
        await services.auth.bootstrap_admin()
        logger.info("%s %s started", settings.project_name, settings.api_version)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MemberRegistryError)
    async def handle_member_registry_error(request: Request, exc: MemberRegistryError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "code": exc.code})

    @app.get("/", tags=["root"])
    async def root() -> dict:
        return {"message": f"Welcome to the {settings.project_name}", "docs": "/docs"}

    app.include_router(v1_router, prefix="/api/v1")

    return app


# Create the application instance at import time so that uvicorn can
# discover it without calling create_app manually.
app = create_app()
