"""FastAPI app factory.

Endpoints are thin wrappers over the engine and the in-memory registry.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from helpdesk_workflows import __version__
from helpdesk_workflows.engine.logging import configure_logging
from helpdesk_workflows.engine.registry import VersionNotFound, WorkflowNotFound, WorkflowRegistry
from helpdesk_workflows.engine.workflow.templates import TemplateNotFound
from helpdesk_workflows.server.config import ServerSettings
from helpdesk_workflows.server.workflow_router import router as workflow_router

logger = logging.getLogger(__name__)


def _not_found(_request: Request, exc: Exception) -> JSONResponse:
    logger.info("Reference not found", extra={"detail": str(exc)})
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def create_app(registry: WorkflowRegistry | None = None) -> FastAPI:
    settings = ServerSettings()
    configure_logging(settings.log_level, json_output=settings.log_format == "json")

    app = FastAPI(
        title="Helpdesk Workflows",
        version=__version__,
        description="Validate, simulate, publish and diff helpdesk workflow graphs.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    app.state.registry = registry or WorkflowRegistry(default_author=settings.default_author)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for exc_type in (WorkflowNotFound, VersionNotFound, TemplateNotFound):
        app.add_exception_handler(exc_type, _not_found)

    app.include_router(workflow_router, prefix="/api")
    return app
