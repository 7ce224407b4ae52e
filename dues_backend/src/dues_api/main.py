from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import MEMORY_DB, SQLiteConnectionProvider
from .errors import InvalidUpdatePayload, QueryFailed, StoreUnavailable
from .observability import setup_logging
from .repositories import DueRepository
from .routers import dues as dues_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "dues", "description": "CRUD operations for dues with single-field updates."},
]


def _error_body(error: str, message: str, detail) -> dict:
    return {"error": error, "message": message, "detail": detail}


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application with its own connection provider and
    repository. The repository is stored on app.state and reaches routes
    through the get_repository dependency.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Dues Backend",
        description="Backend API service for managing dues.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )

    db_path = settings.sqlite_db_path if settings.persistence_backend == "sqlite" else MEMORY_DB
    app.state.settings = settings
    app.state.repository = DueRepository(SQLiteConnectionProvider(db_path))
    logger.info("Dues backend using %s storage (%s)", settings.persistence_backend, db_path)

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for request validation errors.

        Response format:
            {
                "error": "ValidationError",
                "detail": [... pydantic/fastapi error details ...],
                "message": "Request validation failed"
            }
        """
        return JSONResponse(
            status_code=422,
            content=_error_body("ValidationError", "Request validation failed", jsonable_encoder(exc.errors())),
        )

    @app.exception_handler(InvalidUpdatePayload)
    async def invalid_update_handler(request: Request, exc: InvalidUpdatePayload) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=_error_body("InvalidUpdatePayload", exc.message, None),
        )

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content=_error_body("StoreUnavailable", "Database unavailable", str(exc)),
        )

    @app.exception_handler(QueryFailed)
    async def query_failed_handler(request: Request, exc: QueryFailed) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content=_error_body("QueryFailed", "Database query failed", str(exc)),
        )

    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health.
        """
        return {"message": "Healthy", "backend": settings.persistence_backend}

    app.include_router(dues_router.router)
    return app


app = create_app()
