"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.v1.router import api_router
from app.config.settings import Settings, get_settings
from app.core.exceptions import APIException
from app.core.logger import setup_logging
from app.schemas.common import ErrorResponse
from app.schemas.employee import utcnow
from app.services.directory import DirectoryService, FirebaseDirectory
from app.services.firebase import close_firebase_app, init_firebase_app
from app.services.record_store import FirebaseRecordStore, RecordStore

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=error).model_dump())


async def _build_collaborators(app: FastAPI, settings: Settings) -> None:
    """Create the directory and record store once for the application lifetime."""
    needs_firebase = app.state.directory is None or (
        app.state.record_store is None and settings.record_store_backend == "firebase"
    )
    firebase_app = init_firebase_app(settings) if needs_firebase else None
    app.state.firebase_app = firebase_app

    if app.state.directory is None:
        app.state.directory = FirebaseDirectory(firebase_app)

    if app.state.record_store is None:
        if settings.record_store_backend == "sql":
            from app.config.database import create_engine, create_session_factory
            from app.services.sql_record_store import SqlRecordStore

            app.state.engine = create_engine(settings)
            app.state.record_store = SqlRecordStore(create_session_factory(app.state.engine))
        else:
            app.state.record_store = FirebaseRecordStore(firebase_app, settings.root_namespace)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("Starting %s v%s (%s)", settings.app_name, settings.app_version, settings.environment)

    if app.state.directory is None or app.state.record_store is None:
        await _build_collaborators(app, settings)
    logger.info("Record store: %s", type(app.state.record_store).__name__)
    yield

    engine = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.dispose()
    firebase_app = getattr(app.state, "firebase_app", None)
    if firebase_app is not None:
        close_firebase_app(firebase_app)
    logger.info("Shutting down %s", settings.app_name)


def create_app(
    settings: Optional[Settings] = None,
    directory: Optional[DirectoryService] = None,
    record_store: Optional[RecordStore] = None,
) -> FastAPI:
    """Build the application. Collaborators not passed in are created at startup."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Shop employee account management",
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )
    app.state.settings = settings
    app.state.directory = directory
    app.state.record_store = record_store

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if not isinstance(exc, APIException) and exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error(exc.status_code, "Endpoint not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        problems = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"] if part != "body")
            problems.append(f"{location}: {err['msg']}" if location else err["msg"])
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request: " + "; ".join(problems))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = "Internal server error" if settings.is_production else str(exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

    # Include API router
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "success": True,
            "message": "Employee Management API is running",
            "timestamp": utcnow().isoformat(),
            "environment": settings.environment,
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        prefix = settings.api_prefix
        return {
            "success": True,
            "message": f"{settings.app_name} API",
            "version": settings.app_version,
            "endpoints": {
                "health": f"{prefix}/health",
                "generateEmployees": f"{prefix}/generate-employees",
                "getEmployees": f"{prefix}/shop/:shopId/employees",
                "getBatchLogs": f"{prefix}/shop/:shopId/batch-logs",
                "updateStatus": f"{prefix}/employees/:employeeId/status",
                "resetPassword": f"{prefix}/employees/:employeeId/reset-password",
                "updateEmployee": f"{prefix}/employees/:employeeId",
                "deleteEmployee": f"{prefix}/employees/:employeeId",
                "docs": f"{prefix}/docs",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=3001,
        reload=True
    )
