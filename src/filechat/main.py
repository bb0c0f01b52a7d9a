"""
FileChat - Main Application.

FastAPI application with modular routers and feature flags. Collaborators
(database, file storage, text generator, metrics) are built once in the
lifespan handler and kept on ``app.state``.
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filechat import __version__
from filechat.config import Settings, get_settings
from filechat.core.database import Database
from filechat.core.file_storage import FileStorage
from filechat.core.gemini import GeminiGenerator, TextGenerator
from filechat.exceptions import FileChatException
from filechat.observability.metrics import MetricsStore
from filechat.schemas import ErrorDetail, ErrorResponse, HealthResponse

# Import module routers
from filechat.modules.agent.router import router as chat_router
from filechat.modules.conversations.router import router as conversations_router
from filechat.modules.files.router import router as files_router
from filechat.modules.files.router import upload_router
from filechat.modules.voice.router import router as voice_router
from filechat.observability.router import router as metrics_router

# Configure standard logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("filechat")


def _error_body(code: str, message: str, details=None, request_id: str | None = None) -> dict:
    error = ErrorDetail(code=code, message=message, details=details, request_id=request_id)
    return ErrorResponse(error=error).model_dump(mode="json")


def _record_error(request: Request, code: str) -> None:
    metrics = getattr(request.app.state, "metrics", None)
    if metrics is not None:
        metrics.record_error(code)


def create_app(settings: Settings | None = None, generator: TextGenerator | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to the cached environment settings
        generator: Text generator to use instead of Gemini (tests)
    """
    settings = settings or get_settings()
    logging.getLogger("filechat").setLevel(settings.app_log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        database = Database.from_settings(
            settings.storage,
            default_user_id=settings.default_user_id,
        )
        await database.init_schema()

        app.state.database = database
        app.state.file_storage = FileStorage(
            settings.storage.upload_dir,
            settings.storage.allowed_extensions,
            settings.storage.max_file_size_bytes,
        )
        app.state.generator = generator or GeminiGenerator(settings.gemini)
        app.state.metrics = MetricsStore()

        logger.info(
            f"Starting FileChat API v{__version__} "
            f"[env={settings.app_env}] "
            f"[db={settings.storage.database_path}] "
            f"[features={settings.features.to_dict()}]"
        )
        yield
        await database.dispose()
        logger.info("Shutting down FileChat API")

    app = FastAPI(
        title="FileChat API",
        description="Upload log, CSV, spreadsheet or text files and ask questions about them.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.settings = settings

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # Middleware
    # =========================================================================

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.info(f"[{request_id}] {request.method} {request.url.path}")

        response = await call_next(request)

        logger.info(f"[{request_id}] {request.method} {request.url.path} -> {response.status_code}")
        return response

    # Registered last so it runs first and the logger sees the id
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add request ID to all requests."""
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(FileChatException)
    async def filechat_exception_handler(request: Request, exc: FileChatException):
        """Handle FileChat custom exceptions."""
        request_id = getattr(request.state, "request_id", None)
        logger.warning(f"FileChatException: {exc.code} - {exc.message}")
        _record_error(request, exc.code)

        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, exc.details, request_id),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report malformed request bodies as 400 before any processing."""
        request_id = getattr(request.state, "request_id", None)
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
            for e in exc.errors()
        ]
        first = errors[0]["msg"] if errors else "Invalid request"
        _record_error(request, "VALIDATION_ERROR")

        return JSONResponse(
            status_code=400,
            content=_error_body("VALIDATION_ERROR", first, {"errors": errors}, request_id),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        request_id = getattr(request.state, "request_id", None)

        logger.error(f"Unhandled exception on {request.url.path}")
        logger.error(f"Exception type: {type(exc).__name__}")
        logger.error(f"Exception message: {str(exc)}")
        logger.error(f"Traceback:\n{traceback.format_exc()}")
        _record_error(request, "INTERNAL_ERROR")

        return JSONResponse(
            status_code=500,
            content=_error_body(
                "INTERNAL_ERROR",
                str(exc) if settings.app_debug else "An unexpected error occurred",
                request_id=request_id,
            ),
        )

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        database = getattr(request.app.state, "database", None)
        connected = database is not None and await database.ping()
        return HealthResponse(
            status="healthy" if connected else "degraded",
            version=__version__,
            features=settings.features.to_dict(),
            app_env=settings.app_env,
            is_production=settings.is_production,
            database="connected" if connected else "unavailable",
        )

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint."""
        return {
            "message": "FileChat API",
            "version": __version__,
            "docs": "/docs",
        }

    # =========================================================================
    # Register Module Routers
    # =========================================================================

    app.include_router(upload_router)
    app.include_router(files_router)
    app.include_router(conversations_router)
    app.include_router(chat_router)
    app.include_router(voice_router)
    app.include_router(metrics_router)

    return app


app = create_app()
