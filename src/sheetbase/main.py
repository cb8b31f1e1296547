"""
Sheetbase - Main Application.

FastAPI application with modular architecture and feature flags.
"""

import logging
import sys
import traceback
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sheetbase import __version__
from sheetbase.config import get_settings
from sheetbase.deps import get_datastore
from sheetbase.exceptions import SheetbaseException
from sheetbase.schemas import HealthResponse

# Import module routers
from sheetbase.api.routes.metrics import router as metrics_router
from sheetbase.modules.inventory import router as inventory_router
from sheetbase.modules.registries import router as registries_router
from sheetbase.modules.tables import router as tables_router

# Configure standard logging
logging.basicConfig(
    level=get_settings().app_log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("sheetbase")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(
        f"Starting Sheetbase API v{__version__} "
        f"[env={settings.app_env}] "
        f"[backend={settings.sheets.backend}] "
        f"[local_fallback={settings.local_fallback}] "
        f"[features={settings.features.to_dict()}]"
    )
    yield
    if get_datastore.cache_info().currsize:
        await get_datastore().aclose()
    logger.info("Shutting down Sheetbase API")


# Create FastAPI application
app = FastAPI(
    title="Sheetbase API",
    description="Stock, issue/inward entries, production orders and vendors stored in spreadsheet tables.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Middleware
# =============================================================================


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    request_id = getattr(request.state, "request_id", "unknown")
    logger.info(f"[{request_id}] {request.method} {request.url.path}")

    response = await call_next(request)

    logger.info(f"[{request_id}] {request.method} {request.url.path} -> {response.status_code}")

    return response


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to all requests."""
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    return response


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(SheetbaseException)
async def sheetbase_exception_handler(request: Request, exc: SheetbaseException):
    """Handle Sheetbase custom exceptions."""
    request_id = getattr(request.state, "request_id", None)

    logger.warning(f"[{request_id}] SheetbaseException: {exc.code} - {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
                "details": exc.details,
                "request_id": request_id,
            }
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    request_id = getattr(request.state, "request_id", None)

    logger.error(f"Unhandled exception on {request.url.path}: {type(exc).__name__}: {exc}")
    logger.error(f"Traceback:\n{traceback.format_exc()}")

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": str(exc) if get_settings().app_debug else "An unexpected error occurred",
                "request_id": request_id,
            }
        },
    )


# =============================================================================
# Health Check
# =============================================================================


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    return HealthResponse(
        status="degraded" if settings.local_fallback else "healthy",
        version=__version__,
        features=settings.features.to_dict(),
        app_env=settings.app_env,
        is_production=settings.is_production,
        local_fallback=settings.local_fallback,
        sheets_backend=settings.sheets.backend,
    )


# =============================================================================
# Register Module Routers
# =============================================================================

app.include_router(tables_router)
app.include_router(inventory_router)
app.include_router(registries_router)
app.include_router(metrics_router)


# =============================================================================
# Root Endpoint
# =============================================================================


@app.get("/", include_in_schema=False)
async def root():
    """Root endpoint redirect to docs."""
    return {"message": "Welcome to Sheetbase API", "docs": "/docs"}
