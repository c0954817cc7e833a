"""
Scribe Match - FastAPI Application

Main entry point for the matching engine API.
Hosts matching sessions: ranked scribe candidates for a student's exam.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scribe_match.config.settings import settings
from scribe_match.infrastructure.exceptions import (
    ScribeMatchError,
    ValidationError,
    NotFoundError,
    SessionClosedError,
    ConfigurationError,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info(f"Scribe Match starting in {settings.environment} mode...")

    yield

    # Shutdown: stop every session's real-time timer and in-flight run
    from scribe_match.api.dependencies import get_session_registry
    registry = get_session_registry()
    open_sessions = len(registry)
    await registry.close_all()
    logger.info(f"Scribe Match shutting down ({open_sessions} sessions closed)...")


app = FastAPI(
    title="Scribe Match",
    description="Scribe matching and ranking engine for students with disabilities",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.debug,
)

# CORS configuration from Settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Exception Handlers
# ============================================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=400,
        content=exc.to_dict(),
    )


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    """Handle not found errors."""
    return JSONResponse(
        status_code=404,
        content=exc.to_dict(),
    )


@app.exception_handler(SessionClosedError)
async def session_closed_error_handler(request: Request, exc: SessionClosedError):
    """Handle requests against a closed session."""
    return JSONResponse(
        status_code=409,
        content=exc.to_dict(),
    )


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """Handle missing or invalid configuration."""
    return JSONResponse(
        status_code=503,
        content=exc.to_dict(),
    )


@app.exception_handler(ScribeMatchError)
async def general_error_handler(request: Request, exc: ScribeMatchError):
    """Handle all other application errors."""
    return JSONResponse(
        status_code=500,
        content=exc.to_dict(),
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "scribe-match"}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Scribe Match API",
        "version": "1.0.0",
        "docs": "/docs",
    }


# ============================================================================
# Import and register routers
# ============================================================================

from scribe_match.api.routes import matching

app.include_router(matching.router, prefix="/api")
