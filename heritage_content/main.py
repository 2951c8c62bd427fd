"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from heritage_content.api import admin, cities, health, heritage
from heritage_content.config import get_settings
from heritage_content.db.session import init_db
from heritage_content.errors import ContentError
from heritage_content.middleware.rate_limit import limiter
from heritage_content.schemas.schemas import ErrorResponse

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    logger.info("Starting Heritage Content Service...")

    # Initialize database
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    logger.info("Heritage Content Service started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Heritage Content Service...")


# Create FastAPI app
app = FastAPI(
    title="Heritage Content Service",
    description="""
## Multilingual Indian Cultural Heritage API

Localized content about cities, their heritage items and image galleries.

### Languages
Every text field may be translated into any of 23 languages (English and the
22 scheduled Indian languages). Pick one with the `language` query parameter
or the `Accept-Language` header. Missing translations fall back to English,
then to a field default, so no field is ever left blank.

### Caching
Responses are cached per language and filter set: city lists for 5 minutes,
heritage content for 10 minutes, image sets for 30 minutes and the language
catalog for 1 hour. Content writes invalidate the affected views.

### Errors
Errors carry a stable `code`: `NOT_FOUND`, `VALIDATION_ERROR`,
`RESOLUTION_TIMEOUT`.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["GET", "PUT", "POST", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(ContentError)
async def content_error_handler(request: Request, exc: ContentError):
    """Render domain errors with their stable code."""
    if exc.status_code >= 500:
        logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.code.replace("_", " ").capitalize(),
            detail=exc.message,
            code=exc.code,
        ).model_dump(),
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        },
    )


# Include routers
app.include_router(health.router)
app.include_router(cities.router)
app.include_router(heritage.router)
app.include_router(admin.router)


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with service info."""
    return {
        "service": "Heritage Content Service",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "heritage_content.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
