"""
Recipe - FastAPI Application Entry Point.

Exposes the registered recipes over HTTP so they can be listed and run.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse
import logging

from recipe.config import settings
from recipe.api.routes import recipes
from recipe.registry import recipe_registry

# Import the sample recipes to register them
import recipe.workflows  # noqa: F401


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Registered recipes: {[r.name for r in recipe_registry]}")

    yield

    logger.info("Shutting down...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
## Recipe API

Run multi-step, reversible workflows.

### Concepts
- **Steps**: methods that receive the state and return a new one, or a failure value
- **Recipes**: an ordered list of steps plus result and error handlers
- **Correlation id**: identifies each run, returned with the outcome
- **Telemetry**: per-step events with execution time

### Quick Start
1. List available recipes: `GET /recipes`
2. Run a recipe: `POST /recipes/{name}/run`
    """,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Include routers
app.include_router(recipes.router)


# ============================================================
# Root Endpoints
# ============================================================

@app.get("/", tags=["Root"])
async def root():
    """API root - returns basic info and links."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Run multi-step, reversible workflows",
        "docs": "/docs",
        "redoc": "/redoc",
        "endpoints": {
            "recipes": "/recipes",
            "run": "/recipes/{name}/run",
        },
    }


@app.get("/health", tags=["Root"])
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "recipes_count": len(recipe_registry),
    }


# ============================================================
# Error Handlers
# ============================================================

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.exception(f"Unhandled error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "detail": str(exc) if settings.DEBUG else "An unexpected error occurred",
        },
    )
