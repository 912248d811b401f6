"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.config import get_settings
from src.database import engine, init_db
from src.factories.service_factories import get_field_registry

# Import routers
from src.routers import health, reports

# Import middleware
from src.middleware import logging_middleware, register_exception_handlers
from src.utils.logger import configure_logging, get_logger

settings = get_settings()

# Configure logging early
configure_logging(log_level=settings.log_level, debug=settings.debug, json_logs=settings.log_json)
log = get_logger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    log.info("starting application", debug=settings.debug, log_level=settings.log_level)
    await init_db()
    log.info("database initialized")

    # Fail fast on a field configuration that disagrees with the payload models
    registry = get_field_registry()
    log.info("field registry loaded", report_types=len(registry.report_types))

    yield

    log.info("shutting down application")
    await engine.dispose()
    log.info("database connections closed")


app = FastAPI(
    title="EcoTrip Reports API",
    description="Report generation and field customization for EcoTrip travel data",
    version=API_VERSION,
    lifespan=lifespan,
)

# Register exception handlers first
register_exception_handlers(app)

# CORS middleware (must be first in middleware stack)
_cors_origins = settings.get_cors_origins_list()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins or ["*"],
    allow_credentials=bool(_cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)

app.middleware("http")(logging_middleware)

# Register routers
app.include_router(health.router, prefix="/api/v1", tags=["Health"])
app.include_router(reports.router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "EcoTrip Reports API",
        "version": API_VERSION,
        "features": [
            "Eight aggregated report types over trips, packing, posts, products and news",
            "Mandatory/optional field selection per report type",
            "Scheduled report regeneration via Celery beat",
            "JSON, CSV, PDF and Excel export",
        ],
        "endpoints": {
            "health": "/api/v1/health",
            "reports": "/api/v1/reports",
        },
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
