"""Health check router."""

from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text

from src.dependencies import DbSession, FieldRegistryDep
from src.schemas.health import HealthResponse, ServiceStatus
from src.utils.logger import get_logger

router = APIRouter()
log = get_logger(__name__)

API_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession, field_registry: FieldRegistryDep) -> HealthResponse:
    """
    Health check for the report engine.

    Checks:
    - Database connectivity
    - Field configuration registry loaded

    Returns:
        HealthResponse with status and service details
    """
    services = {}
    overall_status = "ok"

    try:
        await db.execute(text("SELECT 1"))
        services["database"] = ServiceStatus(status="healthy", message="Connected")
    except Exception as e:
        log.error("health check failed", service="database", error=str(e))
        services["database"] = ServiceStatus(status="unhealthy", message="Service unavailable")
        overall_status = "degraded"

    services["field_registry"] = ServiceStatus(
        status="healthy",
        message="Loaded",
        details={"report_types": len(field_registry.report_types)},
    )

    return HealthResponse(
        status=overall_status,
        version=API_VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
