"""Reports router: catalogue, generation, lifecycle and export."""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.dependencies import CurrentUserRequired, DbSession, FieldRegistryDep, ReportServiceDep
from src.exceptions import TaskQueueUnavailableError, UnknownReportTypeError, ValidationError
from src.schemas.report_data import ReportStatus, ReportType
from src.schemas.reports import (
    ExportFormatInfo,
    ExportFormatsResponse,
    FieldConfigResponse,
    GenerateReportRequest,
    ReportListItem,
    ReportListResponse,
    ReportOverviewResponse,
    ReportResponse,
    ReportTypeInfo,
    ReportTypesResponse,
)
from src.services.exports import FORMAT_INFO, export_report, parse_export_format
from src.services.report_service import ReportService
from src.tasks.report_tasks import generate_report_task
from src.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


# ============================================================================
# Catalogue (public)
# ============================================================================


@router.get("/types", response_model=ReportTypesResponse)
async def list_report_types(field_registry: FieldRegistryDep) -> ReportTypesResponse:
    """List the available report types with their field counts."""
    types = []
    for report_type in field_registry.report_types:
        config = field_registry.config_for(report_type)
        types.append(
            ReportTypeInfo(
                value=report_type.value,
                label=report_type.label,
                description=report_type.description,
                mandatory_fields=len(config.mandatory),
                optional_fields=len(config.optional),
            )
        )
    return ReportTypesResponse(types=types)


@router.get("/formats", response_model=ExportFormatsResponse)
async def list_export_formats() -> ExportFormatsResponse:
    return ExportFormatsResponse(
        formats=[
            ExportFormatInfo(
                value=fmt.value,
                label=info.label,
                media_type=info.media_type,
                extension=info.extension,
                aliases=list(info.aliases),
            )
            for fmt, info in FORMAT_INFO.items()
        ]
    )


@router.get("/fields/{report_type}", response_model=FieldConfigResponse)
async def get_field_config(report_type: str, field_registry: FieldRegistryDep) -> FieldConfigResponse:
    """Mandatory and optional field paths for one report type."""
    try:
        parsed = ReportType(report_type)
    except ValueError:
        raise UnknownReportTypeError(report_type)
    config = field_registry.config_for(parsed)
    return FieldConfigResponse(
        report_type=parsed.value,
        mandatory=list(config.mandatory),
        optional=list(config.optional),
    )


# ============================================================================
# Owner queries
# ============================================================================


@router.get("/overview", response_model=ReportOverviewResponse)
async def get_overview(
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
) -> ReportOverviewResponse:
    overview = await report_service.overview(current_user.uid)
    return ReportOverviewResponse(
        total_reports=overview.total_reports,
        reports_by_type=overview.reports_by_type,
        recent_reports=[ReportListItem.model_validate(r) for r in overview.recent_reports],
        last_generated=overview.last_generated,
    )


@router.get("/", response_model=ReportListResponse)
async def list_reports(
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
    type: Optional[str] = Query(None, description="Filter by report type"),
    from_date: Optional[date] = Query(None, description="Generated on or after"),
    to_date: Optional[date] = Query(None, description="Generated on or before"),
    limit: Optional[int] = Query(None, ge=1, description="Page size, clamped to the maximum"),
) -> ReportListResponse:
    """List the caller's reports, newest first."""
    reports = await report_service.list(
        current_user.uid,
        report_type=type,
        from_date=from_date,
        to_date=to_date,
        limit=limit,
    )
    page_size = min(limit or report_service.default_page_size, report_service.max_page_size)
    return ReportListResponse(
        reports=[ReportListItem.model_validate(r) for r in reports],
        total=len(reports),
        limit=page_size,
    )


# ============================================================================
# Generation
# ============================================================================


@router.post("/generate", response_model=ReportResponse, status_code=status.HTTP_202_ACCEPTED)
async def generate_report(
    request: GenerateReportRequest,
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
    db: DbSession,
) -> ReportResponse:
    """
    Queue report generation.

    The pending report is committed before the task is enqueued so the
    worker can always load it. If the broker rejects the task the report is
    marked failed so it never stays pending.
    """
    report = await report_service.create_pending(current_user.uid, request)
    await db.commit()

    try:
        task = generate_report_task.delay(str(report.id))
    except Exception as e:
        await report_service.fail_enqueue(report, e)
        raise TaskQueueUnavailableError(str(report.id), e) from e
    log.info("report generation enqueued", report_id=str(report.id), task_id=task.id)
    return ReportResponse.model_validate(report)


@router.post("/generate-sync", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def generate_report_sync(
    request: GenerateReportRequest,
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
) -> ReportResponse:
    """Generate a report inline and return it completed."""
    report = await report_service.generate(current_user.uid, request)
    return ReportResponse.model_validate(report)


# ============================================================================
# Export
# ============================================================================


async def _export(
    report_service: ReportService, report_id: UUID, export_format: str, owner_uid: str
) -> Response:
    fmt = parse_export_format(export_format)
    report = await report_service.get(report_id, owner_uid=owner_uid)
    if report.status != ReportStatus.COMPLETED.value:
        raise ValidationError(
            "Only completed reports can be exported",
            details={"status": report.status},
        )

    result = export_report(report, fmt)
    return Response(
        content=result.content,
        media_type=result.media_type,
        headers={"Content-Disposition": f'attachment; filename="{result.filename}"'},
    )


@router.get("/export/{report_id}/{export_format}")
async def export_report_by_path(
    report_id: UUID,
    export_format: str,
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
) -> Response:
    return await _export(report_service, report_id, export_format, current_user.uid)


@router.get("/{report_id}/export")
async def export_report_by_query(
    report_id: UUID,
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
    format: str = Query("json", description="json, csv, document or spreadsheet"),
) -> Response:
    return await _export(report_service, report_id, format, current_user.uid)


# ============================================================================
# Single report
# ============================================================================


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: UUID,
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
) -> ReportResponse:
    report = await report_service.get(report_id, owner_uid=current_user.uid)
    return ReportResponse.model_validate(report)


@router.post("/{report_id}/regenerate", response_model=ReportResponse)
async def regenerate_report(
    report_id: UUID,
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
) -> ReportResponse:
    """Regenerate with the stored filters; the new report replaces the old one."""
    report = await report_service.regenerate(report_id, owner_uid=current_user.uid)
    return ReportResponse.model_validate(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: UUID,
    current_user: CurrentUserRequired,
    report_service: ReportServiceDep,
) -> None:
    await report_service.delete(report_id, current_user)
