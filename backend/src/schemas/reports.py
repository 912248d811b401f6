"""Schemas for report operations."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.report_data import ReportFilters, ScheduleFrequency


class GenerateReportRequest(BaseModel):
    """Request body for report generation."""

    type: Optional[str] = Field(None, description="Report type, e.g. trip_analytics")
    title: Optional[str] = Field(None, max_length=255, description="Custom title")
    filters: ReportFilters = Field(default_factory=ReportFilters)
    include_optional_fields: bool = Field(True, description="Keep optional fields")
    specific_fields: Optional[list[str]] = Field(
        None, description="Optional field paths to keep, mandatory fields are always kept"
    )
    lightweight: bool = Field(False, description="Keep mandatory fields only")
    is_scheduled: bool = Field(False, description="Regenerate periodically")
    schedule_frequency: Optional[ScheduleFrequency] = Field(
        None, description="Required when is_scheduled is true"
    )
    tags: list[str] = Field(default_factory=list, description="Extra tags")


class ReportResponse(BaseModel):
    """Response for a single report."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(..., description="Report ID")
    owner_uid: str = Field(..., description="Owner user id")
    title: str
    report_type: str = Field(..., description="Type of report")
    filters: dict[str, Any] = Field(default_factory=dict, description="Filters used to generate")
    data: dict[str, Any] = Field(default_factory=dict, description="Report data tree")
    status: str = Field(..., description="pending, generating, completed or failed")
    error_message: Optional[str] = None
    generated_at: Optional[datetime] = None
    is_scheduled: bool = False
    schedule_frequency: Optional[str] = None
    last_generated: Optional[datetime] = None
    tags: list[str] = Field(default_factory=list)
    selected_fields: Optional[list[str]] = Field(None, description="Allowed field paths")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ReportListItem(BaseModel):
    """Report without its data tree, for listings."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    report_type: str
    status: str
    generated_at: Optional[datetime] = None
    is_scheduled: bool = False
    schedule_frequency: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class ReportListResponse(BaseModel):
    """Response for listing reports."""

    reports: list[ReportListItem]
    total: int = Field(..., description="Number of reports returned")
    limit: int = Field(..., description="Page size")


class ReportOverviewResponse(BaseModel):
    total_reports: int
    reports_by_type: dict[str, int]
    recent_reports: list[ReportListItem]
    last_generated: Optional[datetime] = None


class ReportTypeInfo(BaseModel):
    value: str
    label: str
    description: str
    mandatory_fields: int = Field(..., description="Number of mandatory field paths")
    optional_fields: int = Field(..., description="Number of optional field paths")


class ReportTypesResponse(BaseModel):
    types: list[ReportTypeInfo]


class FieldConfigResponse(BaseModel):
    report_type: str
    mandatory: list[str]
    optional: list[str]


class ExportFormatInfo(BaseModel):
    value: str
    label: str
    media_type: str
    extension: str
    aliases: list[str] = Field(default_factory=list)


class ExportFormatsResponse(BaseModel):
    formats: list[ExportFormatInfo]
