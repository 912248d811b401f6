"""Report export: format parsing, per-type projection and rendering."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Union

from src.exceptions import ExportFormatError
from src.models.report import Report
from src.services.exports.csv_exporter import render_csv
from src.services.exports.excel_exporter import render_excel
from src.services.exports.pdf_exporter import render_pdf
from src.services.exports.projection import ExportProjection, project_report
from src.utils.logger import get_logger

log = get_logger(__name__)


class ExportFormat(StrEnum):
    JSON = "json"
    CSV = "csv"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"


@dataclass(frozen=True)
class FormatInfo:
    label: str
    media_type: str
    extension: str
    aliases: tuple[str, ...] = ()


FORMAT_INFO: dict[ExportFormat, FormatInfo] = {
    ExportFormat.JSON: FormatInfo("JSON", "application/json", "json"),
    ExportFormat.CSV: FormatInfo("CSV", "text/csv", "csv"),
    ExportFormat.DOCUMENT: FormatInfo("PDF document", "application/pdf", "pdf", ("pdf",)),
    ExportFormat.SPREADSHEET: FormatInfo(
        "Excel workbook",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "xlsx",
        ("excel", "xlsx"),
    ),
}

_ALIASES: dict[str, ExportFormat] = {
    alias: fmt for fmt, info in FORMAT_INFO.items() for alias in (fmt.value, *info.aliases)
}


def parse_export_format(value: str) -> ExportFormat:
    """Resolve a format name or alias, case-insensitively."""
    fmt = _ALIASES.get((value or "").strip().lower())
    if fmt is None:
        raise ExportFormatError(value, supported=sorted(_ALIASES))
    return fmt


@dataclass
class ExportResult:
    content: Union[bytes, str]
    media_type: str
    filename: str


def export_filename(report: Report, fmt: ExportFormat) -> str:
    stamp = (report.generated_at or datetime.now(timezone.utc)).strftime("%Y-%m-%d")
    safe_title = "_".join(report.title.split()) or "report"
    return f"{safe_title}_{stamp}.{FORMAT_INFO[fmt].extension}"


def render(projection: ExportProjection, fmt: ExportFormat) -> Union[bytes, str]:
    if fmt is ExportFormat.JSON:
        return json.dumps(projection.to_dict(), indent=2, default=str)
    if fmt is ExportFormat.CSV:
        return render_csv(projection)
    if fmt is ExportFormat.DOCUMENT:
        return render_pdf(projection)
    return render_excel(projection)


def export_report(report: Report, fmt: Union[ExportFormat, str]) -> ExportResult:
    """Project a persisted report to its export subset and render it."""
    if not isinstance(fmt, ExportFormat):
        fmt = parse_export_format(fmt)

    projection = project_report(report)
    content = render(projection, fmt)
    log.info(
        "report exported",
        report_id=str(report.id),
        report_type=report.report_type,
        format=fmt.value,
        charts=len(projection.charts),
    )
    return ExportResult(
        content=content,
        media_type=FORMAT_INFO[fmt].media_type,
        filename=export_filename(report, fmt),
    )


__all__ = [
    "ExportFormat",
    "ExportResult",
    "FORMAT_INFO",
    "export_filename",
    "export_report",
    "parse_export_format",
]
