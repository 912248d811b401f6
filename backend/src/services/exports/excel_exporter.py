"""
Excel export of reports using openpyxl.

Sheets: a Summary sheet (metadata plus Metric/Value grid), one sheet per
nested summary map and one sheet per chart.
"""

import re
from io import BytesIO
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from src.services.exports.csv_exporter import _label
from src.services.exports.projection import ExportProjection
from src.utils.logger import get_logger

log = get_logger(__name__)

MAX_SHEET_NAME = 31
_INVALID_SHEET_CHARS = re.compile(r"[\[\]\:\*\?\/\\]")

_HEADER_FONT = Font(bold=True, color="FFFFFF")
_HEADER_FILL = PatternFill(start_color="16A34A", end_color="16A34A", fill_type="solid")


def _excel_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, list):
        return "; ".join(str(v) for v in value)
    if isinstance(value, (int, float, str)):
        return value
    return str(value)


class ExcelExporter:
    """Builds a multi-sheet workbook from an export projection."""

    def __init__(self, projection: ExportProjection):
        self.projection = projection
        self.workbook = Workbook()
        # Remove default sheet
        del self.workbook[self.workbook.sheetnames[0]]

    def sheet_name(self, name: str) -> str:
        """Sanitize, truncate to 31 characters and de-duplicate a sheet name."""
        base = _INVALID_SHEET_CHARS.sub("", name).strip() or "Sheet"
        candidate = base[:MAX_SHEET_NAME]
        suffix = 2
        while candidate in self.workbook.sheetnames:
            tail = f" ({suffix})"
            candidate = base[: MAX_SHEET_NAME - len(tail)] + tail
            suffix += 1
        return candidate

    def _write_table(self, ws, start_row: int, header: list[str], rows: list[list[Any]]) -> None:
        for col, title in enumerate(header, start=1):
            cell = ws.cell(row=start_row, column=col, value=title)
            cell.font = _HEADER_FONT
            cell.fill = _HEADER_FILL
            cell.alignment = Alignment(horizontal="center")
        for offset, row in enumerate(rows, start=1):
            for col, value in enumerate(row, start=1):
                cell = ws.cell(row=start_row + offset, column=col, value=_excel_value(value))
                if isinstance(value, float):
                    cell.number_format = "#,##0.00"

    def _auto_adjust_columns(self, ws) -> None:
        for column in ws.columns:
            longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
            ws.column_dimensions[get_column_letter(column[0].column)].width = min(longest + 2, 50)

    def add_summary_sheet(self) -> None:
        p = self.projection
        ws = self.workbook.create_sheet(title=self.sheet_name("Summary"))
        ws["A1"] = p.title
        ws["A1"].font = Font(size=16, bold=True)

        row = 3
        for key, value in p.metadata().items():
            ws.cell(row=row, column=1, value=f"{key}:").font = Font(bold=True)
            ws.cell(row=row, column=2, value=value)
            row += 1

        rows = [[_label(k), v] for k, v in p.summary.items() if not isinstance(v, dict)]
        self._write_table(ws, row + 1, ["Metric", "Value"], rows)
        self._auto_adjust_columns(ws)

    def add_object_sheets(self) -> None:
        for name, mapping in self.projection.summary.items():
            if not isinstance(mapping, dict):
                continue
            ws = self.workbook.create_sheet(title=self.sheet_name(_label(name)))
            self._write_table(ws, 1, ["Key", "Value"], [[k, v] for k, v in mapping.items()])
            self._auto_adjust_columns(ws)

    def add_chart_sheets(self) -> None:
        for chart in self.projection.charts:
            ws = self.workbook.create_sheet(title=self.sheet_name(chart.get("title", "Chart")))
            rows = [list(pair) for pair in zip(chart.get("labels", []), chart.get("data", []))]
            self._write_table(ws, 1, ["Label", "Value"], rows)
            ws.freeze_panes = "A2"
            self._auto_adjust_columns(ws)

    def export(self) -> bytes:
        self.add_summary_sheet()
        self.add_object_sheets()
        self.add_chart_sheets()
        buffer = BytesIO()
        self.workbook.save(buffer)
        log.debug("excel export built", sheets=len(self.workbook.sheetnames))
        return buffer.getvalue()


def render_excel(projection: ExportProjection) -> bytes:
    return ExcelExporter(projection).export()
