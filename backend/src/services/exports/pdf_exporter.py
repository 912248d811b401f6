"""
PDF export of reports using ReportLab.

One page per section: title and metadata with the summary metric grid,
then one page per chart rendered as a Label/Value table.
"""

from io import BytesIO
from typing import Any

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from xml.sax.saxutils import escape

from src.services.exports.csv_exporter import _cell, _label
from src.services.exports.projection import ExportProjection
from src.utils.logger import get_logger

log = get_logger(__name__)

MAX_HEADING_LENGTH = 80

_TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#16a34a")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 10),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f3f4f6")]),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 9),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#d1d5db")),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]
)


def _heading(text: str) -> str:
    if len(text) > MAX_HEADING_LENGTH:
        text = text[: MAX_HEADING_LENGTH - 3] + "..."
    return escape(text)


class PDFExporter:
    """Builds a paginated PDF document from an export projection."""

    def __init__(self, projection: ExportProjection):
        self.projection = projection
        self.styles = getSampleStyleSheet()
        self.styles.add(
            ParagraphStyle(
                name="ReportTitle",
                parent=self.styles["Title"],
                fontSize=22,
                textColor=colors.HexColor("#14532d"),
                spaceAfter=18,
                alignment=TA_CENTER,
            )
        )
        self.styles.add(
            ParagraphStyle(
                name="SectionHeader",
                parent=self.styles["Heading2"],
                fontSize=14,
                textColor=colors.HexColor("#374151"),
                spaceBefore=12,
                spaceAfter=6,
            )
        )

    def _table(self, header: list[str], rows: list[list[Any]]) -> Table:
        table = Table([header] + rows, repeatRows=1, colWidths=[3 * inch, 3 * inch])
        table.setStyle(_TABLE_STYLE)
        return table

    def _overview_section(self) -> list:
        p = self.projection
        story: list = [Paragraph(_heading(p.title), self.styles["ReportTitle"])]
        for key, value in p.metadata().items():
            story.append(Paragraph(f"<b>{escape(key)}:</b> {escape(value)}", self.styles["Normal"]))
        story.append(Spacer(1, 0.3 * inch))

        story.append(Paragraph("Summary", self.styles["SectionHeader"]))
        scalar_rows = [
            [_label(name), _cell(value)]
            for name, value in p.summary.items()
            if not isinstance(value, dict)
        ]
        if scalar_rows:
            story.append(self._table(["Metric", "Value"], scalar_rows))

        for name, mapping in p.summary.items():
            if isinstance(mapping, dict):
                story.append(Paragraph(_heading(_label(name)), self.styles["SectionHeader"]))
                story.append(
                    self._table(["Key", "Value"], [[k, _cell(v)] for k, v in mapping.items()])
                )
        return story

    def _chart_section(self, chart: dict[str, Any]) -> list:
        rows = [
            [label, _cell(value)]
            for label, value in zip(chart.get("labels", []), chart.get("data", []))
        ]
        story: list = [Paragraph(_heading(chart.get("title", "Chart")), self.styles["SectionHeader"])]
        if rows:
            story.append(self._table(["Label", "Value"], rows))
        else:
            story.append(Paragraph("No data for this period.", self.styles["Normal"]))
        return story

    def export(self) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=54,
            leftMargin=54,
            topMargin=54,
            bottomMargin=54,
            title=self.projection.title,
            subject=self.projection.report_type,
        )

        story = self._overview_section()
        for chart in self.projection.charts:
            story.append(PageBreak())
            story.extend(self._chart_section(chart))

        doc.build(story)
        log.debug("pdf export built", sections=1 + len(self.projection.charts))
        return buffer.getvalue()


def render_pdf(projection: ExportProjection) -> bytes:
    return PDFExporter(projection).export()
