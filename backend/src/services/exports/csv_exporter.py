"""CSV rendering of a report export projection."""

import csv
import io
from typing import Any

from src.services.exports.projection import ExportProjection

LIST_SEPARATOR = "; "


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return LIST_SEPARATOR.join(_cell(v) for v in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _label(name: str) -> str:
    return name.replace("_", " ").title()


def render_csv(projection: ExportProjection) -> str:
    """
    Render the projection as a sequence of blank-line separated blocks:
    metadata, a Metric/Value table, one sub-table per nested summary map,
    and one Label/Value table per chart.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    for key, value in projection.metadata().items():
        writer.writerow([key, value])
    writer.writerow([])

    nested: dict[str, dict] = {}
    writer.writerow(["Metric", "Value"])
    for name, value in projection.summary.items():
        if isinstance(value, dict):
            nested[name] = value
            continue
        writer.writerow([_label(name), _cell(value)])

    for name, mapping in nested.items():
        writer.writerow([])
        writer.writerow([_label(name)])
        writer.writerow(["Key", "Value"])
        for key, value in mapping.items():
            writer.writerow([key, _cell(value)])

    for chart in projection.charts:
        writer.writerow([])
        writer.writerow([chart.get("title", "Chart")])
        writer.writerow(["Label", "Value"])
        for label, value in zip(chart.get("labels", []), chart.get("data", [])):
            writer.writerow([label, _cell(value)])

    return buffer.getvalue()
