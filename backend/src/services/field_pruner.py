"""Report customization: choose allowed field paths and prune the data tree."""

import copy
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from src.exceptions import ValidationError
from src.schemas.report_data import ReportType
from src.services.field_config import FieldConfigRegistry

# Nested mapping mirroring the report tree; True marks a fully included subtree.
FieldMask = dict[str, Union["FieldMask", bool]]


@dataclass(frozen=True)
class FieldSelection:
    """Caller options controlling which optional fields survive."""

    include_optional_fields: bool = True
    specific_fields: Optional[tuple[str, ...]] = None
    lightweight: bool = False


def resolve_allowed_paths(
    registry: FieldConfigRegistry,
    report_type: ReportType | str,
    selection: FieldSelection,
) -> list[str]:
    """
    Compute the allowed path set for a report.

    - explicit ``specific_fields``: mandatory plus the requested optional paths
    - ``lightweight`` or optional fields disabled: mandatory only
    - otherwise: every configured path

    Raises:
        ValidationError: If ``specific_fields`` names unknown paths
    """
    config = registry.config_for(report_type)

    if selection.specific_fields:
        validation = registry.validate(report_type, selection.specific_fields)
        if not validation.is_valid:
            raise ValidationError(
                f"Invalid fields for report type {report_type}",
                details={
                    "report_type": str(report_type),
                    "invalid_fields": validation.invalid_fields,
                    "available_fields": list(config.all_fields),
                },
            )
        requested = set(selection.specific_fields)
        return list(config.mandatory) + [p for p in config.optional if p in requested]

    if selection.lightweight or not selection.include_optional_fields:
        return list(config.mandatory)

    return list(config.all_fields)


def compile_mask(paths: Iterable[str]) -> FieldMask:
    """Compile dot-paths into a tree-shaped mask.

    >>> compile_mask(["summary.a", "summary.b.c", "charts"])
    {'summary': {'a': True, 'b': {'c': True}}, 'charts': True}
    """
    mask: FieldMask = {}
    for path in paths:
        node = mask
        parts = path.split(".")
        for i, part in enumerate(parts):
            if node.get(part) is True:
                break  # an ancestor already includes everything below
            if i == len(parts) - 1:
                node[part] = True
            else:
                node = node.setdefault(part, {})  # type: ignore[assignment]
    return mask


def _copy_included(value: Any) -> Any:
    """Copy a fully included subtree, still dropping maps that are empty."""
    if not isinstance(value, dict):
        return copy.deepcopy(value)
    kept = {}
    for key, child in value.items():
        child = _copy_included(child)
        if not (isinstance(child, dict) and not child):
            kept[key] = child
    return kept


def _prune_node(tree: dict[str, Any], mask: FieldMask) -> dict[str, Any]:
    pruned: dict[str, Any] = {}
    for key, value in tree.items():
        sub_mask = mask.get(key)
        if sub_mask is None:
            continue
        if isinstance(value, dict):
            child = _copy_included(value) if sub_mask is True else _prune_node(value, sub_mask)
            if child:
                pruned[key] = child
        else:
            # Arrays and scalars are atomic: a descendant path keeps them whole
            pruned[key] = copy.deepcopy(value)
    return pruned


def prune(data: dict[str, Any], allowed_paths: Union[Iterable[str], FieldMask]) -> dict[str, Any]:
    """
    Remove every node of ``data`` whose path is not allowed.

    A key survives when an allowed path equals its path, is an ancestor of it,
    or is a descendant of it. Empty maps are dropped, including ones inside a
    fully included subtree.

    >>> prune({"summary": {"a": 1, "b": 2}, "details": {"c": 3}}, ["summary.a"])
    {'summary': {'a': 1}}
    """
    mask = allowed_paths if isinstance(allowed_paths, dict) else compile_mask(allowed_paths)
    return _prune_node(data, mask)
