"""Walk a schema alongside a value and build the validation report tree."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from schema_debugger.access import has, read
from schema_debugger.config import DEFAULT_MAX_DEPTH
from schema_debugger.rules import extract_rules
from schema_debugger.schemas import NormalizedError, ReportNode

logger = logging.getLogger(__name__)

MAX_DEPTH_KIND = "max-depth-reached"

_SCALARS = (str, bytes, int, float, bool)


def is_schema_node(obj: Any) -> bool:
    """True if ``obj`` is an object exposing a callable ``validate_sync``."""
    if obj is None or isinstance(obj, (Mapping, *_SCALARS)):
        return False
    return callable(getattr(obj, "validate_sync", None))


def schema_kind(schema: Any) -> str:
    """
    Classify a schema node.

    Checks the public ``type`` tag, then the private ``_type`` tag, then the
    lower-cased class name with any "schema" part removed.

    Args:
        schema: The schema node.

    Returns:
        str: The schema category, or "unknown".
    """
    for tag in ("type", "_type"):
        if has(schema, tag):
            value = read(schema, tag)
            if isinstance(value, str) and value:
                return value
    class_name = type(schema).__name__
    if class_name:
        lowered = class_name.lower()
        if "schema" in lowered:
            return lowered.replace("schema", "", 1) or "unknown"
        return lowered
    return "unknown"


def object_fields(schema: Any) -> dict[str, Any] | None:
    """Return the declared field mapping of an object schema, or None."""
    fields = read(schema, "fields")
    if isinstance(fields, Mapping):
        return dict(fields)
    nodes = read(schema, "_nodes")
    if isinstance(nodes, (list, tuple)):
        shape = read(schema, "shape") or {}
        return {name: read(shape, name) for name in nodes}
    return None


def element_schema(schema: Any) -> Any:
    """Return the element schema of an array schema, or None."""
    return read(schema, "inner_type") or read(schema, "_sub_type")


def child_value(container: Any, name: str) -> Any:
    """Read a field value from a mapping or object container."""
    if container is None or isinstance(container, (*_SCALARS, list, tuple)):
        return None
    if isinstance(container, Mapping):
        return container.get(name)
    return getattr(container, name, None)


def join_path(parent: str, name: str) -> str:
    return f"{parent}.{name}" if parent else name


class TreeBuilder:
    """Builds a ReportNode tree mirroring a schema's structure."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth

    def build(
        self,
        schema: Any,
        value: Any,
        path: str = "",
        errors: Sequence[NormalizedError] = (),
        depth: int = 0,
    ) -> ReportNode:
        """
        Build the report node for ``schema`` at ``path`` and its subtree.

        Args:
            schema: Schema node to describe.
            value: Value observed at this position.
            path: Dotted/bracketed path of this position ("" for the root).
            errors: Normalized errors of the whole validation pass.
            depth: Current nesting depth.

        Returns:
            ReportNode: The node with children and rule outcomes.
        """
        if depth > self.max_depth:
            logger.debug("Max depth %s reached at '%s'", self.max_depth, path)
            return ReportNode(
                path=path,
                kind=MAX_DEPTH_KIND,
                is_valid=True,
                value=value,
            )

        matched = next((err for err in errors if err.path == path), None)
        children: list[ReportNode] = []

        fields = object_fields(schema)
        if fields is not None:
            for name, field_schema in fields.items():
                if not is_schema_node(field_schema):
                    continue
                children.append(
                    self.build(
                        field_schema,
                        child_value(value, name),
                        join_path(path, name),
                        errors,
                        depth + 1,
                    )
                )

        item_schema = element_schema(schema)
        if item_schema is not None and isinstance(value, (list, tuple)):
            if is_schema_node(item_schema):
                for index, item in enumerate(value):
                    children.append(
                        self.build(
                            item_schema,
                            item,
                            f"{path}[{index}]",
                            errors,
                            depth + 1,
                        )
                    )

        return ReportNode(
            path=path,
            kind=schema_kind(schema),
            is_valid=matched is None,
            value=value,
            matched_error=matched,
            children=children,
            rules=extract_rules(schema, matched),
        )
