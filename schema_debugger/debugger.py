"""Explain why a value fails a schema."""

import logging
from typing import Any, get_origin

from schema_debugger.adapters import PydanticSchema
from schema_debugger.config import DebugOptions
from schema_debugger.normalizer import group_by_path, normalize_errors
from schema_debugger.schemas import DebugResult, NormalizedError
from schema_debugger.tree import TreeBuilder, is_schema_node

logger = logging.getLogger(__name__)


def as_schema(target: Any) -> Any:
    """Wrap types and type annotations; other objects are used as given."""
    if is_schema_node(target):
        return target
    if isinstance(target, type) or get_origin(target) is not None:
        return PydanticSchema.of(target)
    return target


class SchemaDebugger:
    """Runs a schema's validation pass and builds a report for it."""

    def __init__(self, schema: Any, options: DebugOptions | None = None) -> None:
        self.schema = as_schema(schema)
        self.options = options or DebugOptions()

    def collect_errors(self, value: Any) -> list[NormalizedError]:
        """Validate ``value`` and return the normalized errors, if any."""
        try:
            self.schema.validate_sync(value, abort_early=self.options.abort_early)
        except Exception as exc:
            return normalize_errors(exc)
        return []

    def debug(self, value: Any) -> DebugResult:
        """
        Validate ``value`` and explain the outcome.

        Args:
            value: Candidate value to validate.

        Returns:
            DebugResult: Errors, errors grouped by path and the report tree.
        """
        errors = self.collect_errors(value)
        logger.debug("Validation produced %d error(s)", len(errors))

        validation_tree = None
        if self.options.make_validation_tree:
            builder = TreeBuilder(max_depth=self.options.max_depth)
            validation_tree = builder.build(self.schema, value, "", errors)

        return DebugResult(
            is_valid=not errors,
            errors=errors,
            field_errors=group_by_path(errors),
            validation_tree=validation_tree,
        )


def debug(
    schema: Any, value: Any, options: DebugOptions | dict[str, Any] | None = None
) -> DebugResult:
    """Convenience wrapper around ``SchemaDebugger(schema, options).debug(value)``."""
    if isinstance(options, dict):
        options = DebugOptions(**options)
    return SchemaDebugger(schema, options).debug(value)
