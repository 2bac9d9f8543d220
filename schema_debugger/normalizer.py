"""Flatten validation failures into path-addressed errors."""

import logging
from typing import Any

from schema_debugger.access import as_params
from schema_debugger.schemas import NormalizedError

logger = logging.getLogger(__name__)

VALIDATION_FAILURE_NAME = "ValidationError"
ROOT_PATH = "root"


def is_validation_failure(obj: Any) -> bool:
    """
    Structural check for a validation library failure.

    A failure must expose ``name == "ValidationError"``, a string ``message``
    and an ``inner`` sequence (which may be empty or missing).

    Args:
        obj: Anything raised by a schema's validate_sync.

    Returns:
        bool: True if the object can be decomposed into normalized errors.
    """
    if obj is None:
        return False
    name = getattr(obj, "name", None)
    if not isinstance(name, str) or name != VALIDATION_FAILURE_NAME:
        return False
    if not isinstance(getattr(obj, "message", None), str):
        return False
    inner = getattr(obj, "inner", None)
    return inner is None or isinstance(inner, (list, tuple))


def _text(value: Any) -> str | None:
    return str(value) if value else None


def to_normalized_error(failure: Any) -> NormalizedError:
    """Build a NormalizedError from a single failure element."""
    return NormalizedError(
        path=_text(getattr(failure, "path", None)) or ROOT_PATH,
        message=str(getattr(failure, "message", "")),
        value=getattr(failure, "value", None),
        rule_type=_text(getattr(failure, "type", None)) or "unknown",
        params=as_params(getattr(failure, "params", None)),
    )


def _normalize_all(failures: list[Any]) -> list[NormalizedError]:
    errors: list[NormalizedError] = []
    for item in failures:
        try:
            errors.append(to_normalized_error(item))
        except (TypeError, ValueError) as exc:
            logger.debug(
                "Ignoring unrecognized failure element %s: %s",
                type(item).__name__,
                exc,
            )
    return errors


def normalize_errors(failure: Any) -> list[NormalizedError]:
    """
    Convert a failure into an ordered list of normalized errors.

    Unrecognized shapes produce an empty list. Order is preserved and no
    deduplication happens.

    Args:
        failure: The failure raised by the validation pass.

    Returns:
        list[NormalizedError]: One entry per leaf failure.
    """
    if not is_validation_failure(failure):
        logger.debug(
            "Ignoring unrecognized failure shape: %s", type(failure).__name__
        )
        return []

    inner = getattr(failure, "inner", None) or []
    if inner:
        return _normalize_all(list(inner))
    return _normalize_all([failure])


def group_by_path(errors: list[NormalizedError]) -> dict[str, list[NormalizedError]]:
    """Group errors by path, keeping the original order inside each group."""
    grouped: dict[str, list[NormalizedError]] = {}
    for error in errors:
        grouped.setdefault(error.path, []).append(error)
    return grouped
