"""Expose pydantic models and annotations through the schema node protocol."""

import datetime
import decimal
import types
from dataclasses import dataclass
from functools import cached_property
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

VALIDATION_FAILURE_NAME = "ValidationError"
TYPE_ERROR = "typeError"

# (metadata attribute, rule name, params key)
_CONSTRAINT_RULES: tuple[tuple[str, str, str], ...] = (
    ("min_length", "min", "min"),
    ("max_length", "max", "max"),
    ("ge", "min", "min"),
    ("gt", "more_than", "more"),
    ("le", "max", "max"),
    ("lt", "less_than", "less"),
    ("multiple_of", "multiple_of", "multiple_of"),
    ("pattern", "matches", "regex"),
)

_RULE_BY_ERROR_TYPE: dict[str, str] = {
    "missing": "required",
    "string_too_short": "min",
    "too_short": "min",
    "greater_than_equal": "min",
    "string_too_long": "max",
    "too_long": "max",
    "less_than_equal": "max",
    "greater_than": "more_than",
    "less_than": "less_than",
    "multiple_of": "multiple_of",
    "string_pattern_mismatch": "matches",
}

_ARRAY_ORIGINS = (list, tuple, set, frozenset)
_NUMBER_TYPES = (int, float, decimal.Decimal)
_DATE_TYPES = (datetime.date, datetime.datetime, datetime.time)


@dataclass(frozen=True)
class SchemaTest:
    """A declared rule on a schema node."""

    name: str
    params: dict[str, Any] | None = None
    message: str | None = None


class SchemaValidationFailure(Exception):
    """Validation failure shaped like ``name``/``message``/``inner``."""

    name = VALIDATION_FAILURE_NAME

    def __init__(
        self,
        message: str,
        path: str | None = None,
        value: Any = None,
        type: str | None = None,
        params: dict[str, Any] | None = None,
        inner: list["SchemaValidationFailure"] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.value = value
        self.type = type
        self.params = params
        self.inner = inner or []


def loc_to_path(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic ``loc`` tuple as ``a.b[2].c``."""
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def rule_for_error_type(error_type: str) -> str:
    """Map a pydantic error type onto the rule name used by declared tests."""
    if error_type in _RULE_BY_ERROR_TYPE:
        return _RULE_BY_ERROR_TYPE[error_type]
    if error_type.endswith("_type") or error_type.endswith("_parsing"):
        return TYPE_ERROR
    return error_type


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def failure_from_error(error: dict[str, Any]) -> SchemaValidationFailure:
    """Build a leaf failure from one entry of ``ValidationError.errors()``."""
    error_type = error.get("type", "unknown")
    params = {key: _plain(val) for key, val in (error.get("ctx") or {}).items()}
    params["code"] = error_type
    return SchemaValidationFailure(
        message=error.get("msg", ""),
        path=loc_to_path(tuple(error.get("loc", ()))),
        value=None if error_type == "missing" else error.get("input"),
        type=rule_for_error_type(error_type),
        params=params,
    )


def failure_from_validation_error(
    exc: ValidationError, abort_early: bool = False
) -> SchemaValidationFailure:
    """
    Convert a pydantic ValidationError into a single aggregate failure.

    Args:
        exc: The pydantic error.
        abort_early: When true only the first error is kept and ``inner`` is
            left empty.

    Returns:
        SchemaValidationFailure: The aggregate failure.
    """
    leaves = [failure_from_error(error) for error in exc.errors()]
    if abort_early or len(leaves) <= 1:
        return leaves[0] if leaves else SchemaValidationFailure(str(exc))
    return SchemaValidationFailure(
        message=f"{len(leaves)} errors occurred",
        inner=leaves,
    )


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _split_annotated(annotation: Any) -> tuple[Any, list[Any]]:
    if get_origin(annotation) is not Annotated:
        return annotation, []
    base, *extras = get_args(annotation)
    metadata: list[Any] = []
    for extra in extras:
        if isinstance(extra, FieldInfo):
            metadata.extend(extra.metadata)
        else:
            metadata.append(extra)
    return base, metadata


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def kind_of(annotation: Any) -> str:
    """Schema category for a (non-optional) annotation."""
    origin = get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return "mixed"
    if issubclass(origin, BaseModel) or issubclass(origin, dict):
        return "object"
    if issubclass(origin, _ARRAY_ORIGINS):
        return "array"
    if issubclass(origin, str):
        return "string"
    if issubclass(origin, bool):
        return "boolean"
    if issubclass(origin, _NUMBER_TYPES):
        return "number"
    if issubclass(origin, _DATE_TYPES):
        return "date"
    return "mixed"


class PydanticSchema:
    """
    A schema node backed by a pydantic model or type annotation.

    Child nodes are created lazily so self-referencing models can be walked
    up to the tree builder's depth limit.
    """

    def __init__(
        self,
        annotation: Any,
        field_info: FieldInfo | None = None,
        required: bool = False,
    ) -> None:
        info = field_info
        if info is None:
            info = FieldInfo.from_annotation(annotation)
        base, extra_metadata = _split_annotated(_unwrap_optional(info.annotation))
        self._raw_annotation = info.annotation
        self._annotation = base
        self._metadata = [*info.metadata, *extra_metadata]
        self.required = required
        self.type = kind_of(base)

    @classmethod
    def of(cls, target: Any) -> "PydanticSchema":
        """Wrap a model class or annotation, returning schemas unchanged."""
        if isinstance(target, cls):
            return target
        return cls(target)

    def __repr__(self) -> str:
        return f"PydanticSchema({self._annotation!r}, type={self.type!r})"

    @cached_property
    def fields(self) -> dict[str, "PydanticSchema"] | None:
        if not _is_model(self._annotation):
            return None
        return {
            (info.alias or name): PydanticSchema(
                info.annotation, info, required=info.is_required()
            )
            for name, info in self._annotation.model_fields.items()
        }

    @cached_property
    def inner_type(self) -> "PydanticSchema | None":
        if self.type != "array":
            return None
        args = get_args(self._annotation)
        if not args:
            return None
        if issubclass(get_origin(self._annotation), tuple) and (
            len(args) != 2 or args[1] is not Ellipsis
        ):
            # fixed-length tuples have per-position element types
            return None
        return PydanticSchema(args[0])

    @cached_property
    def tests(self) -> list[SchemaTest]:
        tests: list[SchemaTest] = []
        if self.required:
            tests.append(SchemaTest(name="required"))
        for meta in self._metadata:
            for attr, rule, param in _CONSTRAINT_RULES:
                value = getattr(meta, attr, None)
                if value is None:
                    continue
                value = getattr(value, "pattern", value)
                tests.append(SchemaTest(name=rule, params={param: value}))
        return tests

    @cached_property
    def _adapter(self) -> TypeAdapter:
        if self._metadata:
            return TypeAdapter(Annotated[(self._raw_annotation, *self._metadata)])
        return TypeAdapter(self._raw_annotation)

    def validate_sync(self, value: Any, abort_early: bool = False) -> Any:
        """
        Validate ``value`` with pydantic.

        Args:
            value: Candidate value.
            abort_early: Keep only the first failure.

        Returns:
            Any: The validated value.

        Raises:
            SchemaValidationFailure: If pydantic rejects the value.
        """
        try:
            return self._adapter.validate_python(value)
        except ValidationError as exc:
            raise failure_from_validation_error(exc, abort_early) from exc
