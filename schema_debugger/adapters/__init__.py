"""Adapters exposing third-party validation libraries as debuggable schemas."""

from schema_debugger.adapters.pydantic_schema import (
    PydanticSchema,
    SchemaTest,
    SchemaValidationFailure,
)

__all__ = [
    "PydanticSchema",
    "SchemaTest",
    "SchemaValidationFailure",
]
