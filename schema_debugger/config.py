"""Debugger options and environment-backed defaults."""

import os
from typing import Self

from pydantic import BaseModel, Field

DEFAULT_MAX_DEPTH = 10


def _env_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    try:
        return int(val)
    except ValueError:
        return default


class DebugOptions(BaseModel):
    """Options recognized by ``debug``."""

    include_valid_fields: bool = Field(
        True,
        description="Advisory only; does not change how the tree is built.",
    )
    max_depth: int = Field(
        DEFAULT_MAX_DEPTH,
        ge=0,
        description="Nodes deeper than this become 'max-depth-reached' stubs.",
    )
    abort_early: bool = Field(
        False,
        description="Forwarded verbatim to the schema's validate_sync call.",
    )
    make_validation_tree: bool = Field(
        True,
        description="When false the validation tree is not built.",
    )

    @classmethod
    def from_env(cls, **overrides) -> Self:
        """
        Build options from SCHEMA_DEBUGGER_* environment variables.

        Args:
            **overrides: Explicit values that win over the environment.

        Returns:
            DebugOptions: The merged options.
        """
        values = {
            "max_depth": _env_int("SCHEMA_DEBUGGER_MAX_DEPTH", DEFAULT_MAX_DEPTH),
            "abort_early": _env_bool("SCHEMA_DEBUGGER_ABORT_EARLY", False),
            "make_validation_tree": _env_bool("SCHEMA_DEBUGGER_MAKE_TREE", True),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
