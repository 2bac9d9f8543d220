"""Pydantic schemas for normalized errors and the validation report tree."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NormalizedError(BaseModel):
    """One path-addressed validation failure."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(
        ...,
        description="Position in the value tree ('root', 'a.b', 'a[2]').",
    )
    message: str = Field(..., description="Human-readable failure description.")
    value: Any = Field(None, description="Offending value at this path.")
    rule_type: str = Field(
        "unknown", description="Identifier of the rule that produced the failure."
    )
    params: dict[str, Any] | None = Field(
        None, description="Rule-specific parameters, e.g. a minimum length."
    )


class RuleOutcome(BaseModel):
    """A declared rule at a schema node and whether it is considered passing."""

    model_config = ConfigDict(frozen=True)

    rule_type: str
    params: dict[str, Any] | None = None
    message: str | None = None
    is_valid: bool = True


class ReportNode(BaseModel):
    """One schema position in the validation tree."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: str
    is_valid: bool
    value: Any = None
    matched_error: NormalizedError | None = None
    children: list["ReportNode"] = Field(default_factory=list)
    rules: list[RuleOutcome] = Field(default_factory=list)

    def walk(self):
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, path: str) -> "ReportNode | None":
        """Return the first node at ``path`` or None."""
        for node in self.walk():
            if node.path == path:
                return node
        return None


class DebugResult(BaseModel):
    """Outcome of a single debug invocation."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: list[NormalizedError] = Field(default_factory=list)
    field_errors: dict[str, list[NormalizedError]] = Field(default_factory=dict)
    validation_tree: ReportNode | None = None
