from schema_debugger.adapters import PydanticSchema
from schema_debugger.config import DebugOptions
from schema_debugger.debugger import SchemaDebugger, debug
from schema_debugger.normalizer import is_validation_failure, normalize_errors
from schema_debugger.relay import DebugSession, PanelRegistry, RelayRecord
from schema_debugger.schemas import (
    DebugResult,
    NormalizedError,
    ReportNode,
    RuleOutcome,
)
from schema_debugger.tree import TreeBuilder

__all__ = [
    "DebugOptions",
    "DebugResult",
    "DebugSession",
    "NormalizedError",
    "PanelRegistry",
    "PydanticSchema",
    "RelayRecord",
    "ReportNode",
    "RuleOutcome",
    "SchemaDebugger",
    "TreeBuilder",
    "debug",
    "is_validation_failure",
    "normalize_errors",
]
