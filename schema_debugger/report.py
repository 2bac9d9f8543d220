"""Plain-text rendering of debug results."""

from schema_debugger.schemas import DebugResult, ReportNode

VALID_MARK = "✓"
INVALID_MARK = "✗"


def format_field_errors(result: DebugResult) -> str:
    """One line per failing path with its messages."""
    lines = []
    for path, errors in result.field_errors.items():
        messages = "; ".join(error.message for error in errors)
        lines.append(f"{path}: {messages}")
    return "\n".join(lines)


def _node_line(node: ReportNode) -> str:
    mark = VALID_MARK if node.is_valid else INVALID_MARK
    label = node.path or "<root>"
    line = f"{mark} {label} ({node.kind})"
    if node.matched_error is not None:
        line += f" - {node.matched_error.message}"
    failed = [rule.rule_type for rule in node.rules if not rule.is_valid]
    if failed:
        line += f" [failed: {', '.join(failed)}]"
    return line


def format_tree(node: ReportNode, indent: str = "  ") -> str:
    """
    Render a report tree as indented text.

    Args:
        node: Root of the tree to render.
        indent: Indentation added per nesting level.

    Returns:
        str: One line per node.
    """
    lines: list[str] = []

    def _render(current: ReportNode, level: int) -> None:
        lines.append(f"{indent * level}{_node_line(current)}")
        for child in current.children:
            _render(child, level + 1)

    _render(node, 0)
    return "\n".join(lines)


def format_result(result: DebugResult) -> str:
    """Summary, field errors and tree for terminal output."""
    status = "valid" if result.is_valid else f"invalid ({len(result.errors)} errors)"
    sections = [f"Is Valid: {status}"]
    if result.field_errors:
        sections.append("Field errors:\n" + format_field_errors(result))
    if result.validation_tree is not None:
        sections.append("Validation tree:\n" + format_tree(result.validation_tree))
    return "\n\n".join(sections)
