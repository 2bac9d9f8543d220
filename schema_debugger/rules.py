"""Extract the declared rule catalogue of a schema node."""

from typing import Any

from schema_debugger.access import as_params, read
from schema_debugger.schemas import NormalizedError, RuleOutcome

TYPE_RULE = "type"
TYPE_ERROR = "typeError"


def declared_tests(schema: Any) -> list[Any]:
    """Return the node's declared rules from ``tests`` or ``_tests``."""
    tests = read(schema, "tests") or read(schema, "_tests")
    if not isinstance(tests, (list, tuple)):
        return []
    return list(tests)


def _from_test(test: Any, name: str) -> Any:
    options = read(test, "options")
    return read(options, name) or read(test, name)


def extract_rules(
    schema: Any, matched_error: NormalizedError | None
) -> list[RuleOutcome]:
    """
    Build rule outcomes for a schema node.

    A rule is marked invalid only when the node's matched error carries the
    same rule type. Rules after a short-circuiting failure are reported as
    valid even though they may never have run.

    Args:
        schema: The schema node.
        matched_error: The first normalized error at this node's path, if any.

    Returns:
        list[RuleOutcome]: The synthetic type check followed by declared rules.
    """
    failed_type = matched_error.rule_type if matched_error else None
    rules = [RuleOutcome(rule_type=TYPE_RULE, is_valid=failed_type != TYPE_ERROR)]

    for test in declared_tests(schema):
        rule_type = str(_from_test(test, "name") or "unknown")
        params = _from_test(test, "params")
        message = _from_test(test, "message")
        rules.append(
            RuleOutcome(
                rule_type=rule_type,
                params=as_params(params),
                message=message if isinstance(message, str) else None,
                is_valid=failed_type != rule_type,
            )
        )
    return rules
