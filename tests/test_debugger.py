"""End-to-end tests for debug() over pydantic models and duck-typed schemas."""

from types import SimpleNamespace
from typing import Annotated

from pydantic import BaseModel, Field

from schema_debugger import DebugOptions, SchemaDebugger, debug
from schema_debugger.tree import MAX_DEPTH_KIND


class Person(BaseModel):
    name: str = Field(min_length=2)
    age: int | None = Field(None, ge=18)


class Address(BaseModel):
    street: str = Field(min_length=1)
    city: str
    zipCode: str | None = Field(None, pattern=r"^\d{5}$")


class Profile(BaseModel):
    name: str = Field(min_length=2)
    email: str
    age: int | None = Field(None, ge=18)
    address: Address
    hobbies: list[Annotated[str, Field(min_length=2)]] = Field(
        default_factory=list, min_length=1
    )


class TreeNode(BaseModel):
    label: str
    child: "TreeNode | None" = None


TreeNode.model_rebuild()

INVALID_PROFILE = {
    "name": "J",
    "email": "invalid-email",
    "age": 15,
    "address": {"street": "", "city": "New York", "zipCode": "1234"},
    "hobbies": ["reading", "chess", "x"],
}

VALID_PROFILE = {
    "name": "Jane",
    "email": "jane@example.com",
    "age": 30,
    "address": {"street": "Main St", "city": "New York", "zipCode": "10001"},
    "hobbies": ["reading", "chess"],
}


def _depths(node, depth=0):
    yield node, depth
    for child in node.children:
        yield from _depths(child, depth + 1)


def test_invalid_person_reports_both_fields() -> None:
    """Short name and underage age both fail at their own paths."""
    result = debug(Person, {"name": "J", "age": 15})

    assert result.is_valid is False
    assert len(result.errors) == 2
    assert len(result.field_errors["name"]) == 1
    assert len(result.field_errors["age"]) == 1
    children = {child.path: child for child in result.validation_tree.children}
    assert set(children) == {"name", "age"}
    assert children["name"].is_valid is False
    assert children["age"].is_valid is False
    assert [rule.is_valid for rule in children["name"].rules] == [True, True, False]


def test_valid_person_has_all_rules_passing() -> None:
    """A passing value yields no errors and only passing rules."""
    result = debug(Person, {"name": "Jo", "age": 20})

    assert result.is_valid is True
    assert result.errors == []
    assert result.field_errors == {}
    for child in result.validation_tree.children:
        assert child.is_valid is True
        assert child.rules
        assert all(rule.is_valid for rule in child.rules)


def test_valid_profile_tree_is_all_valid() -> None:
    """Every node of a passing value's tree is valid."""
    result = debug(Profile, VALID_PROFILE)

    assert result.is_valid is True
    assert all(node.is_valid for node in result.validation_tree.walk())


def test_invalid_profile_counts_and_paths() -> None:
    """Errors, field errors and tree nodes agree on every failure."""
    result = debug(Profile, INVALID_PROFILE)

    paths = [error.path for error in result.errors]
    assert paths == ["name", "age", "address.street", "address.zipCode", "hobbies[2]"]
    assert sum(len(group) for group in result.field_errors.values()) == len(
        result.errors
    )

    tree = result.validation_tree
    for path in paths:
        node = tree.find(path)
        assert node is not None
        assert node.is_valid is False
        assert node.matched_error.path == path

    zip_node = tree.find("address.zipCode")
    assert zip_node.kind == "string"
    assert {rule.rule_type: rule.is_valid for rule in zip_node.rules} == {
        "type": True,
        "matches": False,
    }
    assert tree.find("email").is_valid is True
    assert tree.find("hobbies").kind == "array"
    assert tree.find("hobbies[1]").is_valid is True


def test_abort_early_forces_single_error_mode() -> None:
    """abort_early keeps only the first failure."""
    result = debug(Profile, INVALID_PROFILE, {"abort_early": True})

    assert [error.path for error in result.errors] == ["name"]
    assert result.validation_tree.find("age").is_valid is True


def test_make_validation_tree_false_omits_tree() -> None:
    result = debug(Person, {"name": "J"}, DebugOptions(make_validation_tree=False))

    assert result.validation_tree is None
    assert result.is_valid is False


def test_debug_is_idempotent() -> None:
    """Two runs over the same schema and value produce equal trees."""
    debugger = SchemaDebugger(Profile)

    first = debugger.debug(INVALID_PROFILE)
    second = debugger.debug(INVALID_PROFILE)

    assert first.validation_tree == second.validation_tree
    assert first.errors == second.errors


def test_depth_bound_on_self_referencing_model() -> None:
    """Positions deeper than max_depth collapse into valid stubs."""
    value = {"label": "a", "child": {"label": "b", "child": {"label": "c"}}}

    result = debug(TreeNode, value, DebugOptions(max_depth=2))

    depths = list(_depths(result.validation_tree))
    assert max(depth for _, depth in depths) == 3
    for node, depth in depths:
        if depth == 3:
            assert node.kind == MAX_DEPTH_KIND
            assert node.is_valid is True
            assert node.children == []
        else:
            assert node.kind != MAX_DEPTH_KIND
    assert result.validation_tree.find("child.child.label").value == "c"


def test_type_error_fails_type_rule_only() -> None:
    """
    A wrong type fails the synthetic type rule.

    Declared rules on the same node still read as valid even though they
    never ran.
    """
    result = debug(Person, {"name": 5})

    name = result.validation_tree.find("name")
    assert name.matched_error.rule_type == "typeError"
    assert [(rule.rule_type, rule.is_valid) for rule in name.rules] == [
        ("type", False),
        ("required", True),
        ("min", True),
    ]


def test_unrecognized_failure_is_reported_as_valid() -> None:
    """Exceptions that are not validation failures are dropped."""

    class BrokenSchema:
        type = "string"

        def validate_sync(self, value, abort_early=False):
            raise RuntimeError("collaborator changed its failure shape")

    result = debug(BrokenSchema(), "anything")

    assert result.is_valid is True
    assert result.errors == []
    assert result.validation_tree.is_valid is True


def test_root_failure_does_not_match_root_node() -> None:
    """Root-level failures are filed under 'root', not the root node's ''."""

    class RootFailingSchema:
        type = "object"

        def validate_sync(self, value, abort_early=False):
            raise _Failure("value is not allowed")

    result = debug(RootFailingSchema(), {})

    assert list(result.field_errors) == ["root"]
    assert result.is_valid is False
    assert result.validation_tree.is_valid is True


def test_abort_early_is_forwarded_verbatim() -> None:
    """The abort_early option reaches validate_sync unchanged."""
    seen = []

    class RecordingSchema:
        type = "string"

        def validate_sync(self, value, abort_early=False):
            seen.append(abort_early)

    debug(RecordingSchema(), "x", {"abort_early": True})
    debug(RecordingSchema(), "x")

    assert seen == [True, False]


class _Failure(Exception):
    name = "ValidationError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.inner = []


def test_duck_typed_failure_with_shared_paths() -> None:
    """Multiple failures at one path are grouped; the node keeps the first."""

    class Schema:
        type = "object"
        fields = {"code": SimpleNamespace(type="string", validate_sync=lambda v: v)}

        def validate_sync(self, value, abort_early=False):
            failure = _Failure("2 errors occurred")
            failure.inner = [
                SimpleNamespace(path="code", message="too short", type="min"),
                SimpleNamespace(path="code", message="bad format", type="matches"),
            ]
            raise failure

    result = debug(Schema(), {"code": "a"})

    assert [error.message for error in result.field_errors["code"]] == [
        "too short",
        "bad format",
    ]
    node = result.validation_tree.find("code")
    assert node.matched_error.message == "too short"


def test_malformed_failure_and_rules_do_not_escape() -> None:
    """Odd failure elements and rule lists never raise out of debug."""

    class OddSchema:
        type = "object"

        def tests(self):
            return []

        def validate_sync(self, value, abort_early=False):
            failure = _Failure("1 error occurred")
            failure.inner = [SimpleNamespace(path=3, message="bad", params=["x"])]
            raise failure

    result = debug(OddSchema(), {})

    assert [error.path for error in result.errors] == ["3"]
    assert [rule.rule_type for rule in result.validation_tree.rules] == ["type"]


def test_annotation_targets_are_wrapped() -> None:
    """Generic annotations are validated like models instead of failing open."""
    result = debug(list[Person], [{"name": "J"}])

    assert result.is_valid is False
    assert [error.path for error in result.errors] == ["[0].name"]
    tree = result.validation_tree
    assert tree.kind == "array"
    assert tree.find("[0].name").is_valid is False
