"""Unit tests for value validation against type models."""

import pytest

from schemashape.config import ValidatorConfig
from schemashape.models import (
    BOOLEAN,
    NEVER,
    NULL,
    NUMBER,
    STRING,
    UNKNOWN,
    ArrayOf,
    EnumOf,
    Intersection,
    Literal,
    ObjectOf,
    UnionExclusive,
    UnionInclusive,
)
from schemashape.validator import (
    ValidationIssue,
    ValidationResult,
    Validator,
    accepts,
    child_path,
    validate_value,
)


@pytest.fixture
def person_model():
    """Closed object with one required and one optional property."""
    return ObjectOf(
        {"name": STRING, "tags": ArrayOf(STRING)},
        {"name"},
        False,
    )


class TestPrimitives:
    """Test primitive and literal models."""

    def test_unknown_and_never(self):
        """Test unknown and never."""
        assert accepts(UNKNOWN, {"anything": [1, 2]})
        assert not accepts(NEVER, None)

    def test_primitive_kinds(self):
        """Test primitive kinds."""
        assert accepts(NULL, None)
        assert accepts(BOOLEAN, False)
        assert accepts(NUMBER, 3)
        assert accepts(NUMBER, 3.5)
        assert accepts(STRING, "")
        assert not accepts(NUMBER, True)
        assert not accepts(BOOLEAN, 0)
        assert not accepts(STRING, None)

    def test_literal(self):
        """Test literal matching."""
        assert accepts(Literal(42), 42)
        assert not accepts(Literal(42), 43)
        assert accepts(Literal({"a": [1]}), {"a": [1]})
        assert not accepts(Literal(1), True)

    def test_enum(self):
        """Test enum membership."""
        model = EnumOf(("a", "b", "c"))
        assert accepts(model, "b")
        assert not accepts(model, "d")


class TestContainers:
    """Test array and object models."""

    def test_array(self):
        """Test array element checks."""
        model = ArrayOf(NUMBER)
        assert accepts(model, [])
        assert accepts(model, [1, 2.5])
        assert accepts(model, (1, 2))
        assert not accepts(model, [1, "2"])
        assert not accepts(model, "12")

    def test_object_required_and_optional(self, person_model):
        """Test object required and optional."""
        assert accepts(person_model, {"name": "Ada"})
        assert accepts(person_model, {"name": "Ada", "tags": ["x"]})
        assert not accepts(person_model, {"tags": []})
        assert not accepts(person_model, {"name": 1})

    def test_closed_object_rejects_extra_keys(self, person_model):
        """Test closed object rejects extra keys."""
        assert not accepts(person_model, {"name": "Ada", "age": 36})

    def test_open_object_accepts_extra_keys(self):
        """Test open object accepts extra keys."""
        model = ObjectOf({"name": STRING}, {"name"}, True)
        assert accepts(model, {"name": "Ada", "age": 36})

    def test_object_rejects_non_mapping(self, person_model):
        """Test object rejects non mapping."""
        assert not accepts(person_model, [("name", "Ada")])

    def test_mapping_with_non_string_keys_is_rejected(self):
        """Test that non-string keys are reported instead of raising."""
        model = ObjectOf({"a": STRING}, set(), False)

        result = validate_value(model, {None: 1})
        assert not result.accepted
        assert result.issues == [ValidationIssue("$", "expected object, got dict")]
        assert not accepts(model, {(1, 2): "x"})
        assert not accepts(ObjectOf({}, set(), True), {1: "x"})


class TestUnions:
    """Test union and intersection models."""

    def test_exclusive_requires_exactly_one_match(self):
        """Test exclusive requires exactly one match."""
        model = UnionExclusive((Literal(1), EnumOf((1, 2))))
        assert not accepts(model, 1)
        assert accepts(model, 2)
        assert not accepts(model, 3)

    def test_single_branch_exclusive_union(self):
        """Test single branch exclusive union."""
        assert accepts(UnionExclusive((STRING,)), "x")

    def test_inclusive_requires_one_or_more(self):
        """Test inclusive requires one or more."""
        model = UnionInclusive((NUMBER, Literal(1)))
        assert accepts(model, 1)
        assert accepts(model, 7)
        assert not accepts(model, "7")

    def test_intersection_requires_every_branch(self):
        """Test intersection requires every branch."""
        model = Intersection((UnionExclusive((STRING, NUMBER)), UnionExclusive((NUMBER, BOOLEAN))))
        assert accepts(model, 5)
        assert not accepts(model, "x")
        assert not accepts(model, True)


class TestDiagnostics:
    """Test the issue trail of a validation run."""

    def test_accepted_value_has_no_issues(self, person_model):
        """Test accepted value has no issues."""
        result = validate_value(person_model, {"name": "Ada"})
        assert result.accepted is True
        assert result.issues == []
        assert result.exit_code == 0

    def test_issue_paths(self, person_model):
        """Test issue paths."""
        result = validate_value(person_model, {"tags": ["ok", 3], "extra key": True})

        assert result.accepted is False
        assert result.exit_code == 1
        assert [str(issue) for issue in result.issues] == [
            "$.name: missing required property",
            "$.tags[1]: expected string, got number",
            "$['extra key']: additional property is not allowed",
        ]

    def test_fail_fast_stops_at_first_issue(self, person_model):
        """Test fail fast stops at first issue."""
        validator = Validator(ValidatorConfig(fail_fast=True))
        result = validator.validate(person_model, {"tags": ["ok", 3], "extra": True})
        assert result.accepted is False
        assert len(result.issues) == 1

    def test_max_issues_caps_trail(self):
        """Test max issues caps trail."""
        validator = Validator(ValidatorConfig(max_issues=2))
        result = validator.validate(ArrayOf(STRING), [1, 2, 3, 4])
        assert result.accepted is False
        assert len(result.issues) == 2

    def test_exclusive_union_summary(self):
        """Test exclusive union summary."""
        model = UnionExclusive((Literal(1), EnumOf((1, 2))))
        result = validate_value(model, 1)
        assert result.issues == [
            ValidationIssue("$", "value matches 2 of the 2 oneOf branches; exactly one is required")
        ]

        result = validate_value(model, "x")
        assert result.issues == [ValidationIssue("$", "value matches none of the 2 oneOf branches")]

    def test_inclusive_union_summary(self):
        """Test inclusive union summary."""
        result = validate_value(UnionInclusive((STRING, BOOLEAN)), None)
        assert result.issues == [ValidationIssue("$", "value matches none of the 2 anyOf branches")]

    def test_to_dict(self):
        """Test result serialization."""
        result = ValidationResult(accepted=False, issues=[ValidationIssue("$.a", "expected string, got null")])
        assert result.to_dict() == {
            "accepted": False,
            "exit_code": 1,
            "issues": [{"path": "$.a", "reason": "expected string, got null"}],
        }

    def test_child_path(self):
        """Test child path formatting."""
        assert child_path("$", "name") == "$.name"
        assert child_path("$.items", 0) == "$.items[0]"
        assert child_path("$", "odd key") == "$['odd key']"
        assert child_path("$", None) == "$[None]"
        assert child_path("$", (1, 2)) == "$[(1, 2)]"
