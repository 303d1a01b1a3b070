"""Validation of runtime values against type models.

Validation is a pure predicate: a mismatch is reported through the returned
``ValidationResult`` and never raised.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .config import ValidatorConfig
from .models import (
    ArrayOf,
    Boolean,
    EnumOf,
    Intersection,
    Literal,
    Never,
    Null,
    Number,
    ObjectOf,
    String,
    TypeModel,
    UnionExclusive,
    UnionInclusive,
    Unknown,
    json_equal,
    json_kind,
)

logger = logging.getLogger(__name__)

ROOT_PATH = "$"


@dataclass
class ValidationIssue:
    """A value that failed its model, located by a JSONPath-like path."""
    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


@dataclass
class ValidationResult:
    """Outcome of validating one value."""
    accepted: bool = True
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        """Exit code for CI: 0 = accepted, 1 = rejected."""
        return 0 if self.accepted else 1

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON output."""
        return {
            "accepted": self.accepted,
            "exit_code": self.exit_code,
            "issues": [{"path": issue.path, "reason": issue.reason} for issue in self.issues],
        }


@dataclass
class _Trail:
    """Issue sink for a single validation run."""
    max_issues: int
    fail_fast: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    def add(self, path: str, reason: str) -> None:
        if len(self.issues) < self.max_issues:
            self.issues.append(ValidationIssue(path, reason))


def child_path(path: str, key: Any) -> str:
    """Extend a value path with an array index or property name."""
    if isinstance(key, int):
        return f"{path}[{key}]"
    if isinstance(key, str) and key.isidentifier():
        return f"{path}.{key}"
    return f"{path}[{key!r}]"


def _kind_label(value: Any) -> str:
    return json_kind(value) or type(value).__name__


class Validator:
    """Checks values against type models."""

    def __init__(self, config: ValidatorConfig | None = None):
        self.config = config or ValidatorConfig()

    def validate(self, model: TypeModel, value: Any) -> ValidationResult:
        """Validate a value against a type model.

        Args:
            model: Resolved type model
            value: Runtime value (JSON-like data)

        Returns:
            ValidationResult with the acceptance flag and path-qualified issues
        """
        trail = _Trail(max_issues=self.config.max_issues, fail_fast=self.config.fail_fast)
        accepted = self._check(model, value, ROOT_PATH, trail)
        if not accepted:
            logger.debug(f"Value rejected by {model.describe()} with {len(trail.issues)} issues")
        return ValidationResult(accepted=accepted, issues=trail.issues)

    def accepts(self, model: TypeModel, value: Any) -> bool:
        """Check acceptance without collecting any issues."""
        return self._check(model, value, ROOT_PATH, None)

    def _fail(self, trail: _Trail | None, path: str, reason: str) -> bool:
        if trail is not None:
            trail.add(path, reason)
        return False

    def _halt(self, trail: _Trail | None) -> bool:
        # Silent checks only need the boolean, so they stop at the first failure
        return trail is None or trail.fail_fast

    def _check(self, model: TypeModel, value: Any, path: str, trail: _Trail | None) -> bool:
        if isinstance(model, Unknown):
            return True
        if isinstance(model, Never):
            return self._fail(trail, path, "no value is permitted here")
        if isinstance(model, Literal):
            if json_equal(value, model.value):
                return True
            return self._fail(trail, path, f"expected {model.describe()}")
        if isinstance(model, EnumOf):
            if model.contains(value):
                return True
            return self._fail(trail, path, f"expected {model.describe()}")
        if isinstance(model, (Null, Boolean, Number, String)):
            if json_kind(value) == model.kind.value:
                return True
            return self._fail(trail, path, f"expected {model.kind.value}, got {_kind_label(value)}")
        if isinstance(model, ArrayOf):
            return self._check_array(model, value, path, trail)
        if isinstance(model, ObjectOf):
            return self._check_object(model, value, path, trail)
        if isinstance(model, UnionExclusive):
            return self._check_exclusive(model, value, path, trail)
        if isinstance(model, UnionInclusive):
            if any(self._check(branch, value, path, None) for branch in model.branches):
                return True
            return self._fail(trail, path, f"value matches none of the {len(model.branches)} anyOf branches")
        if isinstance(model, Intersection):
            accepted = True
            for branch in model.branches:
                if not self._check(branch, value, path, trail):
                    accepted = False
                    if self._halt(trail):
                        break
            return accepted
        raise TypeError(f"Unsupported type model: {model!r}")

    def _check_array(self, model: ArrayOf, value: Any, path: str, trail: _Trail | None) -> bool:
        if json_kind(value) != "array":
            return self._fail(trail, path, f"expected array, got {_kind_label(value)}")

        accepted = True
        for index, item in enumerate(value):
            if not self._check(model.items, item, child_path(path, index), trail):
                accepted = False
                if self._halt(trail):
                    break
        return accepted

    def _check_object(self, model: ObjectOf, value: Any, path: str, trail: _Trail | None) -> bool:
        if json_kind(value) != "object":
            return self._fail(trail, path, f"expected object, got {_kind_label(value)}")

        accepted = True
        for name, _ in model.properties:
            if name in model.required and name not in value:
                accepted = self._fail(trail, child_path(path, name), "missing required property")
                if self._halt(trail):
                    return False

        properties = model.property_map
        for name, item in value.items():
            if name in properties:
                ok = self._check(properties[name], item, child_path(path, name), trail)
            elif not model.additional_allowed:
                ok = self._fail(trail, child_path(path, name), "additional property is not allowed")
            else:
                continue
            if not ok:
                accepted = False
                if self._halt(trail):
                    break
        return accepted

    def _check_exclusive(self, model: UnionExclusive, value: Any, path: str, trail: _Trail | None) -> bool:
        matched = 0
        for branch in model.branches:
            if self._check(branch, value, path, None):
                matched += 1
                if matched > 1 and trail is None:
                    return False
        if matched == 1:
            return True
        if matched == 0:
            return self._fail(trail, path, f"value matches none of the {len(model.branches)} oneOf branches")
        return self._fail(
            trail, path,
            f"value matches {matched} of the {len(model.branches)} oneOf branches; exactly one is required"
        )


_silent_validator = Validator()


def accepts(model: TypeModel, value: Any) -> bool:
    """Check whether a model accepts a value."""
    return _silent_validator.accepts(model, value)


def validate_value(model: TypeModel, value: Any, config: ValidatorConfig | None = None) -> ValidationResult:
    """Validate a value against a model with an optional configuration."""
    return Validator(config).validate(model, value)
