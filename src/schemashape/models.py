"""Type model data structures.

A type model is the resolved description of the values a schema node permits.
Every variant is an immutable dataclass tagged with a ``ModelKind``. Equality
is structural and follows JSON value semantics (``true`` is not ``1``).
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Any, ClassVar


class ModelKind(str, Enum):
    """Discriminant of a type model variant."""
    UNKNOWN = "unknown"
    NEVER = "never"
    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    LITERAL = "literal"
    ENUM = "enum"
    ARRAY = "array"
    OBJECT = "object"
    ONE_OF = "one_of"
    ANY_OF = "any_of"
    ALL_OF = "all_of"


def json_kind(value: Any) -> str | None:
    """Classify a runtime value by its JSON kind.

    Returns:
        One of ``null``, ``boolean``, ``number``, ``string``, ``array``,
        ``object``, or None for values with no JSON counterpart
    """
    if value is None:
        return "null"
    # bool is a subclass of int and must be checked first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping) and all(isinstance(key, str) for key in value):
        return "object"
    return None


def is_json_value(value: Any) -> bool:
    """Check that a value (recursively) only contains JSON data."""
    kind = json_kind(value)
    if kind is None:
        return False
    if kind == "array":
        return all(is_json_value(item) for item in value)
    if kind == "object":
        return all(is_json_value(item) for item in value.values())
    return True


def json_equal(left: Any, right: Any) -> bool:
    """Deep equality over JSON values, keeping booleans apart from numbers."""
    kind = json_kind(left)
    if kind != json_kind(right):
        return False
    if kind == "array":
        return len(left) == len(right) and all(json_equal(a, b) for a, b in zip(left, right))
    if kind == "object":
        return left.keys() == right.keys() and all(json_equal(left[key], right[key]) for key in left)
    return left == right


def json_hash_key(value: Any) -> Any:
    """Hashable key of a JSON value that agrees with ``json_equal``."""
    kind = json_kind(value)
    if kind == "array":
        return (kind, tuple(json_hash_key(item) for item in value))
    if kind == "object":
        return (kind, frozenset((key, json_hash_key(item)) for key, item in value.items()))
    return (kind, value)


@dataclass(frozen=True)
class TypeModel:
    """Base class of all type model variants."""

    kind: ClassVar[ModelKind]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {"kind": self.kind.value}

    def describe(self) -> str:
        """Short label used in diagnostics."""
        return self.kind.value


@dataclass(frozen=True)
class Unknown(TypeModel):
    """Permits every value."""
    kind: ClassVar[ModelKind] = ModelKind.UNKNOWN


@dataclass(frozen=True)
class Never(TypeModel):
    """Permits no value at all."""
    kind: ClassVar[ModelKind] = ModelKind.NEVER


@dataclass(frozen=True)
class Null(TypeModel):
    kind: ClassVar[ModelKind] = ModelKind.NULL


@dataclass(frozen=True)
class Boolean(TypeModel):
    kind: ClassVar[ModelKind] = ModelKind.BOOLEAN


@dataclass(frozen=True)
class Number(TypeModel):
    """Integers and floating point numbers alike."""
    kind: ClassVar[ModelKind] = ModelKind.NUMBER


@dataclass(frozen=True)
class String(TypeModel):
    kind: ClassVar[ModelKind] = ModelKind.STRING


UNKNOWN = Unknown()
NEVER = Never()
NULL = Null()
BOOLEAN = Boolean()
NUMBER = Number()
STRING = String()


@dataclass(frozen=True, eq=False)
class Literal(TypeModel):
    """Permits exactly one concrete JSON value."""
    value: Any
    kind: ClassVar[ModelKind] = ModelKind.LITERAL

    def __post_init__(self):
        if not is_json_value(self.value):
            raise ValueError(f"Literal requires a JSON value, got {type(self.value).__name__}")

    def __eq__(self, other):
        if not isinstance(other, Literal):
            return NotImplemented
        return json_equal(self.value, other.value)

    def __hash__(self):
        return hash(json_hash_key(self.value))

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value}

    def describe(self) -> str:
        return json.dumps(self.value)


@dataclass(frozen=True, eq=False)
class EnumOf(TypeModel):
    """Permits any value from a non-empty set of literals.

    Values are de-duplicated by JSON equality; first-seen order is kept for
    display, but equality between two enums ignores order.
    """
    values: tuple[Any, ...]
    kind: ClassVar[ModelKind] = ModelKind.ENUM

    def __post_init__(self):
        unique: list[Any] = []
        for value in self.values:
            if not is_json_value(value):
                raise ValueError(f"EnumOf requires JSON values, got {type(value).__name__}")
            if not any(json_equal(value, seen) for seen in unique):
                unique.append(value)
        if not unique:
            raise ValueError("EnumOf requires at least one value")
        object.__setattr__(self, "values", tuple(unique))

    def __eq__(self, other):
        if not isinstance(other, EnumOf):
            return NotImplemented
        return len(self.values) == len(other.values) and all(other.contains(value) for value in self.values)

    def __hash__(self):
        return hash(frozenset(json_hash_key(value) for value in self.values))

    def contains(self, value: Any) -> bool:
        """Check whether a value is one of the enumerated literals."""
        return any(json_equal(value, member) for member in self.values)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "values": list(self.values)}

    def describe(self) -> str:
        return "one of " + ", ".join(json.dumps(value) for value in self.values)


@dataclass(frozen=True)
class ArrayOf(TypeModel):
    """Permits arrays whose every element matches ``items``."""
    items: TypeModel
    kind: ClassVar[ModelKind] = ModelKind.ARRAY

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "items": self.items.to_dict()}


@dataclass(frozen=True, eq=False)
class ObjectOf(TypeModel):
    """Permits keyed maps with declared, optionally required, properties.

    ``additional_allowed`` tells whether keys outside ``properties`` may
    occur; when they may, their values are unconstrained.
    """
    properties: tuple[tuple[str, TypeModel], ...] = ()
    required: frozenset[str] = frozenset()
    additional_allowed: bool = True
    kind: ClassVar[ModelKind] = ModelKind.OBJECT

    def __post_init__(self):
        properties = self.properties
        if isinstance(properties, Mapping):
            properties = properties.items()
        object.__setattr__(self, "properties", tuple((name, model) for name, model in properties))
        object.__setattr__(self, "required", frozenset(self.required))

        undeclared = self.required - set(self.property_map)
        if undeclared:
            raise ValueError(f"Required properties not declared: {sorted(undeclared)}")

    def __eq__(self, other):
        if not isinstance(other, ObjectOf):
            return NotImplemented
        return (
            self.property_map == other.property_map
            and self.required == other.required
            and self.additional_allowed == other.additional_allowed
        )

    def __hash__(self):
        return hash((frozenset(self.properties), self.required, self.additional_allowed))

    @property
    def property_map(self) -> dict[str, TypeModel]:
        """Declared properties keyed by name."""
        return dict(self.properties)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "properties": {name: model.to_dict() for name, model in self.properties},
            "required": sorted(self.required),
            "additionalAllowed": self.additional_allowed,
        }


def _branch_tuple(variant: str, branches: Iterable[TypeModel]) -> tuple[TypeModel, ...]:
    branches = tuple(branches)
    if not branches:
        raise ValueError(f"{variant} requires at least one branch")
    for branch in branches:
        if not isinstance(branch, TypeModel):
            raise ValueError(f"{variant} branches must be type models, got {type(branch).__name__}")
    return branches


@dataclass(frozen=True)
class UnionExclusive(TypeModel):
    """Permits values matched by exactly one branch (``oneOf``).

    ``shared`` is the structural intersection of all branches: the values it
    describes satisfy every branch at once and are therefore excluded. It is
    derived from the branches on first access, so reducer passes that only
    rebuild branches never pay for it.
    """
    branches: tuple[TypeModel, ...]
    kind: ClassVar[ModelKind] = ModelKind.ONE_OF

    def __post_init__(self):
        object.__setattr__(self, "branches", _branch_tuple("UnionExclusive", self.branches))

    @cached_property
    def shared(self) -> TypeModel:
        """Overlap satisfied by every branch at once."""
        from .reducer import reduce_models
        return reduce_models(self.branches)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "branches": [branch.to_dict() for branch in self.branches],
            "shared": self.shared.to_dict(),
        }

    def describe(self) -> str:
        return f"exactly one of {len(self.branches)} branches"


@dataclass(frozen=True)
class UnionInclusive(TypeModel):
    """Permits values matched by at least one branch (``anyOf``)."""
    branches: tuple[TypeModel, ...]
    kind: ClassVar[ModelKind] = ModelKind.ANY_OF

    def __post_init__(self):
        object.__setattr__(self, "branches", _branch_tuple("UnionInclusive", self.branches))

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "branches": [branch.to_dict() for branch in self.branches]}

    def describe(self) -> str:
        return f"at least one of {len(self.branches)} branches"


@dataclass(frozen=True)
class Intersection(TypeModel):
    """Permits values matched by every branch."""
    branches: tuple[TypeModel, ...]
    kind: ClassVar[ModelKind] = ModelKind.ALL_OF

    def __post_init__(self):
        object.__setattr__(self, "branches", _branch_tuple("Intersection", self.branches))

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "branches": [branch.to_dict() for branch in self.branches]}

    def describe(self) -> str:
        return f"all of {len(self.branches)} branches"
