"""Schema resolution: mapping a schema document onto a type model.

Keywords are dispatched by fixed precedence, first match wins:

    const > enum > oneOf > anyOf > allOf > type > (nothing: unknown)

Nested schemas under ``oneOf``/``anyOf``/``allOf``, ``items`` and
``properties`` are resolved recursively. Keywords outside the supported
subset never fail resolution; structural problems become ``SchemaIssue``
records unless the resolver runs in strict mode.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .config import ResolverConfig
from .diagnostics import IssueCode, ResolutionResult, SchemaIssue, Severity
from .exceptions import MalformedSchemaError, RecursionLimitExceeded
from .models import (
    BOOLEAN,
    NEVER,
    NULL,
    NUMBER,
    STRING,
    UNKNOWN,
    ArrayOf,
    EnumOf,
    Literal,
    ObjectOf,
    TypeModel,
    UnionInclusive,
    is_json_value,
)
from .reducer import exclusive_union, reduce_models

logger = logging.getLogger(__name__)

SUPPORTED_KEYWORDS = frozenset({
    "const",
    "enum",
    "oneOf",
    "anyOf",
    "allOf",
    "type",
    "items",
    "properties",
    "required",
    "additionalProperties",
})

# Annotations carry no constraint and are skipped without a diagnostic
ANNOTATION_KEYWORDS = frozenset({
    "$schema",
    "$id",
    "$comment",
    "title",
    "description",
    "default",
    "examples",
    "deprecated",
    "readOnly",
    "writeOnly",
})

ROOT_POINTER = "#"


def pointer(path: str, *tokens: str | int) -> str:
    """Append JSON pointer tokens to a schema location."""
    for token in tokens:
        token = str(token).replace("~", "~0").replace("/", "~1")
        path = f"{path}/{token}"
    return path


@dataclass
class _ResolutionContext:
    """Per-call state of one resolution pass."""
    config: ResolverConfig
    issues: list[SchemaIssue] = field(default_factory=list)

    def malformed(self, message: str, path: str) -> None:
        if self.config.strict:
            raise MalformedSchemaError(message, path)
        logger.warning(f"Malformed schema at {path}: {message}")
        self.issues.append(SchemaIssue(IssueCode.MALFORMED_SCHEMA, Severity.WARNING, message, path))

    def unsupported(self, message: str, path: str) -> None:
        if not self.config.report_unsupported:
            return
        logger.debug(f"Unsupported schema construct at {path}: {message}")
        self.issues.append(SchemaIssue(IssueCode.UNSUPPORTED_KEYWORD, Severity.INFO, message, path))


class SchemaResolver:
    """Resolves schema documents into type models.

    The resolver only holds its configuration; every ``resolve`` call starts
    from a fresh context, so one instance may be shared between threads.
    """

    def __init__(self, config: ResolverConfig | None = None):
        self.config = config or ResolverConfig()

    def resolve(self, schema: Any) -> ResolutionResult:
        """Resolve a schema document.

        Args:
            schema: Schema tree of mappings, lists and JSON literals

        Returns:
            ResolutionResult with the type model and collected issues

        Raises:
            RecursionLimitExceeded: If nesting exceeds ``max_depth``
            MalformedSchemaError: In strict mode, on the first malformed node
        """
        context = _ResolutionContext(self.config)
        model = self._resolve(schema, ROOT_POINTER, 0, context)
        logger.debug(f"Resolved schema to {model.kind.value} with {len(context.issues)} issues")
        return ResolutionResult(model=model, issues=context.issues)

    def _resolve(self, node: Any, path: str, depth: int, context: _ResolutionContext) -> TypeModel:
        if depth > self.config.max_depth:
            raise RecursionLimitExceeded(path, self.config.max_depth)

        if isinstance(node, bool):
            return UNKNOWN if node else NEVER
        if not isinstance(node, Mapping):
            context.malformed(f"schema must be an object or boolean, got {type(node).__name__}", path)
            return UNKNOWN

        self._report_unsupported(node, path, context)

        if "const" in node:
            return self._resolve_const(node["const"], pointer(path, "const"), depth, context)
        if "enum" in node:
            return self._resolve_enum(node["enum"], pointer(path, "enum"), depth, context)
        if "oneOf" in node:
            variants = self._resolve_variants(node, "oneOf", path, depth, context)
            return exclusive_union(variants) if variants else UNKNOWN
        if "anyOf" in node:
            variants = self._resolve_variants(node, "anyOf", path, depth, context)
            return UnionInclusive(tuple(variants)) if variants else UNKNOWN
        if "allOf" in node:
            variants = self._resolve_variants(node, "allOf", path, depth, context)
            return reduce_models(variants) if variants else UNKNOWN
        if "type" in node:
            return self._resolve_type(node, path, depth, context)
        return UNKNOWN

    def _report_unsupported(self, node: Mapping, path: str, context: _ResolutionContext) -> None:
        for keyword in node:
            if keyword not in SUPPORTED_KEYWORDS and keyword not in ANNOTATION_KEYWORDS:
                context.unsupported(f"keyword '{keyword}' is not supported and was ignored", pointer(path, keyword))

    def _check_value_depth(self, value: Any, path: str, depth: int, ancestors: tuple[int, ...]) -> None:
        """Bound the nesting of a literal value before it is compared or copied.

        A value that contains itself is reported at once instead of being walked
        down to the ceiling.
        """
        if depth > self.config.max_depth or id(value) in ancestors:
            raise RecursionLimitExceeded(path, self.config.max_depth)
        if isinstance(value, (list, tuple)):
            items = value
        elif isinstance(value, Mapping):
            items = value.values()
        else:
            return
        ancestors = ancestors + (id(value),)
        for item in items:
            self._check_value_depth(item, path, depth + 1, ancestors)

    def _resolve_const(self, value: Any, path: str, depth: int, context: _ResolutionContext) -> TypeModel:
        self._check_value_depth(value, path, depth + 1, ())
        if not is_json_value(value):
            context.malformed(f"const must be a JSON value, got {type(value).__name__}", path)
            return UNKNOWN
        return Literal(value)

    def _resolve_enum(self, values: Any, path: str, depth: int, context: _ResolutionContext) -> TypeModel:
        if not isinstance(values, list):
            context.malformed("enum must be a list of values", path)
            return UNKNOWN
        if not values:
            context.malformed("enum is empty, no value can match", path)
            return NEVER
        self._check_value_depth(values, path, depth, ())
        if not all(is_json_value(value) for value in values):
            context.malformed("enum must only contain JSON values", path)
            return UNKNOWN
        return EnumOf(tuple(values))

    def _resolve_variants(self, node: Mapping, keyword: str, path: str, depth: int,
                          context: _ResolutionContext) -> list[TypeModel] | None:
        variants = node[keyword]
        if not isinstance(variants, list) or not variants:
            context.malformed(f"{keyword} must be a non-empty list of schemas", pointer(path, keyword))
            return None
        return [
            self._resolve(variant, pointer(path, keyword, index), depth + 1, context)
            for index, variant in enumerate(variants)
        ]

    def _resolve_type(self, node: Mapping, path: str, depth: int, context: _ResolutionContext) -> TypeModel:
        type_name = node["type"]
        if not isinstance(type_name, str):
            context.unsupported("type must be a single type name", pointer(path, "type"))
            return UNKNOWN

        if type_name == "string":
            # enum narrows a string node
            if "enum" in node:
                return self._resolve_enum(node["enum"], pointer(path, "enum"), depth, context)
            return STRING
        if type_name in ("integer", "number"):
            return NUMBER
        if type_name == "boolean":
            return BOOLEAN
        if type_name == "null":
            return NULL
        if type_name == "array":
            return self._resolve_array(node, path, depth, context)
        if type_name == "object":
            return self._resolve_object(node, path, depth, context)

        context.unsupported(f"type '{type_name}' is not supported", pointer(path, "type"))
        return UNKNOWN

    def _resolve_array(self, node: Mapping, path: str, depth: int, context: _ResolutionContext) -> TypeModel:
        if "items" not in node:
            return ArrayOf(UNKNOWN)
        items = node["items"]
        if isinstance(items, list):
            context.unsupported("tuple-form items are not supported", pointer(path, "items"))
            return ArrayOf(UNKNOWN)
        return ArrayOf(self._resolve(items, pointer(path, "items"), depth + 1, context))

    def _resolve_object(self, node: Mapping, path: str, depth: int, context: _ResolutionContext) -> TypeModel:
        properties = node.get("properties", {})
        if not isinstance(properties, Mapping):
            context.malformed("properties must be an object", pointer(path, "properties"))
            properties = {}

        resolved: dict[str, TypeModel] = {}
        for name, subschema in properties.items():
            resolved[name] = self._resolve(subschema, pointer(path, "properties", name), depth + 1, context)

        required_names = node.get("required", [])
        if not isinstance(required_names, list) or not all(isinstance(name, str) for name in required_names):
            context.malformed("required must be a list of property names", pointer(path, "required"))
            required_names = []

        required = set()
        for name in required_names:
            if name in resolved:
                required.add(name)
            else:
                context.malformed(f"required property '{name}' is not declared in properties",
                                  pointer(path, "required"))

        # Only an explicit false closes the object
        additional_allowed = node.get("additionalProperties", True) is not False
        return ObjectOf(resolved, frozenset(required), additional_allowed)


def resolve_schema(schema: Any, config: ResolverConfig | None = None) -> TypeModel:
    """Resolve a schema document straight to its type model."""
    return SchemaResolver(config).resolve(schema).model
