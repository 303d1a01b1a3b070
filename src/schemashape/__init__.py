"""schemashape - schema-driven type inference and validation.

schemashape resolves JSON-Schema-like documents into immutable type models
and validates concrete data against them.
"""

__version__ = "0.1.0"
__description__ = "Schema-driven type inference and validation"

from schemashape.config import SchemaShapeConfig, load_config
from schemashape.diagnostics import ResolutionResult, SchemaIssue
from schemashape.exceptions import MalformedSchemaError, RecursionLimitExceeded, SchemaShapeError
from schemashape.models import ModelKind, TypeModel
from schemashape.reducer import overlap, reduce_models
from schemashape.resolver import SchemaResolver, resolve_schema
from schemashape.validator import ValidationResult, Validator, accepts, validate_value

__all__ = [
    "__version__",
    "__description__",
    "SchemaShapeConfig",
    "load_config",
    "ResolutionResult",
    "SchemaIssue",
    "SchemaShapeError",
    "MalformedSchemaError",
    "RecursionLimitExceeded",
    "ModelKind",
    "TypeModel",
    "overlap",
    "reduce_models",
    "SchemaResolver",
    "resolve_schema",
    "ValidationResult",
    "Validator",
    "accepts",
    "validate_value",
]
