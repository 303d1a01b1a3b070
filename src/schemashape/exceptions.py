"""Exceptions raised while resolving schemas.

Validation mismatches are never raised; they are reported through
``ValidationResult``.
"""


class SchemaShapeError(Exception):
    """Base class for schemashape errors."""
    pass


class MalformedSchemaError(SchemaShapeError):
    """Raised in strict mode when a schema node is structurally inconsistent."""

    def __init__(self, message: str, path: str = "#"):
        self.path = path
        super().__init__(f"{message} (at {path})")


class RecursionLimitExceeded(SchemaShapeError):
    """Raised when schema nesting goes deeper than the configured ceiling."""

    def __init__(self, path: str, limit: int):
        self.path = path
        self.limit = limit
        super().__init__(f"Schema nesting exceeds maximum depth {limit} at {path}")
