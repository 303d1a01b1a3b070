"""Diagnostics collected while resolving a schema."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .models import TypeModel


class Severity(str, Enum):
    """Severity levels for resolution issues."""
    INFO = "info"
    WARNING = "warning"


class IssueCode(str, Enum):
    """Kinds of resolution issues."""
    UNSUPPORTED_KEYWORD = "unsupported_keyword"
    MALFORMED_SCHEMA = "malformed_schema"


@dataclass
class SchemaIssue:
    """A single problem found in a schema document."""
    code: IssueCode
    severity: Severity
    message: str
    path: str = "#"  # JSON pointer into the schema document

    def __str__(self) -> str:
        return f"[{self.severity.value.upper()}] {self.code.value}: {self.message} at {self.path}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
        }


@dataclass
class ResolutionResult:
    """Resolved type model plus the issues met on the way."""
    model: TypeModel
    issues: list[SchemaIssue] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        """Check if any issue is warning level or worse."""
        return any(issue.severity != Severity.INFO for issue in self.issues)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "model": self.model.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
        }
