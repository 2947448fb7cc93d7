"""
Result and validation models.

MutationResult is the only thing a mutation action ever hands back to
its caller. ValidationIssue/ValidationResult carry input problems found
before any persistence call.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class MutationResult(BaseModel):
    """
    Tagged outcome of a mutation.

    {success: True, data: ...} or {success: False, error: "..."}.
    Created fresh per invocation; never raised.
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "MutationResult":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, message: str) -> "MutationResult":
        return cls(success=False, error=message)


class ValidationIssue(BaseModel):
    """A single validation issue found in an action payload."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'empty')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="How the user can fix this"
    )


class ValidationResult(BaseModel):
    """All issues found for one payload."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def first_error(self) -> Optional[ValidationIssue]:
        for issue in self.issues:
            if issue.severity == "error":
                return issue
        return None
