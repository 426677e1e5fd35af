"""Workflow validation result schemas."""

from pydantic import BaseModel, Field


class ValidationCode:
    """Error codes reported by the workflow validator."""

    WORKFLOW_NOT_FOUND = "WORKFLOW_NOT_FOUND"
    WORKFLOW_INACTIVE = "WORKFLOW_INACTIVE"
    ENGINE_WORKFLOW_UNAVAILABLE = "ENGINE_WORKFLOW_UNAVAILABLE"
    ENGINE_WORKFLOW_EMPTY = "ENGINE_WORKFLOW_EMPTY"


class ValidationIssue(BaseModel):
    """A single blocking problem found while validating a workflow."""

    field: str
    message: str
    code: str


class ValidationResult(BaseModel):
    """Outcome of validating a workflow. Warnings never block execution."""

    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class ValidationResultRead(BaseModel):
    """Validation result as returned by the API."""

    is_valid: bool
    errors: list[ValidationIssue]
    warnings: list[str]

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResultRead":
        return cls(is_valid=result.is_valid, errors=result.errors, warnings=result.warnings)
