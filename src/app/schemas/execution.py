"""Execution schemas for API request/response."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class ExecutionCreate(BaseModel):
    """Schema for triggering a workflow from inside the app.

    Exactly one of workflow_id or component_id identifies the workflow.
    """

    workflow_id: UUID | None = None
    component_id: UUID | None = None
    trigger_data: dict[str, Any] = Field(default_factory=dict)
    test_mode: bool = False

    @model_validator(mode="after")
    def validate_target(self) -> "ExecutionCreate":
        if (self.workflow_id is None) == (self.component_id is None):
            raise ValueError("Provide exactly one of workflow_id or component_id")
        return self


class ExecutionRead(BaseModel):
    """Schema for reading a workflow execution."""

    id: UUID
    workflow_id: UUID
    status: str
    started_at: datetime
    completed_at: datetime | None
    trigger_data: dict[str, Any]
    engine_execution_id: str | None
    error_message: str | None
    test_mode: bool
    duration_seconds: float | None = None

    model_config = {"from_attributes": True}
