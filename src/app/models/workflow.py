"""Workflow definition and execution tracking models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now
from src.app.models.enums import ExecutionStatus, WorkflowStatus


class Workflow(SQLModel, table=True):
    """Automation definition bound to an engine workflow.

    Created and edited by the funnel builder; read-only to orchestration.
    """

    __tablename__ = "workflows"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(index=True)
    owner_id: UUID | None = Field(default=None)
    name: str = Field(default="", max_length=200)
    engine_workflow_id: str = Field(min_length=1, max_length=255)
    trigger_component_id: UUID | None = Field(default=None, index=True)
    status: str = Field(default=WorkflowStatus.DRAFT.value, max_length=20)
    config: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_active(self) -> bool:
        return self.status == WorkflowStatus.ACTIVE.value


class WorkflowExecution(SQLModel, table=True):
    """One run of a workflow on the automation engine.

    Only ExecutionService writes these rows. completed_at is set exactly
    when status is terminal, engine_execution_id exactly when the engine
    accepted the submission.
    """

    __tablename__ = "workflow_executions"
    __table_args__ = (
        Index("ix_workflow_executions_workflow_status", "workflow_id", "status"),
        Index("ix_workflow_executions_workflow_started", "workflow_id", "started_at"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workflow_id: UUID = Field(foreign_key="public.workflows.id")
    status: str = Field(default=ExecutionStatus.PENDING.value, max_length=20)
    started_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = Field(default=None)
    trigger_data: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    engine_execution_id: str | None = Field(default=None, max_length=255, index=True)
    execution_data: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )
    error_message: str | None = Field(default=None, max_length=1000)
    test_mode: bool = Field(default=False)

    @property
    def status_enum(self) -> ExecutionStatus:
        return ExecutionStatus(self.status)

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()
