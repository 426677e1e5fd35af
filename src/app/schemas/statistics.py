"""Workflow execution statistics."""

from datetime import datetime

from pydantic import BaseModel


class WorkflowStats(BaseModel):
    """Aggregate counts and latency over a workflow's executions.

    last_status is "none" when the workflow has never run.
    """

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    running: int = 0
    pending: int = 0
    cancelled: int = 0
    avg_duration_seconds: float = 0.0
    last_status: str = "none"
    last_started_at: datetime | None = None
