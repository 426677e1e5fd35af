"""Shared enums for models."""

from enum import Enum


class WorkflowStatus(str, Enum):
    """Workflow definition status. Only active workflows may be executed."""

    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"


class ExecutionStatus(str, Enum):
    """Workflow execution lifecycle.

    pending -> running -> {completed, failed}; pending/running -> cancelled.
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def rank(self) -> int:
        """Position in the partial order pending < running < terminal."""
        if self is ExecutionStatus.PENDING:
            return 0
        if self is ExecutionStatus.RUNNING:
            return 1
        return 2


TERMINAL_STATUSES = frozenset(
    {ExecutionStatus.COMPLETED, ExecutionStatus.FAILED, ExecutionStatus.CANCELLED}
)
CANCELLABLE_STATUSES = frozenset({ExecutionStatus.PENDING, ExecutionStatus.RUNNING})


class ExecutionSource(str, Enum):
    """Where a trigger came from."""

    API = "api"
    WEBHOOK = "webhook"
    FORM = "form"


class ExecutionMode(str, Enum):
    """Engine execution mode sent with a submission."""

    TRIGGER = "trigger"
    MANUAL = "manual"
