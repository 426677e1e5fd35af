"""Model exports.

Import from here: `from src.app.models import Workflow, WorkflowExecution`
"""

from src.app.models.enums import (
    CANCELLABLE_STATUSES,
    TERMINAL_STATUSES,
    ExecutionMode,
    ExecutionSource,
    ExecutionStatus,
    WorkflowStatus,
)
from src.app.models.webhook_event import DEFAULT_EVENT_TYPE, WebhookEvent
from src.app.models.workflow import Workflow, WorkflowExecution

__all__ = [
    # Enums
    "CANCELLABLE_STATUSES",
    "TERMINAL_STATUSES",
    "ExecutionMode",
    "ExecutionSource",
    "ExecutionStatus",
    "WorkflowStatus",
    # Models
    "DEFAULT_EVENT_TYPE",
    "WebhookEvent",
    "Workflow",
    "WorkflowExecution",
]
