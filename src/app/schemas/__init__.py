from src.app.schemas.execution import ExecutionCreate, ExecutionRead
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.statistics import WorkflowStats
from src.app.schemas.trigger import (
    LeadFormSubmission,
    TriggerResponse,
    TriggerResult,
    WebhookEventRead,
)
from src.app.schemas.validation import (
    ValidationCode,
    ValidationIssue,
    ValidationResult,
    ValidationResultRead,
)

__all__ = [
    # Execution
    "ExecutionCreate",
    "ExecutionRead",
    # Pagination
    "PaginatedResponse",
    # Statistics
    "WorkflowStats",
    # Trigger
    "LeadFormSubmission",
    "TriggerResponse",
    "TriggerResult",
    "WebhookEventRead",
    # Validation
    "ValidationCode",
    "ValidationIssue",
    "ValidationResult",
    "ValidationResultRead",
]
