"""Repository layer - data access abstraction.

Repositories never commit; the service layer owns the transaction.
"""

from src.app.repositories.base import BaseRepository
from src.app.repositories.webhook_event_repository import WebhookEventRepository
from src.app.repositories.workflow_execution_repository import WorkflowExecutionRepository
from src.app.repositories.workflow_repository import WorkflowRepository

__all__ = [
    "BaseRepository",
    "WebhookEventRepository",
    "WorkflowExecutionRepository",
    "WorkflowRepository",
]
