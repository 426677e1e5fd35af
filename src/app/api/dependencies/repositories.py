"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.app.api.dependencies.db import DBSession
from src.app.repositories import (
    WebhookEventRepository,
    WorkflowExecutionRepository,
    WorkflowRepository,
)


def get_workflow_repository(session: DBSession) -> WorkflowRepository:
    """Get workflow repository with the request session."""
    return WorkflowRepository(session)


def get_workflow_execution_repository(
    session: DBSession,
) -> WorkflowExecutionRepository:
    """Get workflow execution repository with the request session."""
    return WorkflowExecutionRepository(session)


def get_webhook_event_repository(session: DBSession) -> WebhookEventRepository:
    """Get webhook event repository with the request session."""
    return WebhookEventRepository(session)


WorkflowRepo = Annotated[WorkflowRepository, Depends(get_workflow_repository)]
WorkflowExecRepo = Annotated[
    WorkflowExecutionRepository, Depends(get_workflow_execution_repository)
]
WebhookEventRepo = Annotated[WebhookEventRepository, Depends(get_webhook_event_repository)]
