"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.app.api.dependencies.db import DBSession
from src.app.api.dependencies.engine import EngineClient
from src.app.api.dependencies.repositories import (
    WebhookEventRepo,
    WorkflowExecRepo,
    WorkflowRepo,
)
from src.app.core.config import get_settings
from src.app.services import (
    ExecutionService,
    StatisticsService,
    TriggerService,
    WorkflowValidator,
)


def get_workflow_validator(
    workflow_repo: WorkflowRepo,
    execution_repo: WorkflowExecRepo,
    engine: EngineClient,
) -> WorkflowValidator:
    """Get workflow validator with the configured failure warning window."""
    settings = get_settings()
    return WorkflowValidator(
        workflow_repo,
        execution_repo,
        engine,
        failure_window_minutes=settings.recent_failure_window_minutes,
        failure_threshold=settings.recent_failure_threshold,
    )


WorkflowValidatorDep = Annotated[WorkflowValidator, Depends(get_workflow_validator)]


def get_execution_service(
    workflow_repo: WorkflowRepo,
    execution_repo: WorkflowExecRepo,
    engine: EngineClient,
    validator: WorkflowValidatorDep,
    session: DBSession,
) -> ExecutionService:
    """Get execution service."""
    return ExecutionService(workflow_repo, execution_repo, engine, validator, session)


ExecutionServiceDep = Annotated[ExecutionService, Depends(get_execution_service)]


def get_trigger_service(
    workflow_repo: WorkflowRepo,
    webhook_event_repo: WebhookEventRepo,
    execution_service: ExecutionServiceDep,
    session: DBSession,
) -> TriggerService:
    """Get trigger service."""
    return TriggerService(
        workflow_repo,
        webhook_event_repo,
        execution_service,
        session,
        default_redirect_url=get_settings().default_redirect_url,
    )


def get_statistics_service(execution_repo: WorkflowExecRepo) -> StatisticsService:
    """Get statistics service."""
    return StatisticsService(execution_repo)


TriggerServiceDep = Annotated[TriggerService, Depends(get_trigger_service)]
StatisticsServiceDep = Annotated[StatisticsService, Depends(get_statistics_service)]
