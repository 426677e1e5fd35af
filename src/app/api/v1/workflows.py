"""Workflow read endpoints - validation, statistics and history."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.app.api.dependencies import (
    ExecutionServiceDep,
    StatisticsServiceDep,
    TenantWorkflow,
    TriggerServiceDep,
    WorkflowValidatorDep,
)
from src.app.models import ExecutionStatus
from src.app.schemas.execution import ExecutionRead
from src.app.schemas.pagination import PaginatedResponse
from src.app.schemas.statistics import WorkflowStats
from src.app.schemas.trigger import WebhookEventRead
from src.app.schemas.validation import ValidationResultRead

router = APIRouter(prefix="/workflows", tags=["workflows"])


@router.get(
    "/{workflow_id}/validation",
    response_model=ValidationResultRead,
    summary="Validate workflow",
    description="Run the pre-submission checks without starting an execution.",
    responses={
        200: {"description": "Validation result; warnings never block execution"},
        404: {"description": "Workflow not found"},
    },
)
async def validate_workflow(
    workflow: TenantWorkflow,
    validator: WorkflowValidatorDep,
) -> ValidationResultRead:
    """Validate a workflow."""
    result = await validator.validate(workflow.id)
    return ValidationResultRead.from_result(result)


@router.get(
    "/{workflow_id}/stats",
    response_model=WorkflowStats,
    summary="Workflow statistics",
    responses={
        200: {"description": "Execution counts and average duration"},
        404: {"description": "Workflow not found"},
    },
)
async def workflow_stats(
    workflow: TenantWorkflow,
    statistics_service: StatisticsServiceDep,
) -> WorkflowStats:
    """Get execution statistics for a workflow."""
    return await statistics_service.stats(workflow.id)


@router.get(
    "/{workflow_id}/executions",
    response_model=PaginatedResponse[ExecutionRead],
    summary="List executions",
    description="List a workflow's executions, newest first, with cursor-based pagination.",
    responses={
        200: {"description": "Paginated list of executions"},
        404: {"description": "Workflow not found"},
    },
)
async def list_executions(
    workflow: TenantWorkflow,
    execution_service: ExecutionServiceDep,
    status: Annotated[ExecutionStatus | None, Query(description="Filter by status")] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[ExecutionRead]:
    """List executions of a workflow."""
    executions, next_cursor, has_more = await execution_service.list_for_workflow(
        workflow.id, status=status, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[ExecutionRead.model_validate(e) for e in executions],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get(
    "/{workflow_id}/webhook-events",
    response_model=PaginatedResponse[WebhookEventRead],
    summary="List webhook deliveries",
    description="List trigger deliveries logged for a workflow, newest first.",
    responses={
        200: {"description": "Paginated list of deliveries"},
        404: {"description": "Workflow not found"},
    },
)
async def list_webhook_events(
    workflow: TenantWorkflow,
    trigger_service: TriggerServiceDep,
    processed: Annotated[bool | None, Query(description="Filter by outcome")] = None,
    event_type: Annotated[str | None, Query(description="Filter by event type")] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[WebhookEventRead]:
    """List webhook deliveries for a workflow."""
    events, next_cursor, has_more = await trigger_service.list_events(
        workflow.id, processed=processed, event_type=event_type, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[WebhookEventRead.model_validate(e) for e in events],
        next_cursor=next_cursor,
        has_more=has_more,
    )
