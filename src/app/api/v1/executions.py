"""Execution endpoints - trigger, poll and cancel workflow runs from the app."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Header, status

from src.app.api.dependencies import (
    ExecutionServiceDep,
    TenantExecution,
    TenantId,
    TriggerServiceDep,
    WorkflowRepo,
)
from src.app.core.exceptions import WorkflowNotFound
from src.app.models import ExecutionSource
from src.app.schemas.execution import ExecutionCreate, ExecutionRead

router = APIRouter(prefix="/executions", tags=["executions"])


@router.post(
    "",
    response_model=ExecutionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Trigger workflow",
    description=(
        "Validate and start a workflow, identified by workflow_id or by the page "
        "component that triggers it. Requires X-Tenant-ID header."
    ),
    responses={
        201: {"description": "Execution submitted to the automation engine"},
        400: {"description": "Missing or invalid X-Tenant-ID header"},
        404: {"description": "Workflow not found"},
        409: {"description": "Execution was cancelled before submission completed"},
        422: {"description": "Workflow failed validation; no execution created"},
        502: {"description": "Automation engine rejected the submission"},
    },
)
async def create_execution(
    request: ExecutionCreate,
    tenant_id: TenantId,
    workflow_repo: WorkflowRepo,
    execution_service: ExecutionServiceDep,
    trigger_service: TriggerServiceDep,
    x_user_id: Annotated[UUID | None, Header()] = None,
) -> ExecutionRead:
    """Create and submit an execution."""
    if request.component_id is not None:
        workflow = await trigger_service.resolve_component(request.component_id, tenant_id)
        workflow_id = workflow.id
    elif (
        request.workflow_id is not None
        and await workflow_repo.get_for_tenant(request.workflow_id, tenant_id) is not None
    ):
        workflow_id = request.workflow_id
    else:
        raise WorkflowNotFound("Workflow not found")

    execution = await execution_service.create(
        workflow_id,
        request.trigger_data,
        test_mode=request.test_mode,
        source=ExecutionSource.API,
        user_id=x_user_id,
    )
    return ExecutionRead.model_validate(execution)


@router.get(
    "/{execution_id}",
    response_model=ExecutionRead,
    summary="Get execution status",
    description="Reconcile a running execution with the automation engine and return it.",
    responses={
        200: {"description": "Execution with the latest known status"},
        404: {"description": "Execution not found"},
    },
)
async def get_execution(
    execution: TenantExecution,
    execution_service: ExecutionServiceDep,
) -> ExecutionRead:
    """Get an execution, refreshing its status from the engine first."""
    reconciled = await execution_service.reconcile(execution.id)
    return ExecutionRead.model_validate(reconciled)


@router.post(
    "/{execution_id}/cancel",
    response_model=ExecutionRead,
    summary="Cancel execution",
    description=(
        "Cancel a pending or running execution. The engine-side cancel is "
        "best-effort; the execution is cancelled locally even if it fails."
    ),
    responses={
        200: {"description": "Execution cancelled"},
        404: {"description": "Execution not found"},
        409: {"description": "Execution is already finished"},
    },
)
async def cancel_execution(
    execution: TenantExecution,
    execution_service: ExecutionServiceDep,
) -> ExecutionRead:
    """Cancel an execution."""
    cancelled = await execution_service.cancel(execution.id)
    return ExecutionRead.model_validate(cancelled)
