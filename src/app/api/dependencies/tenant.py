"""Tenant header extraction and ownership checks.

Workflows and executions from another tenant are reported as not found,
so ids cannot be probed across tenants.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.app.api.dependencies.repositories import WorkflowExecRepo, WorkflowRepo
from src.app.core.exceptions import ExecutionNotFound, WorkflowNotFound
from src.app.core.logging import bind_tenant_context
from src.app.models import Workflow, WorkflowExecution


async def get_tenant_id_from_header(
    x_tenant_id: Annotated[str | None, Header()] = None,
) -> UUID:
    """Extract tenant id from header."""
    if not x_tenant_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID header is required",
        )
    try:
        tenant_id = UUID(x_tenant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Tenant-ID must be a UUID",
        ) from e
    bind_tenant_context(tenant_id)
    return tenant_id


TenantId = Annotated[UUID, Depends(get_tenant_id_from_header)]


async def get_tenant_workflow(
    workflow_id: UUID,
    tenant_id: TenantId,
    workflow_repo: WorkflowRepo,
) -> Workflow:
    """Resolve the workflow in the path, scoped to the caller's tenant."""
    workflow = await workflow_repo.get_for_tenant(workflow_id, tenant_id)
    if workflow is None:
        raise WorkflowNotFound("Workflow not found")
    return workflow


async def get_tenant_execution(
    execution_id: UUID,
    tenant_id: TenantId,
    workflow_repo: WorkflowRepo,
    execution_repo: WorkflowExecRepo,
) -> WorkflowExecution:
    """Resolve the execution in the path, scoped to the caller's tenant."""
    execution = await execution_repo.get_by_id(execution_id)
    if execution is None:
        raise ExecutionNotFound("Execution not found")
    if await workflow_repo.get_for_tenant(execution.workflow_id, tenant_id) is None:
        raise ExecutionNotFound("Execution not found")
    return execution


TenantWorkflow = Annotated[Workflow, Depends(get_tenant_workflow)]
TenantExecution = Annotated[WorkflowExecution, Depends(get_tenant_execution)]
