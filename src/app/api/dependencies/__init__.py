"""FastAPI dependency injection definitions.

Re-exports all dependencies so routers import from one place.
"""

# Database
from src.app.api.dependencies.db import DBSession, get_db_session

# Engine
from src.app.api.dependencies.engine import EngineClient, get_automation_client

# Repositories
from src.app.api.dependencies.repositories import (
    WebhookEventRepo,
    WorkflowExecRepo,
    WorkflowRepo,
    get_webhook_event_repository,
    get_workflow_execution_repository,
    get_workflow_repository,
)

# Services
from src.app.api.dependencies.services import (
    ExecutionServiceDep,
    StatisticsServiceDep,
    TriggerServiceDep,
    WorkflowValidatorDep,
    get_execution_service,
    get_statistics_service,
    get_trigger_service,
    get_workflow_validator,
)

# Tenant
from src.app.api.dependencies.tenant import (
    TenantExecution,
    TenantId,
    TenantWorkflow,
    get_tenant_execution,
    get_tenant_id_from_header,
    get_tenant_workflow,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Engine
    "EngineClient",
    "get_automation_client",
    # Repositories
    "WebhookEventRepo",
    "WorkflowExecRepo",
    "WorkflowRepo",
    "get_webhook_event_repository",
    "get_workflow_execution_repository",
    "get_workflow_repository",
    # Services
    "ExecutionServiceDep",
    "StatisticsServiceDep",
    "TriggerServiceDep",
    "WorkflowValidatorDep",
    "get_execution_service",
    "get_statistics_service",
    "get_trigger_service",
    "get_workflow_validator",
    # Tenant
    "TenantExecution",
    "TenantId",
    "TenantWorkflow",
    "get_tenant_execution",
    "get_tenant_id_from_header",
    "get_tenant_workflow",
]
