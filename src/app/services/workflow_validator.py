"""Pre-submission workflow validation."""

from datetime import timedelta
from uuid import UUID

from src.app.automation import AutomationEngineClient
from src.app.core.exceptions import EngineUnavailable
from src.app.core.logging import get_logger
from src.app.models import ExecutionStatus
from src.app.models.base import utc_now
from src.app.repositories import WorkflowExecutionRepository, WorkflowRepository
from src.app.schemas.validation import ValidationCode, ValidationIssue, ValidationResult

logger = get_logger(__name__)


class WorkflowValidator:
    """Checks that a workflow is runnable before it is submitted.

    Errors accumulate rather than short-circuit, except a missing workflow,
    which ends validation immediately.
    """

    def __init__(
        self,
        workflow_repo: WorkflowRepository,
        execution_repo: WorkflowExecutionRepository,
        engine: AutomationEngineClient,
        failure_window_minutes: int = 60,
        failure_threshold: int = 3,
    ):
        self.workflow_repo = workflow_repo
        self.execution_repo = execution_repo
        self.engine = engine
        self.failure_window = timedelta(minutes=failure_window_minutes)
        self.failure_threshold = failure_threshold

    async def validate(self, workflow_id: UUID) -> ValidationResult:
        result = ValidationResult()

        workflow = await self.workflow_repo.get_by_id(workflow_id)
        if workflow is None:
            result.errors.append(
                ValidationIssue(
                    field="workflow_id",
                    message="Workflow not found",
                    code=ValidationCode.WORKFLOW_NOT_FOUND,
                )
            )
            return result

        if not workflow.is_active:
            result.errors.append(
                ValidationIssue(
                    field="status",
                    message=f"Workflow is not active (status: {workflow.status})",
                    code=ValidationCode.WORKFLOW_INACTIVE,
                )
            )

        try:
            definition = await self.engine.get_workflow(workflow.engine_workflow_id)
        except EngineUnavailable as e:
            logger.warning(
                "Engine workflow lookup failed",
                workflow_id=str(workflow_id),
                engine_workflow_id=workflow.engine_workflow_id,
                error=e.message,
            )
            result.errors.append(
                ValidationIssue(
                    field="engine_workflow_id",
                    message="Workflow not found in automation engine",
                    code=ValidationCode.ENGINE_WORKFLOW_UNAVAILABLE,
                )
            )
        else:
            if not definition.nodes:
                result.errors.append(
                    ValidationIssue(
                        field="nodes",
                        message="Workflow has no nodes",
                        code=ValidationCode.ENGINE_WORKFLOW_EMPTY,
                    )
                )
            elif not definition.has_trigger:
                result.warnings.append("Workflow has no trigger node")
            if not definition.active:
                result.warnings.append("Workflow is not active in the automation engine")

        since = utc_now() - self.failure_window
        recent_failures = await self.execution_repo.count_by_status_since(
            workflow_id, ExecutionStatus.FAILED, since
        )
        if recent_failures >= self.failure_threshold:
            result.warnings.append(
                f"Workflow has failed {recent_failures} times in the last "
                f"{int(self.failure_window.total_seconds() // 60)} minutes"
            )

        return result
