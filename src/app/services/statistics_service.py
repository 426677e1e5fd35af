"""Execution statistics for a workflow."""

from uuid import UUID

from src.app.models import ExecutionStatus
from src.app.repositories import WorkflowExecutionRepository
from src.app.schemas.statistics import WorkflowStats


class StatisticsService:
    """Pure read-side aggregation over the execution store."""

    def __init__(self, execution_repo: WorkflowExecutionRepository):
        self.execution_repo = execution_repo

    async def stats(self, workflow_id: UUID) -> WorkflowStats:
        """Counts per status, average completed duration and the latest run.

        Average duration covers completed executions only.
        """
        executions = await self.execution_repo.list_by_workflow(workflow_id)
        if not executions:
            return WorkflowStats()

        counts = {status: 0 for status in ExecutionStatus}
        durations: list[float] = []
        for execution in executions:
            status = execution.status_enum
            counts[status] += 1
            if status is ExecutionStatus.COMPLETED and execution.duration_seconds is not None:
                durations.append(execution.duration_seconds)

        latest = max(executions, key=lambda e: e.started_at)
        return WorkflowStats(
            total=len(executions),
            succeeded=counts[ExecutionStatus.COMPLETED],
            failed=counts[ExecutionStatus.FAILED],
            running=counts[ExecutionStatus.RUNNING],
            pending=counts[ExecutionStatus.PENDING],
            cancelled=counts[ExecutionStatus.CANCELLED],
            avg_duration_seconds=sum(durations) / len(durations) if durations else 0.0,
            last_status=latest.status,
            last_started_at=latest.started_at,
        )
