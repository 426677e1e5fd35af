"""Execution orchestration - the workflow execution state machine.

pending -> running -> {completed, failed}, and pending/running -> cancelled.
Every status change is a conditional update keyed on the status the caller
observed, so racing writers cannot move an execution backward or overwrite
each other. A writer that loses gets InvalidStateTransition.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.automation import AutomationEngineClient, EngineExecutionSnapshot
from src.app.core.exceptions import (
    EngineReconciliationSkipped,
    EngineUnavailable,
    ExecutionNotFound,
    ExecutionSubmissionFailed,
    InvalidStateTransition,
    ValidationFailed,
    WorkflowNotFound,
)
from src.app.core.logging import bind_execution_context, get_logger
from src.app.models import (
    CANCELLABLE_STATUSES,
    ExecutionMode,
    ExecutionSource,
    ExecutionStatus,
    WorkflowExecution,
)
from src.app.models.base import parse_engine_timestamp, utc_now
from src.app.repositories import WorkflowExecutionRepository, WorkflowRepository
from src.app.services.workflow_validator import WorkflowValidator

logger = get_logger(__name__)

ERROR_MESSAGE_MAX_LENGTH = 1000
DEFAULT_ENGINE_ERROR = "Execution failed"


def _truncate(message: str) -> str:
    return message[:ERROR_MESSAGE_MAX_LENGTH]


class ExecutionService:
    """Creates, submits, reconciles and cancels workflow executions.

    Stateless: all collaborators are injected, and the service commits
    after each state change so a transition is visible to concurrent callers
    as soon as it is made.
    """

    def __init__(
        self,
        workflow_repo: WorkflowRepository,
        execution_repo: WorkflowExecutionRepository,
        engine: AutomationEngineClient,
        validator: WorkflowValidator,
        session: AsyncSession,
    ):
        self.workflow_repo = workflow_repo
        self.execution_repo = execution_repo
        self.engine = engine
        self.validator = validator
        self.session = session

    async def create(
        self,
        workflow_id: UUID,
        trigger_data: dict[str, Any],
        *,
        test_mode: bool = False,
        source: ExecutionSource | str = ExecutionSource.API,
        user_id: UUID | None = None,
    ) -> WorkflowExecution:
        """Validate, persist and submit a new execution.

        Args:
            workflow_id: Workflow to run
            trigger_data: Caller-supplied input, stored with derived metadata
            test_mode: Run in the engine's manual mode
            source: Where the trigger came from
            user_id: Submitting user, if any

        Returns:
            The execution, in status running

        Raises:
            ValidationFailed: Workflow is not runnable; nothing was persisted
            ExecutionSubmissionFailed: Engine rejected the run; the execution
                was recorded as failed
            InvalidStateTransition: Execution was cancelled while the
                submission was in flight
        """
        validation = await self.validator.validate(workflow_id)
        if not validation.is_valid:
            logger.info(
                "Workflow validation failed",
                workflow_id=str(workflow_id),
                codes=[e.code for e in validation.errors],
            )
            raise ValidationFailed(validation.errors, validation.warnings)

        workflow = await self.workflow_repo.get_by_id(workflow_id)
        if workflow is None:
            raise WorkflowNotFound("Workflow not found")

        source_value = source.value if isinstance(source, ExecutionSource) else source
        execution = WorkflowExecution(
            workflow_id=workflow_id,
            status=ExecutionStatus.PENDING.value,
            trigger_data={
                **trigger_data,
                "test_mode": test_mode,
                "source": source_value,
                "user_id": str(user_id) if user_id else None,
                "execution_timestamp": utc_now().isoformat(),
            },
            test_mode=test_mode,
        )
        try:
            await self.execution_repo.create(execution)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        bind_execution_context(execution.id, workflow_id)
        logger.info("Execution created", source=source_value, test_mode=test_mode)

        return await self._submit(execution, workflow.engine_workflow_id)

    async def _submit(
        self, execution: WorkflowExecution, engine_workflow_id: str
    ) -> WorkflowExecution:
        mode = ExecutionMode.MANUAL if execution.test_mode else ExecutionMode.TRIGGER

        try:
            handle = await self.engine.submit(engine_workflow_id, execution.trigger_data, mode)
        except EngineUnavailable as e:
            await self.execution_repo.transition(
                execution.id,
                [ExecutionStatus.PENDING],
                status=ExecutionStatus.FAILED.value,
                completed_at=utc_now(),
                error_message=_truncate(e.message),
            )
            await self.session.commit()
            logger.warning("Execution submission failed", error=e.message)
            raise ExecutionSubmissionFailed(execution.id, e.message) from e

        running = await self.execution_repo.transition(
            execution.id,
            [ExecutionStatus.PENDING],
            status=ExecutionStatus.RUNNING.value,
            engine_execution_id=handle.execution_id,
            execution_data=handle.raw,
        )
        if running is None:
            # Cancelled while the submission was in flight: keep the engine id
            # on the cancelled record and stop the engine-side run.
            current = await self.execution_repo.transition(
                execution.id,
                [ExecutionStatus.CANCELLED],
                engine_execution_id=handle.execution_id,
                execution_data=handle.raw,
            )
            await self.session.commit()
            await self._cancel_on_engine(handle.execution_id)
            if current is None:
                current = await self.execution_repo.refresh(execution.id)
            current_status = current.status if current else ExecutionStatus.CANCELLED.value
            logger.warning(
                "Submission lost race with cancellation",
                engine_execution_id=handle.execution_id,
                current_status=current_status,
            )
            raise InvalidStateTransition(
                current_status,
                f"Execution left pending before submission completed (status: {current_status})",
            )

        await self.session.commit()
        logger.info(
            "Execution submitted",
            engine_execution_id=handle.execution_id,
            mode=mode.value,
        )
        return running

    async def get(self, execution_id: UUID) -> WorkflowExecution:
        """Get an execution without contacting the engine."""
        execution = await self.execution_repo.get_by_id(execution_id)
        if execution is None:
            raise ExecutionNotFound("Execution not found")
        return execution

    async def reconcile(self, execution_id: UUID) -> WorkflowExecution:
        """Apply the engine's status to a running execution.

        Best-effort and idempotent: only a terminal engine status causes a
        write, and a failed status fetch leaves the record untouched.
        """
        execution = await self.get(execution_id)
        if execution.status != ExecutionStatus.RUNNING.value or not execution.engine_execution_id:
            return execution

        try:
            snapshot = await self.engine.fetch_status(execution.engine_execution_id)
        except EngineUnavailable as e:
            skipped = EngineReconciliationSkipped(e.message, status_code=e.engine_status_code)
            logger.warning(
                "Reconciliation skipped",
                execution_id=str(execution_id),
                engine_execution_id=execution.engine_execution_id,
                error=skipped.message,
            )
            return execution

        values = self._terminal_values(snapshot)
        if values is None:
            return execution

        updated = await self.execution_repo.transition(
            execution_id, [ExecutionStatus.RUNNING], **values
        )
        await self.session.commit()
        if updated is None:
            # Another writer moved it first; report what is stored now.
            return await self.execution_repo.refresh(execution_id) or execution

        logger.info(
            "Execution reconciled",
            execution_id=str(execution_id),
            status=updated.status,
        )
        return updated

    @staticmethod
    def _terminal_values(snapshot: EngineExecutionSnapshot) -> dict[str, Any] | None:
        """Column values for a terminal engine status, or None to leave running.

        Only a finished run is terminal. An error mode takes precedence over
        stoppedAt, and an unparseable stoppedAt is recorded as now.
        """
        if not snapshot.finished:
            return None
        stopped_at = parse_engine_timestamp(snapshot.stopped_at)
        if snapshot.is_error:
            return {
                "status": ExecutionStatus.FAILED.value,
                "completed_at": stopped_at or utc_now(),
                "error_message": _truncate(snapshot.error_message or DEFAULT_ENGINE_ERROR),
                "execution_data": snapshot.raw,
            }
        if snapshot.stopped_at:
            return {
                "status": ExecutionStatus.COMPLETED.value,
                "completed_at": stopped_at or utc_now(),
                "execution_data": snapshot.raw,
            }
        return None

    async def cancel(self, execution_id: UUID) -> WorkflowExecution:
        """Cancel a pending or running execution.

        The engine-side cancel is best-effort: a failure is logged and the
        local record is cancelled regardless, so the engine may still finish
        the run.

        Raises:
            ExecutionNotFound: Unknown execution
            InvalidStateTransition: Execution is terminal, or another writer
                changed it first
        """
        execution = await self.get(execution_id)
        observed = execution.status_enum
        if observed not in CANCELLABLE_STATUSES:
            raise InvalidStateTransition(execution.status)

        if execution.engine_execution_id:
            await self._cancel_on_engine(execution.engine_execution_id)

        cancelled = await self.execution_repo.transition(
            execution_id,
            [observed],
            status=ExecutionStatus.CANCELLED.value,
            completed_at=utc_now(),
        )
        await self.session.commit()
        if cancelled is None:
            current = await self.execution_repo.refresh(execution_id)
            raise InvalidStateTransition(current.status if current else execution.status)

        logger.info("Execution cancelled", execution_id=str(execution_id), previous=observed.value)
        return cancelled

    async def _cancel_on_engine(self, engine_execution_id: str) -> None:
        try:
            await self.engine.cancel(engine_execution_id)
        except EngineUnavailable as e:
            logger.warning(
                "Engine cancel failed, cancelling locally",
                engine_execution_id=engine_execution_id,
                error=e.message,
            )

    async def list_for_workflow(
        self,
        workflow_id: UUID,
        status: ExecutionStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[WorkflowExecution], str | None, bool]:
        """List a workflow's executions, newest first.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        return await self.execution_repo.paginate_by_workflow(workflow_id, status, cursor, limit)
