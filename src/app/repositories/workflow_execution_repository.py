"""Repository for WorkflowExecution entity."""

from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import col, select

from src.app.models import ExecutionStatus, WorkflowExecution
from src.app.repositories.base import BaseRepository


class WorkflowExecutionRepository(BaseRepository[WorkflowExecution]):
    """Execution store. Status changes go through transition() only."""

    model = WorkflowExecution

    async def transition(
        self,
        execution_id: UUID,
        expected: Iterable[ExecutionStatus],
        **values: Any,
    ) -> WorkflowExecution | None:
        """Conditionally update an execution keyed on its current status.

        The UPDATE only matches while the row is still in one of the expected
        statuses, so of two racing writers exactly one wins.

        Returns:
            The updated record, or None if the row was missing or had already
            left the expected statuses.
        """
        stmt = (
            update(WorkflowExecution)
            .where(
                col(WorkflowExecution.id) == execution_id,
                col(WorkflowExecution.status).in_([s.value for s in expected]),
            )
            .values(**values)
            .returning(WorkflowExecution)
            .execution_options(populate_existing=True, synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def refresh(self, execution_id: UUID) -> WorkflowExecution | None:
        """Re-read an execution, bypassing the session identity map."""
        result = await self.session.execute(
            select(WorkflowExecution)
            .where(WorkflowExecution.id == execution_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def count_by_status_since(
        self, workflow_id: UUID, status: ExecutionStatus, since: datetime
    ) -> int:
        """Count executions of a workflow in a status, started at or after `since`."""
        result = await self.session.execute(
            select(func.count())
            .select_from(WorkflowExecution)
            .where(
                WorkflowExecution.workflow_id == workflow_id,
                WorkflowExecution.status == status.value,
                col(WorkflowExecution.started_at) >= since,
            )
        )
        return int(result.scalar_one())

    async def list_by_workflow(
        self,
        workflow_id: UUID,
        statuses: Iterable[ExecutionStatus] | None = None,
    ) -> list[WorkflowExecution]:
        """List all executions of a workflow, newest first."""
        query = select(WorkflowExecution).where(WorkflowExecution.workflow_id == workflow_id)
        if statuses is not None:
            query = query.where(col(WorkflowExecution.status).in_([s.value for s in statuses]))
        result = await self.session.execute(
            query.order_by(col(WorkflowExecution.started_at).desc())
        )
        return list(result.scalars().all())

    async def paginate_by_workflow(
        self,
        workflow_id: UUID,
        status: ExecutionStatus | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[WorkflowExecution], str | None, bool]:
        """List executions of a workflow with cursor pagination.

        Returns:
            Tuple of (executions, next_cursor, has_more)
        """
        query = select(WorkflowExecution).where(WorkflowExecution.workflow_id == workflow_id)
        if status is not None:
            query = query.where(WorkflowExecution.status == status.value)
        return await self.paginate(query, cursor, limit, WorkflowExecution.started_at)
