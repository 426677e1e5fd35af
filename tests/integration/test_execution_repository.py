"""Repository tests against PostgreSQL."""

from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.models import CANCELLABLE_STATUSES, ExecutionStatus
from src.app.models.base import utc_now
from src.app.repositories import (
    WebhookEventRepository,
    WorkflowExecutionRepository,
    WorkflowRepository,
)
from tests.factories import WebhookEventFactory, WorkflowExecutionFactory, WorkflowFactory

pytestmark = pytest.mark.integration


@pytest.fixture
async def workflow(db_session):
    workflow = await WorkflowRepository(db_session).create(WorkflowFactory.build())
    await db_session.commit()
    return workflow


class TestTransition:
    async def test_updates_when_status_matches(self, db_session, workflow):
        repo = WorkflowExecutionRepository(db_session)
        execution = await repo.create(WorkflowExecutionFactory.build(workflow_id=workflow.id))
        await db_session.commit()

        updated = await repo.transition(
            execution.id,
            [ExecutionStatus.PENDING],
            status=ExecutionStatus.RUNNING.value,
            engine_execution_id="exec_1",
        )
        await db_session.commit()

        assert updated is not None
        assert updated.status == ExecutionStatus.RUNNING.value
        assert updated.engine_execution_id == "exec_1"

    async def test_loser_of_race_gets_none(self, db_session, other_session, workflow):
        """Two writers expecting the same status: the second one matches no row."""
        repo = WorkflowExecutionRepository(db_session)
        execution = await repo.create(WorkflowExecutionFactory.running(workflow_id=workflow.id))
        await db_session.commit()

        cancelled = await WorkflowExecutionRepository(other_session).transition(
            execution.id,
            CANCELLABLE_STATUSES,
            status=ExecutionStatus.CANCELLED.value,
            completed_at=utc_now(),
        )
        await other_session.commit()

        completed = await repo.transition(
            execution.id,
            [ExecutionStatus.RUNNING],
            status=ExecutionStatus.COMPLETED.value,
            completed_at=utc_now(),
        )
        await db_session.commit()

        assert cancelled is not None
        assert completed is None
        refreshed = await repo.refresh(execution.id)
        assert refreshed is not None
        assert refreshed.status == ExecutionStatus.CANCELLED.value


class TestQueries:
    async def test_count_by_status_since(self, db_session, workflow):
        repo = WorkflowExecutionRepository(db_session)
        now = utc_now()
        for minutes_ago in (5, 30, 120):
            await repo.create(
                WorkflowExecutionFactory.failed(
                    workflow_id=workflow.id, started_at=now - timedelta(minutes=minutes_ago)
                )
            )
        await repo.create(WorkflowExecutionFactory.completed(workflow_id=workflow.id))
        await db_session.commit()

        count = await repo.count_by_status_since(
            workflow.id, ExecutionStatus.FAILED, now - timedelta(minutes=60)
        )

        assert count == 2

    async def test_paginate_newest_first(self, db_session, workflow):
        repo = WorkflowExecutionRepository(db_session)
        now = utc_now()
        created = [
            await repo.create(
                WorkflowExecutionFactory.build(
                    workflow_id=workflow.id, started_at=now - timedelta(minutes=i)
                )
            )
            for i in range(5)
        ]
        await db_session.commit()

        first, cursor, has_more = await repo.paginate_by_workflow(workflow.id, limit=2)
        second, _, _ = await repo.paginate_by_workflow(workflow.id, cursor=cursor, limit=2)

        assert has_more is True
        assert [e.id for e in first] == [created[0].id, created[1].id]
        assert [e.id for e in second] == [created[2].id, created[3].id]

    async def test_invalid_cursor_restarts(self, db_session, workflow):
        repo = WorkflowExecutionRepository(db_session)
        await repo.create(WorkflowExecutionFactory.build(workflow_id=workflow.id))
        await db_session.commit()

        items, _, has_more = await repo.paginate_by_workflow(workflow.id, cursor="%%%")

        assert len(items) == 1
        assert has_more is False


class TestWorkflowLookups:
    async def test_get_for_tenant_hides_other_tenants(self, db_session, workflow):
        repo = WorkflowRepository(db_session)

        assert await repo.get_for_tenant(workflow.id, workflow.tenant_id) is not None
        assert await repo.get_for_tenant(workflow.id, uuid4()) is None

    async def test_active_by_component(self, db_session):
        repo = WorkflowRepository(db_session)
        component_id = uuid4()
        await repo.create(WorkflowFactory.inactive(trigger_component_id=component_id))
        active = await repo.create(WorkflowFactory.build(trigger_component_id=component_id))
        await db_session.commit()

        found = await repo.get_active_by_component(component_id)

        assert found is not None
        assert found.id == active.id


class TestWebhookEvents:
    async def test_mark_records_outcome(self, db_session, other_session, workflow):
        repo = WebhookEventRepository(db_session)
        event = await repo.create(WebhookEventFactory.build(workflow_id=workflow.id))
        await db_session.commit()

        await repo.mark(event.id, processed=False, error_message="x" * 1500)
        await db_session.commit()

        events, _, _ = await WebhookEventRepository(other_session).list_by_workflow(
            workflow.id, processed=False
        )
        assert [e.id for e in events] == [event.id]
        assert len(events[0].error_message) == 1000
        assert events[0].processed_at is not None
