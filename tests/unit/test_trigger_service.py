"""Unit tests for TriggerService - webhook and form ingress."""

from uuid import uuid4

import pytest

from src.app.core.exceptions import (
    EngineUnavailable,
    ExecutionSubmissionFailed,
    ValidationFailed,
    WorkflowNotActive,
    WorkflowNotFound,
)
from src.app.models import DEFAULT_EVENT_TYPE, ExecutionStatus
from src.app.services.trigger_service import extract_campaign, sanitize_headers
from tests.factories import WorkflowFactory
from tests.fakes import engine_definition

pytestmark = pytest.mark.unit


@pytest.fixture
def workflow(workflow_repo):
    return workflow_repo.put(WorkflowFactory.build())


class TestHandleTrigger:
    """Tests for webhook deliveries addressed to a workflow id."""

    async def test_accepted_delivery_starts_execution(
        self, trigger_service, workflow, execution_repo, webhook_event_repo
    ):
        """Active workflow -> one processed event and one running execution."""
        result = await trigger_service.handle_trigger(
            workflow.id, {"event": "lead.created", "email": "a@b.co"}, {}, "203.0.113.9"
        )

        event = webhook_event_repo.items[result.webhook_event_id]
        execution = execution_repo.items[result.execution_id]
        assert event.processed is True
        assert event.processed_at is not None
        assert event.event_type == "lead.created"
        assert event.workflow_id == workflow.id
        assert execution.status == ExecutionStatus.RUNNING.value
        assert result.redirect_hint == "/thank-you"

    async def test_trigger_data_carries_delivery_context(
        self, trigger_service, workflow, execution_repo
    ):
        """Trigger data links back to the event and records source and owner."""
        payload = {"email": "a@b.co"}

        result = await trigger_service.handle_trigger(
            workflow.id, payload, {"User-Agent": "curl"}, "203.0.113.9"
        )

        data = execution_repo.items[result.execution_id].trigger_data
        assert data["webhook_event_id"] == str(result.webhook_event_id)
        assert data["webhook_payload"] == payload
        assert data["webhook_headers"] == {"user-agent": "curl"}
        assert data["event_type"] == DEFAULT_EVENT_TYPE
        assert data["source_ip"] == "203.0.113.9"
        assert data["source"] == "webhook"
        assert data["user_id"] == str(workflow.owner_id)

    async def test_unknown_source_ip(self, trigger_service, workflow, execution_repo):
        result = await trigger_service.handle_trigger(workflow.id, {}, {})

        assert execution_repo.items[result.execution_id].trigger_data["source_ip"] == "unknown"

    async def test_unknown_workflow_logs_unprocessed_event(
        self, trigger_service, webhook_event_repo, execution_repo
    ):
        """Unknown workflow -> event with the reason, no execution, 404 error."""
        workflow_id = uuid4()

        with pytest.raises(WorkflowNotFound):
            await trigger_service.handle_trigger(workflow_id, {"email": "a@b.co"}, {})

        (event,) = webhook_event_repo.items.values()
        assert event.workflow_id == workflow_id
        assert event.processed is False
        assert event.error_message == "Workflow not found"
        assert execution_repo.items == {}

    async def test_three_unknown_deliveries_log_three_events(
        self, trigger_service, webhook_event_repo, execution_repo
    ):
        """Every delivery is logged once, even when nothing can run."""
        workflow_id = uuid4()

        for _ in range(3):
            with pytest.raises(WorkflowNotFound):
                await trigger_service.handle_trigger(workflow_id, {}, {})

        assert len(webhook_event_repo.items) == 3
        assert all(not e.processed for e in webhook_event_repo.items.values())
        assert execution_repo.items == {}

    async def test_inactive_workflow_logs_unprocessed_event(
        self, trigger_service, workflow_repo, webhook_event_repo, execution_repo, engine
    ):
        """Inactive workflow -> event with the reason, no execution, no engine call."""
        workflow = workflow_repo.put(WorkflowFactory.inactive())

        with pytest.raises(WorkflowNotActive):
            await trigger_service.handle_trigger(workflow.id, {}, {})

        (event,) = webhook_event_repo.items.values()
        assert event.error_message == "Workflow is not active"
        assert event.processed is False
        assert execution_repo.items == {}
        engine.submit.assert_not_called()

    async def test_submission_failure_marks_event_unprocessed(
        self, trigger_service, workflow, webhook_event_repo, execution_repo, engine
    ):
        """The event is kept, flipped to unprocessed with the reason, and the error re-raised."""
        engine.submit.side_effect = EngineUnavailable("Engine API error: 503 Service Unavailable")

        with pytest.raises(ExecutionSubmissionFailed):
            await trigger_service.handle_trigger(workflow.id, {}, {})

        (event,) = webhook_event_repo.items.values()
        (execution,) = execution_repo.items.values()
        assert event.processed is False
        assert "503" in event.error_message
        assert execution.status == ExecutionStatus.FAILED.value

    async def test_validation_failure_marks_event_unprocessed(
        self, trigger_service, workflow, webhook_event_repo, engine
    ):
        """An engine-side empty workflow fails validation after the event is logged."""
        engine.get_workflow.return_value = engine_definition(nodes=[])

        with pytest.raises(ValidationFailed):
            await trigger_service.handle_trigger(workflow.id, {}, {})

        (event,) = webhook_event_repo.items.values()
        assert event.processed is False
        assert event.error_message.startswith("Workflow validation failed")

    async def test_credentials_are_not_stored(self, trigger_service, workflow, webhook_event_repo):
        result = await trigger_service.handle_trigger(
            workflow.id, {}, {"X-Webhook-Secret": "s3cret", "Authorization": "Bearer t"}
        )

        headers = webhook_event_repo.items[result.webhook_event_id].headers
        assert headers["x-webhook-secret"] == "[redacted]"
        assert headers["authorization"] == "[redacted]"

    @pytest.mark.parametrize(
        "config,expected",
        [
            ({"success_redirect_url": "/funnels/ebook/thanks"}, "/funnels/ebook/thanks"),
            ({"successRedirectUrl": "https://example.com/done"}, "https://example.com/done"),
            ({}, "/thank-you"),
        ],
    )
    async def test_redirect_hint(self, trigger_service, workflow_repo, config, expected):
        workflow = workflow_repo.put(WorkflowFactory.build(config=config))

        result = await trigger_service.handle_trigger(workflow.id, {}, {})

        assert result.redirect_hint == expected


class TestHandleFormSubmission:
    """Tests for lead form posts resolved by component."""

    async def test_routes_to_component_workflow(
        self, trigger_service, workflow_repo, webhook_event_repo, execution_repo
    ):
        component_id = uuid4()
        workflow = workflow_repo.put(WorkflowFactory.build(trigger_component_id=component_id))

        result = await trigger_service.handle_form_submission(
            component_id, {"email": "a@b.co", "formId": "optin"}, {}
        )

        event = webhook_event_repo.items[result.webhook_event_id]
        execution = execution_repo.items[result.execution_id]
        assert event.component_id == component_id
        assert execution.workflow_id == workflow.id
        assert execution.trigger_data["source"] == "form"
        assert execution.trigger_data["component_id"] == str(component_id)

    async def test_unbound_component_logs_event_without_workflow(
        self, trigger_service, workflow_repo, webhook_event_repo, execution_repo
    ):
        """Inactive or missing bindings are not found; the delivery is still logged."""
        component_id = uuid4()
        workflow_repo.put(WorkflowFactory.inactive(trigger_component_id=component_id))

        with pytest.raises(WorkflowNotFound):
            await trigger_service.handle_form_submission(component_id, {"email": "a@b.co"}, {})

        (event,) = webhook_event_repo.items.values()
        assert event.workflow_id is None
        assert event.component_id == component_id
        assert event.processed is False
        assert execution_repo.items == {}


class TestResolveComponent:
    async def test_resolves_active_workflow(self, trigger_service, workflow_repo):
        component_id = uuid4()
        workflow = workflow_repo.put(WorkflowFactory.build(trigger_component_id=component_id))

        assert await trigger_service.resolve_component(component_id) is workflow

    async def test_other_tenant_is_not_found(self, trigger_service, workflow_repo):
        component_id = uuid4()
        workflow_repo.put(WorkflowFactory.build(trigger_component_id=component_id))

        with pytest.raises(WorkflowNotFound):
            await trigger_service.resolve_component(component_id, tenant_id=uuid4())


class TestListEvents:
    async def test_filters_by_processed(self, trigger_service, workflow_repo):
        active = workflow_repo.put(WorkflowFactory.build())
        await trigger_service.handle_trigger(active.id, {}, {})
        active.status = "inactive"
        with pytest.raises(WorkflowNotActive):
            await trigger_service.handle_trigger(active.id, {}, {})

        processed, _, _ = await trigger_service.list_events(active.id, processed=True)
        rejected, _, _ = await trigger_service.list_events(active.id, processed=False)

        assert len(processed) == 1
        assert len(rejected) == 1
        assert rejected[0].error_message == "Workflow is not active"


class TestHelpers:
    def test_campaign_from_headers_wins(self):
        campaign = extract_campaign(
            {"x-utm-source": "newsletter"}, {"utm_source": "ads", "utmCampaign": "spring"}
        )

        assert campaign == {"utm_source": "newsletter", "utm_campaign": "spring"}

    def test_campaign_absent(self):
        assert extract_campaign({}, {"email": "a@b.co"}) == {}

    def test_sanitize_lowercases_names(self):
        assert sanitize_headers({"X-UTM-Source": "ads"}) == {"x-utm-source": "ads"}
