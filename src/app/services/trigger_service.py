"""Trigger ingress - turns webhook deliveries and form posts into executions.

Every delivery is logged as a WebhookEvent exactly once, before any
orchestration happens. The event is updated with the outcome but never
deleted, so a delivery that produced no execution is still visible.
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.app.core.exceptions import OrchestrationError, WorkflowNotActive, WorkflowNotFound
from src.app.core.logging import get_logger
from src.app.models import DEFAULT_EVENT_TYPE, ExecutionSource, WebhookEvent, Workflow
from src.app.models.base import utc_now
from src.app.repositories import WebhookEventRepository, WorkflowRepository
from src.app.schemas.trigger import TriggerResult
from src.app.services.execution_service import ExecutionService

logger = get_logger(__name__)

REDACTED_HEADERS = frozenset({"authorization", "cookie", "x-webhook-secret"})
UTM_FIELDS = ("source", "medium", "campaign")


def sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    """Lower-case header names and redact credentials before they are stored."""
    return {
        name.lower(): ("[redacted]" if name.lower() in REDACTED_HEADERS else value)
        for name, value in headers.items()
    }


def extract_campaign(headers: dict[str, str], payload: dict[str, Any]) -> dict[str, str]:
    """Campaign parameters from x-utm-* headers, falling back to the payload.

    The payload may use utm_source or utmSource style keys.
    """
    campaign: dict[str, str] = {}
    for name in UTM_FIELDS:
        value = (
            headers.get(f"x-utm-{name}")
            or payload.get(f"utm_{name}")
            or payload.get(f"utm{name.capitalize()}")
        )
        if value:
            campaign[f"utm_{name}"] = str(value)
    return campaign


def redirect_hint(workflow: Workflow, default: str) -> str:
    config = workflow.config or {}
    return (
        config.get("success_redirect_url")
        or config.get("successRedirectUrl")
        or default
    )


class TriggerService:
    """Resolves inbound triggers to a workflow and hands them to ExecutionService."""

    def __init__(
        self,
        workflow_repo: WorkflowRepository,
        webhook_event_repo: WebhookEventRepository,
        execution_service: ExecutionService,
        session: AsyncSession,
        default_redirect_url: str = "/thank-you",
    ):
        self.workflow_repo = workflow_repo
        self.webhook_event_repo = webhook_event_repo
        self.execution_service = execution_service
        self.session = session
        self.default_redirect_url = default_redirect_url

    async def _log_event(
        self,
        workflow_id: UUID | None,
        payload: dict[str, Any],
        headers: dict[str, str],
        processed: bool,
        error_message: str | None = None,
        component_id: UUID | None = None,
    ) -> UUID:
        """Persist and commit a delivery record. Returns its id."""
        event = WebhookEvent(
            workflow_id=workflow_id,
            component_id=component_id,
            event_type=str(payload.get("event") or DEFAULT_EVENT_TYPE),
            payload=payload,
            headers=headers,
            processed=processed,
            error_message=error_message,
            processed_at=None if processed else utc_now(),
        )
        try:
            await self.webhook_event_repo.create(event)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return event.id

    async def handle_trigger(
        self,
        workflow_id: UUID,
        payload: dict[str, Any],
        headers: dict[str, str],
        client_ip: str | None = None,
        *,
        component_id: UUID | None = None,
        source: ExecutionSource = ExecutionSource.WEBHOOK,
    ) -> TriggerResult:
        """Log a delivery and start an execution for it.

        Raises:
            WorkflowNotFound: No such workflow (delivery logged unprocessed)
            WorkflowNotActive: Workflow is not active (delivery logged unprocessed)
            OrchestrationError: Execution could not be created or submitted;
                the delivery is marked unprocessed with the reason
        """
        headers = sanitize_headers(headers)
        workflow = await self.workflow_repo.get_by_id(workflow_id)

        if workflow is None:
            await self._log_event(
                workflow_id, payload, headers, False, "Workflow not found", component_id
            )
            logger.info("Trigger for unknown workflow", workflow_id=str(workflow_id))
            raise WorkflowNotFound("Workflow not found")

        if not workflow.is_active:
            await self._log_event(
                workflow_id, payload, headers, False, "Workflow is not active", component_id
            )
            logger.info(
                "Trigger for inactive workflow",
                workflow_id=str(workflow_id),
                status=workflow.status,
            )
            raise WorkflowNotActive("Workflow is not active")

        # Read before create(): a failed create may roll back and expire it
        hint = redirect_hint(workflow, self.default_redirect_url)
        owner_id = workflow.owner_id

        event_id = await self._log_event(
            workflow_id, payload, headers, True, component_id=component_id
        )

        trigger_data = {
            "webhook_event_id": str(event_id),
            "webhook_payload": payload,
            "webhook_headers": headers,
            "webhook_timestamp": utc_now().isoformat(),
            "event_type": str(payload.get("event") or DEFAULT_EVENT_TYPE),
            "source_ip": client_ip or "unknown",
            **extract_campaign(headers, payload),
        }
        if component_id is not None:
            trigger_data["component_id"] = str(component_id)

        try:
            execution = await self.execution_service.create(
                workflow_id, trigger_data, source=source, user_id=owner_id
            )
        except OrchestrationError as e:
            await self.webhook_event_repo.mark(event_id, processed=False, error_message=e.message)
            await self.session.commit()
            logger.warning(
                "Triggered execution failed",
                workflow_id=str(workflow_id),
                webhook_event_id=str(event_id),
                error_type=type(e).__name__,
            )
            raise

        await self.webhook_event_repo.mark(event_id, processed=True)
        await self.session.commit()

        logger.info(
            "Webhook triggered workflow",
            workflow_id=str(workflow_id),
            execution_id=str(execution.id),
            webhook_event_id=str(event_id),
        )
        return TriggerResult(
            execution_id=execution.id,
            webhook_event_id=event_id,
            redirect_hint=hint,
        )

    async def handle_form_submission(
        self,
        component_id: UUID,
        payload: dict[str, Any],
        headers: dict[str, str],
        client_ip: str | None = None,
    ) -> TriggerResult:
        """Route a lead form post to the active workflow bound to its component."""
        workflow = await self.workflow_repo.get_active_by_component(component_id)
        if workflow is None:
            await self._log_event(
                None,
                payload,
                sanitize_headers(headers),
                False,
                "No active workflow for component",
                component_id,
            )
            logger.info("Form submission for unbound component", component_id=str(component_id))
            raise WorkflowNotFound("No active workflow for component")

        return await self.handle_trigger(
            workflow.id,
            payload,
            headers,
            client_ip,
            component_id=component_id,
            source=ExecutionSource.FORM,
        )

    async def resolve_component(
        self, component_id: UUID, tenant_id: UUID | None = None
    ) -> Workflow:
        """Find the active workflow a page component triggers."""
        workflow = await self.workflow_repo.get_active_by_component(component_id)
        if workflow is None or (tenant_id is not None and workflow.tenant_id != tenant_id):
            raise WorkflowNotFound("No active workflow for component")
        return workflow

    async def list_events(
        self,
        workflow_id: UUID,
        processed: bool | None = None,
        event_type: str | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[WebhookEvent], str | None, bool]:
        """List deliveries logged for a workflow.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        return await self.webhook_event_repo.list_by_workflow(
            workflow_id, processed, event_type, cursor, limit
        )
