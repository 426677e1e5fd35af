"""Public trigger endpoints - inbound webhooks and lead form submissions.

These endpoints are not tenant scoped: the workflow or component id in the
request identifies the owner.
"""

import json
from typing import Any
from uuid import UUID

from fastapi import APIRouter, HTTPException, Request, status

from src.app.api.dependencies import TriggerServiceDep
from src.app.core.config import get_settings
from src.app.core.request_context import get_request_context
from src.app.core.security import verify_webhook_request
from src.app.schemas.trigger import LeadFormSubmission, TriggerResponse

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


async def _read_verified_payload(request: Request) -> dict[str, Any]:
    """Read the raw body, check the shared secret or signature, parse JSON."""
    body = await request.body()

    secret = get_settings().webhook_secret
    if secret and not verify_webhook_request(
        secret,
        body,
        provided_secret=request.headers.get("x-webhook-secret"),
        provided_signature=request.headers.get("x-webhook-signature"),
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing webhook signature",
        )

    if not body:
        return {}
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook body must be valid JSON",
        ) from e
    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook body must be a JSON object",
        )
    return payload


def _client_ip() -> str | None:
    ctx = get_request_context()
    return ctx.ip_address if ctx else None


@router.post(
    "/workflows/{workflow_id}",
    response_model=TriggerResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Webhook trigger",
    description=(
        "Start a workflow from an external webhook. When WEBHOOK_SECRET is set the "
        "delivery must carry X-Webhook-Secret or an X-Webhook-Signature "
        "(sha256=<hex HMAC of the raw body>). Every accepted delivery is logged."
    ),
    responses={
        202: {"description": "Delivery logged and execution started"},
        400: {"description": "Workflow is not active, or body is not a JSON object"},
        401: {"description": "Missing or invalid webhook signature"},
        404: {"description": "Workflow not found"},
        422: {"description": "Workflow failed validation"},
        502: {"description": "Automation engine rejected the submission"},
    },
)
async def workflow_webhook(
    workflow_id: UUID,
    request: Request,
    trigger_service: TriggerServiceDep,
) -> TriggerResponse:
    """Handle an inbound webhook for a workflow."""
    payload = await _read_verified_payload(request)
    result = await trigger_service.handle_trigger(
        workflow_id,
        payload,
        dict(request.headers),
        _client_ip(),
    )
    return TriggerResponse.from_result(result)


@router.post(
    "/forms",
    response_model=TriggerResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Lead form submission",
    description="Start the active workflow bound to the submitting form's component.",
    responses={
        202: {"description": "Submission logged and execution started"},
        404: {"description": "No active workflow for the component"},
        422: {"description": "Invalid submission, or workflow failed validation"},
        502: {"description": "Automation engine rejected the submission"},
    },
)
async def form_submission(
    submission: LeadFormSubmission,
    request: Request,
    trigger_service: TriggerServiceDep,
) -> TriggerResponse:
    """Handle a lead capture form post."""
    ctx = get_request_context()
    payload = submission.to_payload()
    payload.setdefault("userAgent", (ctx.user_agent if ctx else None) or "unknown")
    payload.setdefault("referrer", (ctx.referrer if ctx else None) or "unknown")

    result = await trigger_service.handle_form_submission(
        submission.component_id,
        payload,
        dict(request.headers),
        _client_ip(),
    )
    return TriggerResponse.from_result(result)
