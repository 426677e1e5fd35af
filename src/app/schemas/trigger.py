"""Trigger ingress schemas."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True, slots=True)
class TriggerResult:
    """Outcome of an accepted trigger."""

    execution_id: UUID
    webhook_event_id: UUID
    redirect_hint: str


class TriggerResponse(BaseModel):
    """Response body for an accepted webhook or form submission."""

    success: bool = True
    execution_id: UUID
    webhook_event_id: UUID
    redirect_url: str

    @classmethod
    def from_result(cls, result: TriggerResult) -> "TriggerResponse":
        return cls(
            execution_id=result.execution_id,
            webhook_event_id=result.webhook_event_id,
            redirect_url=result.redirect_hint,
        )


class LeadFormSubmission(BaseModel):
    """Lead capture form posted by a published funnel page.

    Accepts both camelCase (as sent by the page runtime) and snake_case keys.
    Unknown fields are kept and forwarded to the workflow.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    email: EmailStr
    component_id: UUID
    form_id: str = Field(min_length=1, max_length=100)
    funnel_id: str | None = None
    page_id: str | None = None
    name: str | None = Field(default=None, max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    phone: str | None = Field(default=None, max_length=50)
    lead_magnet_type: str | None = None
    consent: bool = False
    custom_fields: dict[str, Any] = Field(default_factory=dict)
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Flatten into the payload handed to the workflow (camelCase keys)."""
        payload = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        payload["event"] = "lead_magnet.submitted"
        return payload


class WebhookEventRead(BaseModel):
    """Schema for reading a logged trigger delivery."""

    id: UUID
    workflow_id: UUID | None
    component_id: UUID | None
    event_type: str
    payload: dict[str, Any]
    processed: bool
    error_message: str | None
    created_at: datetime
    processed_at: datetime | None

    model_config = {"from_attributes": True}
