"""Inbound trigger delivery log."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.app.models.base import utc_now

DEFAULT_EVENT_TYPE = "webhook.trigger"


class WebhookEvent(SQLModel, table=True):
    """A single trigger delivery, logged whether or not it produced an execution.

    workflow_id is not a foreign key: deliveries for unknown workflows are
    recorded too.
    """

    __tablename__ = "webhook_events"
    __table_args__ = (
        Index("ix_webhook_events_workflow_created", "workflow_id", "created_at"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    workflow_id: UUID | None = Field(default=None)
    component_id: UUID | None = Field(default=None, index=True)
    event_type: str = Field(default=DEFAULT_EVENT_TYPE, max_length=100)
    payload: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    headers: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default="{}"),
    )
    processed: bool = Field(default=False)
    error_message: str | None = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utc_now)
    processed_at: datetime | None = Field(default=None)
