"""Repository for WebhookEvent entity."""

from uuid import UUID

from sqlalchemy import update
from sqlmodel import col, select

from src.app.models import WebhookEvent
from src.app.models.base import utc_now
from src.app.repositories.base import BaseRepository


class WebhookEventRepository(BaseRepository[WebhookEvent]):
    """Delivery log. Rows are appended and updated, never deleted."""

    model = WebhookEvent

    async def mark(
        self,
        event_id: UUID,
        processed: bool,
        error_message: str | None = None,
    ) -> None:
        """Record the outcome of a delivery (no commit)."""
        await self.session.execute(
            update(WebhookEvent)
            .where(col(WebhookEvent.id) == event_id)
            .values(
                processed=processed,
                error_message=error_message[:1000] if error_message else None,
                processed_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )

    async def list_by_workflow(
        self,
        workflow_id: UUID,
        processed: bool | None = None,
        event_type: str | None = None,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[WebhookEvent], str | None, bool]:
        """List deliveries for a workflow with cursor pagination.

        Args:
            workflow_id: Workflow to filter by
            processed: Optional processed flag filter
            event_type: Optional event type filter
            cursor: Pagination cursor
            limit: Maximum items to return

        Returns:
            Tuple of (events, next_cursor, has_more)
        """
        query = select(WebhookEvent).where(WebhookEvent.workflow_id == workflow_id)
        if processed is not None:
            query = query.where(WebhookEvent.processed == processed)
        if event_type:
            query = query.where(WebhookEvent.event_type == event_type)
        return await self.paginate(query, cursor, limit, WebhookEvent.created_at)
