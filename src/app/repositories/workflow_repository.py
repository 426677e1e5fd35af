"""Repository for Workflow entity."""

from uuid import UUID

from sqlmodel import select

from src.app.models import Workflow, WorkflowStatus
from src.app.repositories.base import BaseRepository


class WorkflowRepository(BaseRepository[Workflow]):
    """Read access to workflow definitions."""

    model = Workflow

    async def get_for_tenant(self, workflow_id: UUID, tenant_id: UUID) -> Workflow | None:
        """Get a workflow only if it belongs to the given tenant."""
        result = await self.session.execute(
            select(Workflow).where(Workflow.id == workflow_id, Workflow.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def get_active_by_component(self, component_id: UUID) -> Workflow | None:
        """Get the active workflow triggered by a page component, if any."""
        result = await self.session.execute(
            select(Workflow)
            .where(
                Workflow.trigger_component_id == component_id,
                Workflow.status == WorkflowStatus.ACTIVE.value,
            )
            .order_by(Workflow.updated_at.desc())  # type: ignore[attr-defined]
            .limit(1)
        )
        return result.scalar_one_or_none()
