"""Create workflows, workflow_executions and webhook_events tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "workflows",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tenant_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("engine_workflow_id", sa.String(length=255), nullable=False),
        sa.Column("trigger_component_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="draft"),
        sa.Column(
            "config",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('draft', 'active', 'inactive')", name="ck_workflows_status"
        ),
        schema="public",
    )
    op.create_index("ix_workflows_tenant_id", "workflows", ["tenant_id"], schema="public")
    op.create_index(
        "ix_workflows_trigger_component_id",
        "workflows",
        ["trigger_component_id"],
        schema="public",
    )

    op.create_table(
        "workflow_executions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("workflow_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column(
            "trigger_data",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("engine_execution_id", sa.String(length=255), nullable=True),
        sa.Column("execution_data", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("error_message", sa.String(length=1000), nullable=True),
        sa.Column("test_mode", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["workflow_id"], ["public.workflows.id"], ondelete="CASCADE"
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'running', 'completed', 'failed', 'cancelled')",
            name="ck_workflow_executions_status",
        ),
        # completed_at is set exactly when the execution is terminal
        sa.CheckConstraint(
            "(completed_at IS NOT NULL) = (status IN ('completed', 'failed', 'cancelled'))",
            name="ck_workflow_executions_completed_at",
        ),
        schema="public",
    )
    op.create_index(
        "ix_workflow_executions_workflow_status",
        "workflow_executions",
        ["workflow_id", "status"],
        schema="public",
    )
    op.create_index(
        "ix_workflow_executions_workflow_started",
        "workflow_executions",
        ["workflow_id", "started_at"],
        schema="public",
    )
    op.create_index(
        "ix_workflow_executions_engine_execution_id",
        "workflow_executions",
        ["engine_execution_id"],
        schema="public",
    )

    op.create_table(
        "webhook_events",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("workflow_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("component_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        sa.Column(
            "payload",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "headers",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("processed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("error_message", sa.String(length=1000), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("processed_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        schema="public",
    )
    op.create_index(
        "ix_webhook_events_workflow_created",
        "webhook_events",
        ["workflow_id", "created_at"],
        schema="public",
    )
    op.create_index(
        "ix_webhook_events_component_id", "webhook_events", ["component_id"], schema="public"
    )


def downgrade() -> None:
    op.drop_index("ix_webhook_events_component_id", table_name="webhook_events", schema="public")
    op.drop_index(
        "ix_webhook_events_workflow_created", table_name="webhook_events", schema="public"
    )
    op.drop_table("webhook_events", schema="public")

    op.drop_index(
        "ix_workflow_executions_engine_execution_id",
        table_name="workflow_executions",
        schema="public",
    )
    op.drop_index(
        "ix_workflow_executions_workflow_started",
        table_name="workflow_executions",
        schema="public",
    )
    op.drop_index(
        "ix_workflow_executions_workflow_status",
        table_name="workflow_executions",
        schema="public",
    )
    op.drop_table("workflow_executions", schema="public")

    op.drop_index("ix_workflows_trigger_component_id", table_name="workflows", schema="public")
    op.drop_index("ix_workflows_tenant_id", table_name="workflows", schema="public")
    op.drop_table("workflows", schema="public")
