"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import WorkflowFactory, WorkflowExecutionFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.workflow import (
    WebhookEventFactory,
    WorkflowExecutionFactory,
    WorkflowFactory,
)

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # Workflow
    "WebhookEventFactory",
    "WorkflowExecutionFactory",
    "WorkflowFactory",
]
