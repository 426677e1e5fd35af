"""Tests for structured logging context."""

from uuid import uuid4

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.app.core.logging import (
    bind_execution_context,
    bind_request_context,
    bind_tenant_context,
    clear_request_context,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Route structlog output to a capturing logger for the test."""
    cap_logger = CapturingLogger()

    # Save original configuration to restore later
    old_config = structlog.get_config()

    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )

    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def test_bind_request_context(capturing_logger):
    """Request id, method and path are attached to every log line."""
    bind_request_context("test-request-123", method="POST", path="/api/v1/executions")
    structlog.get_logger().info("test message")

    (entry,) = capturing_logger.calls
    assert entry.kwargs["request_id"] == "test-request-123"
    assert entry.kwargs["method"] == "POST"
    assert entry.kwargs["path"] == "/api/v1/executions"


def test_bind_request_context_with_none(capturing_logger):
    """Test that None request_id is not bound."""
    bind_request_context(None)
    structlog.get_logger().info("test message")

    (entry,) = capturing_logger.calls
    assert "request_id" not in entry.kwargs
    assert "path" not in entry.kwargs


def test_bind_tenant_context(capturing_logger):
    tenant_id = uuid4()

    bind_tenant_context(tenant_id)
    structlog.get_logger().info("test message")

    (entry,) = capturing_logger.calls
    assert entry.kwargs["tenant_id"] == str(tenant_id)


def test_bind_execution_context(capturing_logger):
    execution_id = uuid4()
    workflow_id = uuid4()

    bind_execution_context(execution_id, workflow_id)
    structlog.get_logger().info("test message")

    (entry,) = capturing_logger.calls
    assert entry.kwargs["execution_id"] == str(execution_id)
    assert entry.kwargs["workflow_id"] == str(workflow_id)


def test_context_accumulation_and_clear(capturing_logger):
    """Context accumulates across bind calls until cleared."""
    bind_request_context("test-request-123")
    bind_tenant_context(uuid4())
    bind_execution_context(uuid4())

    logger = structlog.get_logger()
    logger.info("first")
    clear_request_context()
    logger.info("second")

    first, second = capturing_logger.calls
    assert {"request_id", "tenant_id", "execution_id"} <= first.kwargs.keys()
    assert "workflow_id" not in first.kwargs
    assert "request_id" not in second.kwargs
    assert "execution_id" not in second.kwargs
