"""Automation engine integration."""

from src.app.automation.client import (
    AutomationEngineClient,
    close_engine_client,
    get_engine_client,
)
from src.app.automation.types import (
    EngineExecutionHandle,
    EngineExecutionSnapshot,
    EngineNode,
    EngineWorkflowDefinition,
)

__all__ = [
    "AutomationEngineClient",
    "EngineExecutionHandle",
    "EngineExecutionSnapshot",
    "EngineNode",
    "EngineWorkflowDefinition",
    "close_engine_client",
    "get_engine_client",
]
