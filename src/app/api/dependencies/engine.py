"""Automation engine client dependency."""

from typing import Annotated

from fastapi import Depends

from src.app.automation import AutomationEngineClient, get_engine_client


def get_automation_client() -> AutomationEngineClient:
    """Get the process-wide engine client. Overridden in tests."""
    return get_engine_client()


EngineClient = Annotated[AutomationEngineClient, Depends(get_automation_client)]
