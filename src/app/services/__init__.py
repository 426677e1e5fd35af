"""Service layer - business logic with transaction control."""

from src.app.services.execution_service import ExecutionService
from src.app.services.statistics_service import StatisticsService
from src.app.services.trigger_service import TriggerService
from src.app.services.workflow_validator import WorkflowValidator

__all__ = [
    "ExecutionService",
    "StatisticsService",
    "TriggerService",
    "WorkflowValidator",
]
