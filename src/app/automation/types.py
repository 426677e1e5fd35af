"""Typed views over automation engine responses."""

from dataclasses import dataclass, field
from typing import Any

TRIGGER_NODE_MARKERS = ("trigger", "webhook")
ERROR_MODES = frozenset({"error"})
ERROR_STATUSES = frozenset({"error", "crashed"})


@dataclass(slots=True)
class EngineNode:
    name: str
    type: str

    @property
    def is_trigger(self) -> bool:
        node_type = self.type.lower()
        return any(marker in node_type for marker in TRIGGER_NODE_MARKERS)


@dataclass(slots=True)
class EngineWorkflowDefinition:
    """Workflow definition as the engine reports it. Used only for validation."""

    id: str | None
    name: str | None
    active: bool
    nodes: list[EngineNode] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def has_trigger(self) -> bool:
        return any(node.is_trigger for node in self.nodes)

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> "EngineWorkflowDefinition":
        nodes = [
            EngineNode(name=str(n.get("name", "")), type=str(n.get("type", "")))
            for n in body.get("nodes") or []
            if isinstance(n, dict)
        ]
        workflow_id = body.get("id")
        return cls(
            id=str(workflow_id) if workflow_id is not None else None,
            name=body.get("name"),
            active=bool(body.get("active", False)),
            nodes=nodes,
            raw=body,
        )


@dataclass(slots=True)
class EngineExecutionHandle:
    """Result of an accepted submission."""

    execution_id: str
    raw: dict[str, Any]

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> "EngineExecutionHandle | None":
        """Execution id comes from data.executionId, falling back to id."""
        data = body.get("data")
        execution_id = data.get("executionId") if isinstance(data, dict) else None
        if execution_id is None:
            execution_id = body.get("id")
        if execution_id is None or execution_id == "":
            return None
        return cls(execution_id=str(execution_id), raw=body)


@dataclass(slots=True)
class EngineExecutionSnapshot:
    """Engine-side status of one execution, as fetched for reconciliation."""

    finished: bool
    stopped_at: str | None
    mode: str | None
    status: str | None
    error_message: str | None
    raw: dict[str, Any]

    @property
    def is_error(self) -> bool:
        return (self.mode in ERROR_MODES) or (self.status in ERROR_STATUSES)

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> "EngineExecutionSnapshot":
        error_message = None
        data = body.get("data")
        if isinstance(data, dict):
            result_data = data.get("resultData")
            if isinstance(result_data, dict):
                error = result_data.get("error")
                if isinstance(error, dict):
                    error_message = error.get("message")
        return cls(
            finished=bool(body.get("finished", False)),
            stopped_at=body.get("stoppedAt"),
            mode=body.get("mode"),
            status=body.get("status"),
            error_message=error_message,
            raw=body,
        )
