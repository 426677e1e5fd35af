"""Automation engine client - thin HTTP wrapper over the engine's REST API.

The engine performs the actual side effects (email list adds, payment
capture, CRM sync). This client only submits, inspects and cancels runs.
It never retries; retry policy belongs to the caller.
"""

from typing import Any

import httpx

from src.app.automation.types import (
    EngineExecutionHandle,
    EngineExecutionSnapshot,
    EngineWorkflowDefinition,
)
from src.app.core.config import get_settings
from src.app.core.exceptions import EngineUnavailable
from src.app.core.logging import get_logger
from src.app.models.enums import ExecutionMode

logger = get_logger(__name__)


class AutomationEngineClient:
    """Bearer-authenticated client for the external automation engine."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Perform one engine call, normalizing every failure to EngineUnavailable."""
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.warning("Engine call timed out", operation=operation, path=path)
            raise EngineUnavailable(f"Engine {operation} timed out") from e
        except httpx.HTTPError as e:
            logger.warning(
                "Engine call failed", operation=operation, path=path, error=str(e)
            )
            raise EngineUnavailable(f"Engine {operation} error: {e}") from e

        if not response.is_success:
            logger.warning(
                "Engine returned error status",
                operation=operation,
                path=path,
                status_code=response.status_code,
            )
            raise EngineUnavailable(
                f"Engine API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        if not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise EngineUnavailable(f"Engine {operation} returned invalid JSON") from e
        if not isinstance(body, dict):
            raise EngineUnavailable(f"Engine {operation} returned unexpected payload")
        return body

    async def get_workflow(self, engine_workflow_id: str) -> EngineWorkflowDefinition:
        """Fetch the workflow definition (nodes, active flag)."""
        body = await self._request(
            "GET", f"/workflows/{engine_workflow_id}", operation="get_workflow"
        )
        return EngineWorkflowDefinition.from_response(body)

    async def submit(
        self,
        engine_workflow_id: str,
        payload: dict[str, Any],
        mode: ExecutionMode = ExecutionMode.TRIGGER,
    ) -> EngineExecutionHandle:
        """Start a run of the engine workflow with payload as its input data."""
        body = await self._request(
            "POST",
            f"/workflows/{engine_workflow_id}/execute",
            operation="submit",
            json={
                "data": payload,
                "runData": {},
                "startNodes": [],
                "destinationNode": None,
                "executionMode": mode.value,
            },
        )
        handle = EngineExecutionHandle.from_response(body)
        if handle is None:
            raise EngineUnavailable("Engine accepted submission without an execution id")
        logger.info(
            "Engine execution started",
            engine_workflow_id=engine_workflow_id,
            engine_execution_id=handle.execution_id,
            mode=mode.value,
        )
        return handle

    async def fetch_status(self, engine_execution_id: str) -> EngineExecutionSnapshot:
        """Fetch the engine's view of one execution."""
        body = await self._request(
            "GET", f"/executions/{engine_execution_id}", operation="fetch_status"
        )
        return EngineExecutionSnapshot.from_response(body)

    async def cancel(self, engine_execution_id: str) -> None:
        """Ask the engine to stop an execution."""
        await self._request(
            "POST", f"/executions/{engine_execution_id}/cancel", operation="cancel"
        )

    async def ping(self) -> bool:
        """Reachability check for health reporting. Never raises."""
        try:
            response = await self._http.get("/workflows", params={"limit": 1})
        except httpx.HTTPError:
            return False
        return response.status_code < 500


_client: AutomationEngineClient | None = None


def get_engine_client() -> AutomationEngineClient:
    """Get or create the process-wide engine client."""
    global _client
    if _client is None:
        settings = get_settings()
        if not settings.engine_api_key:
            logger.warning("ENGINE_API_KEY not set - engine calls will be rejected")
        _client = AutomationEngineClient(
            base_url=settings.engine_api_url,
            api_key=settings.engine_api_key,
            timeout=settings.engine_timeout_seconds,
        )
    return _client


async def close_engine_client() -> None:
    """Close the engine client. Call during shutdown."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
