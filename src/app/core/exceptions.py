"""Domain errors and the handlers that turn them into JSON responses.

Every response body carries the request_id from asgi-correlation-id so a
failed trigger can be traced through the logs.
"""

from typing import Any
from uuid import UUID

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.app.core.logging import get_logger

logger = get_logger(__name__)


class OrchestrationError(Exception):
    """Base class for failures scoped to a single workflow or execution."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.message}


class WorkflowNotFound(OrchestrationError):
    status_code = status.HTTP_404_NOT_FOUND


class WorkflowNotActive(OrchestrationError):
    status_code = status.HTTP_400_BAD_REQUEST


class ExecutionNotFound(OrchestrationError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationFailed(OrchestrationError):
    """Workflow is not runnable. No execution was created."""

    status_code = 422

    def __init__(self, errors: list[Any], warnings: list[str] | None = None):
        self.errors = errors
        self.warnings = warnings or []
        messages = ", ".join(getattr(e, "message", str(e)) for e in errors)
        super().__init__(f"Workflow validation failed: {messages}")

    @property
    def codes(self) -> list[str]:
        return [e.code for e in self.errors]

    def to_content(self) -> dict[str, Any]:
        return {
            "detail": self.message,
            "errors": [
                e.model_dump() if hasattr(e, "model_dump") else {"message": str(e)}
                for e in self.errors
            ],
            "warnings": self.warnings,
        }


class InvalidStateTransition(OrchestrationError):
    """Requested transition is not legal from the execution's current status."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current_status: str, message: str | None = None):
        self.current_status = current_status
        super().__init__(message or f"Cannot transition execution with status: {current_status}")

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.message, "current_status": self.current_status}


class EngineUnavailable(OrchestrationError):
    """An automation engine call failed (non-2xx, transport error or timeout)."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.engine_status_code = status_code


class ExecutionSubmissionFailed(EngineUnavailable):
    """Submission to the engine failed; the execution was recorded as failed."""

    def __init__(self, execution_id: UUID, message: str):
        super().__init__(f"Failed to execute workflow: {message}")
        self.execution_id = execution_id

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.message, "execution_id": str(self.execution_id)}


class EngineReconciliationSkipped(EngineUnavailable):
    """Status fetch failed during reconcile. Logged and absorbed, never surfaced."""


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(OrchestrationError)
    async def orchestration_exception_handler(
        request: Request, exc: OrchestrationError
    ) -> JSONResponse:
        logger.info(
            "Request rejected",
            error_type=type(exc).__name__,
            detail=exc.message,
            path=request.url.path,
        )
        content = exc.to_content()
        content["request_id"] = correlation_id.get()
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
