from fastapi import APIRouter

from src.app.api.v1 import executions, webhooks, workflows

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(executions.router)
api_router.include_router(workflows.router)
api_router.include_router(webhooks.router)
