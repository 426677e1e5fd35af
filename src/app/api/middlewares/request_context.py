"""Request context middleware - captures where a request came from."""

from asgi_correlation_id import correlation_id
from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.app.core.config import get_settings
from src.app.core.request_context import (
    clear_request_context,
    get_client_ip,
    set_request_context,
)


async def request_context_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Record client IP, user agent, referrer and request id for the request.

    X-Forwarded-For is only trusted from peers listed in TRUSTED_PROXY_IPS.
    """
    clear_request_context()

    client_host = request.client.host if request.client else None
    set_request_context(
        ip_address=get_client_ip(
            request.headers.get("x-forwarded-for"),
            client_host,
            get_settings().trusted_proxy_ips,
        ),
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
        request_id=correlation_id.get(),
    )

    try:
        return await call_next(request)
    finally:
        clear_request_context()
