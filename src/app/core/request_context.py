"""Request context management using contextvars.

Stores request metadata (client IP, user agent, request id) so trigger
ingress can record where a delivery came from without threading the
Request object through the service layer.
"""

from contextvars import ContextVar
from dataclasses import dataclass
from ipaddress import ip_address, ip_network

_request_context: ContextVar["RequestContext | None"] = ContextVar(
    "request_context", default=None
)


@dataclass(frozen=True)
class RequestContext:
    """Immutable context for the current request."""

    ip_address: str | None = None
    user_agent: str | None = None
    referrer: str | None = None
    request_id: str | None = None


def set_request_context(
    ip_address: str | None = None,
    user_agent: str | None = None,
    referrer: str | None = None,
    request_id: str | None = None,
) -> None:
    """Set context for the current request."""
    ctx = RequestContext(
        ip_address=ip_address,
        user_agent=user_agent[:500] if user_agent and len(user_agent) > 500 else user_agent,
        referrer=referrer[:1000] if referrer and len(referrer) > 1000 else referrer,
        request_id=request_id,
    )
    _request_context.set(ctx)


def get_request_context() -> RequestContext | None:
    """Get the current request context."""
    return _request_context.get()


def clear_request_context() -> None:
    """Clear the request context."""
    _request_context.set(None)


def _is_trusted(host: str | None, trusted_proxies: list[str]) -> bool:
    if not host:
        return False
    try:
        addr = ip_address(host)
    except ValueError:
        return host in trusted_proxies
    for proxy in trusted_proxies:
        try:
            if addr in ip_network(proxy, strict=False):
                return True
        except ValueError:
            continue
    return False


def get_client_ip(
    forwarded_for: str | None,
    client_host: str | None,
    trusted_proxies: list[str] | None = None,
) -> str | None:
    """Extract client IP from X-Forwarded-For header or client host.

    X-Forwarded-For is only honoured when the direct peer is a trusted proxy.

    Args:
        forwarded_for: Value of X-Forwarded-For header (may contain multiple IPs)
        client_host: Direct client host from the connection
        trusted_proxies: IPs or CIDR ranges allowed to set X-Forwarded-For

    Returns:
        The client IP address (first IP from X-Forwarded-For, or client host)
    """
    if forwarded_for and _is_trusted(client_host, trusted_proxies or []):
        # First IP is the original client
        return forwarded_for.split(",")[0].strip()
    return client_host
