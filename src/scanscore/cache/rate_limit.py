"""Rate limiting with SlowAPI.

Limits are keyed by device when the client sends ``X-Device-ID`` and by
client IP otherwise. Storage is Redis in deployed environments and in-memory
when ``rate_limiting.storage_uri`` says so (tests).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from scanscore.core.config import get_settings
from scanscore.observability.logging import get_logger


if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.requests import Request

logger = get_logger(__name__)


def _rate_limit_key(request: Request) -> str:
    device_id = request.headers.get("x-device-id")
    if device_id:
        return f"device:{device_id}"
    return f"ip:{get_remote_address(request)}"


def create_limiter() -> Limiter:
    """Build the limiter from settings."""
    settings = get_settings()
    return Limiter(
        key_func=_rate_limit_key,
        default_limits=[settings.rate_limiting.default],
        storage_uri=settings.rate_limit_storage_uri,
        strategy="fixed-window",
        enabled=settings.rate_limiting.enabled,
        headers_enabled=False,
    )


limiter = create_limiter()


def analysis_rate_limit() -> Any:
    """Decorator applying the ``rate_limiting.analysis`` limit to a route.

    The wrapped endpoint must accept a ``request: Request`` parameter.
    """
    return limiter.limit(lambda: get_settings().rate_limiting.analysis)


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """Render ``RateLimitExceeded`` in the service's error shape."""
    assert isinstance(exc, RateLimitExceeded)
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        key=_rate_limit_key(request),
        limit=str(exc.detail),
    )
    content: dict[str, Any] = {
        "error": "rate_limit_exceeded",
        "message": f"Too many requests ({exc.detail}). Please try again later.",
    }
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        content["requestId"] = request_id
    return ORJSONResponse(status_code=429, content=content)


def setup_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter and its exception handler to the app."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    logger.debug("Rate limiting configured", enabled=limiter.enabled)
