"""HTTP middleware stack."""

from scanscore.core.middleware.logging import LoggingMiddleware
from scanscore.core.middleware.request_id import RequestIDMiddleware
from scanscore.core.middleware.security_headers import SecurityHeadersMiddleware
from scanscore.core.middleware.timing import TimingMiddleware


__all__ = [
    "LoggingMiddleware",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TimingMiddleware",
]
