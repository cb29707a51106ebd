from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from tailorfit.core.config import settings

limiter = Limiter(key_func=get_remote_address)


def _passthrough(func):
    return func


def rate_limit(limit: str | None = None):
    """Per-route slowapi limit; ``RATE_LIMIT`` applies when no limit is given."""
    if not settings.rate_limit_enabled:
        return _passthrough
    return limiter.limit(limit or settings.rate_limit)


def reset_rate_limits() -> None:
    limiter.reset()
