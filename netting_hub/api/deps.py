import asyncio
import time

from fastapi import Request

from netting_hub.config import settings
from netting_hub.utils.exceptions import TooManyRequestsException


_rate_limit_lock = asyncio.Lock()
_rate_limit_counters: dict[tuple[int, str], int] = {}


async def rate_limit(request: Request) -> None:
    if not settings.RATE_LIMIT_ENABLED:
        return

    client_host = (request.client.host if request.client else None) or "unknown"
    window_seconds = max(1, int(settings.RATE_LIMIT_WINDOW_SECONDS))
    limit = max(1, int(settings.RATE_LIMIT_REQUESTS_PER_WINDOW))
    bucket = int(time.monotonic() // window_seconds)
    key = (bucket, client_host)

    async with _rate_limit_lock:
        current = _rate_limit_counters.get(key, 0) + 1
        _rate_limit_counters[key] = current

        # Best-effort cleanup of previous window for the same host
        _rate_limit_counters.pop((bucket - 1, client_host), None)

    if current > limit:
        raise TooManyRequestsException(
            details={
                "window_seconds": window_seconds,
                "limit": limit,
            }
        )


def reset_rate_limit() -> None:
    _rate_limit_counters.clear()
