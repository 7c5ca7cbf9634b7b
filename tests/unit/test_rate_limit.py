import pytest
from starlette.requests import Request

from netting_hub.api import deps
from netting_hub.utils.exceptions import TooManyRequestsException


def _make_request(host: str) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/v1/netting",
        "headers": [],
        "client": (host, 12345),
        "server": ("testserver", 80),
    }
    return Request(scope)


@pytest.fixture(autouse=True)
def _isolated_counters(monkeypatch):
    monkeypatch.setattr(deps.settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(deps.settings, "RATE_LIMIT_WINDOW_SECONDS", 3600)
    monkeypatch.setattr(deps.settings, "RATE_LIMIT_REQUESTS_PER_WINDOW", 2)
    deps.reset_rate_limit()
    yield
    deps.reset_rate_limit()


@pytest.mark.asyncio
async def test_rate_limit_rejects_after_window_budget():
    request = _make_request("10.0.0.1")

    await deps.rate_limit(request)
    await deps.rate_limit(request)
    with pytest.raises(TooManyRequestsException) as exc:
        await deps.rate_limit(request)

    assert exc.value.status_code == 429
    assert exc.value.details == {"window_seconds": 3600, "limit": 2}


@pytest.mark.asyncio
async def test_rate_limit_is_per_client():
    await deps.rate_limit(_make_request("10.0.0.1"))
    await deps.rate_limit(_make_request("10.0.0.1"))

    # A different client has its own budget.
    await deps.rate_limit(_make_request("10.0.0.2"))


@pytest.mark.asyncio
async def test_rate_limit_disabled(monkeypatch):
    monkeypatch.setattr(deps.settings, "RATE_LIMIT_ENABLED", False)
    request = _make_request("10.0.0.1")

    for _ in range(5):
        await deps.rate_limit(request)
