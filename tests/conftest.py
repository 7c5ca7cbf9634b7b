"""
Netting Hub: pytest fixtures and configuration.

Provides:
- Settings factory with explicit overrides
- HTTP client bound to the FastAPI app with settings override
"""
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from netting_hub.api import deps
from netting_hub.config import Settings, get_settings
from netting_hub.main import app


# =============================================================================
# Settings
# =============================================================================
@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build isolated Settings instances (never the module-level singleton)."""

    def _make(**overrides) -> Settings:
        return Settings(**overrides)

    return _make


@pytest.fixture
def app_settings(settings_factory) -> Settings:
    return settings_factory()


# =============================================================================
# HTTP Client
# =============================================================================
@pytest.fixture
def client(app_settings: Settings) -> Generator[TestClient, None, None]:
    """TestClient with `get_settings` overridden by the `app_settings` fixture.

    Mutate `app_settings` (or override the fixture) to change engine bounds.
    """
    deps.reset_rate_limit()
    app.dependency_overrides[get_settings] = lambda: app_settings
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_settings, None)
        deps.reset_rate_limit()
