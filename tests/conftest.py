from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from guildwire.config.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ENVIRONMENT", "development")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        environment="development",
        discord_bot_token="test-bot-token",
        discord_application_id="1000",
    )


@pytest.fixture()
def transport() -> AsyncMock:
    """Transporte fake: todo request devolve (200, [])."""
    mock = AsyncMock()
    mock.request.return_value = (200, [])
    return mock
