from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sitewave.core.config import settings


@pytest.fixture
def ai_settings(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "dummy_openai_key")
    monkeypatch.setattr(settings, "ANTHROPIC_API_KEY", "dummy_anthropic_key")
    monkeypatch.setattr(settings, "AI_RETRY_DELAY", 0)


@pytest.fixture
def mock_openai(ai_settings):
    """Patch the SDK client; yields the instance every LLMClient receives."""
    mock_completions = MagicMock()
    mock_completions.create = AsyncMock()

    mock_chat = MagicMock()
    mock_chat.completions = mock_completions

    mock_images = MagicMock()
    mock_images.generate = AsyncMock()

    mock_client_instance = AsyncMock()
    mock_client_instance.chat = mock_chat
    mock_client_instance.images = mock_images

    with patch("sitewave.ai.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        yield mock_client_instance
