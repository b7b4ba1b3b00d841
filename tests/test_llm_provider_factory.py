"""Tests for hot-swappable generation provider factory."""

import pytest

from news_fusion.config import LoggingConfig, ProviderConfig
from news_fusion.llm.providers.factory import available_providers, create_provider
from news_fusion.llm.providers.gemini import GeminiProvider
from news_fusion.llm.providers.openai_compatible import OpenAICompatibleProvider


def test_available_providers_contains_expected_backends():
    names = available_providers()
    assert "gemini" in names
    assert "openai" in names
    assert "openai_compatible" in names


def test_create_provider_gemini_uses_its_own_defaults():
    provider = create_provider(
        ProviderConfig(name="gemini", model="gemini-2.0-flash", api_key="test-key"),
        LoggingConfig(),
        llm_logger=None,
    )
    assert isinstance(provider, GeminiProvider)
    assert provider.base_url == "https://generativelanguage.googleapis.com"


def test_create_provider_openai_compatible():
    provider = create_provider(
        ProviderConfig(
            name="openai_compatible",
            model="llama3",
            api_key="test-key",
            base_url="http://localhost:11434/v1/",
        ),
        LoggingConfig(),
        llm_logger=None,
    )
    assert isinstance(provider, OpenAICompatibleProvider)
    assert provider.base_url == "http://localhost:11434/v1"


def test_create_provider_reads_default_key_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    provider = create_provider(ProviderConfig(name="openai"))
    assert provider.api_key == "env-key"


def test_create_provider_requires_api_key(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(ValueError, match="GOOGLE_API_KEY"):
        create_provider(ProviderConfig(name="gemini"))


def test_create_provider_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unsupported provider"):
        create_provider(
            ProviderConfig(
                name="unknown-provider",
                model="x",
                api_key="test-key",
                base_url="https://example.com",
            ),
            LoggingConfig(),
            llm_logger=None,
        )
