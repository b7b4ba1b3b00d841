"""Provider factory and registry for hot-swappable generation backends."""

from __future__ import annotations

import logging

from ...config import LoggingConfig, ProviderConfig, get_api_key
from .base import GenerationProvider
from .gemini import GeminiProvider
from .openai_compatible import OpenAICompatibleProvider


_PROVIDER_REGISTRY: dict[str, type[GenerationProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAICompatibleProvider,
    "openai_compatible": OpenAICompatibleProvider,
    "openai-compatible": OpenAICompatibleProvider,
}


def available_providers() -> list[str]:
    """Return the set of registered provider names."""
    return sorted(_PROVIDER_REGISTRY.keys())


def create_provider(
    provider_cfg: ProviderConfig,
    log_cfg: LoggingConfig | None = None,
    llm_logger: logging.Logger | None = None,
) -> GenerationProvider:
    """Build a provider instance from runtime config."""
    name = provider_cfg.name.lower().strip()
    builder = _PROVIDER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_providers())
        raise ValueError(f"Unsupported provider: {provider_cfg.name}. Supported: {supported}")
    api_key = get_api_key(provider_cfg, builder.default_api_key_env)
    return builder(provider_cfg, api_key, log_cfg, llm_logger)
