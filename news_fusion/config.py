"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ProviderConfig: Text-generation provider settings
- BrowserConfig: Headless browser settings
- SourcesConfig: Which outlets to read and how many articles each
- FusionConfig: Prompt bounds and response validation policy
- StorageConfig: Persistence backend and duplicate policy
- LoggingConfig: Logging behavior
- LangfuseConfig: Langfuse tracing settings
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


@dataclass
class ProviderConfig:
    """Configuration for the text-generation provider.

    Attributes:
        name: Provider name ("openai", "openai_compatible" or "gemini")
        model: Model identifier sent with every request
        api_key_env: Environment variable with the API key (provider default when unset)
        api_key: Optional inline API key (overrides env var)
        base_url: Base URL for the provider API (provider default when unset)
        timeout_seconds: Request timeout; expiry is a generation failure
        temperature: Sampling temperature
        max_output_tokens: Upper bound on generated tokens
        json_mode: Ask the provider for a JSON response format when supported
        trust_env: Whether to respect system proxy settings for API requests
    """

    name: str = "openai"
    model: str = "gpt-4o-mini"
    api_key_env: str | None = None
    api_key: str | None = None
    base_url: str | None = None
    timeout_seconds: float = 60.0
    temperature: float = 0.2
    max_output_tokens: int = 2048
    json_mode: bool = True
    trust_env: bool = True


@dataclass
class BrowserConfig:
    """Configuration for the headless browsing session.

    Attributes:
        headless: Run Chromium without a window
        navigation_timeout_seconds: Per-navigation timeout
        listing_wait_until: Load state awaited on front pages
        article_wait_until: Load state awaited on article pages
        user_agent: Optional User-Agent override
    """

    headless: bool = True
    navigation_timeout_seconds: float = 30.0
    listing_wait_until: str = "load"
    article_wait_until: str = "networkidle"
    user_agent: str | None = None


@dataclass
class SourcesConfig:
    """Configuration for the two outlets.

    Attributes:
        primary: Registered name of the first outlet
        secondary: Registered name of the second outlet
        limit: Number of front-page entries considered per outlet
    """

    primary: str = "cnn"
    secondary: str = "rt"
    limit: int = 5


@dataclass
class FusionConfig:
    """Configuration for fusion requests.

    Attributes:
        max_chars: Maximum characters of each article block sent to the provider
        tag_policy: "passthrough", "filter" or "reject" for out-of-vocabulary tags
        vocabulary_path: Optional YAML list replacing the built-in tag vocabulary
        extract_embedded_json: Salvage a JSON object wrapped in commentary
    """

    max_chars: int = 12000
    tag_policy: str = "passthrough"
    vocabulary_path: str | None = None
    extract_embedded_json: bool = False


@dataclass
class StorageConfig:
    """Configuration for report persistence.

    Attributes:
        backend: "supabase" or "jsonl"
        table: Target table/collection name
        primary_url_column: Column holding the primary article URL
        secondary_url_column: Column holding the secondary article URL
        duplicate_policy: "append", "reject", "ignore" or "upsert"
        supabase_url_env: Environment variable with the Supabase project URL
        supabase_key_env: Environment variable with the Supabase service key
        timeout_seconds: HTTP timeout for storage requests
        jsonl_path: Output file for the jsonl backend
    """

    backend: str = "supabase"
    table: str = "news"
    primary_url_column: str = "url_cnn"
    secondary_url_column: str = "url_rt"
    duplicate_policy: str = "append"
    supabase_url_env: str = "SUPABASE_URL"
    supabase_key_env: str = "SUPABASE_SERVICE_KEY"
    timeout_seconds: float = 20.0
    jsonl_path: str = "out/news.jsonl"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        dir: Parent directory for per-run log folders
        filename: Name of the main log file
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_detail: "response_only" or "prompt_response"
        llm_log_redaction: "none", "redact_content" or "redact_urls"
        llm_log_file: Name of the LLM log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = True
    format: str = "jsonl"
    dir: str = "logs"
    filename: str = "run.jsonl"
    llm_log_enabled: bool = True
    llm_log_detail: str = "response_only"
    llm_log_redaction: str = "redact_urls"
    llm_log_file: str = "llm.jsonl"


@dataclass
class LangfuseConfig:
    """Configuration for Langfuse tracing.

    Attributes:
        enabled: Whether to enable Langfuse tracing
        public_key: Langfuse public key (falls back to LANGFUSE_PUBLIC_KEY)
        secret_key: Langfuse secret key (falls back to LANGFUSE_SECRET_KEY)
        host: Langfuse host URL (falls back to LANGFUSE_HOST)
        redaction: Redaction mode for prompt/response payloads
        max_text_chars: Maximum characters for prompt/response payloads
    """

    enabled: bool = False
    public_key: str | None = None
    secret_key: str | None = None
    host: str | None = None
    redaction: str = "redact_urls"
    max_text_chars: int = 20000


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    fusion: FusionConfig = field(default_factory=FusionConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)


_SECTIONS: dict[str, type] = {
    "provider": ProviderConfig,
    "browser": BrowserConfig,
    "sources": SourcesConfig,
    "fusion": FusionConfig,
    "storage": StorageConfig,
    "logging": LoggingConfig,
    "langfuse": LangfuseConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})


def get_api_key(cfg: ProviderConfig, default_env: str | None = None) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    env_name = cfg.api_key_env or default_env
    return os.getenv(env_name) if env_name else None
