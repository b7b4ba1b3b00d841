"""Abstract interface for text-generation providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Any

from ...config import LoggingConfig, ProviderConfig
from ...utils.logging import log_event, redact_text, truncate_text


class GenerationProvider(ABC):
    """One system + user message in, one text completion out.

    Implementations raise GenerationError for any failure of the service
    call itself; the returned text is not validated here.
    """

    provider_name: str = ""
    default_base_url: str = ""
    default_api_key_env: str = ""

    def __init__(
        self,
        cfg: ProviderConfig,
        api_key: str | None,
        log_cfg: LoggingConfig | None = None,
        llm_logger: logging.Logger | None = None,
    ):
        if not api_key:
            env_name = cfg.api_key_env or self.default_api_key_env
            raise ValueError(f"Missing API key for provider '{cfg.name}' (set {env_name})")
        self.cfg = cfg
        self.base_url = (cfg.base_url or self.default_base_url).rstrip("/")
        self.api_key = api_key
        self.log_cfg = log_cfg or LoggingConfig()
        self.llm_logger = llm_logger

    @abstractmethod
    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        context: dict[str, Any] | None = None,
    ) -> str:
        """Return the completion text for the prompt pair.

        Args:
            system_prompt: Persona/behavior instruction
            user_prompt: The task and its inputs
            context: Identifiers (e.g. source URLs) attached to log records

        Raises:
            GenerationError: If the request fails or the response has no text
        """
        raise NotImplementedError

    def _log_llm_response(
        self,
        status: str,
        content: str,
        prompt: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        if self.llm_logger is None:
            return
        detail = self.log_cfg.llm_log_detail
        redaction = self.log_cfg.llm_log_redaction
        payload: dict[str, Any] = {
            "event": "llm_response",
            "status": status,
            "provider": self.provider_name,
            "model": self.cfg.model,
        }
        # Context identifies the pair and is logged as-is; redaction covers prompt and response text.
        payload.update(context or {})
        if detail == "prompt_response":
            payload["raw_prompt"] = truncate_text(redact_text(prompt, redaction))
        payload["raw_response"] = truncate_text(redact_text(content, redaction))
        log_event(self.llm_logger, "LLM response", **payload)
