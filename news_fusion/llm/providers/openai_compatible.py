"""OpenAI-compatible chat completions provider."""

from __future__ import annotations

from typing import Any

import httpx

from ...core.errors import GenerationError
from ..tracing import record_span_error, set_span_output, start_span
from .base import GenerationProvider


class OpenAICompatibleProvider(GenerationProvider):
    """Provider for any endpoint implementing ``POST /chat/completions``."""

    provider_name = "openai"
    default_base_url = "https://api.openai.com/v1"
    default_api_key_env = "OPENAI_API_KEY"

    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        context: dict[str, Any] | None = None,
    ) -> str:
        payload: dict[str, Any] = {
            "model": self.cfg.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.cfg.temperature,
            "max_tokens": self.cfg.max_output_tokens,
        }
        if self.cfg.json_mode:
            payload["response_format"] = {"type": "json_object"}

        with start_span(
            "openai.generate",
            kind="llm",
            input_value=user_prompt,
            attributes={"llm.model": self.cfg.model, "llm.provider": self.provider_name},
        ) as span:
            try:
                data = self._post(payload)
            except httpx.HTTPError as exc:
                record_span_error(span, exc)
                self._log_llm_response("provider_error", str(exc), user_prompt, context)
                raise GenerationError(f"{type(exc).__name__}: {exc}") from exc
            content = _extract_text(data)
            if content is None:
                exc = GenerationError("Response has no message content")
                record_span_error(span, exc)
                self._log_llm_response("provider_error", str(data)[:2000], user_prompt, context)
                raise exc
            set_span_output(span, content)
            self._log_llm_response("ok", content, user_prompt, context)
            return content

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/chat/completions"
        headers = {"Authorization": f"Bearer {self.api_key}"}
        with httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = client.post(url, headers=headers, json=payload)
            resp.raise_for_status()
            try:
                return resp.json()
            except ValueError as exc:
                raise httpx.DecodingError(f"Non-JSON response body: {exc}", request=resp.request) from exc


def _extract_text(data: dict[str, Any]) -> str | None:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None
