"""Google Gemini provider."""

from __future__ import annotations

from typing import Any

import httpx

from ...core.errors import GenerationError
from ..tracing import record_span_error, set_span_output, start_span
from .base import GenerationProvider


class GeminiProvider(GenerationProvider):
    """Gemini ``generateContent`` backed provider."""

    provider_name = "gemini"
    default_base_url = "https://generativelanguage.googleapis.com"
    default_api_key_env = "GOOGLE_API_KEY"

    def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        context: dict[str, Any] | None = None,
    ) -> str:
        generation_config: dict[str, Any] = {
            "temperature": self.cfg.temperature,
            "maxOutputTokens": self.cfg.max_output_tokens,
        }
        if self.cfg.json_mode:
            generation_config["responseMimeType"] = "application/json"
        payload = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": generation_config,
        }

        with start_span(
            "gemini.generate",
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
            if not content:
                exc = GenerationError("Response has no candidate text")
                record_span_error(span, exc)
                self._log_llm_response("provider_error", str(data)[:2000], user_prompt, context)
                raise exc
            set_span_output(span, content)
            self._log_llm_response("ok", content, user_prompt, context)
            return content

    def _post(self, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/v1beta/models/{self.cfg.model}:generateContent"
        params = {"key": self.api_key}
        with httpx.Client(timeout=self.cfg.timeout_seconds, trust_env=self.cfg.trust_env) as client:
            resp = client.post(url, params=params, json=payload)
            resp.raise_for_status()
            try:
                return resp.json()
            except ValueError as exc:
                raise httpx.DecodingError(f"Non-JSON response body: {exc}", request=resp.request) from exc


def _extract_text(data: dict[str, Any]) -> str:
    """Join the text parts of the first candidate, skipping thought parts.

    Falls back to every text part when only thoughts were returned.
    """
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    texts = [p.get("text", "") for p in parts if isinstance(p, dict) and not p.get("thought")]
    if not any(texts):
        texts = [p.get("text", "") for p in parts if isinstance(p, dict)]
    return "".join(texts)
