"""Text generation providers, prompts and observability."""

from .json_parser import parse_json_response
from .prompts import FusionPrompt, build_fusion_prompt
from .providers.base import GenerationProvider
from .providers.factory import available_providers, create_provider
from .providers.gemini import GeminiProvider
from .providers.openai_compatible import OpenAICompatibleProvider
from .tracing import flush, record_span_error, set_span_output, setup_langfuse, start_span

__all__ = [
    "GenerationProvider",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "create_provider",
    "available_providers",
    "FusionPrompt",
    "build_fusion_prompt",
    "parse_json_response",
    "setup_langfuse",
    "flush",
    "start_span",
    "set_span_output",
    "record_span_error",
]
