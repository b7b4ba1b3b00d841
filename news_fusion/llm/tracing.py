"""
Langfuse tracing helpers.

Spans are emitted only when tracing is enabled and the Langfuse client can
be built; otherwise every helper is a no-op and yields ``None``.
"""

from __future__ import annotations

from contextlib import contextmanager
import json
import logging
import os
from typing import Any, Iterator

from ..config import LangfuseConfig
from ..utils.logging import redact_text, truncate_text

logger = logging.getLogger(__name__)

_TRACER = None
_CFG: LangfuseConfig | None = None


def setup_langfuse(cfg: LangfuseConfig) -> None:
    """Initialize Langfuse tracing if enabled and keys are available."""
    global _TRACER, _CFG  # noqa: PLW0603
    _CFG = cfg
    _TRACER = None
    if not cfg.enabled:
        return

    public_key = cfg.public_key or os.getenv("LANGFUSE_PUBLIC_KEY")
    secret_key = cfg.secret_key or os.getenv("LANGFUSE_SECRET_KEY")
    if not public_key or not secret_key:
        logger.warning("Langfuse enabled but keys are missing; tracing disabled")
        return

    try:
        from langfuse import Langfuse

        _TRACER = Langfuse(
            public_key=public_key,
            secret_key=secret_key,
            host=cfg.host or os.getenv("LANGFUSE_HOST"),
        )
    except Exception:  # noqa: BLE001
        logger.warning("Langfuse client could not be created; tracing disabled", exc_info=True)
        _TRACER = None


def get_tracer():
    return _TRACER


@contextmanager
def start_span(
    name: str,
    kind: str,
    input_value: Any | None = None,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Any | None]:
    """Open a Langfuse span around the block if tracing is active."""
    tracer = _TRACER
    if tracer is None:
        yield None
        return

    metadata = _clean_attributes(attributes or {})
    metadata.setdefault("span.kind", kind)
    try:
        cm = tracer.start_as_current_span(
            name=name, input=_normalize_text(input_value), metadata=metadata
        )
        span = cm.__enter__()
    except Exception:  # noqa: BLE001
        logger.debug("Could not open span %s", name, exc_info=True)
        yield None
        return

    try:
        yield span
    finally:
        try:
            cm.__exit__(None, None, None)
        except Exception:  # noqa: BLE001
            logger.debug("Could not close span %s", name, exc_info=True)


def set_span_output(span: Any | None, output_value: Any) -> None:
    if span is None:
        return
    payload = _normalize_text(output_value)
    if payload is not None:
        _safe_update(span, output=payload)


def record_span_error(span: Any | None, exc: Exception) -> None:
    if span is None:
        return
    _safe_update(span, level="ERROR", status_message=f"{type(exc).__name__}: {exc}")


def flush() -> None:
    """Send pending traces before the process exits."""
    tracer = _TRACER
    if tracer is None:
        return
    try:
        tracer.flush()
    except Exception:  # noqa: BLE001
        logger.debug("Langfuse flush failed", exc_info=True)


def _normalize_text(value: Any) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else json.dumps(value, ensure_ascii=True, default=str)
    cfg = _CFG
    if cfg is None:
        return text
    return truncate_text(redact_text(text, cfg.redaction), cfg.max_text_chars)


def _clean_attributes(attrs: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in attrs.items():
        if value is None:
            continue
        cleaned[key] = value if isinstance(value, (str, int, float, bool)) else str(value)
    return cleaned


def _safe_update(span: Any, **kwargs: Any) -> None:
    try:
        span.update(**kwargs)
    except Exception:  # noqa: BLE001
        logger.debug("Span update failed", exc_info=True)
