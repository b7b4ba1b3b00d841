"""Fusion of a matched article pair into one neutral report."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..config import FusionConfig
from ..core.errors import SchemaError
from ..core.types import FusedReport, MatchedPair
from ..core.vocabulary import Vocabulary
from ..llm.json_parser import parse_json_response
from ..llm.prompts import build_fusion_prompt
from ..llm.providers.base import GenerationProvider
from ..utils.logging import log_event


TAG_POLICIES = ("passthrough", "filter", "reject")
_REQUIRED_FIELDS = ("title", "summary", "tags", "content")


class FusionRequester:
    """Turns a MatchedPair into a FusedReport through one generation call."""

    def __init__(
        self,
        provider: GenerationProvider,
        vocabulary: Vocabulary,
        cfg: FusionConfig,
        primary_label: str = "CNN",
        secondary_label: str = "RT",
        logger: logging.Logger | None = None,
    ) -> None:
        if cfg.tag_policy not in TAG_POLICIES:
            raise ValueError(
                f"Unsupported tag_policy: {cfg.tag_policy}. Use one of {', '.join(TAG_POLICIES)}."
            )
        self.provider = provider
        self.vocabulary = vocabulary
        self.cfg = cfg
        self.primary_label = primary_label
        self.secondary_label = secondary_label
        self.logger = logger

    def fuse(self, pair: MatchedPair) -> FusedReport:
        """Generate and validate the fused report for ``pair``.

        Raises:
            GenerationError: If the provider call fails
            SchemaError: If the response is not a valid report document
        """
        prompt = build_fusion_prompt(
            pair,
            self.vocabulary,
            self.cfg.max_chars,
            self.primary_label,
            self.secondary_label,
        )
        context = {"url_primary": pair.primary.url, "url_secondary": pair.secondary.url}
        content = self.provider.generate(prompt.system, prompt.user, context=context)
        try:
            return build_report(
                content,
                pair,
                self.vocabulary,
                tag_policy=self.cfg.tag_policy,
                extract_embedded=self.cfg.extract_embedded_json,
                logger=self.logger,
            )
        except SchemaError as exc:
            exc.url_primary = pair.primary.url
            exc.url_secondary = pair.secondary.url
            raise


def build_report(
    content: str,
    pair: MatchedPair,
    vocabulary: Vocabulary,
    tag_policy: str = "passthrough",
    extract_embedded: bool = False,
    logger: logging.Logger | None = None,
) -> FusedReport:
    """Validate a raw completion and normalize it into a FusedReport.

    The only coercion applied is wrapping a string ``content`` into a
    one-element list; every other type mismatch is a SchemaError.
    """
    try:
        doc = parse_json_response(content, extract_embedded=extract_embedded)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Response is not valid JSON: {exc.msg}") from exc
    if not isinstance(doc, dict):
        raise SchemaError(f"Response must be a JSON object, got {type(doc).__name__}")

    missing = [name for name in _REQUIRED_FIELDS if name not in doc]
    if missing:
        raise SchemaError(f"Response is missing fields: {', '.join(missing)}")
    extra = sorted(set(doc) - set(_REQUIRED_FIELDS))
    if extra:
        log_event(
            logger,
            "Ignoring extra response fields",
            level=logging.DEBUG,
            event="fusion_extra_fields",
            fields=extra,
        )

    title = _require_str(doc, "title")
    summary = _require_str(doc, "summary")
    paragraphs = _normalize_content(doc["content"])
    tags = _require_str_list(doc, "tags")
    for name, values in (("title", [title]), ("summary", [summary]), ("content", paragraphs), ("tags", tags)):
        _check_encodable(name, values)
    tags = apply_tag_policy(tags, vocabulary, tag_policy)

    return FusedReport(
        title=title,
        summary=summary,
        content=paragraphs,
        tags=tags,
        url_primary=pair.primary.url,
        url_secondary=pair.secondary.url,
    )


def apply_tag_policy(tags: list[str], vocabulary: Vocabulary, policy: str) -> list[str]:
    """Apply the out-of-vocabulary policy to generated tags.

    "passthrough" returns the tags untouched, "filter" keeps only the first
    occurrence of each in-vocabulary tag, and "reject" raises on any tag
    outside the vocabulary.
    """
    if policy == "passthrough":
        return tags
    if policy == "filter":
        return [tag for tag in dict.fromkeys(tags) if tag in vocabulary]
    if policy == "reject":
        unknown = [tag for tag in tags if tag not in vocabulary]
        if unknown:
            raise SchemaError(f"Tags outside the vocabulary: {', '.join(unknown)}")
        return tags
    raise ValueError(f"Unsupported tag_policy: {policy}")


def _normalize_content(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    raise SchemaError("Field 'content' must be a string or an array of strings")


def _require_str(doc: dict[str, Any], name: str) -> str:
    value = doc[name]
    if not isinstance(value, str):
        raise SchemaError(f"Field '{name}' must be a string, got {type(value).__name__}")
    return value


def _check_encodable(name: str, values: list[str]) -> None:
    for value in values:
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise SchemaError(f"Field '{name}' is not valid UTF-8 text: {exc.reason}") from exc


def _require_str_list(doc: dict[str, Any], name: str) -> list[str]:
    value = doc[name]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise SchemaError(f"Field '{name}' must be an array of strings")
    return value
