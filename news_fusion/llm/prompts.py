"""Prompt loading and rendering helpers for fusion requests."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from ..core.types import MatchedPair
from ..core.vocabulary import Vocabulary


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@dataclass
class FusionPrompt:
    """System and user messages for one fusion request."""

    system: str
    user: str


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


def truncate_block(text: str, max_chars: int) -> str:
    """Cap an article block at ``max_chars`` characters; 0 disables the cap."""
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars]


def build_fusion_prompt(
    pair: MatchedPair,
    vocabulary: Vocabulary,
    max_chars: int,
    primary_label: str,
    secondary_label: str,
) -> FusionPrompt:
    return FusionPrompt(
        system=_load_template("fusion_system"),
        user=_render_template(
            "fusion_user",
            primary_label=primary_label,
            secondary_label=secondary_label,
            tags=vocabulary.as_prompt_list(),
            primary_content=truncate_block(pair.primary.full_text(), max_chars),
            secondary_content=truncate_block(pair.secondary.full_text(), max_chars),
        ),
    )
