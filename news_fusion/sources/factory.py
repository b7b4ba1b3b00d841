"""Extractor registry for pluggable outlets."""

from __future__ import annotations

from ..config import BrowserConfig, SourcesConfig
from .base import SelectorExtractor
from .cnn import CnnExtractor
from .rt import RtExtractor


_SOURCE_REGISTRY: dict[str, type[SelectorExtractor]] = {
    "cnn": CnnExtractor,
    "rt": RtExtractor,
}


def available_sources() -> list[str]:
    """Return the registered outlet names."""
    return sorted(_SOURCE_REGISTRY.keys())


def create_extractor(
    name: str, limit: int = 5, browser_cfg: BrowserConfig | None = None
) -> SelectorExtractor:
    """Build an extractor for a registered outlet."""
    builder = _SOURCE_REGISTRY.get(name.lower().strip())
    if builder is None:
        supported = ", ".join(available_sources())
        raise ValueError(f"Unsupported source: {name}. Supported: {supported}")
    return builder(limit=limit, browser_cfg=browser_cfg)


def create_extractors(
    cfg: SourcesConfig, browser_cfg: BrowserConfig | None = None
) -> tuple[SelectorExtractor, SelectorExtractor]:
    """Build the (primary, secondary) extractor pair from config."""
    if cfg.limit < 1:
        raise ValueError(f"sources.limit must be positive, got {cfg.limit}")
    if cfg.primary.lower().strip() == cfg.secondary.lower().strip():
        raise ValueError("sources.primary and sources.secondary must be different outlets")
    return (
        create_extractor(cfg.primary, cfg.limit, browser_cfg),
        create_extractor(cfg.secondary, cfg.limit, browser_cfg),
    )
