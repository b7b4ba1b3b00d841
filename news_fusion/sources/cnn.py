"""CNN International world-news front page."""

from __future__ import annotations

from .base import SelectorExtractor


class CnnExtractor(SelectorExtractor):
    name = "cnn"
    label = "CNN"
    listing_url = "https://edition.cnn.com/world"
    base_url = "https://edition.cnn.com"
    entry_selector = ".container__link--type-article"
    title_selector = ".container__headline-text"
    paragraph_selector = ".article__content p"
