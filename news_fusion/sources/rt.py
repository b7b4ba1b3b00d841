"""RT front page."""

from __future__ import annotations

from .base import SelectorExtractor


class RtExtractor(SelectorExtractor):
    name = "rt"
    label = "RT"
    listing_url = "https://www.rt.com/"
    base_url = "https://www.rt.com"
    entry_selector = "li.card-list__item strong.card__header a"
    title_selector = None
    paragraph_selector = "div.article__text p"
