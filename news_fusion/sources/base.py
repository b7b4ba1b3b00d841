"""
Abstract extractor capability and the selector-driven implementation.

New outlets should inherit from SelectorExtractor and set the class
attributes describing where the listing and article body live. Outlets
whose pages need more than CSS selectors can implement Extractor directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging

from ..config import BrowserConfig
from ..core.errors import ExtractionFailure
from ..core.types import Article
from ..fetch.browser import BrowsingSession
from ..fetch.extractor import resolve_url, select_listing_entries, select_paragraphs
from ..utils.logging import log_event

logger = logging.getLogger("news_fusion")


class Extractor(ABC):
    """Reads a bounded list of current articles from one outlet.

    Attributes:
        name: Registry name, also stamped on every Article as ``source``
        label: Human-readable outlet name used in prompts
    """

    name: str = ""
    label: str = ""

    @abstractmethod
    def extract(self, session: BrowsingSession) -> list[Article]:
        """Return at most ``limit`` articles in front-page order.

        Per-article failures are logged and skipped, never raised.
        """
        raise NotImplementedError


class SelectorExtractor(Extractor):
    """Extractor for outlets described entirely by CSS selectors.

    Attributes:
        listing_url: Front page holding the article listing
        base_url: Base for resolving relative article links
        entry_selector: Selector for listing links, in prominence order
        title_selector: Selector inside the link for its headline, or None
            to use the link text
        paragraph_selector: Selector for body paragraphs on article pages
    """

    listing_url: str = ""
    base_url: str = ""
    entry_selector: str = ""
    title_selector: str | None = None
    paragraph_selector: str = ""

    def __init__(self, limit: int = 5, browser_cfg: BrowserConfig | None = None):
        self.limit = limit
        self.browser_cfg = browser_cfg or BrowserConfig()

    def extract(self, session: BrowsingSession) -> list[Article]:
        log_event(
            logger,
            "Extract start",
            event="extract_start",
            source=self.name,
            listing_url=self.listing_url,
            limit=self.limit,
        )
        try:
            listing_html = session.fetch_html(
                self.listing_url, wait_until=self.browser_cfg.listing_wait_until
            )
        except ExtractionFailure as exc:
            log_event(
                logger,
                "Listing failed",
                level=logging.WARNING,
                event="listing_failed",
                source=self.name,
                url=self.listing_url,
                error=str(exc),
            )
            return []

        entries = select_listing_entries(listing_html, self.entry_selector, self.title_selector)
        articles: list[Article] = []
        # Slice before dropping link-less entries, so fewer than limit may survive.
        for entry in entries[: self.limit]:
            if not entry.href:
                continue
            url = resolve_url(entry.href, self.base_url)
            try:
                article = self._extract_article(session, url, entry.title)
            except ExtractionFailure as exc:
                log_event(
                    logger,
                    "Extract failed",
                    level=logging.WARNING,
                    event="extract_failed",
                    source=self.name,
                    url=url,
                    title=entry.title,
                    error=str(exc),
                )
                continue
            articles.append(article)
        return articles

    def _extract_article(self, session: BrowsingSession, url: str, title: str) -> Article:
        html = session.fetch_html(url, wait_until=self.browser_cfg.article_wait_until)
        paragraphs = select_paragraphs(html, self.paragraph_selector)
        if not paragraphs:
            log_event(
                logger,
                "Article body empty",
                level=logging.WARNING,
                event="article_body_empty",
                source=self.name,
                url=url,
                title=title,
            )
        log_event(
            logger,
            "Article extracted",
            event="article_extracted",
            source=self.name,
            url=url,
            title=title,
            paragraphs=len(paragraphs),
        )
        return Article(title=title, url=url, paragraphs=paragraphs, source=self.name)
