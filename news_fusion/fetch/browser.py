"""
Browsing sessions that return settled page HTML.

Outlet pages render parts of their body client-side, so reads go through a
real browser: every navigation waits for the configured load state before
the DOM is serialized. The session serializes navigations on a single tab.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..config import BrowserConfig
from ..core.errors import ExtractionFailure

logger = logging.getLogger(__name__)


class BrowsingSession(ABC):
    """Opens pages and returns their rendered HTML."""

    @abstractmethod
    def fetch_html(self, url: str, wait_until: str = "load") -> str:
        """Navigate to ``url`` and return the DOM once ``wait_until`` is reached.

        Raises:
            ExtractionFailure: If navigation fails or times out
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release the session's resources."""

    def __enter__(self) -> "BrowsingSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class PlaywrightSession(BrowsingSession):
    """Headless Chromium session backed by Playwright's sync API."""

    def __init__(self, cfg: BrowserConfig):
        self.cfg = cfg
        self._playwright = None
        self._browser = None
        self._page = None

    def start(self) -> "PlaywrightSession":
        """Launch the browser. Failures here propagate: there is no run without it."""
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=self.cfg.headless)
            context = self._browser.new_context(user_agent=self.cfg.user_agent)
            self._page = context.new_page()
            self._page.set_default_navigation_timeout(self.cfg.navigation_timeout_seconds * 1000)
        except Exception:
            self.close()
            raise
        return self

    def fetch_html(self, url: str, wait_until: str = "load") -> str:
        if self._page is None:
            raise RuntimeError("PlaywrightSession.start() must be called before fetch_html()")
        try:
            self._page.goto(url, wait_until=wait_until)
            return self._page.content()
        except PlaywrightError as exc:
            raise ExtractionFailure(f"Navigation failed: {exc}", url=url) from exc

    def close(self) -> None:
        if self._browser is not None:
            try:
                self._browser.close()
            except PlaywrightError:
                logger.debug("Browser already closed", exc_info=True)
            self._browser = None
            self._page = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None
