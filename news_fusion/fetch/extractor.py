"""
HTML helpers for reading listing entries and article bodies.

Pages come from the browsing session as settled HTML and are parsed with
BeautifulSoup using CSS selectors.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urljoin

from bs4 import BeautifulSoup


@dataclass
class ListingEntry:
    """One link in an outlet's front-page listing.

    Attributes:
        href: The link target as written in the page, or None if absent
        title: Headline text shown for the link
    """
    href: str | None
    title: str


def select_listing_entries(
    html: str,
    entry_selector: str,
    title_selector: str | None = None,
) -> list[ListingEntry]:
    """Return the listing entries matched by ``entry_selector`` in document order.

    Args:
        html: Rendered front-page HTML
        entry_selector: CSS selector for the link elements
        title_selector: Optional selector, relative to the link, for the
            headline element; the link's own text is used when omitted

    Returns:
        One ListingEntry per matched element, links not yet resolved
    """
    soup = BeautifulSoup(html, "html.parser")
    entries: list[ListingEntry] = []
    for node in soup.select(entry_selector):
        href = node.get("href") or None
        if title_selector:
            heading = node.select_one(title_selector)
            title = _element_text(heading) if heading is not None else ""
        else:
            title = _element_text(node)
        entries.append(ListingEntry(href=href, title=title))
    return entries


def select_paragraphs(html: str, paragraph_selector: str) -> list[str]:
    """Return the trimmed, non-empty text of every matched paragraph, in order."""
    soup = BeautifulSoup(html, "html.parser")
    paragraphs = (node.get_text().strip() for node in soup.select(paragraph_selector))
    return [text for text in paragraphs if text]


def resolve_url(href: str, base_url: str) -> str:
    """Resolve a listing href to an absolute URL."""
    return urljoin(base_url, href)


def _element_text(node) -> str:
    return " ".join(node.get_text(" ").split())
