"""
Page fetching and HTML extraction.

This package handles browser navigation and reading listing entries and
article paragraphs out of rendered pages.
"""

from .browser import BrowsingSession, PlaywrightSession
from .extractor import ListingEntry, resolve_url, select_listing_entries, select_paragraphs

__all__ = [
    "BrowsingSession",
    "PlaywrightSession",
    "ListingEntry",
    "select_listing_entries",
    "select_paragraphs",
    "resolve_url",
]
