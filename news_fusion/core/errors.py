"""Exception types raised by pipeline stages.

Everything except ``NewsFusionError`` itself is scoped to a single article or
matched pair; the runner catches these at that scope and moves on.
"""

from __future__ import annotations


class NewsFusionError(Exception):
    """Base class for pipeline errors."""


class ExtractionFailure(NewsFusionError):
    """A page could not be loaded or read."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class PairError(NewsFusionError):
    """Failure while fusing or storing one matched pair."""

    def __init__(
        self,
        message: str,
        url_primary: str | None = None,
        url_secondary: str | None = None,
    ):
        super().__init__(message)
        self.url_primary = url_primary
        self.url_secondary = url_secondary


class GenerationError(PairError):
    """The generation service call failed (timeout, auth, rate limit, bad HTTP)."""


class SchemaError(PairError):
    """The generation response is not valid structured data of the expected shape."""


class StorageError(PairError):
    """A report could not be written."""


class DuplicateReportError(StorageError):
    """A report for the same URL pair already exists and the policy rejects it."""
