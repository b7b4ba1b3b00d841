"""
Core data types for the news fusion pipeline.

This module defines the fundamental data structures passed between stages:
- Article: One outlet's article as extracted from its pages
- MatchedPair: One article from each outlet judged to cover the same event
- FusedReport: The synthesized record that gets persisted
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Article:
    """Represents one page of one outlet at one point in time.

    Attributes:
        title: The headline as rendered on the outlet's front page
        url: Absolute URL of the article; the identity key of the article
        paragraphs: Body text blocks in document order (lead paragraph first)
        source: Registered name of the outlet the article came from
    """
    title: str
    url: str
    paragraphs: list[str] = field(default_factory=list)
    source: str = ""

    def full_text(self) -> str:
        """Join the paragraphs with newlines."""
        return "\n".join(self.paragraphs)


@dataclass
class MatchedPair:
    """The unit of fusion work.

    Attributes:
        primary: Article from the primary outlet
        secondary: Best-scoring article from the secondary outlet
        score: Title similarity in (0, 1]; informational only
    """
    primary: Article
    secondary: Article
    score: float


@dataclass
class FusedReport:
    """Neutral combined report generated from a MatchedPair.

    Attributes:
        title: Generated headline
        summary: Generated short summary
        content: Generated body paragraphs, in order
        tags: Category tags, ideally drawn from the controlled vocabulary
        url_primary: URL of the primary source article, verbatim
        url_secondary: URL of the secondary source article, verbatim
    """
    title: str
    summary: str
    content: list[str]
    tags: list[str]
    url_primary: str
    url_secondary: str

    def to_row(
        self, primary_column: str = "url_cnn", secondary_column: str = "url_rt"
    ) -> dict[str, Any]:
        """Return the six persisted fields keyed by storage column."""
        return {
            "title": self.title,
            "summary": self.summary,
            "content": list(self.content),
            "tags": list(self.tags),
            primary_column: self.url_primary,
            secondary_column: self.url_secondary,
        }

    @classmethod
    def from_row(
        cls,
        row: dict[str, Any],
        primary_column: str = "url_cnn",
        secondary_column: str = "url_rt",
    ) -> "FusedReport":
        return cls(
            title=row["title"],
            summary=row["summary"],
            content=list(row.get("content") or []),
            tags=list(row.get("tags") or []),
            url_primary=row[primary_column],
            url_secondary=row[secondary_column],
        )
