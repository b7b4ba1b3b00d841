"""
News Fusion - neutral reports from two outlets covering the same events.

This package reads the front pages of two news outlets, pairs articles
that cover the same event by headline overlap, asks a text-generation
service to fuse each pair into one neutral tagged report, and stores the
result.

Main entry point is the CLI via `news-fusion run` command.

Example:
    $ news-fusion run --storage jsonl
"""

__all__ = ["__version__", "Article", "MatchedPair", "FusedReport", "match_articles", "run_pipeline"]
__version__ = "0.1.0"

from .core.matcher import match_articles
from .core.types import Article, FusedReport, MatchedPair
from .runner import run_pipeline
