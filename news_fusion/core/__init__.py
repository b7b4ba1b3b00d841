"""
Core domain models and business logic.

This package contains data types, errors and the matching logic that is
independent of any browser, provider or storage backend.
"""

from .errors import (
    DuplicateReportError,
    ExtractionFailure,
    GenerationError,
    NewsFusionError,
    PairError,
    SchemaError,
    StorageError,
)
from .matcher import match_articles, title_similarity, tokenize
from .types import Article, FusedReport, MatchedPair
from .vocabulary import DEFAULT_TAGS, Vocabulary, load_vocabulary

__all__ = [
    "Article",
    "MatchedPair",
    "FusedReport",
    "NewsFusionError",
    "ExtractionFailure",
    "PairError",
    "GenerationError",
    "SchemaError",
    "StorageError",
    "DuplicateReportError",
    "tokenize",
    "title_similarity",
    "match_articles",
    "DEFAULT_TAGS",
    "Vocabulary",
    "load_vocabulary",
]
