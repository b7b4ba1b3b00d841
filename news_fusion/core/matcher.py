"""
Cross-outlet article matching by headline token overlap.

Each primary article is paired with the secondary article whose title shares
the largest fraction of tokens with it. The score is

    |tokens(a) & tokens(b)| / max(|tokens(a)|, |tokens(b)|)

which, unlike Jaccard, does not punish one title for being much shorter
than the other. Any score above zero is a match; precision is left to the
fusion step.
"""

from __future__ import annotations

import re

from .types import Article, MatchedPair


_NON_WORD_RE = re.compile(r"\W+")


def tokenize(title: str) -> set[str]:
    """Lower-case a title and split it into a set of word tokens.

    Examples:
        >>> sorted(tokenize("Global markets: rally, rally!"))
        ['global', 'markets', 'rally']
    """
    return {token for token in _NON_WORD_RE.split(title.lower()) if token}


def title_similarity(a: str, b: str) -> float:
    """Score two titles in [0, 1]; symmetric in its arguments."""
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / max(len(tokens_a), len(tokens_b))


def match_articles(primary: list[Article], secondary: list[Article]) -> list[MatchedPair]:
    """Pick the best secondary article for every primary article.

    Ties keep the earliest secondary candidate. A secondary article may be
    chosen by several primaries. Primaries whose best score is zero are
    dropped, so the result has at most ``len(primary)`` pairs, in primary
    order.

    Args:
        primary: Articles from the primary outlet
        secondary: Candidate articles from the secondary outlet

    Returns:
        One MatchedPair per primary article that has a nonzero best score
    """
    pairs: list[MatchedPair] = []
    for article in primary:
        best: Article | None = None
        best_score = 0.0
        for candidate in secondary:
            score = title_similarity(article.title, candidate.title)
            if score > best_score:
                best_score = score
                best = candidate
        if best is None:
            continue
        pairs.append(MatchedPair(primary=article, secondary=best, score=best_score))
    return pairs
