"""
Main pipeline orchestration for news fusion.

This module coordinates one batch run:
1. INIT: build the provider, sink, extractors and browsing session
2. EXTRACTING: read the primary outlet, then the secondary outlet
3. MATCHING: pair primary articles with their best secondary match
4. FUSING_AND_STORING: fuse and persist each pair independently

Failures scoped to one article or one pair are logged and counted; any
other exception propagates to the caller, which treats it as fatal.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from .analyzers.fusion import FusionRequester
from .config import AppConfig
from .core.errors import GenerationError, PairError, SchemaError, StorageError
from .core.matcher import match_articles
from .core.types import Article, MatchedPair
from .core.vocabulary import load_vocabulary
from .fetch.browser import BrowsingSession, PlaywrightSession
from .llm.providers.factory import create_provider
from .llm.tracing import record_span_error, set_span_output, setup_langfuse, start_span
from .output import ReportSink, create_sink
from .sources.base import Extractor
from .sources.factory import create_extractors
from .utils.logging import build_run_log_dir, log_event, setup_llm_logger, setup_logging


@dataclass
class RunStats:
    """Counters collected during one run.

    Attributes:
        primary_extracted: Articles read from the primary outlet
        secondary_extracted: Articles read from the secondary outlet
        matched: Pairs produced by the matcher
        stored: Reports inserted or updated
        skipped: Reports not written because the pair already existed
        generation_errors: Pairs dropped because the provider call failed
        schema_errors: Pairs dropped because the response was invalid
        storage_errors: Pairs dropped because the write failed
    """
    primary_extracted: int = 0
    secondary_extracted: int = 0
    matched: int = 0
    stored: int = 0
    skipped: int = 0
    generation_errors: int = 0
    schema_errors: int = 0
    storage_errors: int = 0

    @property
    def failed(self) -> int:
        return self.generation_errors + self.schema_errors + self.storage_errors


def run_pipeline(
    cfg: AppConfig,
    show_progress: bool = True,
    console: Console | None = None,
) -> RunStats:
    """Run one extraction, matching, fusion and persistence pass.

    Args:
        cfg: Application configuration
        show_progress: Whether to display a progress bar over pairs
        console: Rich console for output (creates default if None)

    Returns:
        Statistics for the run; reaching this point means exit status 0

    Raises:
        Exception: Any initialization failure or error not scoped to a
            single article or pair
    """
    console = console or Console()
    run_log_dir = build_run_log_dir(cfg.logging)
    logger = setup_logging(cfg.logging, run_log_dir)
    llm_logger = setup_llm_logger(cfg.logging, run_log_dir)
    setup_langfuse(cfg.langfuse)
    stats = RunStats()

    with start_span(
        "news_fusion.run",
        kind="chain",
        attributes={"sources.primary": cfg.sources.primary, "sources.secondary": cfg.sources.secondary},
    ) as run_span:
        log_event(
            logger,
            "Pipeline start",
            event="pipeline_start",
            primary=cfg.sources.primary,
            secondary=cfg.sources.secondary,
            limit=cfg.sources.limit,
            storage=cfg.storage.backend,
            duplicate_policy=cfg.storage.duplicate_policy,
        )

        vocabulary = load_vocabulary(cfg.fusion.vocabulary_path)
        provider = create_provider(cfg.provider, cfg.logging, llm_logger)
        primary_extractor, secondary_extractor = create_extractors(cfg.sources, cfg.browser)
        requester = FusionRequester(
            provider,
            vocabulary,
            cfg.fusion,
            primary_label=primary_extractor.label,
            secondary_label=secondary_extractor.label,
            logger=logger,
        )

        with _build_sink(cfg) as sink:
            session = _open_session(cfg)
            try:
                primary = _extract(primary_extractor, session, logger)
                secondary = _extract(secondary_extractor, session, logger)
            finally:
                session.close()
            stats.primary_extracted = len(primary)
            stats.secondary_extracted = len(secondary)

            pairs = match_articles(primary, secondary)
            stats.matched = len(pairs)
            _log_matches(primary, pairs, logger)

            if show_progress and pairs:
                progress = Progress(
                    SpinnerColumn(),
                    TextColumn("{task.description}"),
                    BarColumn(),
                    TaskProgressColumn(),
                    console=console,
                )
                with progress:
                    task = progress.add_task("Fuse + Store", total=len(pairs))
                    for pair in pairs:
                        _fuse_and_store(pair, requester, sink, stats, logger)
                        progress.advance(task, 1)
            else:
                for pair in pairs:
                    _fuse_and_store(pair, requester, sink, stats, logger)

        _render_run_stats(stats, console)
        log_event(
            logger,
            "Pipeline complete",
            event="pipeline_complete",
            matched=stats.matched,
            stored=stats.stored,
            skipped=stats.skipped,
            failed=stats.failed,
        )
        set_span_output(run_span, {"matched": stats.matched, "stored": stats.stored})
    return stats


def _build_sink(cfg: AppConfig) -> ReportSink:
    return create_sink(cfg.storage)


def _open_session(cfg: AppConfig) -> BrowsingSession:
    return PlaywrightSession(cfg.browser).start()


def _extract(extractor: Extractor, session: BrowsingSession, logger: logging.Logger) -> list[Article]:
    articles = extractor.extract(session)
    log_event(
        logger,
        "Extract complete",
        event="extract_complete",
        source=extractor.name,
        count=len(articles),
    )
    return articles


def _log_matches(primary: list[Article], pairs: list[MatchedPair], logger: logging.Logger) -> None:
    matched_urls = {pair.primary.url for pair in pairs}
    for pair in pairs:
        log_event(
            logger,
            "Match found",
            event="match_found",
            url_primary=pair.primary.url,
            url_secondary=pair.secondary.url,
            score=round(pair.score, 4),
        )
    for article in primary:
        if article.url not in matched_urls:
            log_event(
                logger,
                "No match",
                level=logging.DEBUG,
                event="match_missing",
                url_primary=article.url,
                title=article.title,
            )


def _fuse_and_store(
    pair: MatchedPair,
    requester: FusionRequester,
    sink: ReportSink,
    stats: RunStats,
    logger: logging.Logger,
) -> None:
    """Fuse and persist one pair; pair-scoped failures are logged, not raised."""
    with start_span(
        "news_fusion.pair",
        kind="chain",
        input_value={"url_primary": pair.primary.url, "url_secondary": pair.secondary.url},
        attributes={"match.score": pair.score},
    ) as span:
        try:
            report = requester.fuse(pair)
            outcome = sink.store(report)
        except PairError as exc:
            record_span_error(span, exc)
            _count_failure(exc, stats)
            log_event(
                logger,
                "Pair failed",
                level=logging.ERROR,
                event="store_failed" if isinstance(exc, StorageError) else "fusion_failed",
                error_type=type(exc).__name__,
                error=str(exc),
                url_primary=pair.primary.url,
                url_secondary=pair.secondary.url,
            )
            return

        if outcome == "skipped":
            stats.skipped += 1
            event = "store_skipped"
        else:
            stats.stored += 1
            event = "store_ok"
        set_span_output(span, {"outcome": outcome, "title": report.title})
        log_event(
            logger,
            "Report stored" if event == "store_ok" else "Report skipped",
            event=event,
            outcome=outcome,
            title=report.title,
            tags=report.tags,
            url_primary=report.url_primary,
            url_secondary=report.url_secondary,
        )


def _count_failure(exc: PairError, stats: RunStats) -> None:
    if isinstance(exc, GenerationError):
        stats.generation_errors += 1
    elif isinstance(exc, SchemaError):
        stats.schema_errors += 1
    elif isinstance(exc, StorageError):
        stats.storage_errors += 1


def _render_run_stats(stats: RunStats, console: Console) -> None:
    console.print(
        "[bold]Run summary[/bold]: "
        f"extracted={stats.primary_extracted}+{stats.secondary_extracted}, "
        f"matched={stats.matched}, stored={stats.stored}, skipped={stats.skipped}, "
        f"failed={stats.failed} (generation={stats.generation_errors}, "
        f"schema={stats.schema_errors}, storage={stats.storage_errors})"
    )
