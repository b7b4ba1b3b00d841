"""
Command-line interface for news fusion.

Uses Typer to provide a CLI with options for the main configuration
settings. Loads .env files for API key and Supabase configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console

from .config import load_config
from .core.vocabulary import load_vocabulary
from .llm.tracing import flush
from .runner import run_pipeline

app = typer.Typer(add_completion=False)
console = Console()

_DEFAULT_CONFIG = Path("config.yaml")


@app.command()
def run(
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="YAML config file (defaults to ./config.yaml when present).",
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    limit: int | None = typer.Option(None, "--limit", help="Articles considered per outlet."),
    storage: str | None = typer.Option(None, "--storage", help="Storage backend: supabase or jsonl."),
    duplicate_policy: str | None = typer.Option(
        None,
        "--duplicate-policy",
        help="Handling of an existing URL pair: append, reject, ignore or upsert.",
    ),
    tag_policy: str | None = typer.Option(
        None,
        "--tag-policy",
        help="Out-of-vocabulary tags: passthrough, filter or reject.",
    ),
    headless: bool | None = typer.Option(None, "--headless/--headed", help="Browser mode."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        help="Override provider API key (or set it in the environment / .env).",
    ),
):
    """Fetch both outlets, match their articles, fuse each pair and store the reports.

    Exits with status 0 once every pair has been attempted, even if some
    pairs failed, and with status 1 on any fatal error.
    """
    load_dotenv()

    if config is None and _DEFAULT_CONFIG.is_file():
        config = _DEFAULT_CONFIG

    try:
        cfg = load_config(str(config) if config else None)
        if api_key:
            cfg.provider.api_key = api_key
        if limit is not None:
            cfg.sources.limit = limit
        if storage:
            cfg.storage.backend = storage
        if duplicate_policy:
            cfg.storage.duplicate_policy = duplicate_policy
        if tag_policy:
            cfg.fusion.tag_policy = tag_policy
        if headless is not None:
            cfg.browser.headless = headless
        if log_level:
            cfg.logging.level = log_level
        if log_file is not None:
            cfg.logging.file = log_file

        stats = run_pipeline(cfg, show_progress=progress, console=console)
    except Exception as exc:  # noqa: BLE001
        logging.getLogger("news_fusion").error(
            "Pipeline failed: %s", exc, exc_info=True, extra={"event": "pipeline_fatal"}
        )
        console.print(f"[bold red]Fatal:[/bold red] {type(exc).__name__}: {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        flush()

    console.print(f"Stored {stats.stored} report(s) from {stats.matched} matched pair(s)")


@app.command()
def tags(
    vocabulary: Path | None = typer.Option(
        None, "--vocabulary", exists=True, dir_okay=False, help="YAML list of tags."
    ),
):
    """Print the controlled tag vocabulary, one term per line."""
    for term in load_vocabulary(str(vocabulary) if vocabulary else None):
        console.print(term, markup=False, highlight=False)


if __name__ == "__main__":
    app()
