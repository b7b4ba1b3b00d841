"""End-to-end pipeline tests with stubbed browser, provider and storage."""

from __future__ import annotations

import json

import pytest
from rich.console import Console

from news_fusion import runner
from news_fusion.config import AppConfig
from news_fusion.core.errors import GenerationError, StorageError
from news_fusion.core.types import Article
from news_fusion.output import JsonlSink


class _FakeExtractor:
    def __init__(self, name, label, articles):
        self.name = name
        self.label = label
        self.articles = articles
        self.sessions = []

    def extract(self, session):
        self.sessions.append(session)
        return list(self.articles)


class _FakeSession:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class _ScriptedProvider:
    """Returns a fused document per call, or the error mapped to the primary URL."""

    def __init__(self, failures=None, raw=None):
        self.failures = failures or {}
        self.raw = raw or {}
        self.calls = []

    def generate(self, system_prompt, user_prompt, context=None):
        self.calls.append(context)
        url_primary = context["url_primary"]
        if url_primary in self.failures:
            raise self.failures[url_primary]
        if url_primary in self.raw:
            return self.raw[url_primary]
        return json.dumps(
            {
                "title": f"Fused {len(self.calls)}",
                "summary": "Both outlets agree.",
                "tags": ["Politics"],
                "content": "One paragraph.",
            }
        )


class _FailingSink(JsonlSink):
    def __init__(self, cfg, path, failing_urls):
        super().__init__(cfg, path=path)
        self.failing_urls = failing_urls

    def _insert(self, report):
        if report.url_primary in self.failing_urls:
            raise StorageError("Supabase POST failed with 500", url_primary=report.url_primary)
        super()._insert(report)


def _cfg(tmp_path) -> AppConfig:
    cfg = AppConfig()
    cfg.logging.console = False
    cfg.logging.file = False
    cfg.logging.llm_log_enabled = False
    cfg.logging.dir = str(tmp_path / "logs")
    cfg.storage.backend = "jsonl"
    cfg.storage.jsonl_path = str(tmp_path / "news.jsonl")
    return cfg


def _wire(monkeypatch, cfg, primary, secondary, provider, sink=None):
    session = _FakeSession()
    extractors = (
        _FakeExtractor("cnn", "CNN", primary),
        _FakeExtractor("rt", "RT", secondary),
    )
    monkeypatch.setattr(runner, "create_provider", lambda *args, **kwargs: provider)
    monkeypatch.setattr(runner, "create_extractors", lambda *args, **kwargs: extractors)
    monkeypatch.setattr(runner, "_open_session", lambda _cfg: session)
    if sink is not None:
        monkeypatch.setattr(runner, "_build_sink", lambda _cfg: sink)
    return session, extractors


def _run(cfg):
    return runner.run_pipeline(cfg, show_progress=False, console=Console(quiet=True))


def _rows(cfg):
    return JsonlSink(cfg.storage).read_rows()


def test_summit_pair_is_fused_and_stored(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)
    primary = [
        Article(
            title="Summit ends in agreement",
            url="https://edition.cnn.com/summit",
            paragraphs=["Leaders met.", "They agreed.", "Markets rose."],
            source="cnn",
        )
    ]
    secondary = [
        Article(
            title="World leaders reach summit deal",
            url="https://www.rt.com/news/summit/",
            paragraphs=["A deal was reached.", "Details follow."],
            source="rt",
        )
    ]
    provider = _ScriptedProvider()
    session, extractors = _wire(monkeypatch, cfg, primary, secondary, provider)

    stats = _run(cfg)

    assert len(provider.calls) == 1
    rows = _rows(cfg)
    assert len(rows) == 1
    assert rows[0]["url_cnn"] == "https://edition.cnn.com/summit"
    assert rows[0]["url_rt"] == "https://www.rt.com/news/summit/"
    assert rows[0]["content"] == ["One paragraph."]
    assert stats.matched == 1
    assert stats.stored == 1
    assert stats.failed == 0
    assert session.closed
    assert extractors[0].sessions == [session]
    assert extractors[1].sessions == [session]


def test_partial_extraction_still_completes(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)
    primary = [
        Article(title=f"Story {word} update", url=f"https://edition.cnn.com/{word}", source="cnn")
        for word in ("alpha", "bravo", "charlie", "delta", "echo")
    ]
    # Two of five secondary articles failed upstream and were skipped.
    secondary = [
        Article(title=f"{word} story", url=f"https://www.rt.com/news/{word}/", source="rt")
        for word in ("alpha", "charlie", "echo")
    ]
    provider = _ScriptedProvider()
    _wire(monkeypatch, cfg, primary, secondary, provider)

    stats = _run(cfg)

    assert stats.secondary_extracted == 3
    # "story" is shared by every title, so each primary article still finds a match.
    assert stats.matched == 5
    assert stats.stored == 5
    assert len(_rows(cfg)) == 5


def test_pair_failures_are_isolated(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)
    primary = [
        Article(title="Alpha summit", url="https://edition.cnn.com/alpha"),
        Article(title="Bravo summit", url="https://edition.cnn.com/bravo"),
        Article(title="Charlie summit", url="https://edition.cnn.com/charlie"),
        Article(title="Delta summit", url="https://edition.cnn.com/delta"),
    ]
    secondary = [Article(title="Summit news", url="https://www.rt.com/news/summit/")]
    provider = _ScriptedProvider(
        failures={"https://edition.cnn.com/alpha": GenerationError("ReadTimeout: timed out")},
        raw={"https://edition.cnn.com/bravo": "Sorry, I cannot help with that."},
    )
    sink = _FailingSink(cfg.storage, tmp_path / "news.jsonl", {"https://edition.cnn.com/charlie"})
    _wire(monkeypatch, cfg, primary, secondary, provider, sink=sink)

    stats = _run(cfg)

    assert len(provider.calls) == 4
    assert stats.generation_errors == 1
    assert stats.schema_errors == 1
    assert stats.storage_errors == 1
    assert stats.stored == 1
    assert [row["url_cnn"] for row in _rows(cfg)] == ["https://edition.cnn.com/delta"]


def test_rerun_appends_duplicate_rows(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)
    primary = [Article(title="Summit ends in agreement", url="https://edition.cnn.com/summit")]
    secondary = [Article(title="Summit deal reached", url="https://www.rt.com/news/summit/")]
    _wire(monkeypatch, cfg, primary, secondary, _ScriptedProvider())

    _run(cfg)
    _run(cfg)

    rows = _rows(cfg)
    assert len(rows) == 2
    assert {(r["url_cnn"], r["url_rt"]) for r in rows} == {
        ("https://edition.cnn.com/summit", "https://www.rt.com/news/summit/")
    }


def test_rerun_with_ignore_policy_skips_existing_pair(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)
    cfg.storage.duplicate_policy = "ignore"
    primary = [Article(title="Summit ends in agreement", url="https://edition.cnn.com/summit")]
    secondary = [Article(title="Summit deal reached", url="https://www.rt.com/news/summit/")]
    _wire(monkeypatch, cfg, primary, secondary, _ScriptedProvider())

    _run(cfg)
    stats = _run(cfg)

    assert stats.skipped == 1
    assert stats.stored == 0
    assert len(_rows(cfg)) == 1


def test_no_matches_makes_no_generation_calls(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)
    primary = [Article(title="Volcano erupts", url="https://edition.cnn.com/volcano")]
    provider = _ScriptedProvider()
    _wire(monkeypatch, cfg, primary, [], provider)

    stats = _run(cfg)

    assert provider.calls == []
    assert stats.matched == 0
    assert _rows(cfg) == []


def test_session_is_closed_when_extraction_raises(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)
    session, extractors = _wire(monkeypatch, cfg, [], [], _ScriptedProvider())

    def boom(_session):
        raise RuntimeError("browser crashed")

    extractors[1].extract = boom

    with pytest.raises(RuntimeError, match="browser crashed"):
        _run(cfg)
    assert session.closed


def test_initialization_failure_is_fatal(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)

    def no_key(*args, **kwargs):
        raise ValueError("Missing API key for openai provider")

    monkeypatch.setattr(runner, "create_provider", no_key)

    with pytest.raises(ValueError, match="Missing API key"):
        _run(cfg)


def test_unencodable_response_is_isolated_to_its_pair(tmp_path, monkeypatch):
    cfg = _cfg(tmp_path)
    primary = [
        Article(title="Alpha summit", url="https://edition.cnn.com/alpha"),
        Article(title="Bravo summit", url="https://edition.cnn.com/bravo"),
    ]
    secondary = [Article(title="Summit news", url="https://www.rt.com/news/summit/")]
    provider = _ScriptedProvider(
        raw={
            "https://edition.cnn.com/alpha": (
                '{"title": "Bad \\ud83d", "summary": "s", "tags": [], "content": "c"}'
            )
        },
    )
    _wire(monkeypatch, cfg, primary, secondary, provider)

    stats = _run(cfg)

    assert len(provider.calls) == 2
    assert stats.schema_errors == 1
    assert stats.stored == 1
    assert [row["url_cnn"] for row in _rows(cfg)] == ["https://edition.cnn.com/bravo"]
