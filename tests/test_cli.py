"""Tests for CLI exit status and option overrides."""

from __future__ import annotations

from typer.testing import CliRunner

from news_fusion import cli
from news_fusion.runner import RunStats

runner = CliRunner()


def test_run_exits_zero_with_partial_failures(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    captured = {}

    def fake_run_pipeline(cfg, show_progress=True, console=None):
        captured["cfg"] = cfg
        captured["show_progress"] = show_progress
        return RunStats(matched=3, stored=2, schema_errors=1)

    monkeypatch.setattr(cli, "run_pipeline", fake_run_pipeline)

    result = runner.invoke(
        cli.app,
        ["run", "--no-progress", "--limit", "3", "--storage", "jsonl", "--duplicate-policy", "ignore"],
    )

    assert result.exit_code == 0
    assert "Stored 2 report(s)" in result.output
    cfg = captured["cfg"]
    assert cfg.sources.limit == 3
    assert cfg.storage.backend == "jsonl"
    assert cfg.storage.duplicate_policy == "ignore"
    assert captured["show_progress"] is False


def test_run_exits_one_on_fatal_error(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    def failing_run_pipeline(cfg, show_progress=True, console=None):
        raise ValueError("Missing Supabase URL (set SUPABASE_URL)")

    monkeypatch.setattr(cli, "run_pipeline", failing_run_pipeline)

    result = runner.invoke(cli.app, ["run", "--no-progress"])

    assert result.exit_code == 1
    assert "Fatal" in result.output


def test_run_reads_config_file(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    config_path = tmp_path / "custom.yaml"
    config_path.write_text("sources:\n  limit: 2\nfusion:\n  tag_policy: filter\n", encoding="utf-8")
    captured = {}

    def fake_run_pipeline(cfg, show_progress=True, console=None):
        captured["cfg"] = cfg
        return RunStats()

    monkeypatch.setattr(cli, "run_pipeline", fake_run_pipeline)

    result = runner.invoke(cli.app, ["run", "--config", str(config_path), "--tag-policy", "reject"])

    assert result.exit_code == 0
    assert captured["cfg"].sources.limit == 2
    assert captured["cfg"].fusion.tag_policy == "reject"


def test_tags_lists_vocabulary(tmp_path):
    path = tmp_path / "tags.yaml"
    path.write_text("tags:\n  - Space\n  - Music\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["tags", "--vocabulary", str(path)])

    assert result.exit_code == 0
    assert result.output.split() == ["Space", "Music"]


def test_run_reports_bad_config_as_fatal(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    config_path = tmp_path / "config.yaml"
    config_path.write_text("sources:\n  limt: 2\n", encoding="utf-8")
    monkeypatch.setattr(cli, "run_pipeline", lambda *args, **kwargs: RunStats())

    result = runner.invoke(cli.app, ["run", "--no-progress"])

    assert result.exit_code == 1
    assert "Fatal" in result.output
    assert "limt" in result.output
