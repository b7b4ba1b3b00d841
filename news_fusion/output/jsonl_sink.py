"""Local JSON-lines sink for offline and dry runs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..config import StorageConfig
from ..core.errors import StorageError
from ..core.types import FusedReport
from .base import ReportSink


class JsonlSink(ReportSink):
    """Appends one JSON object per report to a file, using the table's row shape."""

    def __init__(self, cfg: StorageConfig, path: Path | None = None):
        super().__init__(cfg.duplicate_policy)
        self.cfg = cfg
        self.path = Path(path or cfg.jsonl_path)

    def read_rows(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                return [json.loads(line) for line in f if line.strip()]
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc

    def _insert(self, report: FusedReport) -> None:
        line = self._encode_row(self._row(report), report)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "ab") as f:
                f.write(line)
        except OSError as exc:
            raise StorageError(
                f"Cannot write {self.path}: {exc}",
                url_primary=report.url_primary,
                url_secondary=report.url_secondary,
            ) from exc

    def _exists(self, url_primary: str, url_secondary: str) -> bool:
        return any(self._is_pair(row, url_primary, url_secondary) for row in self.read_rows())

    def _update(self, report: FusedReport) -> None:
        lines = [
            self._encode_row(
                self._row(report) if self._is_pair(row, report.url_primary, report.url_secondary) else row,
                report,
            )
            for row in self.read_rows()
        ]
        # The original file is only replaced once the rewrite is complete.
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "wb") as f:
                f.writelines(lines)
            tmp_path.replace(self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(
                f"Cannot rewrite {self.path}: {exc}",
                url_primary=report.url_primary,
                url_secondary=report.url_secondary,
            ) from exc

    def _row(self, report: FusedReport) -> dict[str, Any]:
        return report.to_row(self.cfg.primary_url_column, self.cfg.secondary_url_column)

    def _encode_row(self, row: dict[str, Any], report: FusedReport) -> bytes:
        try:
            return (json.dumps(row, ensure_ascii=False) + "\n").encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise StorageError(
                f"Cannot serialize report: {type(exc).__name__}: {exc}",
                url_primary=report.url_primary,
                url_secondary=report.url_secondary,
            ) from exc

    def _is_pair(self, row: dict[str, Any], url_primary: str, url_secondary: str) -> bool:
        return (
            row.get(self.cfg.primary_url_column) == url_primary
            and row.get(self.cfg.secondary_url_column) == url_secondary
        )
