"""Supabase (PostgREST) sink writing to the ``news`` table over HTTP."""

from __future__ import annotations

import json
import os
from typing import Any

import httpx

from ..config import StorageConfig
from ..core.errors import StorageError
from ..core.types import FusedReport
from .base import ReportSink


class SupabaseSink(ReportSink):
    """Writes reports through the Supabase REST API.

    Uses PostgREST directly: ``POST /rest/v1/<table>`` for inserts,
    filtered ``GET``/``PATCH`` for duplicate lookups and upserts. No unique
    constraint is required on the table.
    """

    def __init__(
        self,
        cfg: StorageConfig,
        url: str | None = None,
        key: str | None = None,
        client: httpx.Client | None = None,
    ):
        super().__init__(cfg.duplicate_policy)
        url = url or os.getenv(cfg.supabase_url_env)
        key = key or os.getenv(cfg.supabase_key_env)
        if not url:
            raise ValueError(f"Missing Supabase URL (set {cfg.supabase_url_env})")
        if not key:
            raise ValueError(f"Missing Supabase key (set {cfg.supabase_key_env})")
        self.cfg = cfg
        self._client = client or httpx.Client(
            base_url=url.rstrip("/"), timeout=cfg.timeout_seconds
        )
        self._headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }
        self._path = f"/rest/v1/{cfg.table}"

    def _insert(self, report: FusedReport) -> None:
        self._request(
            "POST",
            report,
            content=self._encode(report),
            headers={"Prefer": "return=minimal"},
        )

    def _exists(self, url_primary: str, url_secondary: str) -> bool:
        params = {**self._pair_filter(url_primary, url_secondary), "select": "id", "limit": "1"}
        resp = self._request("GET", None, params=params, url_pair=(url_primary, url_secondary))
        try:
            rows = resp.json()
        except ValueError as exc:
            raise StorageError(
                f"Unreadable lookup response: {exc}",
                url_primary=url_primary,
                url_secondary=url_secondary,
            ) from exc
        return bool(rows)

    def _update(self, report: FusedReport) -> None:
        self._request(
            "PATCH",
            report,
            params=self._pair_filter(report.url_primary, report.url_secondary),
            content=self._encode(report),
            headers={"Prefer": "return=minimal"},
        )

    def close(self) -> None:
        self._client.close()

    def _row(self, report: FusedReport) -> dict[str, Any]:
        return report.to_row(self.cfg.primary_url_column, self.cfg.secondary_url_column)

    def _encode(self, report: FusedReport) -> bytes:
        try:
            return json.dumps(self._row(report), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise StorageError(
                f"Report body could not be encoded: {type(exc).__name__}: {exc}",
                url_primary=report.url_primary,
                url_secondary=report.url_secondary,
            ) from exc

    def _pair_filter(self, url_primary: str, url_secondary: str) -> dict[str, str]:
        return {
            self.cfg.primary_url_column: f"eq.{url_primary}",
            self.cfg.secondary_url_column: f"eq.{url_secondary}",
        }

    def _request(
        self,
        method: str,
        report: FusedReport | None,
        url_pair: tuple[str, str] | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        if report is not None:
            url_pair = (report.url_primary, report.url_secondary)
        url_primary, url_secondary = url_pair or (None, None)
        try:
            resp = self._client.request(
                method, self._path, headers={**self._headers, **(headers or {})}, **kwargs
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StorageError(
                f"Supabase {method} failed with {exc.response.status_code}: "
                f"{exc.response.text[:300]}",
                url_primary=url_primary,
                url_secondary=url_secondary,
            ) from exc
        except httpx.HTTPError as exc:
            raise StorageError(
                f"Supabase {method} failed: {type(exc).__name__}: {exc}",
                url_primary=url_primary,
                url_secondary=url_secondary,
            ) from exc
        return resp
