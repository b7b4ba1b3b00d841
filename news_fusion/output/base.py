"""
Abstract report sink with a configurable duplicate policy.

Reports are identified externally by their (primary URL, secondary URL)
pair. The default "append" policy performs a blind insert, so re-running
over the same front pages writes duplicate rows. The other policies look
the pair up first:

- reject: raise DuplicateReportError when the pair already exists
- ignore: skip the write when the pair already exists
- upsert: overwrite the existing record(s) for the pair
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.errors import DuplicateReportError
from ..core.types import FusedReport


DUPLICATE_POLICIES = ("append", "reject", "ignore", "upsert")


class ReportSink(ABC):
    """Stores FusedReports; subclasses provide the backend operations."""

    def __init__(self, duplicate_policy: str = "append"):
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Unsupported duplicate_policy: {duplicate_policy}. "
                f"Use one of {', '.join(DUPLICATE_POLICIES)}."
            )
        self.duplicate_policy = duplicate_policy

    def store(self, report: FusedReport) -> str:
        """Persist one report according to the duplicate policy.

        Returns:
            "inserted", "updated" or "skipped"

        Raises:
            StorageError: If the backend rejects the write
            DuplicateReportError: Under the "reject" policy, for an existing pair
        """
        if self.duplicate_policy == "append":
            self._insert(report)
            return "inserted"

        exists = self._exists(report.url_primary, report.url_secondary)
        if not exists:
            self._insert(report)
            return "inserted"
        if self.duplicate_policy == "ignore":
            return "skipped"
        if self.duplicate_policy == "upsert":
            self._update(report)
            return "updated"
        raise DuplicateReportError(
            "A report for this article pair already exists",
            url_primary=report.url_primary,
            url_secondary=report.url_secondary,
        )

    @abstractmethod
    def _insert(self, report: FusedReport) -> None:
        raise NotImplementedError

    @abstractmethod
    def _exists(self, url_primary: str, url_secondary: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def _update(self, report: FusedReport) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self) -> "ReportSink":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
