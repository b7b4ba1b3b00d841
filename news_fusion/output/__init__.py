"""
Report persistence.

This package contains the sink interface and its Supabase and JSONL
backends.
"""

from ..config import StorageConfig
from .base import DUPLICATE_POLICIES, ReportSink
from .jsonl_sink import JsonlSink
from .supabase_sink import SupabaseSink


def create_sink(cfg: StorageConfig) -> ReportSink:
    """Build the configured storage backend."""
    backend = cfg.backend.lower().strip()
    if backend == "supabase":
        return SupabaseSink(cfg)
    if backend == "jsonl":
        return JsonlSink(cfg)
    raise ValueError(f"Unsupported storage backend: {cfg.backend}. Use 'supabase' or 'jsonl'.")


__all__ = [
    "ReportSink",
    "SupabaseSink",
    "JsonlSink",
    "DUPLICATE_POLICIES",
    "create_sink",
]
