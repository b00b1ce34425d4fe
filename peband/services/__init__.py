"""Service layer - search orchestration and formatting."""

from .formatters import format_analysis_text
from .snapshot_service import SearchSession, SnapshotService, analyze, build_snapshot

__all__ = [
    "SearchSession",
    "SnapshotService",
    "analyze",
    "build_snapshot",
    "format_analysis_text",
]
