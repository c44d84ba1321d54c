"""Scanning, scoring, suggestion and resolution services."""

from .discovery import discover
from .health import HealthScore, average, score
from .pool import default_worker_count, run_parallel
from .resolution import BatchResult, apply_action, resolve, resolve_all, resolve_batch
from .scan import ScanOptions, SortKey, StatusFilter, filter_statuses, scan_workspace, sort_statuses
from .stats import RepoStats, WorkspaceStats, collect_all, collect_stats, summarize_stats
from .status import analyze, analyze_all
from .suggestions import IssueSummary, Priority, Suggestion, suggest, summarize

__all__ = [
    # discovery
    "discover",
    # health
    "HealthScore",
    "average",
    "score",
    # pool
    "default_worker_count",
    "run_parallel",
    # resolution
    "BatchResult",
    "apply_action",
    "resolve",
    "resolve_all",
    "resolve_batch",
    # scan
    "ScanOptions",
    "SortKey",
    "StatusFilter",
    "filter_statuses",
    "scan_workspace",
    "sort_statuses",
    # stats
    "RepoStats",
    "WorkspaceStats",
    "collect_all",
    "collect_stats",
    "summarize_stats",
    # status
    "analyze",
    "analyze_all",
    # suggestions
    "IssueSummary",
    "Priority",
    "Suggestion",
    "suggest",
    "summarize",
]
