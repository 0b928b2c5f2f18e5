"""
export-diff: Compare versions of exported prompt collections.

Classifies every prompt in two export snapshots as added, removed,
modified or unchanged, with field-level changes and line diffs.
"""

__version__ = "0.1.0"

from .differ import ChangeType, DiffLine, inline_diff, line_diff
from .fields import field_diff
from .models import (
    ComparisonResult,
    ComparisonSummary,
    FieldChange,
    RecordDiff,
    RecordSnapshot,
    RecordStats,
    RecordValue,
    Snapshot,
    VersionInfo,
)
from .reconciler import DEFAULT_STATUS_ORDER, reconcile
from .similarity import levenshtein, similarity
from .stats import collection_stats, record_stats

__all__ = [
    "ChangeType",
    "DiffLine",
    "line_diff",
    "inline_diff",
    "field_diff",
    "ComparisonResult",
    "ComparisonSummary",
    "FieldChange",
    "RecordDiff",
    "RecordSnapshot",
    "RecordStats",
    "RecordValue",
    "Snapshot",
    "VersionInfo",
    "DEFAULT_STATUS_ORDER",
    "reconcile",
    "levenshtein",
    "similarity",
    "record_stats",
    "collection_stats",
]
