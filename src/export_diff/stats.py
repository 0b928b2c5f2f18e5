"""
Line and field change counts for reporting.
"""

from typing import Iterable

from .differ import ChangeType, line_diff, split_lines
from .models import RecordDiff, RecordStats


def record_stats(diff: RecordDiff) -> RecordStats:
    """
    Count lines added/removed and fields changed for one record.

    Added and removed records count every line of their content; modified
    records count the operations of a line diff of old vs new content.
    """
    lines_added = 0
    lines_removed = 0

    if diff.status == ChangeType.ADDED and diff.new_value is not None:
        lines_added = len(split_lines(diff.new_value.content))
    elif diff.status == ChangeType.REMOVED and diff.old_value is not None:
        lines_removed = len(split_lines(diff.old_value.content))
    elif diff.status == ChangeType.MODIFIED and diff.old_value is not None and diff.new_value is not None:
        ops = line_diff(diff.old_value.content, diff.new_value.content)
        lines_added = sum(1 for op in ops if op.type == ChangeType.ADDED)
        lines_removed = sum(1 for op in ops if op.type == ChangeType.REMOVED)

    return RecordStats(
        lines_added=lines_added,
        lines_removed=lines_removed,
        fields_changed=len(diff.changes),
    )


def collection_stats(records: Iterable[RecordDiff]) -> RecordStats:
    """Sum of record_stats over a comparison's records."""
    total = RecordStats()
    for diff in records:
        total = total + record_stats(diff)
    return total
