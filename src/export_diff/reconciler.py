"""
Collection reconciler: pairs records of two snapshots by identifier and
classifies each as added, removed, modified or unchanged.
"""

from typing import Iterable, Optional

from .differ import ChangeType
from .fields import field_diff
from .logging_utils import RECONCILE, get_logger
from .models import (
    ComparisonResult, ComparisonSummary, RecordDiff, RecordSnapshot, RecordValue, Snapshot,
)

logger = get_logger(__name__)


# Most actionable entries first.
DEFAULT_STATUS_ORDER = (
    ChangeType.MODIFIED,
    ChangeType.ADDED,
    ChangeType.REMOVED,
    ChangeType.UNCHANGED,
)


def status_rank(status_order: Iterable) -> dict[ChangeType, int]:
    """Map each status to its sort position. The order must name all four."""
    order = [ChangeType(s) for s in status_order]
    if len(order) != len(ChangeType) or set(order) != set(ChangeType):
        raise ValueError(
            f"status order must list each of {[c.value for c in ChangeType]} exactly once"
        )
    return {status: position for position, status in enumerate(order)}


def classify(
    record_id: str,
    old: Optional[RecordSnapshot],
    new: Optional[RecordSnapshot],
) -> RecordDiff:
    """Classify one identifier given its record in each snapshot (or None)."""
    if old is None:
        return RecordDiff(
            id=record_id,
            name=new.name,
            status=ChangeType.ADDED,
            new_value=RecordValue.from_record(new),
        )

    if new is None:
        return RecordDiff(
            id=record_id,
            name=old.name,
            status=ChangeType.REMOVED,
            old_value=RecordValue.from_record(old),
        )

    changes = field_diff(old, new)
    return RecordDiff(
        id=record_id,
        name=new.name,
        status=ChangeType.MODIFIED if changes else ChangeType.UNCHANGED,
        old_value=RecordValue.from_record(old),
        new_value=RecordValue.from_record(new),
        changes=tuple(changes),
    )


def reconcile(
    old_snapshot: Snapshot,
    new_snapshot: Snapshot,
    status_order: Iterable = DEFAULT_STATUS_ORDER,
) -> ComparisonResult:
    """
    Reconcile two snapshots.

    Args:
        old_snapshot: The earlier snapshot
        new_snapshot: The later snapshot
        status_order: Sort priority of statuses; ties keep iteration order

    Returns:
        ComparisonResult with one RecordDiff per distinct identifier and
        the summary counts. summary.total is the size of the id union.
    """
    rank = status_rank(status_order)
    old_map = old_snapshot.by_id()
    new_map = new_snapshot.by_id()

    all_ids = list(old_map) + [rid for rid in new_map if rid not in old_map]
    records = [classify(rid, old_map.get(rid), new_map.get(rid)) for rid in all_ids]
    records.sort(key=lambda r: rank[r.status])

    counts = {status: 0 for status in ChangeType}
    for record in records:
        counts[record.status] += 1

    summary = ComparisonSummary(
        added=counts[ChangeType.ADDED],
        removed=counts[ChangeType.REMOVED],
        modified=counts[ChangeType.MODIFIED],
        unchanged=counts[ChangeType.UNCHANGED],
        total=len(all_ids),
    )
    logger.debug(
        f"{RECONCILE} {len(old_map)} old / {len(new_map)} new records: "
        f"+{summary.added} -{summary.removed} ~{summary.modified} ={summary.unchanged}"
    )

    return ComparisonResult(summary=summary, records=tuple(records))
