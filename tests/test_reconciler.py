import pytest

from export_diff.differ import ChangeType
from export_diff.models import Snapshot
from export_diff.reconciler import DEFAULT_STATUS_ORDER, reconcile, status_rank

from conftest import make_record, make_snapshot


def _statuses(result):
    return [(r.id, r.status) for r in result.records]


def test_classifies_each_record(old_payload, new_payload):
    result = reconcile(Snapshot.from_dict(old_payload), Snapshot.from_dict(new_payload))

    assert _statuses(result) == [
        ("p2", ChangeType.MODIFIED),
        ("p4", ChangeType.ADDED),
        ("p3", ChangeType.REMOVED),
        ("p1", ChangeType.UNCHANGED),
    ]
    s = result.summary
    assert (s.added, s.removed, s.modified, s.unchanged, s.total) == (1, 1, 1, 1, 4)


def test_modified_record_carries_both_values_and_changes(old_payload, new_payload):
    result = reconcile(Snapshot.from_dict(old_payload), Snapshot.from_dict(new_payload))
    modified = result.records[0]

    assert modified.name == "Summarizer v2"
    assert modified.old_value.content == "Summarize {{text}}"
    assert modified.new_value.content == "Summarize {{text}} briefly"
    assert [c.field for c in modified.changes] == ["content", "model"]


def test_status_field_invariants(old_payload, new_payload):
    result = reconcile(Snapshot.from_dict(old_payload), Snapshot.from_dict(new_payload))

    for record in result.records:
        assert bool(record.changes) == (record.status == ChangeType.MODIFIED)
        assert (record.old_value is not None) == (record.status != ChangeType.ADDED)
        assert (record.new_value is not None) == (record.status != ChangeType.REMOVED)


def test_identical_records_are_unchanged():
    old = make_snapshot(make_record("p1", "Same", description="d", variables=[{"name": "x"}]))
    new = make_snapshot(make_record("p1", "Same", description="d", variables=[{"name": "x"}]))

    result = reconcile(old, new)

    assert len(result.records) == 1
    assert result.records[0].status == ChangeType.UNCHANGED
    assert result.records[0].changes == ()
    assert not result.has_changes


def test_disjoint_snapshots_only_add_and_remove():
    old = make_snapshot(make_record("a", "1"), make_record("b", "2"))
    new = make_snapshot(make_record("c", "3"))

    result = reconcile(old, new)

    assert {r.status for r in result.records} == {ChangeType.ADDED, ChangeType.REMOVED}
    assert result.summary.total == 3


def test_empty_snapshots():
    result = reconcile(Snapshot(), Snapshot())
    assert result.records == ()
    assert result.summary.total == 0


def test_total_matches_identifier_union():
    old = make_snapshot(*(make_record(str(i), f"c{i}") for i in range(0, 10)))
    new = make_snapshot(*(make_record(str(i), f"c{i}" if i % 2 else "changed") for i in range(5, 15)))

    s = reconcile(old, new).summary

    assert s.total == 15
    assert s.added + s.removed + s.modified + s.unchanged == s.total


def test_ties_keep_iteration_order():
    old = make_snapshot(make_record("b", "1"), make_record("a", "1"))
    new = make_snapshot(make_record("z", "1"), make_record("y", "1"))

    result = reconcile(old, new)

    assert [r.id for r in result.records] == ["z", "y", "b", "a"]


def test_duplicate_id_keeps_last_record():
    old = make_snapshot(make_record("p1", "first"), make_record("p1", "second"))
    new = make_snapshot(make_record("p1", "second"))

    result = reconcile(old, new)

    assert result.summary.total == 1
    assert result.records[0].status == ChangeType.UNCHANGED


def test_custom_status_order():
    old = make_snapshot(make_record("gone", "x"), make_record("same", "x"))
    new = make_snapshot(make_record("same", "x"), make_record("new", "x"))

    result = reconcile(old, new, ["unchanged", "removed", "added", "modified"])

    assert [r.id for r in result.records] == ["same", "gone", "new"]


def test_incomplete_status_order_is_rejected():
    with pytest.raises(ValueError):
        status_rank(["modified", "added", "removed"])
    with pytest.raises(ValueError):
        status_rank(["modified", "added", "removed", "removed"])


def test_default_status_order():
    assert [s.value for s in DEFAULT_STATUS_ORDER] == ["modified", "added", "removed", "unchanged"]


def test_to_dict_shape(old_payload, new_payload):
    data = reconcile(Snapshot.from_dict(old_payload), Snapshot.from_dict(new_payload)).to_dict()

    assert data["summary"] == {"added": 1, "removed": 1, "modified": 1, "unchanged": 1, "total": 4}
    added = next(p for p in data["prompts"] if p["status"] == "added")
    assert "oldValue" not in added and "changes" not in added
    assert added["newValue"]["content"] == "Translate\n{{text}}\nto French"
    assert "metadata" not in data
