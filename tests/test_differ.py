from export_diff.differ import (
    ChangeType, DiffLine, format_side_by_side, format_unified, inline_diff, line_diff,
)

U, A, R = ChangeType.UNCHANGED, ChangeType.ADDED, ChangeType.REMOVED


def ops(lines):
    return [(line.type, line.text) for line in lines]


def test_identical_text_is_all_unchanged():
    text = "first\nsecond\n\nfourth"
    result = line_diff(text, text)
    assert all(line.type == U for line in result)
    assert [line.text for line in result] == text.split("\n")


def test_single_identical_line():
    assert line_diff("Hello World", "Hello World") == [DiffLine(U, "Hello World")]


def test_detects_added_line():
    result = ops(line_diff("Line 1", "Line 1\nLine 2"))
    assert (U, "Line 1") in result
    assert (A, "Line 2") in result


def test_detects_removed_line():
    result = ops(line_diff("Line 1\nLine 2", "Line 1"))
    assert (U, "Line 1") in result
    assert (R, "Line 2") in result


def test_similar_lines_become_remove_then_add():
    result = ops(line_diff("Hello World", "Hello Universe"))
    assert (R, "Hello World") in result
    assert (A, "Hello Universe") in result


def test_empty_inputs():
    assert (A, "New content") in ops(line_diff("", "New content"))
    assert (R, "Old content") in ops(line_diff("Old content", ""))


def test_multi_line_edit():
    result = ops(line_diff("Line 1\nLine 2\nLine 3", "Line 1\nModified Line 2\nLine 3\nLine 4"))
    assert result == [
        (U, "Line 1"),
        (R, "Line 2"),
        (A, "Modified Line 2"),
        (U, "Line 3"),
        (A, "Line 4"),
    ]


def test_inserted_line_is_consumed_from_new_side():
    result = ops(line_diff("keep", "inserted line\nkeep"))
    assert result == [(A, "inserted line"), (U, "keep")]


def test_deleted_line_is_consumed_from_old_side():
    result = ops(line_diff("x\nkeep", "keep"))
    assert result == [(R, "x"), (U, "keep")]


def test_tie_prefers_new_side():
    # Both lines reappear one position later on the other side
    result = ops(line_diff("alpha\nbravo", "bravo\nalpha"))
    assert result == [(A, "bravo"), (U, "alpha"), (R, "bravo")]


def test_operation_count_is_bounded():
    old = "\n".join(f"old {i} qwerty" for i in range(20))
    new = "\n".join(f"zz{i}" for i in range(15))
    assert len(line_diff(old, new)) <= 20 + 15


def test_inline_diff_is_line_diff():
    assert inline_diff("a\nb", "a\nc") == line_diff("a\nb", "a\nc")


def test_to_dict():
    assert DiffLine(A, "x").to_dict() == {"type": "added", "text": "x"}


def test_format_unified():
    lines = line_diff("Line 1\nLine 2", "Line 1\nLine 3")
    assert format_unified(lines).split("\n") == [" Line 1", "-Line 2", "+Line 3"]


def test_format_side_by_side_pairs_modifications():
    lines = [
        DiffLine(U, "same"),
        DiffLine(R, "old a"),
        DiffLine(R, "old b"),
        DiffLine(A, "new a"),
        DiffLine(A, "extra"),
        DiffLine(A, "more"),
    ]
    assert format_side_by_side(lines) == [
        (" ", "same", "same"),
        ("|", "old a", "new a"),
        ("|", "old b", "extra"),
        (">", "", "more"),
    ]


def test_format_side_by_side_removed_only_and_truncation():
    rows = format_side_by_side([DiffLine(R, "x" * 100)], width=23)
    assert rows == [("<", "x" * 10, "")]
