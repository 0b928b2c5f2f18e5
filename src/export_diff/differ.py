"""
Line-level differ for prompt content.

Merges the old and new line sequences with two cursors, using string
similarity to tell an edited line apart from an inserted or deleted one.
This is a greedy, bounded-lookahead heuristic rather than a minimal edit
script: reordered blocks can produce longer diffs than strictly needed.
"""

from dataclasses import dataclass
from enum import Enum

from .similarity import similarity


class ChangeType(Enum):
    """Type of change for a line or a record."""
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


# Two differing lines scoring above this are treated as one edited line.
MODIFICATION_THRESHOLD = 0.5


@dataclass(frozen=True)
class DiffLine:
    """One operation in a line diff. Type is never MODIFIED."""
    type: ChangeType
    text: str

    def to_dict(self) -> dict:
        return {'type': self.type.value, 'text': self.text}


def split_lines(text: str) -> list[str]:
    """Split on newlines only; an empty text is a single empty line."""
    return (text or '').split('\n')


def _offset_of(lines: list[str], target: str, start: int) -> int:
    """Offset of target in lines[start:], or -1 if absent."""
    try:
        return lines.index(target, start) - start
    except ValueError:
        return -1


def line_diff(old_text: str, new_text: str) -> list[DiffLine]:
    """
    Diff two texts line by line.

    Args:
        old_text: Original text
        new_text: New text

    Returns:
        Ordered list of DiffLine operations (unchanged/added/removed).
        An edited line is emitted as a removed line followed by an added one.
    """
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)
    result = []

    i = j = 0
    while i < len(old_lines) or j < len(new_lines):
        if i >= len(old_lines):
            result.append(DiffLine(ChangeType.ADDED, new_lines[j]))
            j += 1
            continue

        if j >= len(new_lines):
            result.append(DiffLine(ChangeType.REMOVED, old_lines[i]))
            i += 1
            continue

        old_line = old_lines[i]
        new_line = new_lines[j]

        if old_line == new_line:
            result.append(DiffLine(ChangeType.UNCHANGED, old_line))
            i += 1
            j += 1
            continue

        if similarity(old_line, new_line) > MODIFICATION_THRESHOLD:
            result.append(DiffLine(ChangeType.REMOVED, old_line))
            result.append(DiffLine(ChangeType.ADDED, new_line))
            i += 1
            j += 1
            continue

        old_in_new = _offset_of(new_lines, old_line, j)
        new_in_old = _offset_of(old_lines, new_line, i)

        if old_in_new == -1 and new_in_old == -1:
            result.append(DiffLine(ChangeType.REMOVED, old_line))
            result.append(DiffLine(ChangeType.ADDED, new_line))
            i += 1
            j += 1
        elif old_in_new != -1 and (new_in_old == -1 or old_in_new <= new_in_old):
            # Old line reappears further down; consume new lines until then
            result.append(DiffLine(ChangeType.ADDED, new_line))
            j += 1
        else:
            result.append(DiffLine(ChangeType.REMOVED, old_line))
            i += 1

    return result


# Entry point used for rendering a single field's before/after.
inline_diff = line_diff


def format_unified(lines: list[DiffLine]) -> str:
    """Render a line diff with '+', '-' and ' ' prefixes."""
    prefixes = {
        ChangeType.ADDED: '+',
        ChangeType.REMOVED: '-',
        ChangeType.UNCHANGED: ' ',
    }
    return '\n'.join(f"{prefixes[line.type]}{line.text}" for line in lines)


def format_side_by_side(
    lines: list[DiffLine],
    width: int = 80,
) -> list[tuple[str, str, str]]:
    """
    Generate side-by-side rows from a line diff.

    Returns list of (marker, old_line, new_line) tuples.
    Marker is one of: ' ' (same), '<' (removed), '>' (added), '|' (modified).
    A run of removed lines directly followed by a run of added lines is
    paired up row by row as modifications.
    """
    half_width = (width - 3) // 2
    result = []
    removed: list[str] = []
    added: list[str] = []

    def flush():
        for k in range(max(len(removed), len(added))):
            old_line = removed[k][:half_width] if k < len(removed) else ''
            new_line = added[k][:half_width] if k < len(added) else ''
            if k < len(removed) and k < len(added):
                marker = '|'
            elif k < len(removed):
                marker = '<'
            else:
                marker = '>'
            result.append((marker, old_line, new_line))
        removed.clear()
        added.clear()

    for line in lines:
        if line.type == ChangeType.REMOVED:
            if added:
                flush()
            removed.append(line.text)
        elif line.type == ChangeType.ADDED:
            added.append(line.text)
        else:
            flush()
            result.append((' ', line.text[:half_width], line.text[:half_width]))

    flush()
    return result
