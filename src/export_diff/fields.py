"""
Field-level comparison of two versions of the same record.

An empty result means the record is unchanged; the reconciler relies on
that to tell modified records from unchanged ones.
"""

import json
from typing import Any

from .models import FieldChange, RecordSnapshot


# Scalar fields compared in this order; the structured variables come last.
COMPARED_FIELDS = ('content', 'description', 'systemPrompt', 'model', 'temperature')
VARIABLES_FIELD = 'variables'


def serialize(value: Any) -> str:
    """Deterministic compact JSON; list and mapping order is significant."""
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)


def _render(value: Any) -> str:
    return value if isinstance(value, str) else serialize(value)


def field_diff(old: RecordSnapshot, new: RecordSnapshot) -> list[FieldChange]:
    """
    Compare the tracked fields of two record versions.

    Absent values count as empty, so a missing description equals "".
    Non-string values are reported as their JSON serialization.
    """
    changes = []

    for name in COMPARED_FIELDS:
        old_value = old.get(name)
        new_value = new.get(name)
        old_value = '' if old_value is None else old_value
        new_value = '' if new_value is None else new_value

        if serialize(old_value) != serialize(new_value):
            changes.append(FieldChange(
                field=name,
                old_value=_render(old_value),
                new_value=_render(new_value),
            ))

    old_vars = serialize(old.structured_fields if old.structured_fields is not None else [])
    new_vars = serialize(new.structured_fields if new.structured_fields is not None else [])
    if old_vars != new_vars:
        changes.append(FieldChange(field=VARIABLES_FIELD, old_value=old_vars, new_value=new_vars))

    return changes
