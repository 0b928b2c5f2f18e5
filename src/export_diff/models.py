"""
Data model for export snapshots and their comparison results.

Everything here is immutable and created fresh per comparison. The
to_dict() methods produce the camelCase JSON shape used by exports.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .differ import ChangeType
from .exceptions import SnapshotFormatError


# Keys of an exported prompt that map onto named RecordSnapshot attributes.
# Anything else (systemPrompt, model, temperature, ...) is kept in `extra`.
_KNOWN_KEYS = {'id', 'name', 'content', 'description', 'variables', 'structuredFields', 'version'}


@dataclass(frozen=True)
class RecordSnapshot:
    """One record (prompt) captured in a snapshot."""
    id: str
    name: str = ''
    content: str = ''
    description: Optional[str] = None
    structured_fields: Any = None
    version_label: Optional[str] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "RecordSnapshot":
        if not isinstance(data, dict):
            raise SnapshotFormatError(f"Prompt entry must be an object, got {type(data).__name__}")
        if data.get('id') is None:
            raise SnapshotFormatError(f"Prompt entry is missing an id: {data.get('name', '?')!r}")

        structured = data.get('variables')
        if structured is None:
            structured = data.get('structuredFields')

        return cls(
            id=str(data['id']),
            name=data.get('name') or '',
            content=data.get('content') or '',
            description=data.get('description'),
            structured_fields=structured,
            version_label=data.get('version'),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def get(self, field_name: str) -> Any:
        """Look up a comparable field by its export name."""
        if field_name == 'content':
            return self.content
        if field_name == 'description':
            return self.description
        if field_name in ('variables', 'structuredFields'):
            return self.structured_fields
        return self.extra.get(field_name)


@dataclass(frozen=True)
class Snapshot:
    """One versioned copy of an exported record collection."""
    records: tuple[RecordSnapshot, ...] = ()
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, payload: Any, label: Optional[str] = None) -> "Snapshot":
        """Build a snapshot from a parsed export payload: {"prompts": [...]}."""
        if not isinstance(payload, dict):
            raise SnapshotFormatError("Export payload must be a JSON object")
        prompts = payload.get('prompts')
        if not isinstance(prompts, list):
            raise SnapshotFormatError("Export payload has no 'prompts' list")
        return cls(records=tuple(RecordSnapshot.from_dict(p) for p in prompts), label=label)

    def by_id(self) -> dict[str, RecordSnapshot]:
        """Identifier to record map. A repeated id keeps its last record."""
        return {record.id: record for record in self.records}

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class FieldChange:
    """A single differing field between two versions of a record."""
    field: str
    old_value: str
    new_value: str

    def to_dict(self) -> dict:
        return {'field': self.field, 'oldValue': self.old_value, 'newValue': self.new_value}


@dataclass(frozen=True)
class RecordValue:
    """The content subset of a record carried in a RecordDiff."""
    content: str
    description: Optional[str] = None
    variables: Any = None
    version: Optional[str] = None

    @classmethod
    def from_record(cls, record: RecordSnapshot) -> "RecordValue":
        return cls(
            content=record.content,
            description=record.description,
            variables=record.structured_fields,
            version=record.version_label,
        )

    def to_dict(self) -> dict:
        data = {'content': self.content}
        for key in ('description', 'variables', 'version'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass(frozen=True)
class RecordDiff:
    """
    Classified comparison of one record identifier across two snapshots.

    old_value is set for removed/modified/unchanged, new_value for
    added/modified/unchanged, and changes is non-empty only for modified.
    """
    id: str
    name: str
    status: ChangeType
    old_value: Optional[RecordValue] = None
    new_value: Optional[RecordValue] = None
    changes: tuple[FieldChange, ...] = ()

    def to_dict(self) -> dict:
        data = {'id': self.id, 'name': self.name, 'status': self.status.value}
        if self.old_value is not None:
            data['oldValue'] = self.old_value.to_dict()
        if self.new_value is not None:
            data['newValue'] = self.new_value.to_dict()
        if self.changes:
            data['changes'] = [c.to_dict() for c in self.changes]
        return data


@dataclass(frozen=True)
class ComparisonSummary:
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0
    total: int = 0

    def to_dict(self) -> dict:
        return {
            'added': self.added,
            'removed': self.removed,
            'modified': self.modified,
            'unchanged': self.unchanged,
            'total': self.total,
        }


@dataclass(frozen=True)
class VersionInfo:
    """Metadata of a stored export version, passed through untouched."""
    id: str
    version_number: int
    created_at: Optional[datetime] = None
    file_size: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'versionNumber': self.version_number,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'fileSize': self.file_size,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """Result of reconciling two snapshots."""
    summary: ComparisonSummary
    records: tuple[RecordDiff, ...]
    version1: Optional[VersionInfo] = None
    version2: Optional[VersionInfo] = None

    @property
    def has_changes(self) -> bool:
        return any(r.status != ChangeType.UNCHANGED for r in self.records)

    def to_dict(self) -> dict:
        data = {
            'summary': self.summary.to_dict(),
            'prompts': [r.to_dict() for r in self.records],
        }
        if self.version1 is not None and self.version2 is not None:
            data['metadata'] = {
                'version1': self.version1.to_dict(),
                'version2': self.version2.to_dict(),
            }
        return data


@dataclass(frozen=True)
class RecordStats:
    lines_added: int = 0
    lines_removed: int = 0
    fields_changed: int = 0

    def __add__(self, other: "RecordStats") -> "RecordStats":
        return RecordStats(
            lines_added=self.lines_added + other.lines_added,
            lines_removed=self.lines_removed + other.lines_removed,
            fields_changed=self.fields_changed + other.fields_changed,
        )

    def to_dict(self) -> dict:
        return {
            'linesAdded': self.lines_added,
            'linesRemoved': self.lines_removed,
            'fieldsChanged': self.fields_changed,
        }
