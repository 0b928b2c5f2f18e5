# tests/conftest.py
import gzip
import json

import pytest

from export_diff.models import RecordSnapshot, Snapshot


def make_record(record_id, content="", **kwargs) -> RecordSnapshot:
    data = {"id": record_id, "name": kwargs.pop("name", f"Prompt {record_id}"), "content": content}
    data.update(kwargs)
    return RecordSnapshot.from_dict(data)


def make_snapshot(*records) -> Snapshot:
    return Snapshot(records=tuple(records))


@pytest.fixture
def old_payload():
    return {
        "prompts": [
            {"id": "p1", "name": "Greeter", "content": "Hello\nWorld", "description": "Says hi"},
            {"id": "p2", "name": "Summarizer", "content": "Summarize {{text}}",
             "variables": [{"name": "text"}], "model": "gpt-4"},
            {"id": "p3", "name": "Legacy", "content": "Old prompt"},
        ]
    }


@pytest.fixture
def new_payload():
    return {
        "prompts": [
            {"id": "p1", "name": "Greeter", "content": "Hello\nWorld", "description": "Says hi"},
            {"id": "p2", "name": "Summarizer v2", "content": "Summarize {{text}} briefly",
             "variables": [{"name": "text"}], "model": "gpt-4o"},
            {"id": "p4", "name": "Translator", "content": "Translate\n{{text}}\nto French"},
        ]
    }


@pytest.fixture
def export_files(tmp_path, old_payload, new_payload):
    """Write the two payloads as a gzipped and a plain export file."""
    old_path = tmp_path / "v1.json.gz"
    new_path = tmp_path / "v2.json"
    old_path.write_bytes(gzip.compress(json.dumps(old_payload).encode("utf-8")))
    new_path.write_text(json.dumps(new_payload), encoding="utf-8")
    return old_path, new_path
