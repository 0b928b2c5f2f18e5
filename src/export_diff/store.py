"""
Export version store and the comparison service built on top of it.

The store resolves version ids to metadata and a retrievable export URL.
It is an explicitly constructed object; nothing here is process-global.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from .differ import DiffLine, inline_diff
from .exceptions import ConfigError, SourceUnavailableError, VersionNotFoundError
from .loader import fetch_snapshot
from .logging_utils import STORE, get_logger
from .models import ComparisonResult, Snapshot, VersionInfo
from .reconciler import DEFAULT_STATUS_ORDER, reconcile

logger = get_logger(__name__)

DEFAULT_LIST_LIMIT = 50


class ExportVersion(BaseModel):
    """Metadata of one stored export version."""
    id: str
    user_id: str
    version_number: int
    created_at: Optional[datetime] = None
    file_size: Optional[int] = None
    prompt_count: Optional[int] = None
    description: Optional[str] = None
    export_url: Optional[str] = None
    model_config = ConfigDict(extra="forbid", frozen=True)

    def info(self) -> VersionInfo:
        return VersionInfo(
            id=self.id,
            version_number=self.version_number,
            created_at=self.created_at,
            file_size=self.file_size,
        )

    def to_listing(self) -> dict:
        return {
            "id": self.id,
            "versionNumber": self.version_number,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "fileSize": self.file_size,
            "promptCount": self.prompt_count,
            "description": self.description,
        }


class VersionStore:
    """In-memory index of export versions, optionally loaded from a YAML manifest."""

    def __init__(self, versions: Iterable[ExportVersion] = ()):
        self._versions: dict[str, ExportVersion] = {}
        for version in versions:
            self.add(version)

    @classmethod
    def from_manifest(cls, path: str | Path) -> "VersionStore":
        """
        Load a manifest of the form:

            versions:
              - id: v1
                user_id: alice
                version_number: 1
                export_url: exports/v1.json.gz

        Relative local export_url paths resolve against the manifest's directory.
        """
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"Version manifest not found: {p}")

        try:
            data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {p}: {e}") from e

        entries = data.get("versions", []) if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ConfigError(f"Manifest {p} must contain a 'versions' list")

        versions = []
        for entry in entries:
            try:
                version = ExportVersion.model_validate(entry)
            except ValidationError as e:
                raise ConfigError(f"Invalid version entry in {p}:\n{e}") from e
            versions.append(_resolve_url(version, p.parent))

        logger.info(f"{STORE} loaded {len(versions)} versions from {p}")
        return cls(versions)

    def add(self, version: ExportVersion) -> None:
        self._versions[version.id] = version

    def get(self, user_id: str, version_id: str) -> ExportVersion:
        version = self._versions.get(version_id)
        if version is None or version.user_id != user_id:
            raise VersionNotFoundError(f"Version not found: {version_id}")
        return version

    def list_comparable_versions(self, user_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[ExportVersion]:
        """A user's versions, newest version number first."""
        owned = [v for v in self._versions.values() if v.user_id == user_id]
        owned.sort(key=lambda v: v.version_number, reverse=True)
        return owned[:limit]

    def __len__(self) -> int:
        return len(self._versions)


def _resolve_url(version: ExportVersion, base: Path) -> ExportVersion:
    url = version.export_url
    if not url or "://" in url or Path(url).is_absolute():
        return version
    return version.model_copy(update={"export_url": str(base / url)})


class ExportDiffService:
    """
    Entry points consumed by a request layer: compare two stored versions,
    list comparable versions, and diff a single field inline.
    """

    def __init__(
        self,
        store: VersionStore,
        fetcher: Callable[[str], Snapshot] = fetch_snapshot,
        status_order: Iterable = DEFAULT_STATUS_ORDER,
    ):
        self.store = store
        self.fetcher = fetcher
        self.status_order = tuple(status_order)

    def compare(self, user_id: str, version1_id: str, version2_id: str) -> ComparisonResult:
        """
        Compare two export versions owned by `user_id`.

        Raises:
            VersionNotFoundError: either version is missing or not owned by the user
            SourceUnavailableError: either version has no export URL
            FetchError, SnapshotFormatError: from fetching and parsing
        """
        try:
            v1 = self.store.get(user_id, version1_id)
            v2 = self.store.get(user_id, version2_id)
        except VersionNotFoundError as e:
            raise VersionNotFoundError("One or both versions not found") from e

        if not v1.export_url or not v2.export_url:
            raise SourceUnavailableError("Version file URLs not available")

        logger.info(f"{STORE} comparing {v1.id} (v{v1.version_number}) -> {v2.id} (v{v2.version_number})")
        old_snapshot = self.fetcher(v1.export_url)
        new_snapshot = self.fetcher(v2.export_url)

        result = reconcile(old_snapshot, new_snapshot, self.status_order)
        return ComparisonResult(
            summary=result.summary,
            records=result.records,
            version1=v1.info(),
            version2=v2.info(),
        )

    def list_comparable_versions(self, user_id: str, limit: int = DEFAULT_LIST_LIMIT) -> list[ExportVersion]:
        return self.store.list_comparable_versions(user_id, limit)

    def inline_diff(self, old_text: str, new_text: str) -> list[DiffLine]:
        return inline_diff(old_text, new_text)
