"""
Exceptions raised at the boundary of the export diff engine.

The diff engine itself (similarity, differ, fields, reconciler, stats) is
total over well-formed input and raises none of these. They come from
resolving, fetching and parsing snapshots, and from configuration.
"""


class ExportDiffError(Exception):
    """Base class for all export-diff errors."""


class VersionNotFoundError(ExportDiffError):
    """A requested export version does not exist or belongs to another user."""


class SourceUnavailableError(ExportDiffError):
    """An export version has no retrievable file URL."""


class FetchError(ExportDiffError):
    """Fetching a stored export failed (non-success response or unreadable file)."""


class SnapshotFormatError(ExportDiffError):
    """A fetched export payload could not be decoded into a snapshot."""


class ConfigError(ExportDiffError):
    """Configuration file is missing or invalid."""
