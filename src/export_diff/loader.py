"""
Fetching and decoding stored export files into snapshots.

Exports are JSON documents of the form {"prompts": [...]}, optionally
gzip-compressed. They can live on an HTTP(S) URL or on local disk.
"""

import gzip
import json
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx

from .exceptions import FetchError, SnapshotFormatError
from .logging_utils import FETCH, get_logger
from .models import Snapshot

logger = get_logger(__name__)

GZIP_MAGIC = b'\x1f\x8b'
DEFAULT_TIMEOUT = 30.0


def load_snapshot_bytes(
    data: bytes,
    compressed: Optional[bool] = None,
    label: Optional[str] = None,
) -> Snapshot:
    """
    Decode raw export bytes into a Snapshot.

    Args:
        data: Raw file contents
        compressed: Force (True) or skip (False) gunzip; None sniffs the gzip header
        label: Optional label carried on the snapshot

    Raises:
        SnapshotFormatError: if the bytes are not a valid export document
    """
    if compressed is None:
        compressed = data[:2] == GZIP_MAGIC

    if compressed:
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError) as e:
            raise SnapshotFormatError(f"Export is not valid gzip data: {e}") from e

    try:
        payload = json.loads(data.decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SnapshotFormatError(f"Export is not valid JSON: {e}") from e

    return Snapshot.from_dict(payload, label=label)


def _fetch_http(url: str, client: Optional[httpx.Client], timeout: float) -> bytes:
    try:
        if client is not None:
            response = client.get(url)
        else:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                response = own_client.get(url)
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch export: {e}") from e

    if response.is_error:
        raise FetchError(f"Failed to fetch export: {response.status_code} {response.reason_phrase}")
    return response.content


def _read_local(location: str) -> bytes:
    parsed = urlparse(location)
    path = Path(unquote(parsed.path)) if parsed.scheme == 'file' else Path(location)
    if not path.is_file():
        raise FetchError(f"Export file not found: {path}")
    try:
        return path.read_bytes()
    except OSError as e:
        raise FetchError(f"Failed to read export {path}: {e}") from e


def fetch_snapshot(
    url: str,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Snapshot:
    """
    Fetch an export from an http(s) URL, a file:// URL or a plain path.

    Gzip content is decompressed transparently.

    Raises:
        FetchError: non-success response or unreadable file
        SnapshotFormatError: payload cannot be parsed
    """
    scheme = urlparse(url).scheme.lower()
    if scheme in ('http', 'https'):
        data = _fetch_http(url, client, timeout)
    else:
        data = _read_local(url)

    logger.info(f"{FETCH} fetched {len(data)} bytes from {url}")
    return load_snapshot_bytes(data, label=url)
