"""
One-shot retrieval of the raw catalog JSON.

The catalog is either read from a local file or downloaded from the
published ``fpb.json`` export. Only the Python standard library is
used for HTTP. There is no retry: a failed load is reported as a
``CatalogLoadError`` and the caller decides what to show.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any, Optional, Union

from .. import config
from ..errors import CatalogLoadError


logger = logging.getLogger(__name__)


def fetch_json(url: str, timeout: float = config.FETCH_TIMEOUT) -> Any:
    """Perform an HTTP GET and return the decoded JSON body.

    A browser-like User-Agent and an Accept header are sent because
    some CDNs reject the default urllib agent. Any network, status or
    decoding problem is raised as ``CatalogLoadError``.
    """
    request = urllib.request.Request(
        url,
        headers={
            'User-Agent': (
                'Mozilla/5.0 (Windows NT 10.0; Win64; x64) '
                'AppleWebKit/537.36 (KHTML, like Gecko) '
                'Chrome/115.0 Safari/537.36'
            ),
            'Accept': 'application/json',
        },
    )
    try:
        with urllib.request.urlopen(request, timeout=timeout) as response:
            if response.status != 200:
                raise CatalogLoadError(
                    f"Catalog request to {url} returned status {response.status}"
                )
            body = response.read()
    except (urllib.error.URLError, OSError) as exc:
        raise CatalogLoadError(f"Error fetching {url}: {exc}") from exc
    try:
        data = body.decode('utf-8')
    except UnicodeDecodeError as exc:
        raise CatalogLoadError(f"Catalog at {url} is not valid UTF-8: {exc}") from exc
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Catalog at {url} is not valid JSON: {exc}") from exc


def read_json_file(path: Union[str, Path]) -> Any:
    """Read and decode a local catalog file."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as exc:
        raise CatalogLoadError(f"Cannot read catalog file {path}: {exc}") from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CatalogLoadError(f"Catalog file {path} is not valid JSON: {exc}") from exc


def load_raw_catalog(
    path: Optional[Union[str, Path]] = None,
    url: Optional[str] = None,
) -> Any:
    """Load the raw catalog from ``path`` if given, otherwise from ``url``.

    Both default to the configured ``CATALOG_FILE`` / ``CATALOG_URL``.
    """
    path = path if path is not None else config.CATALOG_FILE
    if path is not None:
        logger.info("Loading catalog from %s", path)
        return read_json_file(path)
    url = url or config.CATALOG_URL
    logger.info("Downloading catalog from %s", url)
    return fetch_json(url)
