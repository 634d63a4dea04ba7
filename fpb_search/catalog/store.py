"""
In-memory holder of the loaded catalog and its search engine.

The catalog is loaded once at startup, flattened once and indexed
once. The resulting ``CatalogSnapshot`` is immutable; a reload builds
a complete new snapshot and swaps it in with a single assignment, so
readers never see a half-built index.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, NamedTuple, Optional, Union

from ..errors import CatalogLoadError
from ..search.engine import FuzzySearch
from ..search.query import SearchParams
from ..search.session import run_search
from .indexer import flatten_catalog
from .loader import load_raw_catalog
from .schemas import CatalogStatus, DisplayItem, Entry, Language, LoadState


logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Couldn't get data. Please try again later"


class CatalogSnapshot(NamedTuple):
    entries: List[Entry]
    sections: List[str]
    languages: List[Language]
    engine: FuzzySearch


class CatalogStore:
    """Load state plus the current snapshot, if any."""

    def __init__(self):
        self.state: LoadState = "loading"
        self.detail = ""
        self.snapshot: Optional[CatalogSnapshot] = None

    def load_raw(self, raw: Any) -> CatalogSnapshot:
        """Index an already decoded catalog and make it current."""
        flat = flatten_catalog(raw)
        snapshot = CatalogSnapshot(
            entries=flat.entries,
            sections=flat.sections,
            languages=flat.languages,
            engine=FuzzySearch(flat.entries),
        )
        self.snapshot = snapshot
        if flat.entries:
            self.state, self.detail = "ready", ""
        else:
            self.state, self.detail = "empty", "The catalog has no entries"
            logger.warning("Loaded an empty catalog")
        return snapshot

    def load(
        self,
        path: Optional[Union[str, Path]] = None,
        url: Optional[str] = None,
    ) -> Optional[CatalogSnapshot]:
        """Fetch and index the catalog.

        A load failure moves the store to the ``error`` state and
        returns ``None``; the previous snapshot, if any, is dropped.
        """
        self.state, self.detail = "loading", ""
        try:
            raw = load_raw_catalog(path=path, url=url)
        except CatalogLoadError as exc:
            logger.error("Catalog load failed: %s", exc)
            self.snapshot = None
            self.state, self.detail = "error", LOAD_ERROR_MESSAGE
            return None
        return self.load_raw(raw)

    @property
    def ready(self) -> bool:
        return self.state == "ready"

    def status(self) -> CatalogStatus:
        snapshot = self.snapshot
        return CatalogStatus(
            state=self.state,
            detail=self.detail,
            entries=len(snapshot.entries) if snapshot else 0,
            sections=len(snapshot.sections) if snapshot else 0,
        )

    def search(self, params: Union[SearchParams, Mapping[str, Optional[str]]]) -> List[DisplayItem]:
        """Run the search pipeline against the current snapshot."""
        if not isinstance(params, SearchParams):
            params = SearchParams.from_mapping(params)
        snapshot = self.snapshot
        return run_search(snapshot.engine if snapshot else None, params)


# Process-wide store used by the API
STORE = CatalogStore()
