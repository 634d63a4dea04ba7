"""
The search pipeline and the immutable session that carries its state.

A session pairs the current parameters with the results computed from
them. Sessions are never modified: every parameter change produces a
new session whose results are recomputed from scratch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .. import config
from ..catalog.schemas import DisplayItem
from .aggregator import aggregate
from .engine import FuzzySearch
from .query import SearchParams, build_query


logger = logging.getLogger(__name__)


def run_search(
    engine: Optional[FuzzySearch],
    params: SearchParams,
    max_results: int = config.MAX_RESULTS,
    max_listings: int = config.MAX_LISTINGS,
    base_url: str = config.LISTINGS_BASE_URL,
) -> List[DisplayItem]:
    """Build, execute and aggregate the query for ``params``.

    Returns an empty list when no parameter is set or no engine is
    available yet.
    """
    query = build_query(params)
    if query is None or engine is None:
        return []
    matches = engine.search(query, limit=max_results)
    logger.debug("%r: %d matches", params, len(matches))
    return aggregate(matches, limit=max_listings, base_url=base_url)


@dataclass(frozen=True)
class SearchSession:
    params: SearchParams = field(default_factory=SearchParams)
    results: Tuple[DisplayItem, ...] = ()


def with_parameter(
    session: SearchSession,
    engine: Optional[FuzzySearch],
    key: str,
    value: Optional[str],
) -> SearchSession:
    """New session with ``key`` set to ``value`` and fresh results."""
    params = session.params.merge(key, value)
    return SearchSession(params=params, results=tuple(run_search(engine, params)))


def refresh(session: SearchSession, engine: Optional[FuzzySearch]) -> SearchSession:
    """New session with the same parameters, searched against ``engine``."""
    return SearchSession(params=session.params, results=tuple(run_search(engine, session.params)))
