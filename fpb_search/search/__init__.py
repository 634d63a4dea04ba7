"""
Search core: engine, query builder, aggregation and sessions.

Everything in this package is synchronous and free of I/O; the
catalog package feeds it entries and the router exposes it over HTTP.
"""

from .aggregator import aggregate, normalize_label, slugify  # noqa: F401
from .engine import And, FuzzySearch, MatchMode, Or, Term  # noqa: F401
from .query import SearchParameter, SearchParams, build_query  # noqa: F401
from .session import SearchSession, refresh, run_search, with_parameter  # noqa: F401
