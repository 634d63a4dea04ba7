"""
Translate user search parameters into an engine query.

Only three parameters exist. The language code and the section are
strict filters: they must match the start of their field exactly. The
free-text term is matched fuzzily against the author or the title.
Every active clause is AND-ed together.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict, Iterator, Mapping, Optional, Tuple

from .engine import And, MatchMode, Or, Query, Term


logger = logging.getLogger(__name__)


class SearchParameter(str, enum.Enum):
    FREE_TEXT = "searchTerm"
    LANGUAGE = "lang.code"
    SECTION = "section"

    @classmethod
    def lookup(cls, key: str) -> Optional["SearchParameter"]:
        try:
            return cls(key)
        except ValueError:
            return None


def _free_text_clause(value: str) -> Query:
    return Or((Term("author", value), Term("title", value)))


def _language_clause(value: str) -> Query:
    return Term("language.code", value, MatchMode.PREFIX)


def _section_clause(value: str) -> Query:
    return Term("section", value, MatchMode.PREFIX)


# Clause builder for every parameter, in the order clauses are emitted
CLAUSES: Dict[SearchParameter, Callable[[str], Query]] = {
    SearchParameter.LANGUAGE: _language_clause,
    SearchParameter.SECTION: _section_clause,
    SearchParameter.FREE_TEXT: _free_text_clause,
}


class SearchParams(Mapping[str, str]):
    """Immutable mapping of the recognized search parameters.

    Values are stored stripped; empty values are dropped since they
    carry no constraint. Use ``merge`` to derive updated parameters.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[SearchParameter, str]] = None):
        cleaned: Dict[SearchParameter, str] = {}
        for param, value in (values or {}).items():
            value = (value or "").strip()
            if value:
                cleaned[SearchParameter(param)] = value
        self._values = cleaned

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Optional[str]]]) -> "SearchParams":
        """Build parameters from loosely typed input, ignoring unknown keys."""
        values: Dict[SearchParameter, str] = {}
        for key, value in (mapping or {}).items():
            param = SearchParameter.lookup(key)
            if param is None:
                logger.debug("Ignoring unknown search parameter %r", key)
                continue
            values[param] = value or ""
        return cls(values)

    def merge(self, key: str, value: Optional[str]) -> "SearchParams":
        """Return new parameters with ``key`` set to ``value``.

        An empty ``value`` clears the parameter; an unknown ``key``
        returns an equal copy.
        """
        param = SearchParameter.lookup(key)
        values = dict(self._values)
        if param is not None:
            values[param] = value or ""
        return SearchParams(values)

    def get_param(self, param: SearchParameter) -> str:
        return self._values.get(param, "")

    def __getitem__(self, key: str) -> str:
        param = SearchParameter.lookup(key)
        if param is None or param not in self._values:
            raise KeyError(key)
        return self._values[param]

    def __iter__(self) -> Iterator[str]:
        return (param.value for param in self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SearchParams):
            return self._values == other._values
        return super().__eq__(other)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        return f"SearchParams({dict(self)!r})"


def build_query(params: SearchParams) -> Optional[And]:
    """Build the query for ``params``, or ``None`` if nothing is set.

    ``None`` means "no active query": callers must not run the engine
    and should show an empty result list instead.
    """
    clauses: Tuple[Query, ...] = tuple(
        build(params.get_param(param))
        for param, build in CLAUSES.items()
        if params.get_param(param)
    )
    if not clauses:
        return None
    return And(clauses)
