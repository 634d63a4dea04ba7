"""
Approximate multi-field search over flattened catalog entries.

``FuzzySearch`` indexes a fixed set of fields of every entry once and
then answers boolean query trees built from three node types:

* ``Term``  - match one field, either fuzzily (``MatchMode.FUZZY``) or
  as an anchored, case-insensitive prefix (``MatchMode.PREFIX``).
* ``And``   - every child must match; the score is the mean of the
  child scores.
* ``Or``    - at least one child must match; the score is the best
  child score.

Scores run from 0 (exact) to 1 (no match). A fuzzy term matches when
its distance is at most the engine threshold. Distances come from
rapidfuzz's partial alignment ratio, which tolerates the pattern being
a substring of a longer field. A field shorter than the pattern is
compared whole, so it never counts as containing the pattern.

An ``And`` or ``Or`` group without children places no constraint on
its parent. A query that contains no ``Term`` at all returns nothing
rather than ranking the whole catalog.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from rapidfuzz import fuzz

from .. import config
from ..catalog.schemas import Entry, FieldMatch, MatchResult


logger = logging.getLogger(__name__)

SEARCH_KEYS: Tuple[str, ...] = ("author", "title", "language.code", "section")


class MatchMode(str, enum.Enum):
    FUZZY = "fuzzy"
    PREFIX = "prefix"


@dataclass(frozen=True)
class Term:
    key: str
    pattern: str
    mode: MatchMode = MatchMode.FUZZY


@dataclass(frozen=True)
class And:
    children: Tuple["Query", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Or:
    children: Tuple["Query", ...] = field(default_factory=tuple)


Query = Union[Term, And, Or]

# (score, matches) for a node that matched
_Hit = Tuple[float, List[FieldMatch]]
# (score, spans) for a single field
_Found = Optional[Tuple[float, List[Tuple[int, int]]]]


def has_terms(query: Query) -> bool:
    """True if ``query`` contains at least one ``Term``."""
    if isinstance(query, Term):
        return True
    return any(has_terms(child) for child in query.children)


def prune(query: Query) -> Optional[Query]:
    """Drop groups without terms; ``None`` if nothing is left."""
    if isinstance(query, Term):
        return query
    children = tuple(
        pruned for pruned in (prune(child) for child in query.children) if pruned is not None
    )
    if not children:
        return None
    return type(query)(children)


def _resolve(entry: Entry, key: str) -> str:
    """Read a dotted ``key`` such as ``language.code`` from an entry."""
    value = entry
    for part in key.split("."):
        value = getattr(value, part, None)
        if value is None:
            return ""
    return value if isinstance(value, str) else str(value)


class FuzzySearch:
    """Search index over a fixed list of entries.

    The index is built in the constructor and never changes; build a
    new instance when the catalog changes.
    """

    def __init__(
        self,
        entries: Sequence[Entry],
        keys: Sequence[str] = SEARCH_KEYS,
        threshold: float = config.FUZZY_THRESHOLD,
    ):
        self.entries: Tuple[Entry, ...] = tuple(entries)
        self.keys: Tuple[str, ...] = tuple(keys)
        self.threshold = threshold
        # raw and lower-cased value of every searchable field, per entry
        self._records: List[Dict[str, Tuple[str, str]]] = []
        for entry in self.entries:
            record = {}
            for key in self.keys:
                value = _resolve(entry, key)
                record[key] = (value, value.lower())
            self._records.append(record)

    def __len__(self) -> int:
        return len(self.entries)

    # -- term matching -----------------------------------------------------

    def _match_prefix(self, pattern: str, lowered: str) -> _Found:
        if not lowered.startswith(pattern.lower()):
            return None
        return 0.0, [(0, len(pattern))]

    def _match_fuzzy(self, pattern: str, lowered: str) -> _Found:
        tokens = pattern.lower().split()
        if not tokens or not lowered:
            return None
        distances = []
        spans = []
        for token in tokens:
            if len(token) > len(lowered):
                # the field cannot contain the token; compare them whole
                score = fuzz.ratio(token, lowered)
                span = (0, len(lowered))
            else:
                alignment = fuzz.partial_ratio_alignment(token, lowered)
                score = alignment.score
                span = (alignment.dest_start, alignment.dest_end)
            distance = 1.0 - score / 100.0
            if distance > self.threshold:
                return None
            distances.append(distance)
            if span[1] > span[0]:
                spans.append(span)
        return sum(distances) / len(distances), sorted(set(spans))

    def _evaluate_term(self, term: Term, record: Dict[str, Tuple[str, str]]) -> Optional[_Hit]:
        if term.key not in record:
            raise KeyError(f"'{term.key}' is not a searchable key")
        value, lowered = record[term.key]
        if term.mode == MatchMode.PREFIX:
            found = self._match_prefix(term.pattern, lowered)
        else:
            found = self._match_fuzzy(term.pattern, lowered)
        if found is None:
            return None
        score, spans = found
        return score, [FieldMatch(key=term.key, value=value, indices=spans)]

    # -- tree evaluation ---------------------------------------------------

    def _evaluate(self, node: Query, record: Dict[str, Tuple[str, str]]) -> Optional[_Hit]:
        if isinstance(node, Term):
            return self._evaluate_term(node, record)

        if isinstance(node, And):
            scores = []
            matches: List[FieldMatch] = []
            for child in node.children:
                hit = self._evaluate(child, record)
                if hit is None:
                    return None
                scores.append(hit[0])
                matches.extend(hit[1])
            return sum(scores) / len(scores), matches

        best: Optional[float] = None
        matches = []
        for child in node.children:
            hit = self._evaluate(child, record)
            if hit is None:
                continue
            best = hit[0] if best is None else min(best, hit[0])
            matches.extend(hit[1])
        if best is None:
            return None
        return best, matches

    def execute(self, query: Query) -> List[MatchResult]:
        """Run ``query`` against every entry.

        Returns all matching entries sorted by ascending score, ties in
        catalog order. The list is not truncated.
        """
        pruned = prune(query)
        if pruned is None:
            logger.debug("Query has no terms, returning no results")
            return []
        results = []
        for index, record in enumerate(self._records):
            hit = self._evaluate(pruned, record)
            if hit is None:
                continue
            score, matches = hit
            results.append(
                MatchResult(
                    entry=self.entries[index],
                    score=score,
                    ref_index=index,
                    matches=matches,
                )
            )
        results.sort(key=lambda r: (r.score, r.ref_index))
        logger.debug("Query %r matched %d of %d entries", query, len(results), len(self))
        return results

    def search(self, query: Query, limit: Optional[int] = None) -> List[MatchResult]:
        """``execute`` followed by truncation to ``limit`` results."""
        results = self.execute(query)
        return results if limit is None else results[: max(0, limit)]
