"""
Pydantic schema definitions for the catalog module.

Two families of models live here. The first describes the catalog
itself: the ``Language`` of a markdown document and the flattened
``Entry`` records the search engine indexes. The second describes
what a search returns: ``MatchResult`` for a ranked entry,
``ListingEntry`` for a synthesized "List of all ..." link, and the
API payloads that wrap them for the front-end.
"""

from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Literal


class Language(BaseModel):
    """Language of one catalog document.

    The catalog keeps English subject pages (``free-programming-books-
    subjects``) and English language pages (``free-programming-books-
    langs``) as two documents that share the code ``en``. ``is_subject``
    tells them apart. ``code`` may be empty when the source document
    does not declare one.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str = ""
    name: str = ""
    is_subject: bool = Field(default=False, alias="isSubject")


class Entry(BaseModel):
    """A single book or resource, stamped with where it is filed.

    Entries are created once by the indexer and never mutated. The
    owning language, section and (optional) subsection are copied by
    value so an entry can be rendered without walking the tree again.
    """

    model_config = ConfigDict(frozen=True)

    author: str = ""
    title: str
    url: str
    language: Language
    section: str
    subsection: Optional[str] = None


class FieldMatch(BaseModel):
    """Where a query term matched inside one searchable field.

    ``indices`` are half-open ``(start, end)`` character spans into
    ``value``.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: str
    indices: List[Tuple[int, int]] = Field(default_factory=list)


class MatchResult(BaseModel):
    """An entry returned by the search engine.

    ``score`` runs from 0 (exact) to 1 (no match); lower is better.
    ``ref_index`` is the entry's position in the flattened catalog and
    breaks ties between equal scores.
    """

    model_config = ConfigDict(frozen=True)

    entry: Entry
    score: float
    ref_index: int
    matches: List[FieldMatch] = Field(default_factory=list)


class ListingEntry(BaseModel):
    """A synthesized link to a whole section of a catalog page."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["listing"] = "listing"
    author: str = ""
    title: str
    url: str
    language: Language
    section: str


# Items of the final display list, listings first
DisplayItem = Union[ListingEntry, MatchResult]


class SearchHit(BaseModel):
    """API view of a ``MatchResult``, flattened for the front-end."""

    kind: Literal["entry"] = "entry"
    author: str
    title: str
    url: str
    language: Language
    section: str
    subsection: Optional[str] = None
    score: float
    matches: List[FieldMatch] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: MatchResult) -> "SearchHit":
        entry = result.entry
        return cls(
            author=entry.author,
            title=entry.title,
            url=entry.url,
            language=entry.language,
            section=entry.section,
            subsection=entry.subsection,
            score=result.score,
            matches=result.matches,
        )


class SearchResponse(BaseModel):
    """Payload of ``/search``: listings followed by ranked hits."""

    count: int
    items: List[Union[ListingEntry, SearchHit]]


LoadState = Literal["loading", "ready", "empty", "error"]


class CatalogStatus(BaseModel):
    """Load state of the catalog, reported by ``/status``."""

    state: LoadState
    detail: str = ""
    entries: int = 0
    sections: int = 0
