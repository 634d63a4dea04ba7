"""
Post-processing of ranked matches into the final display list.

Besides the matching entries themselves, users usually want the whole
list a match comes from. For the first few distinct (section,
language) pairs among the results a ``ListingEntry`` is synthesized
that deep-links to that section of the rendered catalog page. The
anchors must be derived exactly as the public site derives them or the
links land nowhere.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Set, Tuple

from .. import config
from ..catalog.schemas import DisplayItem, Language, ListingEntry, MatchResult
from ..errors import AnchorExtractionError


logger = logging.getLogger(__name__)

_QUOTED = re.compile(r'"(.*?)"')
_SLUG_DROP = re.compile(r"[()&/.]")


def extract_anchor_id(label: str) -> Optional[str]:
    """Return the quoted id of an embedded ``<a ...>`` tag in ``label``.

    Some headings in the catalog still carry the HTML anchor they had
    in the markdown, e.g. ``<a name="android">Android</a>``. Returns
    ``None`` when the label has no anchor tag and raises
    ``AnchorExtractionError`` when it has one without a quoted id.
    """
    if "<a" not in label:
        return None
    match = _QUOTED.search(label)
    if match is None or not match.group(1):
        raise AnchorExtractionError(f"no quoted id in {label!r}")
    return match.group(1)


def normalize_label(label: str) -> str:
    """Canonical text of a section or subsection label."""
    try:
        anchor = extract_anchor_id(label)
    except AnchorExtractionError as exc:
        logger.warning("Using raw label for anchor: %s", exc)
        return label
    return label if anchor is None else anchor


def slugify(label: str) -> str:
    """Anchor id of ``label`` as published on the catalog pages.

    Lower-cases, turns spaces into hyphens and drops ``( ) & / .``.
    Applying it twice gives the same result as applying it once.
    """
    return _SLUG_DROP.sub("", label.lower().replace(" ", "-"))


def page_family(language: Language) -> str:
    """Suffix of the catalog page holding ``language``'s entries.

    English content is split over two pages, one per subject and one
    per programming language, both coded ``en``.
    """
    if language.code == "en":
        return "subjects" if language.is_subject else "langs"
    return language.code


def listing_url(language: Language, label: str, base_url: str = config.LISTINGS_BASE_URL) -> str:
    return (
        f"{base_url.rstrip('/')}/free-programming-books-{page_family(language)}.html"
        f"#{slugify(label)}"
    )


def make_listing(result: MatchResult, base_url: str = config.LISTINGS_BASE_URL) -> ListingEntry:
    """Build the "List of all ..." entry for the section of ``result``.

    The link targets the subsection when the entry has one.
    """
    entry = result.entry
    label = normalize_label(entry.subsection or entry.section)
    return ListingEntry(
        title=f"List of all {label} resources in {entry.language.name}",
        url=listing_url(entry.language, label, base_url),
        language=entry.language,
        section=entry.section,
    )


def synthesize_listings(
    matches: Sequence[MatchResult],
    limit: int = config.MAX_LISTINGS,
    base_url: str = config.LISTINGS_BASE_URL,
) -> List[ListingEntry]:
    """One listing per distinct (section, language code), in rank order.

    Matches without a language code are skipped. At most ``limit``
    listings are returned.
    """
    seen: Set[Tuple[str, str]] = set()
    listings: List[ListingEntry] = []
    for result in matches:
        if len(listings) >= limit:
            break
        entry = result.entry
        key = (entry.section, entry.language.code)
        if key in seen or not entry.language.code:
            continue
        seen.add(key)
        listings.append(make_listing(result, base_url))
    return listings


def aggregate(
    matches: Sequence[MatchResult],
    limit: int = config.MAX_LISTINGS,
    base_url: str = config.LISTINGS_BASE_URL,
) -> List[DisplayItem]:
    """Listings for ``matches`` followed by ``matches`` in their order."""
    listings: List[DisplayItem] = list(synthesize_listings(matches, limit, base_url))
    return listings + list(matches)
