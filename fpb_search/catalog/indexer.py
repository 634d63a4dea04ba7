"""
Flatten the nested catalog tree into a searchable list of entries.

The catalog is published as one document per markdown file. Each
document has a language and a list of sections (``h2`` headings);
sections hold entries directly and through subsections (``h3``
headings). Searching a flat list is both faster and simpler than
walking the tree on every keystroke, so the tree is flattened once
when the catalog is loaded.

Order matters: later stages use first-seen order as a tie-break, so
the traversal is document, section, section entries, subsections,
subsection entries, exactly as they appear in the source.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, NamedTuple, Optional

from pydantic import ValidationError

from ..errors import MalformedCatalogError
from .schemas import Entry, Language


logger = logging.getLogger(__name__)


class FlatCatalog(NamedTuple):
    entries: List[Entry]
    sections: List[str]
    languages: List[Language]


def _documents(raw: Any) -> List[Any]:
    """Return the list of documents from any of the accepted root shapes.

    Three shapes are understood: ``{"documents": [...]}``, the
    published ``fpb.json`` layout ``{"children": [{"children":
    [...]}]}`` and a bare list of documents. Anything else yields no
    documents.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, dict):
        logger.warning("Unexpected catalog root of type %s", type(raw).__name__)
        return []
    if isinstance(raw.get("documents"), list):
        return raw["documents"]
    children = raw.get("children")
    if isinstance(children, list) and children and isinstance(children[0], dict):
        documents = children[0].get("children")
        if isinstance(documents, list):
            return documents
    logger.warning("Catalog root has no documents")
    return []


def _as_list(node: dict, key: str) -> List[Any]:
    value = node.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedCatalogError(f"'{key}' is not a list")
    return value


def _parse_language(document: Any) -> Language:
    if not isinstance(document, dict) or not isinstance(document.get("language"), dict):
        raise MalformedCatalogError("document has no language object")
    try:
        return Language.model_validate(document["language"])
    except ValidationError as exc:
        raise MalformedCatalogError(f"invalid language: {exc}") from exc


def _section_name(node: Any) -> str:
    if not isinstance(node, dict):
        raise MalformedCatalogError("section is not an object")
    name = node.get("section")
    if not isinstance(name, str) or not name:
        raise MalformedCatalogError("section has no name")
    return name


def _parse_entry(
    node: Any,
    language: Language,
    section: str,
    subsection: Optional[str] = None,
) -> Entry:
    if not isinstance(node, dict):
        raise MalformedCatalogError("entry is not an object")
    title = node.get("title")
    url = node.get("url")
    if not isinstance(title, str) or not isinstance(url, str):
        raise MalformedCatalogError("entry is missing title or url")
    author = node.get("author")
    return Entry(
        author=author if isinstance(author, str) else "",
        title=title,
        url=url,
        language=language,
        section=section,
        subsection=subsection,
    )


def _collect_entries(
    nodes: Iterable[Any],
    out: List[Entry],
    language: Language,
    section: str,
    subsection: Optional[str] = None,
) -> None:
    for node in nodes:
        try:
            out.append(_parse_entry(node, language, section, subsection))
        except MalformedCatalogError as exc:
            logger.warning(
                "Skipping entry in %s / %s: %s", section, subsection or "-", exc
            )


def flatten_catalog(raw: Any) -> FlatCatalog:
    """Flatten a raw catalog into entries, section names and languages.

    Parameters
    ----------
    raw : Any
        Decoded catalog JSON. ``None`` is accepted and yields an empty
        catalog; whether that is a problem is for the caller to decide.

    Returns
    -------
    FlatCatalog
        ``entries`` in traversal order, the deduplicated ``sections``
        names in first-seen order, and the deduplicated ``languages``
        of the parsed documents.

    Malformed documents, sections, subsections and entries are logged
    and skipped; they never abort the build.
    """
    entries: List[Entry] = []
    sections: List[str] = []
    languages: List[Language] = []

    for position, document in enumerate(_documents(raw)):
        try:
            language = _parse_language(document)
            section_nodes = _as_list(document, "sections")
        except MalformedCatalogError as exc:
            logger.warning("Skipping document #%d: %s", position, exc)
            continue
        if language not in languages:
            languages.append(language)

        for section_node in section_nodes:
            try:
                section = _section_name(section_node)
                entry_nodes = _as_list(section_node, "entries")
                subsection_nodes = _as_list(section_node, "subsections")
            except MalformedCatalogError as exc:
                logger.warning("Skipping section in %s: %s", language.code, exc)
                continue
            if section not in sections:
                sections.append(section)

            _collect_entries(entry_nodes, entries, language, section)

            for subsection_node in subsection_nodes:
                try:
                    subsection = _section_name(subsection_node)
                    sub_entry_nodes = _as_list(subsection_node, "entries")
                except MalformedCatalogError as exc:
                    logger.warning("Skipping subsection of %s: %s", section, exc)
                    continue
                _collect_entries(sub_entry_nodes, entries, language, section, subsection)

    logger.info(
        "Indexed %d entries across %d sections and %d languages",
        len(entries),
        len(sections),
        len(languages),
    )
    return FlatCatalog(entries=entries, sections=sections, languages=languages)
