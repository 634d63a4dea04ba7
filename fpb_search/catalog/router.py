"""
Route definitions for the catalogue search API.

Endpoints under /api/catalog:
- GET  /status    : load state of the catalog
- GET  /search    : fuzzy search with optional language/section filters
- GET  /sections  : section names, in catalog order
- GET  /languages : languages of the loaded documents
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..search.query import SearchParameter, SearchParams
from .schemas import CatalogStatus, Language, ListingEntry, SearchHit, SearchResponse
from .store import STORE, CatalogStore

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


def get_store() -> CatalogStore:
    return STORE


def _require_ready(store: CatalogStore) -> None:
    if store.state == "error":
        raise HTTPException(status_code=503, detail=store.detail)
    if store.snapshot is None:
        raise HTTPException(status_code=503, detail="Catalog is still loading")


@router.get("/status", response_model=CatalogStatus)
def catalog_status(store: CatalogStore = Depends(get_store)) -> CatalogStatus:
    return store.status()


@router.get("/search", response_model=SearchResponse)
def search(
    search_term: Optional[str] = Query(
        default=None, alias=SearchParameter.FREE_TEXT.value, description="Book title or author"
    ),
    lang_code: Optional[str] = Query(
        default=None, alias=SearchParameter.LANGUAGE.value, description="Language code prefix"
    ),
    section: Optional[str] = Query(
        default=None, alias=SearchParameter.SECTION.value, description="Section name prefix"
    ),
    store: CatalogStore = Depends(get_store),
) -> SearchResponse:
    """
    Search the catalog.

    With no parameter set the result is empty rather than the whole
    catalog. Listings come first, followed by the matching entries
    ranked best first.
    """
    _require_ready(store)
    params = SearchParams.from_mapping(
        {
            SearchParameter.FREE_TEXT.value: search_term,
            SearchParameter.LANGUAGE.value: lang_code,
            SearchParameter.SECTION.value: section,
        }
    )
    items = [
        item if isinstance(item, ListingEntry) else SearchHit.from_result(item)
        for item in store.search(params)
    ]
    return SearchResponse(count=len(items), items=items)


@router.get("/sections", response_model=List[str])
def list_sections(store: CatalogStore = Depends(get_store)) -> List[str]:
    _require_ready(store)
    return store.snapshot.sections


@router.get("/languages", response_model=List[Language])
def list_languages(store: CatalogStore = Depends(get_store)) -> List[Language]:
    _require_ready(store)
    return store.snapshot.languages
